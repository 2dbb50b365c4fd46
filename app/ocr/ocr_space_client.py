import httpx

from app.logging.logger import Log
from app.ocr.exceptions import OcrServiceError, OcrServiceNetworkError


class OcrSpaceClient:
    """Client for the OCR.space parse API.

    The service downloads the document itself from the URL it is given, so
    only the URL (not the bytes) is submitted.
    """

    provider = "ocr.space"

    def __init__(
        self,
        client: httpx.Client,
        *,
        api_key: str,
        endpoint: str,
        language: str = "eng",
        timeout_seconds: float = 60.0,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._endpoint = endpoint
        self._language = language
        self._timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self._api_key.strip())

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def parse_url(self, document_url: str, timeout_seconds: float | None = None) -> str:
        """Return the first page's parsed text.

        Raises:
            OcrServiceNetworkError: if the request cannot be completed.
            OcrServiceError: on non-2xx status, malformed body, a processing
                error reported by the service, or blank text.
        """
        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        try:
            response = self._client.post(
                self._endpoint,
                data={
                    "apikey": self._api_key,
                    "url": document_url,
                    "language": self._language,
                    "isOverlayRequired": "false",
                },
                timeout=timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise OcrServiceNetworkError(f"OCR service network error: {exc}") from exc

        if not response.is_success:
            raise OcrServiceError(f"OCR service returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise OcrServiceError(f"OCR service returned invalid JSON: {exc}") from exc

        return self._first_parsed_text(payload)

    @staticmethod
    def _first_parsed_text(payload: object) -> str:
        if not isinstance(payload, dict):
            raise OcrServiceError("OCR service response must be an object")
        if payload.get("IsErroredOnProcessing"):
            message = payload.get("ErrorMessage") or "unknown error"
            if isinstance(message, list):
                message = "; ".join(str(part) for part in message)
            raise OcrServiceError(f"OCR service reported an error: {message}")

        results = payload.get("ParsedResults")
        if not isinstance(results, list) or not results:
            raise OcrServiceError("OCR service returned no ParsedResults")
        first = results[0]
        text = first.get("ParsedText") if isinstance(first, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise OcrServiceError("OCR service returned blank ParsedText")

        Log.debug("OCR service parsed text", characters=len(text.strip()))
        return text.strip()
