import httpx

from app.extraction.classifier import extension_from_url
from app.extraction.deadline import Deadline
from app.extraction.exceptions import DocumentFetchError
from app.extraction.models import FetchedDocument
from app.logging.logger import Log


class DocumentFetcher:
    """Downloads a source document with a single GET. No retries."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        timeout_seconds: float,
        error_body_limit: int = 500,
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._error_body_limit = error_body_limit

    def fetch(self, url: str, deadline: Deadline | None = None) -> FetchedDocument:
        """Fetch the document bytes and the response content type.

        Raises:
            DocumentFetchError: on network failure or a non-2xx response.
        """
        timeout = self._timeout_seconds
        if deadline is not None:
            deadline.check("before fetch")
            timeout = deadline.bound(timeout)

        try:
            response = self._client.get(url, timeout=timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise DocumentFetchError(f"Failed to fetch file: {exc}") from exc

        if not response.is_success:
            body = response.text[: self._error_body_limit]
            raise DocumentFetchError(
                f"Failed to fetch file: {response.status_code} {body}".rstrip(),
                status_code=response.status_code,
                body=body,
            )

        document = FetchedDocument(
            source=url,
            content=response.content,
            declared_extension=extension_from_url(url),
            declared_content_type=response.headers.get("content-type", "").lower(),
        )
        Log.info(
            "Fetched document",
            bytes=len(document.content),
            extension=document.declared_extension or "-",
            content_type=document.declared_content_type or "-",
        )
        return document
