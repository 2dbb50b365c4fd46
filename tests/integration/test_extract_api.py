"""End-to-end tests: HTTP request -> fetch (mocked transport) -> extraction -> JSON."""

from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.app import create_app
from app.config.settings import Settings

DOC_HOST = "https://files.example.com"
OCR_ENDPOINT = "https://api.ocr.space/parse/image"

Routes = dict[str, httpx.Response]


def _transport(routes: Routes, ocr_calls: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == OCR_ENDPOINT:
            ocr_calls.append(request)
            return routes.get(OCR_ENDPOINT, httpx.Response(500))
        return routes.get(str(request.url), httpx.Response(404, text="no such object"))

    return httpx.MockTransport(handler)


@pytest.fixture()
def make_client(
    settings: Settings,
) -> Generator[Callable[..., tuple[TestClient, list[httpx.Request]]], None, None]:
    opened: list[TestClient] = []

    def factory(
        routes: Routes, **overrides: object
    ) -> tuple[TestClient, list[httpx.Request]]:
        ocr_calls: list[httpx.Request] = []
        http_client = httpx.Client(transport=_transport(routes, ocr_calls))
        app_settings = settings.model_copy(update=overrides)
        client = TestClient(create_app(app_settings, http_client=http_client))
        client.__enter__()
        opened.append(client)
        return client, ocr_calls

    yield factory
    for client in opened:
        client.__exit__(None, None, None)


class TestExtractEndpoint:
    def test_text_pdf_returns_text_without_ocr_flags(
        self, make_client, sample_pdf_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        url = f"{DOC_HOST}/resumes/cv.pdf"
        client, ocr_calls = make_client(
            {url: httpx.Response(200, content=sample_pdf_bytes, headers={"content-type": "application/pdf"})},
            ocr_space_api_key="configured",
        )

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 200
        body = response.json()
        assert body["text"] == "Hello PDF World"
        assert "usedOcr" not in body
        assert "usedExternalOcr" not in body
        assert ocr_calls == []

    def test_docx_returns_hello_world(self, make_client, docx_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        url = f"{DOC_HOST}/resumes/cv.docx"
        client, _ = make_client({url: httpx.Response(200, content=docx_bytes)})

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 200
        assert response.json() == {"text": "Hello World"}

    def test_plain_text_without_extension(self, make_client) -> None:  # type: ignore[no-untyped-def]
        url = f"{DOC_HOST}/resumes/abc"
        client, _ = make_client(
            {url: httpx.Response(200, content=b"abc", headers={"content-type": "text/plain"})}
        )

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 200
        assert response.json() == {"text": "abc"}

    def test_missing_file_url_is_400(self, make_client) -> None:  # type: ignore[no-untyped-def]
        client, _ = make_client({})
        assert client.post("/api/extract", json={}).status_code == 400
        assert client.post("/api/extract", json={"file_url": "  "}).status_code == 400

    def test_unparsable_body_is_400(self, make_client) -> None:  # type: ignore[no-untyped-def]
        client, _ = make_client({})
        response = client.post(
            "/api/extract", content=b"{not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "file_url is required"}

    def test_upstream_failure_is_502(self, make_client) -> None:  # type: ignore[no-untyped-def]
        client, _ = make_client({})

        response = client.post("/api/extract", json={"file_url": f"{DOC_HOST}/gone.pdf"})

        assert response.status_code == 502
        body = response.json()
        assert "404" in body["error"]
        assert body["upstreamStatus"] == 404
        assert body["details"] == "no such object"

    def test_scanned_pdf_without_credential_is_500_with_diagnostics(
        self, make_client, image_only_pdf_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        url = f"{DOC_HOST}/scan.pdf"
        client, ocr_calls = make_client(
            {url: httpx.Response(200, content=image_only_pdf_bytes)},
            local_ocr_enabled=False,
        )

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "extraction exhausted"
        assert body["meta"]["byteLength"] == len(image_only_pdf_bytes)
        assert body["meta"]["extension"] == "pdf"
        assert "external OCR skipped: no credential" in body["diagnostics"]["notes"]
        assert body["diagnostics"]["attempted"] == ["text_layer"]
        assert ocr_calls == []

    def test_scanned_pdf_falls_back_to_external_ocr(
        self, make_client, image_only_pdf_bytes: bytes  # type: ignore[no-untyped-def]
    ) -> None:
        url = f"{DOC_HOST}/scan.pdf"
        client, ocr_calls = make_client(
            {
                url: httpx.Response(200, content=image_only_pdf_bytes),
                OCR_ENDPOINT: httpx.Response(
                    200, json={"ParsedResults": [{"ParsedText": "Jane Doe, Data Engineer"}]}
                ),
            },
            local_ocr_enabled=False,
            ocr_space_api_key="configured",
        )

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 200
        assert response.json() == {
            "text": "Jane Doe, Data Engineer",
            "usedExternalOcr": "ocr.space",
        }
        assert len(ocr_calls) == 1

    def test_corrupt_docx_is_500_with_parse_error(self, make_client) -> None:  # type: ignore[no-untyped-def]
        url = f"{DOC_HOST}/cv.docx"
        client, _ = make_client({url: httpx.Response(200, content=b"not a word file")})

        response = client.post("/api/extract", json={"file_url": url})

        assert response.status_code == 500
        body = response.json()
        assert body["error"].startswith("Failed to extract Word document")
        assert body["diagnostics"]["formatClass"] == "word"


class TestDebugEnvEndpoint:
    def test_reports_presence_only(self, make_client) -> None:  # type: ignore[no-untyped-def]
        client, _ = make_client({}, ocr_space_api_key="super-secret")

        response = client.get("/api/debug/env")

        assert response.status_code == 200
        assert response.json() == {
            "present": {"OCR_SPACE_API_KEY": True, "LOCAL_OCR_ENABLED": True}
        }
        assert "super-secret" not in response.text
