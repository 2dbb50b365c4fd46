"""Request model and JSON payloads for the extraction API."""

from pydantic import BaseModel, ConfigDict

from app.extraction.models import (
    ExtractionDiagnostics,
    ExtractionFailure,
    ExtractionSuccess,
    FailureKind,
)

FAILURE_STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.FETCH_FAILED: 502,
    FailureKind.WORD_PARSE_FAILED: 500,
    FailureKind.EXHAUSTED: 500,
    FailureKind.DEADLINE_EXCEEDED: 500,
    FailureKind.INTERNAL: 500,
}


class ExtractBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    file_url: str | None = None


def success_payload(outcome: ExtractionSuccess) -> dict[str, object]:
    payload: dict[str, object] = {"text": outcome.text}
    if outcome.used_ocr:
        payload["usedOcr"] = True
    if outcome.used_external_ocr:
        payload["usedExternalOcr"] = outcome.used_external_ocr
    return payload


def diagnostics_payload(diagnostics: ExtractionDiagnostics) -> dict[str, object]:
    return {
        "formatClass": diagnostics.format_class.value if diagnostics.format_class else None,
        "attempted": diagnostics.attempted_stages,
        "stages": [
            {"name": stage.name, "status": stage.status.value, "detail": stage.detail}
            for stage in diagnostics.stages
        ],
        "notes": list(diagnostics.notes),
    }


def failure_payload(outcome: ExtractionFailure) -> dict[str, object]:
    diagnostics = outcome.diagnostics
    payload: dict[str, object] = {
        "error": outcome.reason,
        "kind": outcome.kind.value,
        "meta": {
            "byteLength": diagnostics.byte_length,
            "extension": diagnostics.extension,
            "contentType": diagnostics.content_type,
        },
        "diagnostics": diagnostics_payload(diagnostics),
    }
    if outcome.details:
        payload["details"] = outcome.details
    if outcome.status_code is not None:
        payload["upstreamStatus"] = outcome.status_code
    return payload


def failure_status(outcome: ExtractionFailure) -> int:
    return FAILURE_STATUS_CODES.get(outcome.kind, 500)
