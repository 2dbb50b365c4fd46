from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.schemas import ExtractBody, failure_payload, failure_status, success_payload
from app.config.settings import Settings
from app.extraction.models import ExtractionRequest, ExtractionSuccess
from app.extraction.pipeline import ExtractionPipeline
from app.logging.logger import Log

router = APIRouter(prefix="/api")


def get_pipeline(request: Request) -> ExtractionPipeline:
    return request.app.state.pipeline


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("/extract")
def extract(
    body: ExtractBody,
    pipeline: ExtractionPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Fetch the document at `file_url` and return its plain text."""
    file_url = (body.file_url or "").strip()
    if not file_url:
        return JSONResponse({"error": "file_url is required"}, status_code=400)

    outcome = pipeline.extract(ExtractionRequest(source=file_url))
    if isinstance(outcome, ExtractionSuccess):
        Log.info(
            "Extraction succeeded",
            characters=len(outcome.text),
            used_ocr=outcome.used_ocr,
            external=outcome.used_external_ocr or "-",
        )
        return JSONResponse(success_payload(outcome))

    Log.warning("Extraction failed", kind=outcome.kind.value, reason=outcome.reason)
    return JSONResponse(failure_payload(outcome), status_code=failure_status(outcome))


@router.get("/debug/env")
def debug_env(settings: Settings = Depends(get_settings)) -> dict[str, object]:
    """Report which optional settings are present. Never returns the values."""
    present = {
        "OCR_SPACE_API_KEY": bool(settings.ocr_space_api_key.strip()),
        "LOCAL_OCR_ENABLED": settings.local_ocr_enabled,
    }
    Log.info("Environment check", **present)
    return {"present": present}
