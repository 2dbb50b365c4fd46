from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000

    pdf_engine: str = "pdfplumber"

    fetch_timeout_seconds: float = 30.0
    fetch_error_body_limit: int = 500
    extraction_deadline_seconds: float = 120.0

    local_ocr_enabled: bool = True
    tesseract_cmd: str = "tesseract"
    ocr_languages: str = "eng"
    ocr_dpi: int = 200

    doc_conversion_timeout_seconds: float = 60.0

    ocr_space_api_key: str = ""
    ocr_space_endpoint: str = "https://api.ocr.space/parse/image"
    ocr_space_language: str = "eng"
    ocr_space_timeout_seconds: float = 60.0
