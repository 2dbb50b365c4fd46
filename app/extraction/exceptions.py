class ExtractionError(Exception):
    """Base exception for extraction pipeline errors."""


class DocumentFetchError(ExtractionError):
    """Raised when the source document cannot be retrieved."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DeadlineExceededError(ExtractionError):
    """Raised when the per-request extraction deadline has elapsed."""


class WordExtractionError(ExtractionError):
    """Raised when a Word document cannot be opened or read."""
