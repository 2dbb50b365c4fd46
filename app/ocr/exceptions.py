class OcrServiceError(Exception):
    """Raised when the hosted OCR service call fails or returns no text."""


class OcrServiceNetworkError(OcrServiceError):
    """Raised when the hosted OCR service cannot be reached."""
