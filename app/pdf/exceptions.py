class PdfExtractionError(Exception):
    """Raised when a PDF text layer cannot be parsed."""


class OcrError(PdfExtractionError):
    """Raised when local OCR of a PDF fails."""
