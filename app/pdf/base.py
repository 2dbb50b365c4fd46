from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text-layer extraction adapters."""

    name: str = "base"

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the text layer of every page, in page order.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Page texts joined by blank lines, stripped. Empty when the
            document has no text layer (e.g. scanned images).

        Raises:
            PdfExtractionError: if the document structure cannot be parsed.
        """
