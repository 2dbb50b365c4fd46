import io

import pdfplumber

from app.logging.logger import Log
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads the PDF text layer using pdfplumber."""

    name = "pdfplumber"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [(page.extract_text() or "").strip() for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not parse document: {exc}") from exc

        Log.debug(
            "pdfplumber text layer read",
            pages=len(pages),
            pages_with_text=sum(1 for text in pages if text),
        )
        return "\n\n".join(text for text in pages if text).strip()
