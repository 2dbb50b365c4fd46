import io
from dataclasses import dataclass

import pymupdf
import pytesseract
from PIL import Image

from app.extraction.deadline import Deadline
from app.logging.logger import Log
from app.pdf.exceptions import OcrError


@dataclass(frozen=True)
class OcrPdfText:
    """Text of an OCR-enabled pass plus how many pages needed recognition."""

    text: str
    page_count: int
    ocr_pages: int


class TesseractPdfOcr:
    """Page-by-page PDF extraction with Tesseract OCR for pages lacking a text layer.

    Pages are processed sequentially in page order. Pages that already carry
    a text layer keep it; the others are rendered with PyMuPDF and
    recognised with Tesseract.
    """

    def __init__(self, *, tesseract_cmd: str, languages: str, dpi: int) -> None:
        self._languages = languages
        self._dpi = dpi
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract(self, pdf_bytes: bytes, deadline: Deadline | None = None) -> OcrPdfText:
        """Extract text from every page, recognising image-only pages.

        Raises:
            OcrError: if the document cannot be opened or a page fails to render/recognise.
            DeadlineExceededError: if the deadline elapses between pages.
        """
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise OcrError(f"pymupdf could not open document for OCR: {exc}") from exc

        texts: list[str] = []
        ocr_pages = 0
        with doc:
            page_count = len(doc)
            for index, page in enumerate(doc):
                if deadline is not None:
                    deadline.check(f"local OCR before page {index + 1}")
                native = page.get_text().strip()
                if native:
                    texts.append(native)
                    continue
                recognised = self._recognise(page, index)
                ocr_pages += 1
                if recognised:
                    texts.append(recognised)

        Log.info(
            "Local OCR pass completed",
            page_count=page_count,
            ocr_pages=ocr_pages,
            pages_with_text=len(texts),
        )
        return OcrPdfText(text="\n\n".join(texts).strip(), page_count=page_count, ocr_pages=ocr_pages)

    def _recognise(self, page: pymupdf.Page, index: int) -> str:
        try:
            pix = page.get_pixmap(dpi=self._dpi)
            image = Image.open(io.BytesIO(pix.tobytes("png")))
            text = pytesseract.image_to_string(image, lang=self._languages)
        except Exception as exc:
            raise OcrError(f"OCR failed on page {index + 1}: {exc}") from exc
        Log.debug("Page recognised", page=index + 1, characters=len(text.strip()))
        return text.strip()
