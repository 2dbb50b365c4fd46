from app.config.settings import Settings
from app.pdf.base import BasePdfExtractor
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter
from app.pdf.tesseract_ocr import TesseractPdfOcr


class PdfExtractorFactory:
    """Creates the text-layer extractor and local OCR engine from settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create_ocr(cls, settings: Settings) -> TesseractPdfOcr:
        return TesseractPdfOcr(
            tesseract_cmd=settings.tesseract_cmd,
            languages=settings.ocr_languages,
            dpi=settings.ocr_dpi,
        )
