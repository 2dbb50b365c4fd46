from abc import ABC, abstractmethod

from app.extraction.deadline import Deadline
from app.extraction.exceptions import DeadlineExceededError
from app.extraction.models import (
    ExtractionDiagnostics,
    FetchedDocument,
    StageReport,
    StageStatus,
)
from app.logging.logger import Log
from app.ocr.exceptions import OcrServiceError
from app.ocr.ocr_space_client import OcrSpaceClient
from app.pdf.base import BasePdfExtractor
from app.pdf.exceptions import PdfExtractionError
from app.pdf.tesseract_ocr import TesseractPdfOcr


class PdfStrategy(ABC):
    """One stage of the PDF fallback chain."""

    name: str = "pdf"
    label: str = "pdf"
    provider: str | None = None

    def skip_reason(self) -> str | None:
        """Return why the stage cannot run with the current configuration, if so."""
        return None

    @abstractmethod
    def run(self, document: FetchedDocument, deadline: Deadline) -> StageReport:
        raise NotImplementedError

    def _report(self, text: str) -> StageReport:
        if text.strip():
            return StageReport(self.name, StageStatus.SUCCEEDED, text=text)
        return StageReport(self.name, StageStatus.EMPTY, detail="no text")


class TextLayerStrategy(PdfStrategy):
    name = "text_layer"
    label = "text layer"

    def __init__(self, extractor: BasePdfExtractor) -> None:
        self._extractor = extractor

    def run(self, document: FetchedDocument, deadline: Deadline) -> StageReport:
        try:
            text = self._extractor.extract(document.content)
        except PdfExtractionError as exc:
            Log.warning("Text layer extraction failed", engine=self._extractor.name, error=exc)
            return StageReport(self.name, StageStatus.FAILED, detail=str(exc))
        return self._report(text)


class LocalOcrStrategy(PdfStrategy):
    name = "local_ocr"
    label = "local OCR"

    def __init__(self, ocr: TesseractPdfOcr, enabled: bool = True) -> None:
        self._ocr = ocr
        self._enabled = enabled

    def skip_reason(self) -> str | None:
        return None if self._enabled else "disabled"

    def run(self, document: FetchedDocument, deadline: Deadline) -> StageReport:
        try:
            result = self._ocr.extract(document.content, deadline)
        except PdfExtractionError as exc:
            Log.warning("Local OCR failed", error=exc)
            return StageReport(self.name, StageStatus.FAILED, detail=str(exc))
        report = self._report(result.text)
        if report.succeeded:
            return StageReport(
                self.name,
                StageStatus.SUCCEEDED,
                detail=f"{result.ocr_pages} of {result.page_count} pages recognised",
                text=result.text,
                used_ocr=result.ocr_pages > 0,
            )
        return report


class ExternalOcrStrategy(PdfStrategy):
    name = "external_ocr"
    label = "external OCR"

    def __init__(self, client: OcrSpaceClient | None) -> None:
        self._client = client
        self.provider = client.provider if client is not None else None

    def skip_reason(self) -> str | None:
        if self._client is None or not self._client.configured:
            return "no credential"
        return None

    def run(self, document: FetchedDocument, deadline: Deadline) -> StageReport:
        if self._client is None:
            raise ValueError("ExternalOcrStrategy.run requires a configured OCR client")
        try:
            text = self._client.parse_url(
                document.source,
                timeout_seconds=deadline.bound(self._client.timeout_seconds),
            )
        except OcrServiceError as exc:
            Log.warning("External OCR failed", provider=self.provider, error=exc)
            return StageReport(self.name, StageStatus.FAILED, detail=str(exc))
        return self._report(text)


class PdfStrategyChain:
    """Runs PDF strategies in priority order until one yields non-blank text.

    Every stage outcome (including skips and cancellations) is appended to
    the diagnostics. Stage-local errors never escape; only an elapsed
    deadline does, after the remaining stages are marked cancelled.
    """

    def __init__(self, strategies: list[PdfStrategy]) -> None:
        self._strategies = strategies

    @property
    def strategies(self) -> list[PdfStrategy]:
        return list(self._strategies)

    def run(
        self,
        document: FetchedDocument,
        deadline: Deadline,
        diagnostics: ExtractionDiagnostics,
    ) -> tuple[PdfStrategy, StageReport] | None:
        for index, strategy in enumerate(self._strategies):
            skip = strategy.skip_reason()
            if skip is not None:
                diagnostics.stages.append(StageReport(strategy.name, StageStatus.SKIPPED, detail=skip))
                diagnostics.notes.append(f"{strategy.label} skipped: {skip}")
                Log.info("PDF stage skipped", stage=strategy.name, reason=skip)
                continue

            try:
                deadline.check(f"before {strategy.label}")
                report = strategy.run(document, deadline)
            except DeadlineExceededError as exc:
                self._cancel_from(index, str(exc), diagnostics)
                raise
            except Exception as exc:
                Log.exception("PDF stage raised unexpectedly", stage=strategy.name)
                report = StageReport(strategy.name, StageStatus.FAILED, detail=str(exc))

            diagnostics.stages.append(report)
            Log.info("PDF stage finished", stage=strategy.name, status=report.status.value)
            if report.succeeded:
                return strategy, report
        return None

    def _cancel_from(self, index: int, detail: str, diagnostics: ExtractionDiagnostics) -> None:
        diagnostics.notes.append(detail)
        for position, strategy in enumerate(self._strategies[index:]):
            skip = strategy.skip_reason() if position else None
            if skip is not None:
                diagnostics.stages.append(StageReport(strategy.name, StageStatus.SKIPPED, detail=skip))
                diagnostics.notes.append(f"{strategy.label} skipped: {skip}")
                continue
            diagnostics.stages.append(
                StageReport(strategy.name, StageStatus.CANCELLED, detail=detail)
            )
