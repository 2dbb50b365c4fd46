import httpx

from app.config.settings import Settings
from app.extraction.classifier import classify_parts, extension_from_url, url_for_log
from app.extraction.deadline import Deadline
from app.extraction.exceptions import (
    DeadlineExceededError,
    DocumentFetchError,
    WordExtractionError,
)
from app.extraction.fetcher import DocumentFetcher
from app.extraction.models import (
    ExtractionDiagnostics,
    ExtractionFailure,
    ExtractionOutcome,
    ExtractionRequest,
    ExtractionSuccess,
    FailureKind,
    FetchedDocument,
    FormatClass,
    StageReport,
    StageStatus,
)
from app.extraction.strategies import (
    ExternalOcrStrategy,
    LocalOcrStrategy,
    PdfStrategyChain,
    TextLayerStrategy,
)
from app.extraction.word import WordExtractor
from app.logging.logger import Log
from app.ocr.ocr_space_client import OcrSpaceClient
from app.pdf.factory import PdfExtractorFactory

EXHAUSTED_REASON = "extraction exhausted"


def decode_plain_text(content: bytes) -> str:
    """Decode as UTF-8, replacing malformed sequences instead of raising."""
    return content.decode("utf-8", errors="replace")


class ExtractionPipeline:
    """Turns a document URL into plain text.

    Pipeline: fetch -> classify -> (PDF chain | Word pass | plain decode).
    Every failure is returned as an ExtractionFailure; nothing escapes
    `extract`.
    """

    def __init__(
        self,
        *,
        fetcher: DocumentFetcher,
        pdf_chain: PdfStrategyChain,
        word_extractor: WordExtractor,
        deadline_seconds: float,
    ) -> None:
        self._fetcher = fetcher
        self._pdf_chain = pdf_chain
        self._word_extractor = word_extractor
        self._deadline_seconds = deadline_seconds

    def extract(self, request: ExtractionRequest) -> ExtractionOutcome:
        deadline = Deadline(self._deadline_seconds)
        Log.info("Extraction started", source=url_for_log(request.source))

        try:
            document = self._fetcher.fetch(request.source, deadline)
        except DocumentFetchError as exc:
            Log.warning(
                "Document fetch failed",
                source=url_for_log(request.source),
                status=exc.status_code,
            )
            return ExtractionFailure(
                reason=str(exc),
                kind=FailureKind.FETCH_FAILED,
                diagnostics=ExtractionDiagnostics(extension=extension_from_url(request.source)),
                details=exc.body or None,
                status_code=exc.status_code,
            )
        except DeadlineExceededError as exc:
            return ExtractionFailure(reason=str(exc), kind=FailureKind.DEADLINE_EXCEEDED)

        try:
            return self.extract_document(document, deadline)
        except Exception as exc:
            Log.exception("Extraction failed unexpectedly", source=url_for_log(request.source))
            return ExtractionFailure(
                reason=f"Internal extraction error: {exc}",
                kind=FailureKind.INTERNAL,
                diagnostics=ExtractionDiagnostics.for_document(document),
            )

    def extract_document(
        self, document: FetchedDocument, deadline: Deadline | None = None
    ) -> ExtractionOutcome:
        """Classify an already fetched document and run its extraction route."""
        if deadline is None:
            deadline = Deadline(self._deadline_seconds)
        diagnostics = ExtractionDiagnostics.for_document(document)
        diagnostics.format_class = classify_parts(
            document.declared_extension, document.declared_content_type
        )
        Log.info(
            "Document classified",
            format=diagnostics.format_class.value,
            bytes=diagnostics.byte_length,
        )

        if diagnostics.format_class is FormatClass.PDF:
            return self._extract_pdf(document, deadline, diagnostics)
        if diagnostics.format_class is FormatClass.WORD:
            return self._extract_word(document, diagnostics)
        return self._extract_plain(document, diagnostics)

    def _extract_pdf(
        self,
        document: FetchedDocument,
        deadline: Deadline,
        diagnostics: ExtractionDiagnostics,
    ) -> ExtractionOutcome:
        try:
            winner = self._pdf_chain.run(document, deadline, diagnostics)
        except DeadlineExceededError as exc:
            Log.warning("PDF extraction cancelled", reason=exc)
            return ExtractionFailure(
                reason=str(exc),
                kind=FailureKind.DEADLINE_EXCEEDED,
                diagnostics=diagnostics,
            )

        if winner is None:
            Log.warning(
                "PDF extraction exhausted",
                attempted=",".join(diagnostics.attempted_stages),
                notes="; ".join(diagnostics.notes) or "-",
            )
            return ExtractionFailure(
                reason=EXHAUSTED_REASON,
                kind=FailureKind.EXHAUSTED,
                diagnostics=diagnostics,
                details="; ".join(diagnostics.notes) or None,
            )

        strategy, report = winner
        return ExtractionSuccess(
            text=report.text or "",
            used_ocr=report.used_ocr,
            used_external_ocr=strategy.provider,
            diagnostics=diagnostics,
        )

    def _extract_word(
        self, document: FetchedDocument, diagnostics: ExtractionDiagnostics
    ) -> ExtractionOutcome:
        try:
            text = self._word_extractor.extract(document.content)
        except WordExtractionError as exc:
            Log.error("Word extraction failed", error=exc)
            diagnostics.stages.append(StageReport("word", StageStatus.FAILED, detail=str(exc)))
            return ExtractionFailure(
                reason=str(exc),
                kind=FailureKind.WORD_PARSE_FAILED,
                diagnostics=diagnostics,
                details=str(exc.__cause__ or exc),
            )
        status = StageStatus.SUCCEEDED if text.strip() else StageStatus.EMPTY
        diagnostics.stages.append(StageReport("word", status))
        return ExtractionSuccess(text=text, diagnostics=diagnostics)

    def _extract_plain(
        self, document: FetchedDocument, diagnostics: ExtractionDiagnostics
    ) -> ExtractionOutcome:
        text = decode_plain_text(document.content)
        diagnostics.stages.append(StageReport("plain", StageStatus.SUCCEEDED))
        return ExtractionSuccess(text=text, diagnostics=diagnostics)


def build_pipeline(settings: Settings, http_client: httpx.Client) -> ExtractionPipeline:
    """Build an ExtractionPipeline with all adapters wired from settings."""
    fetcher = DocumentFetcher(
        http_client,
        timeout_seconds=settings.fetch_timeout_seconds,
        error_body_limit=settings.fetch_error_body_limit,
    )
    ocr_client = None
    if settings.ocr_space_api_key.strip():
        ocr_client = OcrSpaceClient(
            http_client,
            api_key=settings.ocr_space_api_key,
            endpoint=settings.ocr_space_endpoint,
            language=settings.ocr_space_language,
            timeout_seconds=settings.ocr_space_timeout_seconds,
        )
    pdf_chain = PdfStrategyChain(
        [
            TextLayerStrategy(PdfExtractorFactory.create(settings)),
            LocalOcrStrategy(
                PdfExtractorFactory.create_ocr(settings),
                enabled=settings.local_ocr_enabled,
            ),
            ExternalOcrStrategy(ocr_client),
        ]
    )
    return ExtractionPipeline(
        fetcher=fetcher,
        pdf_chain=pdf_chain,
        word_extractor=WordExtractor(
            conversion_timeout_seconds=settings.doc_conversion_timeout_seconds
        ),
        deadline_seconds=settings.extraction_deadline_seconds,
    )
