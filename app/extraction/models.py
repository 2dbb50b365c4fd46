from dataclasses import dataclass, field
from enum import Enum


class FormatClass(str, Enum):
    """Extraction route selected for a document."""

    PDF = "pdf"
    WORD = "word"
    PLAIN = "plain"


class StageStatus(str, Enum):
    SUCCEEDED = "succeeded"
    EMPTY = "empty"
    FAILED = "failed"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class FailureKind(str, Enum):
    """Why an extraction produced no usable text."""

    FETCH_FAILED = "fetch_failed"
    WORD_PARSE_FAILED = "word_parse_failed"
    EXHAUSTED = "exhausted"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ExtractionRequest:
    source: str


@dataclass(frozen=True)
class FetchedDocument:
    """Raw payload of a fetched document plus the hints used for classification."""

    source: str
    content: bytes
    declared_extension: str = ""
    declared_content_type: str = ""


@dataclass(frozen=True)
class StageReport:
    """What one extraction stage did; `text` is set only when it succeeded."""

    name: str
    status: StageStatus
    detail: str = ""
    text: str | None = None
    used_ocr: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status is StageStatus.SUCCEEDED


@dataclass
class ExtractionDiagnostics:
    """Metadata that lets operators tell failure causes apart after the fact."""

    byte_length: int = 0
    extension: str = ""
    content_type: str = ""
    format_class: FormatClass | None = None
    stages: list[StageReport] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def attempted_stages(self) -> list[str]:
        return [
            stage.name
            for stage in self.stages
            if stage.status not in (StageStatus.SKIPPED, StageStatus.CANCELLED)
        ]

    @classmethod
    def for_document(cls, document: FetchedDocument) -> "ExtractionDiagnostics":
        return cls(
            byte_length=len(document.content),
            extension=document.declared_extension,
            content_type=document.declared_content_type,
        )


@dataclass(frozen=True)
class ExtractionSuccess:
    text: str
    used_ocr: bool = False
    used_external_ocr: str | None = None
    diagnostics: ExtractionDiagnostics = field(default_factory=ExtractionDiagnostics)

    @property
    def usable(self) -> bool:
        """Only non-blank text is worth passing on to scoring."""
        return bool(self.text.strip())


@dataclass(frozen=True)
class ExtractionFailure:
    reason: str
    kind: FailureKind
    diagnostics: ExtractionDiagnostics = field(default_factory=ExtractionDiagnostics)
    details: str | None = None
    status_code: int | None = None


ExtractionOutcome = ExtractionSuccess | ExtractionFailure
