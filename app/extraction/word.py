import io
import shutil
import subprocess
import tempfile
from pathlib import Path

from docx import Document

from app.extraction.exceptions import WordExtractionError
from app.logging.logger import Log

# Compound File Binary header used by legacy Word 97-2003 .doc files.
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class WordExtractor:
    """Single-pass raw text extraction for Word documents.

    OOXML (.docx) containers are read with python-docx. Legacy binary .doc
    files are converted to text with textutil or LibreOffice when one of
    them is installed.
    """

    def __init__(self, conversion_timeout_seconds: float = 60.0) -> None:
        self._conversion_timeout_seconds = conversion_timeout_seconds

    def extract(self, document_bytes: bytes) -> str:
        """Return paragraph text followed by table cell text.

        Raises:
            WordExtractionError: if the container cannot be opened or parsed.
        """
        if document_bytes.startswith(OLE_SIGNATURE):
            return self._extract_legacy(document_bytes)

        try:
            doc = Document(io.BytesIO(document_bytes))
            paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]
            cells = [
                cell.text
                for table in doc.tables
                for row in table.rows
                for cell in row.cells
                if cell.text.strip()
            ]
        except Exception as exc:
            raise WordExtractionError(f"Failed to extract Word document: {exc}") from exc

        Log.debug("Word document read", paragraphs=len(paragraphs), table_cells=len(cells))
        return "\n".join(paragraphs + cells).strip()

    def _extract_legacy(self, document_bytes: bytes) -> str:
        with tempfile.TemporaryDirectory() as tmp_dir:
            source = Path(tmp_dir) / "document.doc"
            source.write_bytes(document_bytes)
            try:
                text = self._convert(source)
            except (OSError, subprocess.SubprocessError) as exc:
                raise WordExtractionError(f"Failed to extract Word document: {exc}") from exc

        if text is None:
            raise WordExtractionError(
                "Failed to extract Word document: legacy .doc needs textutil or LibreOffice"
            )
        return text

    def _convert(self, source: Path) -> str | None:
        if shutil.which("textutil"):
            result = subprocess.run(
                ["textutil", "-convert", "txt", str(source), "-stdout"],
                capture_output=True,
                text=True,
                timeout=self._conversion_timeout_seconds,
            )
            if result.returncode == 0 and result.stdout.strip():
                Log.debug("Legacy .doc converted", converter="textutil")
                return result.stdout.strip()

        soffice = shutil.which("soffice") or shutil.which("libreoffice")
        if soffice:
            result = subprocess.run(
                [
                    soffice,
                    "--headless",
                    "--convert-to",
                    "txt:Text",
                    str(source),
                    "--outdir",
                    str(source.parent),
                ],
                capture_output=True,
                text=True,
                timeout=self._conversion_timeout_seconds,
            )
            converted = source.with_suffix(".txt")
            if result.returncode == 0 and converted.exists():
                Log.debug("Legacy .doc converted", converter="soffice")
                return converted.read_text(encoding="utf-8", errors="ignore").strip()

        return None
