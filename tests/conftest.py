import io

import pytest
from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.config.settings import Settings


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def image_only_pdf_bytes() -> bytes:
    """Generate a PDF whose single page has graphics but no text layer, like a scan."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setFillGray(0.2)
    c.rect(72, 600, 300, 120, fill=1)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def mixed_pdf_bytes() -> bytes:
    """Generate a two-page PDF: text layer on page one, graphics only on page two."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Typed page")
    c.showPage()
    c.rect(72, 600, 300, 120, fill=1)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    """Generate a minimal Word document containing "Hello World"."""
    doc = Document()
    doc.add_paragraph("Hello World")
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings isolated from the host environment, with external OCR disabled."""
    monkeypatch.delenv("OCR_SPACE_API_KEY", raising=False)
    return Settings(_env_file=None, ocr_space_api_key="")
