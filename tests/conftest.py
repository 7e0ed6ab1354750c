import io
import zipfile
from collections.abc import Callable

import pytest
from docx import Document
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _pdf(*lines: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 720
    for line in lines:
        c.drawString(72, y, line)
        y -= 20
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single-page invoice PDF with known text content."""
    return _pdf("Invoice INV-001", "Client: Acme Corp", "Total: 1180.00")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF with no text layer (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Word document with one paragraph and a two-column table."""
    document = Document()
    document.add_paragraph("Invoice INV-002")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Amount"
    table.rows[0].cells[1].text = "500.00"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    """Build a ZIP archive in memory; names ending in '/' become directory entries."""

    def _make(entries: dict[str, bytes]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as archive:
            for name, data in entries.items():
                if name.endswith("/"):
                    archive.writestr(zipfile.ZipInfo(name), b"")
                else:
                    archive.writestr(name, data)
        return buf.getvalue()

    return _make


@pytest.fixture()
def make_encrypted_zip() -> Callable[[str], bytes]:
    """ZIP with one plain PDF entry and one entry flagged as password protected."""

    def _make(name: str) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as archive:
            archive.writestr("plain.pdf", b"P")
            info = zipfile.ZipInfo(name)
            archive.writestr(info, b"scrambled")
            # writestr resets flag_bits; the central directory is written on close.
            info.flag_bits |= 0x1
        return buf.getvalue()

    return _make
