"""Upload validation and text extraction."""

import io

import pytest
from docx import Document
from fastapi import HTTPException

from app.utils.file_upload import extract_text, get_file_extension, max_file_size_bytes


def test_file_extension():
    assert get_file_extension("Resume.PDF") == ".pdf"
    assert get_file_extension("notes") == ""


def test_txt_extraction_utf8_and_fallback():
    assert extract_text("a.txt", "Résumé".encode("utf-8")) == "Résumé"
    assert extract_text("b.txt", "Café".encode("cp1252")) == "Café"


def test_docx_extraction_includes_tables():
    document = Document()
    document.add_paragraph("Priya Sharma")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "Advanced"
    buffer = io.BytesIO()
    document.save(buffer)

    text = extract_text("resume.docx", buffer.getvalue())
    assert "Priya Sharma" in text
    assert "Python | Advanced" in text


def test_unsupported_extension():
    with pytest.raises(HTTPException) as exc:
        extract_text("photo.jpg", b"data")
    assert exc.value.status_code == 400


def test_file_too_large():
    with pytest.raises(HTTPException) as exc:
        extract_text("big.txt", b"a" * (max_file_size_bytes() + 1))
    assert exc.value.status_code == 413


def test_empty_text_is_rejected():
    with pytest.raises(HTTPException) as exc:
        extract_text("blank.txt", b"   \n")
    assert exc.value.status_code == 400


def test_corrupt_pdf():
    with pytest.raises(HTTPException) as exc:
        extract_text("broken.pdf", b"not a pdf")
    assert exc.value.status_code == 400


def _single_page_pdf(line: str) -> bytes:
    """Build a one-page PDF with a line of Helvetica text."""
    stream = f"BT /F1 18 Tf 72 720 Td ({line}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    pdf = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_at = len(pdf)
    pdf += f"xref\n0 {len(objects) + 1}\n".encode()
    pdf += b"0000000000 65535 f \n"
    for offset in offsets:
        pdf += f"{offset:010d} 00000 n \n".encode()
    pdf += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return pdf


def test_pdf_extraction():
    text = extract_text("resume.pdf", _single_page_pdf("Priya Sharma Python Developer"))
    assert "Priya Sharma Python Developer" in text
