"""
File Upload Utility - Extract text from resumes and company requirement documents.

Supported formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text (.txt)
"""

import io
import logging
from typing import Tuple

from docx import Document
from fastapi import UploadFile, HTTPException
from PyPDF2 import PdfReader

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

ALLOWED_EXTENSIONS = {'.pdf', '.docx', '.txt'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def max_file_size_bytes() -> int:
    return settings.max_upload_size_mb * 1024 * 1024


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str]:
    """
    Extract text from uploaded file.

    Returns:
        Tuple of (extracted_text, filename)

    Raises:
        HTTPException on validation/extraction errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    content = await file.read()
    text = extract_text(file.filename, content)
    return text, file.filename


def extract_text(filename: str, content: bytes) -> str:
    """Validate type and size, then extract text from raw bytes."""
    ext = get_file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT"
        )

    if len(content) > max_file_size_bytes():
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_size_mb}MB"
        )

    if ext == '.pdf':
        text = extract_from_pdf(content)
    elif ext == '.docx':
        text = extract_from_docx(content)
    else:  # .txt
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )

    logger.debug("Extracted %d characters from %s", len(text), filename)
    return text


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    try:
        doc = Document(io.BytesIO(content))
        text_parts = []

        for para in doc.paragraphs:
            if para.text.strip():
                text_parts.append(para.text)

        # Tables often hold skill matrices and eligibility grids
        for table in doc.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    text_parts.append(' | '.join(row_text))

        return '\n'.join(text_parts)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {str(e)}")


def extract_from_txt(content: bytes) -> str:
    """Extract text from TXT bytes."""
    for encoding in ['utf-8', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode('latin-1')


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "supported_formats": [
            {"extension": ".pdf", "name": "PDF"},
            {"extension": ".docx", "name": "Word Document"},
            {"extension": ".txt", "name": "Plain Text"}
        ],
        "max_size_mb": settings.max_upload_size_mb
    }
