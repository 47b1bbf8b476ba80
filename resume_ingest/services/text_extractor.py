"""
Text extraction for uploaded resumes.
Resolves the document kind from its MIME type or filename, pulls the text
layer out of PDF/DOCX/TXT bytes, then normalizes and length-checks it.
"""
import io
import os
import re
import logging
import zipfile
from typing import Any, Dict, List, Optional, Tuple

import fitz  # PyMuPDF
import docx
from docx.opc.exceptions import PackageNotFoundError
from pydantic import BaseModel, Field

from ..exceptions import (
    LegacyFormatUnsupported,
    NoReadableText,
    TextTooShort,
    UnsupportedFileType,
)

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 100
MAX_TEXT_LENGTH = 15000
TRUNCATION_MARKER = "\n\n[... Resume truncated for processing ...]"

MIME_KINDS = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/msword": "doc",
    "text/plain": "txt",
}

EXTENSION_KINDS = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".doc": "doc",
    ".txt": "txt",
}


class ExtractedText(BaseModel):
    # raw_text carries TRUNCATION_MARKER when truncated; length counts resume text only
    raw_text: str
    length: int
    truncated: bool = False
    original_length: int
    kind: str
    page_count: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


def resolve_file_kind(mime_hint: Optional[str], file_name: Optional[str]) -> str:
    """Map a MIME type (exact match) or, failing that, a file extension to a kind."""
    if mime_hint:
        kind = MIME_KINDS.get(mime_hint.split(";")[0].strip().lower())
        if kind:
            return kind

    extension = os.path.splitext(file_name or "")[1].lower()
    kind = EXTENSION_KINDS.get(extension)
    if kind:
        return kind

    raise UnsupportedFileType(
        f"Unsupported file type ({mime_hint or 'unknown'}, '{extension or 'no extension'}'). "
        "Only PDF, DOCX and TXT resumes are supported."
    )


def normalize_text(text: str) -> str:
    text = text.replace("\f", "\n").replace("\r\n", "\n")
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_pdf_text(buffer: bytes) -> Tuple[str, int, Dict[str, Any]]:
    """Return (text, page_count, metadata) from the PDF text layer."""
    try:
        pdf_document = fitz.open(stream=buffer, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise NoReadableText("Could not read the PDF file. It may be corrupted.", details=str(e))

    try:
        pages = [page.get_text() for page in pdf_document]
        page_count = pdf_document.page_count
        metadata = {k: v for k, v in (pdf_document.metadata or {}).items() if v}
    finally:
        pdf_document.close()

    return "\n".join(pages), page_count, metadata


def extract_docx_text(buffer: bytes) -> Tuple[str, List[str]]:
    """Return (text, warnings). Paragraphs first, then table cells row by row."""
    try:
        document = docx.Document(io.BytesIO(buffer))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise NoReadableText("Could not read the DOCX file. It may be corrupted.", details=str(e))

    warnings = []
    lines = [p.text for p in document.paragraphs]

    if document.tables:
        warnings.append(f"{len(document.tables)} table(s) flattened to plain text")
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))

    image_count = len(document.inline_shapes)
    if image_count:
        warnings.append(f"{image_count} embedded image(s) ignored; image content is not extracted")

    return "\n".join(lines), warnings


class TextExtractor:
    """Turns a raw document buffer into normalized, length-checked text."""

    def __init__(self, min_text_length: int = MIN_TEXT_LENGTH, max_text_length: int = MAX_TEXT_LENGTH):
        self.min_text_length = min_text_length
        self.max_text_length = max_text_length

    def extract(self, buffer: bytes, mime_hint: Optional[str], file_name: Optional[str]) -> ExtractedText:
        kind = resolve_file_kind(mime_hint, file_name)

        page_count = None
        metadata: Dict[str, Any] = {}
        warnings: List[str] = []

        if kind == "doc":
            raise LegacyFormatUnsupported()
        elif kind == "pdf":
            text, page_count, metadata = extract_pdf_text(buffer)
            if not text.strip():
                raise NoReadableText()
        elif kind == "docx":
            text, warnings = extract_docx_text(buffer)
            if not text.strip():
                raise NoReadableText()
        else:
            try:
                text = buffer.decode("utf-8")
            except UnicodeDecodeError:
                text = buffer.decode("utf-8", errors="replace")
                warnings.append("File is not valid UTF-8; undecodable bytes were replaced")

        text = normalize_text(text)
        original_length = len(text)

        if original_length < self.min_text_length:
            raise TextTooShort(
                f"The document contains only {original_length} characters of text; "
                f"at least {self.min_text_length} are required."
            )

        truncated = original_length > self.max_text_length
        length = original_length
        if truncated:
            length = self.max_text_length
            text = text[:self.max_text_length] + TRUNCATION_MARKER
            logger.info(f"Truncated {kind} text from {original_length} to {self.max_text_length} characters")

        return ExtractedText(
            raw_text=text,
            length=length,
            truncated=truncated,
            original_length=original_length,
            kind=kind,
            page_count=page_count,
            metadata=metadata,
            warnings=warnings,
        )
