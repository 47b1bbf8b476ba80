"""
Pytest configuration
Settings, sample documents, fake collaborators and an in-memory database
"""
import io
import os
import tempfile
from typing import Callable, List, Optional

# Keep the app's static uploads mount out of the working tree
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="resume-ingest-uploads-"))

import docx
import fitz
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_ingest.config import Settings
from resume_ingest.database import create_engine_for, init_db
from resume_ingest.exceptions import CompletionApiError
from resume_ingest.services.blob_store import FetchedBlob
from resume_ingest.services.completion_client import CompletionResult


PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RESUME_LINES = [
    "Alice Johnson",
    "Senior Backend Engineer - Berlin, Germany",
    "Email: a@b.com GitHub: github.com/alice",
    "",
    "EXPERIENCE",
    "Acme Corp - Senior Backend Engineer (2019 - Present)",
    "Built async ingestion services in Python and FastAPI.",
    "Reduced p95 latency of the document API by 40 percent.",
    "",
    "EDUCATION",
    "B.Sc. Computer Science, Technical University of Munich, 2016",
    "",
    "SKILLS",
    "Python, PostgreSQL, Docker, Kubernetes, AWS",
]


# ==================== Settings ====================

def build_settings(**overrides) -> Settings:
    values = {
        "openrouter_api_key": "test-openrouter-key",
        "groq_api_key": "",
        "together_api_key": "",
        "llama_api_key": "",
        "database_url": "sqlite+aiosqlite://",
        "completion_backoff_seconds": 0,
        "environment": "development",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return build_settings()


# ==================== Sample documents ====================

@pytest.fixture
def resume_text() -> str:
    return "\n".join(RESUME_LINES)


def make_pdf(pages: List[List[str]]) -> bytes:
    """Build a PDF with one page per list of lines."""
    pdf_document = fitz.open()
    for lines in pages:
        page = pdf_document.new_page()
        if lines:
            page.insert_text((72, 72), "\n".join(lines), fontsize=10)
    data = pdf_document.tobytes()
    pdf_document.close()
    return data


def make_docx(paragraphs: List[str], table_rows: Optional[List[List[str]]] = None) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    if table_rows:
        table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def resume_pdf() -> bytes:
    """Two-page resume PDF."""
    return make_pdf([RESUME_LINES[:8], RESUME_LINES[8:]])


# ==================== Fake collaborators ====================

class FakeBlobStore:
    def __init__(self, content: bytes = b"", content_type: Optional[str] = None, error: Exception = None):
        self.content = content
        self.content_type = content_type
        self.error = error
        self.fetched: List[str] = []

    async def fetch(self, url: str) -> FetchedBlob:
        self.fetched.append(url)
        if self.error:
            raise self.error
        return FetchedBlob(content=self.content, content_type=self.content_type, byte_length=len(self.content))


def is_extraction_prompt(prompt: str) -> bool:
    return "resume parsing engine" in prompt


class FakeCompletionClient:
    """
    Returns canned completions keyed by prompt type.
    Each response may be a string or an exception to raise.
    """

    model = "fake-model"

    def __init__(self, summary="Strong backend engineer.", extraction='{"personalInfo": {}}',
                 on_call: Optional[Callable] = None):
        self.summary = summary
        self.extraction = extraction
        self.on_call = on_call
        self.calls: List[str] = []
        self.completed: List[str] = []

    async def complete(self, prompt: str, temperature: float = 0.3, max_tokens: int = 1500) -> CompletionResult:
        kind = "extraction" if is_extraction_prompt(prompt) else "summary"
        self.calls.append(kind)
        if self.on_call:
            await self.on_call(kind)
        response = self.extraction if kind == "extraction" else self.summary
        if isinstance(response, Exception):
            raise response
        self.completed.append(kind)
        return CompletionResult(text=response, tokens_used=100 if kind == "summary" else 250)


@pytest.fixture
def upstream_failure() -> CompletionApiError:
    return CompletionApiError("OpenRouter returned 500: upstream down", upstream_status=500)


# ==================== Database Fixtures ====================

@pytest.fixture
async def db_engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine_for("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session
