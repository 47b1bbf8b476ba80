"""
Resume ingestion pipeline.

Fetch bytes -> extract text -> summary + structured extraction (concurrent)
-> reconcile with harvested URLs -> persist.
"""
import asyncio
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import Settings
from ..exceptions import (
    CompletionApiError,
    MissingInput,
    ResumeProcessingError,
    StructuredExtractionFailed,
    SummarizationFailed,
)
from ..schemas.resume import ProcessResumeRequest, ResumeRecordCreate
from .blob_store import BlobStore
from .completion_client import CompletionClient
from .persistence import ResumeRecordRepository
from .prompts import PROMPT_VERSION, build_extraction_prompt, build_summary_prompt
from .reconciler import reconcile
from .text_extractor import ExtractedText, TextExtractor
from .url_harvester import HarvestedUrls, harvest_urls

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    record_id: str
    name: str
    file_name: str
    resume_url: str
    file_size: int
    summary: str
    structured_requested: bool
    structured_data: Optional[Dict[str, Any]] = None
    extracted: ExtractedText
    harvested: HarvestedUrls
    summary_tokens: int = 0
    extraction_tokens: int = 0
    warnings: List[str] = Field(default_factory=list)
    prompt_version: str = PROMPT_VERSION
    processed_at: datetime
    processing_time_ms: int

    @property
    def word_count(self) -> int:
        return len(self.extracted.raw_text.split())

    @property
    def total_tokens(self) -> int:
        return self.summary_tokens + self.extraction_tokens


def derive_record_name(user_name: Optional[str], file_name: str) -> str:
    """Caller-supplied name, else the file name without its extension."""
    if user_name and user_name.strip():
        return user_name.strip()
    base = os.path.basename(file_name.strip())
    return os.path.splitext(base)[0] or base


class IngestionPipeline:
    def __init__(
        self,
        settings: Settings,
        completion_client: CompletionClient,
        blob_store: BlobStore,
        repository: ResumeRecordRepository,
        extractor: Optional[TextExtractor] = None,
    ):
        self.settings = settings
        self.completion_client = completion_client
        self.blob_store = blob_store
        self.repository = repository
        self.extractor = extractor or TextExtractor(
            min_text_length=settings.min_text_length,
            max_text_length=settings.max_text_length,
        )

    async def run(self, request: ProcessResumeRequest) -> PipelineResult:
        start = time.perf_counter()

        # ===== STEP 1: VALIDATE REQUEST =====
        file_url = (request.file_url or "").strip()
        file_name = (request.file_name or "").strip()
        if not file_url or not file_name:
            raise MissingInput()

        # ===== STEP 2: FETCH BYTES =====
        blob = await self.blob_store.fetch(file_url)

        # ===== STEP 3: EXTRACT TEXT =====
        extracted = self.extractor.extract(blob.content, blob.content_type, file_name)
        harvested = harvest_urls(extracted.raw_text)
        logger.info(
            f"Extracted {extracted.length} chars from {extracted.kind} '{file_name}' "
            f"(truncated={extracted.truncated}, urls={len(harvested.all_urls)})"
        )

        # ===== STEP 4: MODEL CALLS (join, not race) =====
        calls = [
            self.completion_client.complete(
                build_summary_prompt(extracted.raw_text),
                temperature=self.settings.summary_temperature,
                max_tokens=self.settings.summary_max_tokens,
            )
        ]
        if request.extract_json:
            calls.append(
                self.completion_client.complete(
                    build_extraction_prompt(extracted.raw_text),
                    temperature=self.settings.extraction_temperature,
                    max_tokens=self.settings.extraction_max_tokens,
                )
            )
        results = await asyncio.gather(*calls, return_exceptions=True)

        summary_result = results[0]
        if isinstance(summary_result, CompletionApiError):
            raise SummarizationFailed(details=summary_result.message)
        if isinstance(summary_result, BaseException):
            raise summary_result

        warnings = list(extracted.warnings)
        structured_data = None
        extraction_tokens = 0
        if request.extract_json:
            structured_data, extraction_tokens = self._structured_data(results[1], harvested, warnings)

        # ===== STEP 5: PERSIST =====
        record = await self.repository.insert(
            ResumeRecordCreate(
                name=derive_record_name(request.user_name, file_name),
                resume_url=file_url,
                summary_of_resume=summary_result.text,
                structured_data=structured_data,
            )
        )

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(f"Processed resume '{file_name}' as record {record.id} in {elapsed_ms}ms")

        return PipelineResult(
            record_id=record.id,
            name=record.name,
            file_name=file_name,
            resume_url=file_url,
            file_size=blob.byte_length,
            summary=summary_result.text,
            structured_requested=request.extract_json,
            structured_data=structured_data,
            extracted=extracted,
            harvested=harvested,
            summary_tokens=summary_result.tokens_used,
            extraction_tokens=extraction_tokens,
            warnings=warnings,
            processed_at=datetime.now(timezone.utc),
            processing_time_ms=elapsed_ms,
        )

    def _structured_data(self, outcome, harvested: HarvestedUrls, warnings: List[str]):
        """Reconcile the extraction outcome; fatal unless require_structured_data is off."""
        try:
            if isinstance(outcome, CompletionApiError):
                raise StructuredExtractionFailed(details=outcome.message)
            if isinstance(outcome, BaseException):
                raise outcome
            return reconcile(outcome.text, harvested), outcome.tokens_used
        except ResumeProcessingError as e:
            if self.settings.require_structured_data:
                raise
            logger.warning(f"Structured extraction skipped: {e.message}")
            warnings.append(f"Structured data unavailable: {e.message}")
            return None, 0
