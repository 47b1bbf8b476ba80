"""
Process Resume Router - AI summary and structured extraction for uploaded resumes
"""
import logging
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..database import get_db
from ..exceptions import RateLimited, ResumeProcessingError, UnknownError
from ..schemas.resume import ProcessResumeRequest
from ..services.blob_store import BlobStore
from ..services.completion_client import CompletionClient
from ..services.persistence import ResumeRecordRepository
from ..services.pipeline import IngestionPipeline, PipelineResult
from ..services.providers import (
    PROVIDER_PRIORITY, ProviderConfig, configured_providers, provider_config, resolve_provider
)
from ..services.rate_limiter import RateLimiter, RateLimitResult, client_identifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/process-resume", tags=["Process Resume"])

SERVICE_NAME = "Resume Processor"
SUPPORTED_METHODS = ["POST", "GET"]
# Answered with the JSON 405 envelope
UNSUPPORTED_METHODS = ["PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
SUPPORTED_FILE_TYPES = ["PDF", "DOCX", "TXT"]


# ============================================================================
# Dependencies
# ============================================================================

@lru_cache()
def get_rate_limiter() -> RateLimiter:
    settings = get_settings()
    return RateLimiter(window_seconds=settings.rate_limit_window_seconds)


def get_provider(settings: Settings = Depends(get_settings)) -> ProviderConfig:
    return resolve_provider(settings)


def get_completion_client(
    provider: ProviderConfig = Depends(get_provider),
    settings: Settings = Depends(get_settings)
) -> CompletionClient:
    return CompletionClient(
        provider,
        timeout=settings.completion_timeout_seconds,
        max_retries=settings.completion_max_retries,
        backoff_seconds=settings.completion_backoff_seconds,
        top_p=settings.completion_top_p,
    )


def get_blob_store(settings: Settings = Depends(get_settings)) -> BlobStore:
    return BlobStore(
        uploads_dir=settings.uploads_dir,
        max_bytes=settings.max_file_size_bytes,
        timeout=settings.fetch_timeout_seconds,
    )


def get_pipeline(
    settings: Settings = Depends(get_settings),
    completion_client: CompletionClient = Depends(get_completion_client),
    blob_store: BlobStore = Depends(get_blob_store),
    db: AsyncSession = Depends(get_db)
) -> IngestionPipeline:
    return IngestionPipeline(
        settings=settings,
        completion_client=completion_client,
        blob_store=blob_store,
        repository=ResumeRecordRepository(db),
    )


# ============================================================================
# Helper Functions
# ============================================================================

def _format_success(result: PipelineResult, provider: ProviderConfig, rate_limit: RateLimitResult) -> dict:
    extracted = result.extracted
    response = {
        "success": True,
        "summary": result.summary,
        "data": {
            "recordId": result.record_id,
            "name": result.name,
            "fileName": result.file_name,
            "fileSize": f"{round(result.file_size / 1024, 2)}KB",
            "resumeUrl": result.resume_url,
            "fileKind": extracted.kind,
            "pageCount": extracted.page_count,
            "documentMetadata": extracted.metadata,
            "warnings": result.warnings,
            "textLength": extracted.length,
            "wordCount": result.word_count,
            "truncated": extracted.truncated,
            "extractedUrls": result.harvested.by_category,
            "tokensUsed": {
                "summary": result.summary_tokens,
                "extraction": result.extraction_tokens,
                "total": result.total_tokens,
            },
            "aiProvider": {
                "name": provider.provider.value,
                "model": provider.model,
            },
            "promptVersion": result.prompt_version,
            "processedAt": result.processed_at.isoformat(),
            "processingTime": f"{result.processing_time_ms}ms",
            "rateLimit": {
                "remaining": rate_limit.remaining,
                "resetTime": rate_limit.reset_seconds,
            },
        },
    }
    if result.structured_requested:
        response["structuredData"] = result.structured_data
    return response


# ============================================================================
# Endpoints
# ============================================================================

@router.post("")
async def process_resume(
    request: Request,
    payload: ProcessResumeRequest,
    provider: ProviderConfig = Depends(get_provider),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    pipeline: IngestionPipeline = Depends(get_pipeline)
):
    """
    Summarize a resume and extract structured data from it.

    The file is referenced by URL (remote storage or /uploads/...).
    Rate limiting is checked before any processing starts.
    """
    client_id = client_identifier(request.headers)
    rate_limit = rate_limiter.check(client_id, provider.rate_limit)
    if not rate_limit.allowed:
        logger.warning(f"Rate limit exceeded for client {client_id} on {provider.provider.value}")
        raise RateLimited(
            f"Rate limit exceeded for {provider.provider.value}. "
            f"Please wait {rate_limit.reset_seconds} seconds.",
            remaining=rate_limit.remaining,
            reset_seconds=rate_limit.reset_seconds,
        )

    try:
        result = await pipeline.run(payload)
    except ResumeProcessingError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error processing resume for client {client_id}")
        raise UnknownError(details=str(e))

    return _format_success(result, provider, rate_limit)


@router.get("")
async def health_check(
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimiter = Depends(get_rate_limiter)
):
    """Service status and configured providers. No side effects."""
    available = configured_providers(settings)
    health = {
        "status": "healthy" if available else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "configuration": {
            "configuredProviders": [p.provider.value for p in available],
            "activeProvider": available[0].provider.value if available else None,
        },
    }

    try:
        active = resolve_provider(settings)
        health["ai"] = {"provider": active.provider.value, "model": active.model, "status": "ready"}
    except ResumeProcessingError as e:
        health["ai"] = {"status": "error", "error": e.message}
        health["warnings"] = ["No LLM API keys configured"]

    health["rateLimiting"] = {
        "enabled": True,
        "windowSeconds": settings.rate_limit_window_seconds,
        "limits": {p.value: provider_config(p, settings).rate_limit for p in PROVIDER_PRIORITY},
        "activeClients": rate_limiter.active_clients,
    }
    return health


@router.get("/config")
async def get_config(settings: Settings = Depends(get_settings)):
    """Providers, file types and limits the endpoint accepts."""
    available = configured_providers(settings)
    return {
        "availableProviders": [
            {
                "name": p.provider.value,
                "displayName": p.display_name,
                "models": p.models,
                "status": "available",
            }
            for p in available
        ],
        "defaultProvider": available[0].provider.value if available else None,
        "supportedFileTypes": SUPPORTED_FILE_TYPES,
        "maxFileSize": f"{round(settings.max_file_size_bytes / 1024 / 1024)}MB",
        "textLimits": {
            "minLength": settings.min_text_length,
            "maxLength": settings.max_text_length,
        },
        "rateLimits": {p.value: provider_config(p, settings).rate_limit for p in PROVIDER_PRIORITY},
    }


@router.api_route("", methods=UNSUPPORTED_METHODS, include_in_schema=False)
async def method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={
            "success": False,
            "error": "Method not allowed. Use POST to process a resume.",
            "code": "MethodNotAllowed",
            "supportedMethods": SUPPORTED_METHODS,
        },
        headers={"Allow": ", ".join(SUPPORTED_METHODS)},
    )
