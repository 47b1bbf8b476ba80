from .text_extractor import (
    ExtractedText,
    TextExtractor,
    resolve_file_kind,
    normalize_text,
    TRUNCATION_MARKER
)
from .url_harvester import (
    HarvestedUrls,
    harvest_urls,
    categorize_url,
    URL_CATEGORIES
)
from .prompts import (
    build_summary_prompt,
    build_extraction_prompt,
    RESUME_SCHEMA_SKELETON,
    PROMPT_VERSION
)
from .providers import (
    LLMProvider,
    ProviderConfig,
    provider_config,
    configured_providers,
    resolve_provider
)
from .completion_client import CompletionClient, CompletionResult
from .reconciler import reconcile, strip_code_fence
from .rate_limiter import RateLimiter, RateLimitResult, client_identifier
from .blob_store import BlobStore, FetchedBlob
from .persistence import ResumeRecordRepository
from .pipeline import IngestionPipeline, PipelineResult

__all__ = [
    # Text extraction
    "ExtractedText",
    "TextExtractor",
    "resolve_file_kind",
    "normalize_text",
    "TRUNCATION_MARKER",
    # URL harvesting
    "HarvestedUrls",
    "harvest_urls",
    "categorize_url",
    "URL_CATEGORIES",
    # Prompts
    "build_summary_prompt",
    "build_extraction_prompt",
    "RESUME_SCHEMA_SKELETON",
    "PROMPT_VERSION",
    # Providers and completions
    "LLMProvider",
    "ProviderConfig",
    "provider_config",
    "configured_providers",
    "resolve_provider",
    "CompletionClient",
    "CompletionResult",
    # Reconciliation
    "reconcile",
    "strip_code_fence",
    # Rate limiting
    "RateLimiter",
    "RateLimitResult",
    "client_identifier",
    # Collaborators
    "BlobStore",
    "FetchedBlob",
    "ResumeRecordRepository",
    # Pipeline
    "IngestionPipeline",
    "PipelineResult"
]
