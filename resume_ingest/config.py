from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Resume Ingest API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    environment: str = "development"
    log_level: str = "INFO"

    # Database - supports both SQLite (local) and PostgreSQL (production)
    database_url: str = "sqlite+aiosqlite:///./resume_ingest.db"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Routes live under this prefix, e.g. /api/process-resume
    api_prefix: str = "/api"

    # Local blob storage, served at /uploads
    uploads_dir: str = "uploads"

    # LLM providers (first configured key wins: openrouter, groq, together, generic)
    openrouter_api_key: str = ""
    groq_api_key: str = ""
    together_api_key: str = ""
    llama_api_key: str = ""

    openrouter_model: str = "meta-llama/llama-3.3-8b-instruct:free"
    groq_model: str = "llama3-8b-8192"
    together_model: str = "meta-llama/Llama-2-7b-chat-hf"
    generic_model: str = "meta-llama/llama-3.3-8b-instruct:free"
    generic_base_url: str = "https://openrouter.ai/api/v1"

    # OpenRouter attribution headers
    http_referer: str = "http://localhost:3000"
    app_title: str = "Resume Processor"

    # Rate limiting (requests per window, per client)
    openrouter_rate_limit: int = 5
    groq_rate_limit: int = 10
    together_rate_limit: int = 3
    default_rate_limit: int = 5
    rate_limit_window_seconds: int = 60

    # Document limits
    max_file_size_bytes: int = 16 * 1024 * 1024  # 16 MiB
    min_text_length: int = 100
    max_text_length: int = 15000
    fetch_timeout_seconds: float = 60.0

    # Completion calls
    completion_timeout_seconds: float = 60.0
    completion_max_retries: int = 2
    completion_backoff_seconds: float = 1.0
    completion_top_p: float = 0.9
    summary_temperature: float = 0.3
    summary_max_tokens: int = 1500
    extraction_temperature: float = 0.1
    extraction_max_tokens: int = 4000

    # When False, a failed JSON extraction returns the summary with structuredData=null
    require_structured_data: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
