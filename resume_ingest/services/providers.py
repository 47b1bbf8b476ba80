"""
Chat-completion provider configuration.
All providers speak the OpenAI-compatible /chat/completions protocol.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, List

from ..config import Settings
from ..exceptions import ServiceNotConfigured


class LLMProvider(str, enum.Enum):
    OPENROUTER = "openrouter"
    GROQ = "groq"
    TOGETHER = "together"
    GENERIC = "generic"


# Preference order when several keys are configured
PROVIDER_PRIORITY = [LLMProvider.OPENROUTER, LLMProvider.GROQ, LLMProvider.TOGETHER, LLMProvider.GENERIC]


@dataclass(frozen=True)
class ProviderConfig:
    provider: LLMProvider
    display_name: str
    base_url: str
    model: str
    api_key_env: str
    api_key: str
    rate_limit: int
    models: List[str] = field(default_factory=list)
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


def provider_config(provider: LLMProvider, settings: Settings) -> ProviderConfig:
    configs = {
        LLMProvider.OPENROUTER: lambda: ProviderConfig(
            provider=provider,
            display_name="OpenRouter",
            base_url="https://openrouter.ai/api/v1",
            model=settings.openrouter_model,
            api_key_env="OPENROUTER_API_KEY",
            api_key=settings.openrouter_api_key,
            rate_limit=settings.openrouter_rate_limit,
            models=[settings.openrouter_model, "meta-llama/llama-3.1-8b-instruct:free"],
            extra_headers={"HTTP-Referer": settings.http_referer, "X-Title": settings.app_title},
        ),
        LLMProvider.GROQ: lambda: ProviderConfig(
            provider=provider,
            display_name="Groq",
            base_url="https://api.groq.com/openai/v1",
            model=settings.groq_model,
            api_key_env="GROQ_API_KEY",
            api_key=settings.groq_api_key,
            rate_limit=settings.groq_rate_limit,
            models=[settings.groq_model, "llama3-70b-8192"],
        ),
        LLMProvider.TOGETHER: lambda: ProviderConfig(
            provider=provider,
            display_name="Together AI",
            base_url="https://api.together.xyz/v1",
            model=settings.together_model,
            api_key_env="TOGETHER_API_KEY",
            api_key=settings.together_api_key,
            rate_limit=settings.together_rate_limit,
            models=[settings.together_model],
        ),
        LLMProvider.GENERIC: lambda: ProviderConfig(
            provider=provider,
            display_name="Generic (OpenAI-compatible)",
            base_url=settings.generic_base_url,
            model=settings.generic_model,
            api_key_env="LLAMA_API_KEY",
            api_key=settings.llama_api_key,
            rate_limit=settings.default_rate_limit,
            models=[settings.generic_model],
            extra_headers={"HTTP-Referer": settings.http_referer, "X-Title": settings.app_title},
        ),
    }
    return configs[LLMProvider(provider)]()


def configured_providers(settings: Settings) -> List[ProviderConfig]:
    """Providers with an API key, in preference order."""
    configs = [provider_config(provider, settings) for provider in PROVIDER_PRIORITY]
    return [config for config in configs if config.is_configured]


def resolve_provider(settings: Settings) -> ProviderConfig:
    available = configured_providers(settings)
    if not available:
        raise ServiceNotConfigured(
            details="Set one of OPENROUTER_API_KEY, GROQ_API_KEY, TOGETHER_API_KEY or LLAMA_API_KEY"
        )
    return available[0]
