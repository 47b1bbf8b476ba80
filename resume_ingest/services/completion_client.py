"""
Chat-completion client with bounded retry and exponential backoff.
"""
import asyncio
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from ..exceptions import CompletionApiError
from .providers import ProviderConfig

logger = logging.getLogger(__name__)


class CompletionResult(BaseModel):
    text: str
    tokens_used: int = 0


class CompletionClient:
    """
    Sends a single-user-message prompt to an OpenAI-compatible endpoint.

    Every failure (transport error, non-2xx status, malformed body, missing
    choices[0].message) is retried up to ``max_retries`` times, sleeping
    ``2**attempt * backoff_seconds`` between attempts. Calls share nothing,
    so concurrent callers retry independently.
    """

    def __init__(
        self,
        provider: ProviderConfig,
        timeout: float = 60.0,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
        top_p: float = 0.9,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.provider = provider
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.top_p = top_p
        self._transport = transport

    @property
    def model(self) -> str:
        return self.provider.model

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.provider.api_key}",
            "Content-Type": "application/json",
            **self.provider.extra_headers,
        }

    async def _request(self, client: httpx.AsyncClient, payload: dict) -> CompletionResult:
        response = await client.post(
            f"{self.provider.base_url.rstrip('/')}/chat/completions",
            headers=self._headers(),
            json=payload,
        )

        if response.status_code < 200 or response.status_code >= 300:
            error_detail = response.text[:500] if response.text else "Unknown error"
            raise CompletionApiError(
                f"{self.provider.display_name} returned {response.status_code}: {error_detail}",
                upstream_status=response.status_code,
            )

        try:
            body = response.json()
            message = body["choices"][0]["message"]
            content = message["content"]
            usage = body.get("usage") or {}
            tokens_used = int(usage.get("total_tokens") or 0)
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise CompletionApiError(
                f"Malformed completion response from {self.provider.display_name}: {e!r}",
                upstream_status=response.status_code,
            )

        if not isinstance(content, str):
            raise CompletionApiError(
                f"Completion response from {self.provider.display_name} has no text content",
                upstream_status=response.status_code,
            )

        return CompletionResult(text=content.strip(), tokens_used=tokens_used)

    async def complete(self, prompt: str, temperature: float = 0.3, max_tokens: int = 1500) -> CompletionResult:
        payload = {
            "model": self.provider.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "top_p": self.top_p,
        }

        last_error: Optional[CompletionApiError] = None
        attempts = self.max_retries + 1

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for attempt in range(attempts):
                try:
                    return await self._request(client, payload)
                except CompletionApiError as e:
                    last_error = e
                except httpx.HTTPError as e:
                    last_error = CompletionApiError(
                        f"Request to {self.provider.display_name} failed: {e!r}"
                    )

                logger.warning(
                    f"Completion attempt {attempt + 1}/{attempts} via {self.provider.provider.value} "
                    f"failed: {last_error.message}"
                )
                if attempt < attempts - 1:
                    await asyncio.sleep((2 ** attempt) * self.backoff_seconds)

        logger.error(f"Completion failed after {attempts} attempts via {self.provider.provider.value}")
        raise last_error
