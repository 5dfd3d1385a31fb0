"""
Text generation providers.

The rest of the application only sees ``TextGenerator.generate``; which vendor
answers is decided once at startup by ``build_text_generator``.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from core.exceptions import UpstreamError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    name: str = "base"

    def __init__(
            self,
            api_key: str,
            model: str,
            url: str,
            timeout: float = 30.0,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout
        self.transport = transport

    @abstractmethod
    async def generate(self, prompt: str, max_tokens: int = 500) -> str:
        ...

    async def _post(self, url: str, **kwargs) -> dict:
        """POST and return the decoded JSON body, mapping transport failures."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, **kwargs)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            logger.error(f"[{self.name}] provider unreachable: {e!r}")
            raise UpstreamUnavailableError(f"{self.name} API is unavailable")
        except httpx.HTTPError as e:
            logger.error(f"[{self.name}] request failed: {e!r}")
            raise UpstreamError(f"{self.name} API request failed")

        if response.status_code >= 400:
            logger.error(f"[{self.name}] HTTP {response.status_code}: {response.text[:500]}")
            raise UpstreamError(f"{self.name} API returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError:
            raise UpstreamError(f"Invalid response from {self.name} API")


class OpenAIChatGenerator(TextGenerator):
    name = "OpenAI"

    async def generate(self, prompt: str, max_tokens: int = 500) -> str:
        data = await self._post(
            self.url,
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise UpstreamError("Invalid response from OpenAI API")
        return text


class GeminiGenerator(TextGenerator):
    name = "Google Gemini"

    async def generate(self, prompt: str, max_tokens: int = 500) -> str:
        data = await self._post(
            f"{self.url.rstrip('/')}/{self.model}:generateContent",
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"maxOutputTokens": max_tokens},
            },
        )

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise UpstreamError("Invalid response from Google Gemini API")
        return text


def build_text_generator(settings, transport=None) -> Optional[TextGenerator]:
    """Pick the provider from configuration; None means AI is not configured."""
    provider = (settings.AI_PROVIDER or "").strip().lower()

    if not provider or not settings.AI_API_KEY:
        logger.info("AI provider not configured; using template fallbacks")
        return None

    if provider == "openai":
        generator_cls, model, url = OpenAIChatGenerator, settings.OPENAI_MODEL, settings.OPENAI_URL
    elif provider == "google":
        generator_cls, model, url = GeminiGenerator, settings.GEMINI_MODEL, settings.GEMINI_URL
    else:
        logger.warning(f"Unknown AI_PROVIDER '{settings.AI_PROVIDER}'; using template fallbacks")
        return None

    logger.info(f"AI provider: {generator_cls.name} ({model})")
    return generator_cls(
        api_key=settings.AI_API_KEY,
        model=model,
        url=url,
        timeout=settings.AI_TIMEOUT_SECONDS,
        transport=transport,
    )
