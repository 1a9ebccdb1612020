"""Text-completion client used by the deck generator.

Wraps a pydantic-ai ``Agent`` with plain ``str`` output: the deck generator
does its own parsing of the reply, so no structured output schema is sent to
the provider. Provider imports are lazy to avoid import-time errors when
credentials are missing.
"""

from __future__ import annotations

from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.decks.errors import OracleError

logger = get_logger(__name__)


def _build_google_model() -> Model:
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    if not settings.oracle.gemini_api_key:
        raise RuntimeError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    provider = GoogleProvider(api_key=settings.oracle.gemini_api_key)
    return GoogleModel(settings.oracle.gemini_model, provider=provider)


def _build_openrouter_model() -> Model:
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.oracle.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.oracle.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.oracle.openrouter_model, provider=provider)


def build_model_by_settings() -> Model:
    provider = (settings.oracle.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


class TextOracle:
    """One prompt in, one block of text out. No retries.

    Create once per process and share it across requests; the underlying
    provider client is safe for concurrent use.
    """

    def __init__(
        self,
        model: Optional[Model] = None,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.model = model if model is not None else build_model_by_settings()
        timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.oracle.timeout_seconds
        )
        self.model_settings: Optional[ModelSettings] = (
            ModelSettings(timeout=timeout) if timeout else None
        )
        self._agent: Agent[None, str] = Agent[None, str](
            model=self.model,
            output_type=str,
            retries=0,
        )

    async def complete(self, prompt: str) -> str:
        try:
            res = await self._agent.run(prompt, model_settings=self.model_settings)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Model call failed: {type(e).__name__}: {e}")
            raise OracleError("Model call failed") from e

        text = res.output
        if not text or not text.strip():
            raise OracleError("Model returned an empty response")
        return text
