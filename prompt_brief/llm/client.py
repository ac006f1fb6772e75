"""Ollama-backed model capability for brief normalization.

The core depends only on ``ModelCall`` (prompt -> awaitable text); this module
provides one concrete implementation through LangChain.
"""

import asyncio
from functools import lru_cache

import structlog
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_ollama import OllamaLLM
from pydantic_settings import BaseSettings, SettingsConfigDict
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from prompt_brief.config.prompts import NORMALIZER_SYSTEM_PROMPT
from prompt_brief.pipeline.llm_helpers import ModelCall

logger = structlog.get_logger(__name__)


class LLMSettings(BaseSettings):
    """LLM configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
    )

    ollama_base_url: str = "http://localhost:11434"
    model_name: str = "gpt-oss:20b"
    temperature: float = 0.0
    request_timeout: int = 120
    num_ctx: int = 8192
    num_predict: int = 2048  # Max tokens to generate

    max_retries: int = 2
    retry_min_wait: float = 1.0
    retry_max_wait: float = 10.0


@lru_cache
def get_llm_settings() -> LLMSettings:
    """Get cached LLM settings."""
    return LLMSettings()


def create_llm_client(settings: LLMSettings | None = None) -> OllamaLLM:
    """Create configured Ollama LLM client.

    Args:
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        Configured OllamaLLM instance.
    """
    settings = settings or get_llm_settings()

    return OllamaLLM(
        model=settings.model_name,
        base_url=settings.ollama_base_url,
        temperature=settings.temperature,
        num_ctx=settings.num_ctx,
        num_predict=settings.num_predict,
    )


def create_model_call(settings: LLMSettings | None = None) -> ModelCall:
    """Build an async prompt -> text callable for ``extract_brief``.

    Each attempt is bounded by ``request_timeout``; transient failures are
    retried up to ``max_retries`` times before the last error is raised.

    Args:
        settings: Optional custom settings.

    Returns:
        Async callable returning the raw model reply.
    """
    settings = settings or get_llm_settings()

    prompt = ChatPromptTemplate.from_messages([
        ("system", NORMALIZER_SYSTEM_PROMPT),
        ("human", "{normalizer_prompt}"),
    ])
    chain = prompt | create_llm_client(settings) | StrOutputParser()

    async def call_model(normalizer_prompt: str) -> str:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.max_retries + 1),
            wait=wait_exponential(
                multiplier=1, min=settings.retry_min_wait, max=settings.retry_max_wait
            ),
            reraise=True,
        ):
            with attempt:
                logger.debug(
                    "normalizer_model_call",
                    model=settings.model_name,
                    attempt=attempt.retry_state.attempt_number,
                    prompt_length=len(normalizer_prompt),
                )
                response = await asyncio.wait_for(
                    chain.ainvoke({"normalizer_prompt": normalizer_prompt}),
                    timeout=settings.request_timeout,
                )
        return response.strip() if response else ""

    return call_model
