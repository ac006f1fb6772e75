"""
Dependency injection for API routes.

The model capability is resolved here so tests and callers can override it
with ``app.dependency_overrides[get_model_call]``.
"""

from functools import lru_cache

from prompt_brief.config import get_settings
from prompt_brief.llm import ModelCall, create_model_call, get_llm_settings


@lru_cache
def get_ollama_model_call() -> ModelCall:
    """Get the cached Ollama-backed capability built from the cached LLM settings."""
    return create_model_call(get_llm_settings())


def get_model_call() -> ModelCall | None:
    """Model capability, or None when model assistance is disabled."""
    if not get_settings().use_model:
        return None
    return get_ollama_model_call()
