"""Ollama model capability adapter."""

from prompt_brief.pipeline.llm_helpers import ModelCall, parse_normalizer_response, strip_code_fence

from .client import LLMSettings, create_llm_client, create_model_call, get_llm_settings

__all__ = [
    "LLMSettings",
    "ModelCall",
    "create_llm_client",
    "create_model_call",
    "get_llm_settings",
    "parse_normalizer_response",
    "strip_code_fence",
]
