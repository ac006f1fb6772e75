"""Model capability type and tolerant parsing of normalizer replies.

The pipeline only sees ``ModelCall``; concrete adapters live in ``prompt_brief.llm``.
"""

import json
import re
from collections.abc import Awaitable, Callable

import structlog
from pydantic import ValidationError

from prompt_brief.models import ModelNormalization

logger = structlog.get_logger(__name__)

ModelCall = Callable[[str], Awaitable[str]]


CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")


def strip_code_fence(text: str) -> str:
    """Return the body of the first fenced block, or the trimmed text."""
    trimmed = text.strip()
    match = CODE_FENCE_PATTERN.search(trimmed)
    return match.group(1).strip() if match else trimmed


def _extract_json_object(text: str) -> str | None:
    """Find the first balanced JSON object, skipping braces inside strings.

    Handles replies where the model writes prose before the JSON.
    """
    depth = 0
    start_idx = None
    in_string = False
    escape_next = False

    for i, char in enumerate(text):
        if escape_next:
            escape_next = False
            continue
        if char == "\\" and in_string:
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == "{":
            if depth == 0:
                start_idx = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start_idx is not None:
                return text[start_idx:i + 1]

    return None


def _clean_json_string(text: str) -> str:
    """Drop BOM/zero-width characters and trailing commas before } or ]."""
    text = text.strip("\ufeff\u200b\u200c\u200d")
    return TRAILING_COMMA_PATTERN.sub(r"\1", text)


def _load_json_object(text: str) -> dict | None:
    for candidate in (text, _extract_json_object(text)):
        if not candidate:
            continue
        try:
            payload = json.loads(_clean_json_string(candidate))
        except json.JSONDecodeError as e:
            logger.debug("normalizer_json_decode_failed", error=str(e))
            continue
        if isinstance(payload, dict):
            return payload
    return None


def parse_normalizer_response(raw_response: object) -> ModelNormalization | None:
    """Parse a model reply.

    Args:
        raw_response: Text returned by the model capability.

    Returns:
        The validated reply, or None when it is empty, not JSON, or mis-shaped.
    """
    if not isinstance(raw_response, str) or not raw_response.strip():
        logger.warning("normalizer_response_empty")
        return None

    payload = _load_json_object(strip_code_fence(raw_response))
    if payload is None:
        logger.warning(
            "normalizer_response_not_json",
            response_preview=raw_response[:200],
        )
        return None

    try:
        return ModelNormalization.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            "normalizer_response_invalid_shape",
            errors=e.error_count(),
            first_error=e.errors()[0]["msg"] if e.errors() else None,
        )
        return None
