"""Brief extraction orchestrator - coordinates all pipeline stages.

Segmentation, detection, resolution and readiness are deterministic and
synchronous. The only suspension point is the optional model call; any
failure there degrades to the heuristic brief instead of raising.
"""

import asyncio
from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from prompt_brief.config.prompts import build_normalizer_prompt
from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import (
    BriefExtractionResult,
    ChatMessage,
    FieldKey,
    FieldResult,
    ModelNormalization,
    NormalizationMethod,
    UnresolvedConflict,
)
from prompt_brief.pipeline.llm_helpers import ModelCall, parse_normalizer_response
from prompt_brief.pipeline.stages import (
    arbitrate_fields,
    detect_candidates,
    merge_conflicts,
    resolve_fields,
    segment_statements,
    split_turns,
    turns_from_messages,
)
from prompt_brief.pipeline.stages.segmentation import ConversationTurn

logger = structlog.get_logger(__name__)


class BriefInputError(ValueError):
    """Structurally invalid extraction input, rejected before any work."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


@dataclass
class NormalizedHistory:
    """Validated conversation input."""
    messages: list[ChatMessage]
    transcript_text: str
    from_messages: bool


@dataclass
class HeuristicBrief:
    """Output of the deterministic stages."""
    fields: dict[FieldKey, FieldResult]
    unresolved_conflicts: list[UnresolvedConflict]


# =============================================================================
# Input Handling
# =============================================================================

def _validate_messages(messages: object) -> list[ChatMessage]:
    if not isinstance(messages, (list, tuple)):
        raise BriefInputError(
            f"messages must be a list of {{role, content}} objects, got {type(messages).__name__}"
        )

    validated = []
    for index, message in enumerate(messages):
        if isinstance(message, ChatMessage):
            validated.append(message)
            continue
        if not isinstance(message, dict):
            raise BriefInputError(f"messages[{index}] is not a {{role, content}} object", index=index)
        try:
            validated.append(ChatMessage.model_validate(message))
        except ValidationError as e:
            raise BriefInputError(
                f"messages[{index}] is not a well-formed {{role, content}} pair: {e.errors()[0]['msg']}",
                index=index,
            ) from e
    return validated


def normalize_history(
    transcript: str | None = None,
    messages: list | None = None,
) -> NormalizedHistory:
    """Validate input and settle on one transcript text.

    A non-empty transcript wins; otherwise the transcript is rebuilt from the
    messages as ``role: content`` lines.

    Raises:
        BriefInputError: If transcript is not a string or messages are malformed.
    """
    if transcript is not None and not isinstance(transcript, str):
        raise BriefInputError(f"transcript must be a string, got {type(transcript).__name__}")

    validated = _validate_messages(messages) if messages is not None else []
    transcript_text = (transcript or "").strip()

    if transcript_text:
        return NormalizedHistory(messages=validated, transcript_text=transcript_text, from_messages=False)

    rebuilt = "\n".join(f"{m.role.value}: {m.content}" for m in validated)
    return NormalizedHistory(messages=validated, transcript_text=rebuilt, from_messages=bool(validated))


def _history_turns(history: NormalizedHistory) -> list[ConversationTurn]:
    if history.from_messages:
        return turns_from_messages(history.messages)
    return split_turns(history.transcript_text)


# =============================================================================
# Heuristic Pipeline
# =============================================================================

def _run_heuristic(turns: list[ConversationTurn], schema: SchemaRegistry) -> HeuristicBrief:
    statements = segment_statements(turns)
    candidates = detect_candidates(statements, schema)
    fields, conflicts = resolve_fields(candidates, schema)
    return HeuristicBrief(fields=fields, unresolved_conflicts=conflicts)


def extract_heuristic_brief(
    transcript: str | None = None,
    messages: list | None = None,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> BriefExtractionResult:
    """Deterministic extraction without any model involvement.

    Raises:
        BriefInputError: If the input is structurally invalid.
    """
    history = normalize_history(transcript, messages)
    heuristic = _run_heuristic(_history_turns(history), schema)
    return _build_result(heuristic, schema)


def _build_result(
    heuristic: HeuristicBrief,
    schema: SchemaRegistry,
    normalization: ModelNormalization | None = None,
) -> BriefExtractionResult:
    if normalization is None:
        fields = dict(heuristic.fields)
        conflicts = list(heuristic.unresolved_conflicts)
        global_assumptions: list[str] = []
        method = NormalizationMethod.HEURISTIC_FALLBACK
    else:
        fields = arbitrate_fields(heuristic.fields, normalization, schema)
        conflicts = merge_conflicts(heuristic.unresolved_conflicts, normalization, schema)
        global_assumptions = list(normalization.global_assumptions)
        method = NormalizationMethod.MODEL_ASSISTED

    return BriefExtractionResult(
        fields={key: fields[key] for key in schema.field_keys},
        brief={key: fields[key].value for key in schema.field_keys},
        unresolved_conflicts=conflicts,
        global_assumptions=global_assumptions,
        normalization_method=method,
    )


# =============================================================================
# Model Assistance
# =============================================================================

async def _request_normalization(
    model_call: ModelCall,
    prompt: str,
    timeout: float | None,
) -> ModelNormalization | None:
    """Invoke the model once; any failure yields None."""
    try:
        if timeout is None:
            raw_response = await model_call(prompt)
        else:
            raw_response = await asyncio.wait_for(model_call(prompt), timeout=timeout)
    except asyncio.CancelledError:
        task = asyncio.current_task()
        if task is not None and task.cancelling():
            raise
        logger.warning("model_call_cancelled")
        return None
    except Exception as e:
        logger.warning("model_call_failed", error=str(e), error_type=type(e).__name__)
        return None

    return parse_normalizer_response(raw_response)


async def extract_brief(
    transcript: str | None = None,
    messages: list | None = None,
    model_call: ModelCall | None = None,
    *,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
    model_timeout: float | None = None,
) -> BriefExtractionResult:
    """Extract a confidence-scored brief from a conversation.

    Args:
        transcript: Flat transcript with ``role: content`` prefixes.
        messages: Ordered ``{role, content}`` history, used when transcript is empty.
        model_call: Optional async prompt -> text capability.
        schema: Field and stage registry.
        model_timeout: Optional caller-side bound on the model call, in seconds.

    Returns:
        BriefExtractionResult tagged ``model_assisted`` when a usable model
        reply was merged, ``heuristic_fallback`` otherwise.

    Raises:
        BriefInputError: If the input is structurally invalid.
    """
    history = normalize_history(transcript, messages)

    logger.info(
        "brief_extraction_start",
        from_messages=history.from_messages,
        transcript_length=len(history.transcript_text),
        model_assisted=model_call is not None,
    )

    heuristic = _run_heuristic(_history_turns(history), schema)

    normalization = None
    if model_call is not None:
        prompt = build_normalizer_prompt(history.transcript_text, schema)
        normalization = await _request_normalization(model_call, prompt, model_timeout)
        if normalization is None:
            logger.warning("model_contribution_discarded")

    result = _build_result(heuristic, schema, normalization)

    logger.info(
        "brief_extraction_complete",
        normalization_method=result.normalization_method.value,
        present_fields=[key.value for key, value in result.brief.items() if value],
        conflicts=len(result.unresolved_conflicts),
    )
    return result
