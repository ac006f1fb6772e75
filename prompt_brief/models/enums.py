"""Enumeration types for the brief models."""

from enum import Enum


class FieldKey(str, Enum):
    """Brief field keys.

    Declaration order is significant: the pattern fallback in detection
    walks fields in this order and the first match wins.
    """

    OBJECTIVE = "objective"
    AUDIENCE = "audience"
    CONTEXT = "context"
    CONSTRAINTS = "constraints"
    NON_GOALS = "nonGoals"
    OUTPUT_FORMAT = "outputFormat"
    TONE = "tone"
    EXAMPLES = "examples"
    ACCEPTANCE_CRITERIA = "acceptanceCriteria"


class FieldSource(str, Enum):
    """Where a resolved field value came from."""

    HEURISTIC = "heuristic"
    MODEL = "model"


class NormalizationMethod(str, Enum):
    """How the final brief was produced."""

    HEURISTIC_FALLBACK = "heuristic_fallback"
    MODEL_ASSISTED = "model_assisted"


class MessageRole(str, Enum):
    """Conversation participant roles."""

    USER = "user"
    ASSISTANT = "assistant"
