"""Pydantic data models for brief extraction and stage gating."""

from .enums import FieldKey, FieldSource, MessageRole, NormalizationMethod
from .conversation import ChatMessage
from .brief import (
    BriefExtractionResult,
    FieldResult,
    ModelConflict,
    ModelFieldJudgment,
    ModelNormalization,
    UnresolvedConflict,
)
from .stages import (
    FieldThreshold,
    MissingStage,
    RuleSet,
    StageDefinition,
    StageProgress,
    StageStatus,
)

__all__ = [
    # Enums
    "FieldKey",
    "FieldSource",
    "MessageRole",
    "NormalizationMethod",
    # Conversation
    "ChatMessage",
    # Brief
    "FieldResult",
    "UnresolvedConflict",
    "BriefExtractionResult",
    # Model reply
    "ModelFieldJudgment",
    "ModelConflict",
    "ModelNormalization",
    # Stages
    "FieldThreshold",
    "RuleSet",
    "StageDefinition",
    "StageStatus",
    "MissingStage",
    "StageProgress",
]
