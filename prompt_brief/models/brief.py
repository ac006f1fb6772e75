"""Models for brief extraction results."""

from pydantic import Field, field_validator

from .base import CamelModel
from .enums import FieldKey, FieldSource, NormalizationMethod


class FieldResult(CamelModel):
    """Resolved value for one brief field."""

    value: str | None = Field(None, description="Resolved value, None when absent")
    confidence: float = Field(0.0, ge=0.0, le=1.0, description="Calibrated confidence")
    source: FieldSource = Field(FieldSource.HEURISTIC, description="Heuristic or model")
    assumptions: list[str] = Field(
        default_factory=list,
        description="Notes on inferred or uncertain interpretations",
    )

    @property
    def is_present(self) -> bool:
        """True when the field carries a non-empty value."""
        return bool(self.value)


class UnresolvedConflict(CamelModel):
    """A contradiction observed for one field across turns.

    Advisory only: the latest statement has already been applied.
    """

    field: FieldKey
    selected_value: str | None = None
    reason: str
    candidates: list[str] = Field(default_factory=list)


class BriefExtractionResult(CamelModel):
    """Complete output of a brief extraction call."""

    fields: dict[FieldKey, FieldResult]
    brief: dict[FieldKey, str | None]
    unresolved_conflicts: list[UnresolvedConflict] = Field(default_factory=list)
    global_assumptions: list[str] = Field(default_factory=list)
    normalization_method: NormalizationMethod = NormalizationMethod.HEURISTIC_FALLBACK

    @field_validator("fields", "brief")
    @classmethod
    def _covers_every_field(cls, value: dict) -> dict:
        missing = [key.value for key in FieldKey if key not in value]
        if missing:
            raise ValueError(f"Missing field keys: {', '.join(missing)}")
        return value


# =============================================================================
# Model reply contract
# =============================================================================

class ModelFieldJudgment(CamelModel):
    """Per-field judgment returned by the external model."""

    value: str | None = None
    confidence: float | None = 0.0
    assumptions: list[str] = Field(default_factory=list)


class ModelConflict(CamelModel):
    """Conflict reported by the external model.

    ``field`` stays a plain string here; unknown keys are filtered when merging.
    """

    field: str
    selected_value: str | None = None
    reason: str = ""
    candidates: list[str] = Field(default_factory=list)


class ModelNormalization(CamelModel):
    """Expected shape of the normalizer reply."""

    fields: dict[str, ModelFieldJudgment | None] = Field(default_factory=dict)
    unresolved_conflicts: list[ModelConflict] = Field(default_factory=list)
    global_assumptions: list[str] = Field(default_factory=list)
