"""Models for stage definitions and readiness progress."""

from pydantic import ConfigDict, Field

from .base import CamelModel
from .enums import FieldKey


class FieldThreshold(CamelModel):
    """A field must be present with at least ``min_confidence``."""

    model_config = ConfigDict(frozen=True)

    field_key: FieldKey
    min_confidence: float = Field(ge=0.0, le=1.0)


class RuleSet(CamelModel):
    """allOf/anyOf condition over field thresholds.

    None means the clause is absent; a rule set with both clauses absent is
    vacuously true.
    """

    model_config = ConfigDict(frozen=True)

    all_of: tuple[FieldThreshold, ...] | None = None
    any_of: tuple[FieldThreshold, ...] | None = None

    def referenced_fields(self) -> list[FieldKey]:
        return [t.field_key for t in (self.all_of or ()) + (self.any_of or ())]


class StageDefinition(CamelModel):
    """Static readiness checkpoint."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    required: bool
    required_fields: tuple[str, ...] = ()
    completion_rules: tuple[RuleSet, ...] = ()
    done_criteria: str
    follow_up_question: str


class StageStatus(StageDefinition):
    """A stage definition together with its evaluated completeness."""

    complete: bool


class MissingStage(CamelModel):
    """A required stage that is not complete yet."""

    key: str
    label: str
    follow_up_question: str
    done_criteria: str


class StageProgress(CamelModel):
    """Derived readiness diagnostics for one set of field results."""

    stages: list[StageStatus]
    completed_required: int
    required_total: int
    completed_optional: int
    optional_total: int
    required_completeness: float = Field(ge=0.0, le=1.0)
    overall_completeness: float = Field(ge=0.0, le=1.0)
    missing_required_stage_keys: list[str] = Field(default_factory=list)
    missing_required_items: list[MissingStage] = Field(default_factory=list)
    can_generate_final_prompt: bool
