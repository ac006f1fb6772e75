"""Stage 5: Stage Rule Engine - declarative completion rules and the readiness gate."""

from collections.abc import Mapping

import structlog

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import (
    FieldKey,
    FieldResult,
    FieldThreshold,
    MissingStage,
    RuleSet,
    StageDefinition,
    StageProgress,
    StageStatus,
)

logger = structlog.get_logger(__name__)


FINAL_PROMPT_READINESS_THRESHOLD = 0.72
OPTIONAL_STAGE_WEIGHT = 0.5


def threshold_met(threshold: FieldThreshold, fields: Mapping[FieldKey, FieldResult]) -> bool:
    """Field present with confidence at or above the threshold."""
    result = fields.get(threshold.field_key)
    return result is not None and result.is_present and result.confidence >= threshold.min_confidence


def rule_set_met(rule_set: RuleSet, fields: Mapping[FieldKey, FieldResult]) -> bool:
    """Absent clauses pass; ``all_of`` needs every threshold, ``any_of`` at least one."""
    all_ok = rule_set.all_of is None or all(threshold_met(t, fields) for t in rule_set.all_of)
    any_ok = rule_set.any_of is None or any(threshold_met(t, fields) for t in rule_set.any_of)
    return all_ok and any_ok


def is_stage_complete(stage: StageDefinition, fields: Mapping[FieldKey, FieldResult]) -> bool:
    """A stage is complete when any of its rule sets holds."""
    return any(rule_set_met(rule_set, fields) for rule_set in stage.completion_rules)


def evaluate_stage_progress(
    fields: Mapping[FieldKey, FieldResult],
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> StageProgress:
    """Evaluate every stage and aggregate readiness.

    Args:
        fields: Final field results; missing keys count as absent.
        schema: Registry providing stage definitions.

    Returns:
        StageProgress with per-stage completeness and the final-prompt gate.
    """
    stages = [
        StageStatus(**stage.model_dump(), complete=is_stage_complete(stage, fields))
        for stage in schema.stages
    ]

    required = [s for s in stages if s.required]
    optional = [s for s in stages if not s.required]
    completed_required = sum(1 for s in required if s.complete)
    completed_optional = sum(1 for s in optional if s.complete)

    # No required stages means nothing required is missing
    required_completeness = completed_required / len(required) if required else 1.0

    weighted_total = len(required) + OPTIONAL_STAGE_WEIGHT * len(optional)
    overall_completeness = (
        (completed_required + OPTIONAL_STAGE_WEIGHT * completed_optional) / weighted_total
        if weighted_total
        else 1.0
    )

    missing = [s for s in required if not s.complete]

    progress = StageProgress(
        stages=stages,
        completed_required=completed_required,
        required_total=len(required),
        completed_optional=completed_optional,
        optional_total=len(optional),
        required_completeness=required_completeness,
        overall_completeness=overall_completeness,
        missing_required_stage_keys=[s.key for s in missing],
        missing_required_items=[
            MissingStage(
                key=s.key,
                label=s.label,
                follow_up_question=s.follow_up_question,
                done_criteria=s.done_criteria,
            )
            for s in missing
        ],
        can_generate_final_prompt=required_completeness >= FINAL_PROMPT_READINESS_THRESHOLD,
    )

    logger.debug(
        "stage_progress_evaluated",
        completed_required=completed_required,
        required_total=len(required),
        can_generate_final_prompt=progress.can_generate_final_prompt,
    )
    return progress
