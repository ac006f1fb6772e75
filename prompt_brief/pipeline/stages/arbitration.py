"""Stage 4: Merge Arbitration - blend model judgments with the heuristic brief.

The model wins a field only with a non-empty value and a confidence of at
least 90% of the heuristic confidence.
"""

import structlog

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import (
    FieldKey,
    FieldResult,
    FieldSource,
    ModelFieldJudgment,
    ModelNormalization,
    UnresolvedConflict,
)
from prompt_brief.pipeline.stages.resolution import clamp_confidence

logger = structlog.get_logger(__name__)


MODEL_DOMINANCE_MARGIN = 0.9


def merge_field(heuristic: FieldResult, judgment: ModelFieldJudgment | None) -> FieldResult:
    """Pick the model judgment or the heuristic result for one field."""
    if judgment is None:
        return heuristic

    model_value = judgment.value.strip() if judgment.value else ""
    model_confidence = judgment.confidence or 0.0

    if model_value and model_confidence >= heuristic.confidence * MODEL_DOMINANCE_MARGIN:
        return FieldResult(
            value=judgment.value,
            confidence=clamp_confidence(model_confidence),
            source=FieldSource.MODEL,
            assumptions=list(judgment.assumptions),
        )

    return heuristic


def merge_conflicts(
    heuristic_conflicts: list[UnresolvedConflict],
    normalization: ModelNormalization,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> list[UnresolvedConflict]:
    """Heuristic conflicts first, then model-reported ones naming known fields."""
    known = {key.value: key for key in schema.field_keys}
    merged = list(heuristic_conflicts)

    for conflict in normalization.unresolved_conflicts:
        key = known.get(conflict.field)
        if key is None:
            logger.warning("model_conflict_unknown_field", field=conflict.field)
            continue
        merged.append(
            UnresolvedConflict(
                field=key,
                selected_value=conflict.selected_value,
                reason=conflict.reason,
                candidates=list(conflict.candidates),
            )
        )

    return merged


def arbitrate_fields(
    heuristic_fields: dict[FieldKey, FieldResult],
    normalization: ModelNormalization,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> dict[FieldKey, FieldResult]:
    """Merge every field of the heuristic brief with the parsed model reply."""
    fields = {
        key: merge_field(heuristic_fields[key], normalization.fields.get(key.value))
        for key in schema.field_keys
    }

    logger.debug(
        "arbitration_complete",
        model_fields=[key.value for key, r in fields.items() if r.source == FieldSource.MODEL],
    )
    return fields
