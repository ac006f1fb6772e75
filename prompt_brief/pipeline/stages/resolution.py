"""Stage 3: Conflict Resolution - per-field winner, conflicts and confidence.

The latest candidate in transcript order wins. Earlier disagreement is kept
as an advisory UnresolvedConflict and lowers confidence.
"""

from dataclasses import dataclass

import structlog

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import FieldKey, FieldResult, FieldSource, UnresolvedConflict
from prompt_brief.pipeline.stages.detection import Candidate

logger = structlog.get_logger(__name__)


NEGATABLE_FIELDS = frozenset({FieldKey.CONSTRAINTS, FieldKey.NON_GOALS})

NO_EVIDENCE_ASSUMPTION = "No direct user evidence found for this field."
NEGATED_ASSUMPTION = "Latest user turn explicitly negates this field."
IMPLICIT_ASSUMPTION = "Inferred from implicit phrasing in user statements."
PATTERN_ASSUMPTION = "Inferred from nearby phrasing using heuristic pattern matching."

POLARITY_CONFLICT_REASON = (
    "Contradictory statements across turns (affirmed vs negated). "
    "Latest user statement was prioritized."
)
VALUE_CONFLICT_REASON = (
    "Multiple competing values observed across turns. "
    "Latest user statement was prioritized."
)


@dataclass(frozen=True)
class ConfidenceCalibration:
    """Base scores and penalties for one field."""
    explicit: float
    pattern: float
    conflict_penalty: float
    implicit: float | None = None
    negation_penalty: float = 0.0

    def score(self, winner: Candidate, has_conflict: bool) -> float:
        if winner.explicit:
            base = self.explicit
        elif winner.implicit and self.implicit is not None:
            base = self.implicit
        else:
            base = self.pattern

        score = base
        if winner.negated:
            score -= self.negation_penalty
        if has_conflict:
            score -= self.conflict_penalty
        return clamp_confidence(score)


FIELD_CALIBRATION: dict[FieldKey, ConfidenceCalibration] = {
    FieldKey.OBJECTIVE: ConfidenceCalibration(explicit=0.82, pattern=0.6, conflict_penalty=0.16),
    FieldKey.AUDIENCE: ConfidenceCalibration(explicit=0.78, implicit=0.58, pattern=0.5, conflict_penalty=0.14),
    FieldKey.CONTEXT: ConfidenceCalibration(explicit=0.76, implicit=0.56, pattern=0.48, conflict_penalty=0.14),
    FieldKey.CONSTRAINTS: ConfidenceCalibration(
        explicit=0.8, pattern=0.63, conflict_penalty=0.12, negation_penalty=0.08
    ),
    FieldKey.NON_GOALS: ConfidenceCalibration(
        explicit=0.78, pattern=0.62, conflict_penalty=0.12, negation_penalty=0.08
    ),
    FieldKey.OUTPUT_FORMAT: ConfidenceCalibration(explicit=0.8, pattern=0.55, conflict_penalty=0.12),
    FieldKey.TONE: ConfidenceCalibration(explicit=0.72, pattern=0.5, conflict_penalty=0.12),
    FieldKey.EXAMPLES: ConfidenceCalibration(explicit=0.74, pattern=0.5, conflict_penalty=0.12),
    FieldKey.ACCEPTANCE_CRITERIA: ConfidenceCalibration(explicit=0.75, pattern=0.52, conflict_penalty=0.12),
}


def clamp_confidence(value: float) -> float:
    """Clamp to [0, 1], rounded to 4 places so repeated runs serialize identically."""
    return round(max(0.0, min(1.0, value)), 4)


def resolve_field(
    key: FieldKey,
    candidates: list[Candidate],
) -> tuple[FieldResult, UnresolvedConflict | None]:
    """Resolve one field from its candidates in transcript order."""
    if not candidates:
        return FieldResult(value=None, confidence=0.0, assumptions=[NO_EVIDENCE_ASSUMPTION]), None

    winner = candidates[-1]
    has_polarity_conflict = any(c.negated != winner.negated for c in candidates)
    affirmed_values = {c.normalized_value for c in candidates if not c.negated}
    has_value_conflict = len(affirmed_values) > 1
    has_conflict = has_polarity_conflict or has_value_conflict

    confidence = FIELD_CALIBRATION[key].score(winner, has_conflict)

    if winner.negated and key in NEGATABLE_FIELDS:
        result = FieldResult(
            value=None,
            confidence=confidence,
            source=FieldSource.HEURISTIC,
            assumptions=[NEGATED_ASSUMPTION],
        )
    else:
        assumptions = []
        if not winner.explicit:
            assumptions.append(IMPLICIT_ASSUMPTION if winner.implicit else PATTERN_ASSUMPTION)
        result = FieldResult(
            value=winner.value,
            confidence=confidence,
            source=FieldSource.HEURISTIC,
            assumptions=assumptions,
        )

    if not has_conflict:
        return result, None

    conflict = UnresolvedConflict(
        field=key,
        selected_value=result.value,
        reason=POLARITY_CONFLICT_REASON if has_polarity_conflict else VALUE_CONFLICT_REASON,
        candidates=[c.value for c in candidates],
    )
    return result, conflict


def resolve_fields(
    candidates_by_field: dict[FieldKey, list[Candidate]],
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> tuple[dict[FieldKey, FieldResult], list[UnresolvedConflict]]:
    """Build the heuristic brief.

    Returns:
        Tuple of (one FieldResult per field key, conflicts in field order).
    """
    fields: dict[FieldKey, FieldResult] = {}
    conflicts: list[UnresolvedConflict] = []

    for key in schema.field_keys:
        result, conflict = resolve_field(key, candidates_by_field.get(key, []))
        fields[key] = result
        if conflict is not None:
            conflicts.append(conflict)

    logger.debug(
        "conflict_resolution_complete",
        resolved=sum(1 for r in fields.values() if r.is_present),
        conflicts=[c.field.value for c in conflicts],
    )
    return fields, conflicts
