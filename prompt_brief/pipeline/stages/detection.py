"""Stage 2: Field Detection - classify each statement into at most one field.

Order of attempts per statement:
1. Explicit ``label: value``; an unknown label drops the statement
2. Boundary phrasing routed to nonGoals / constraints without a label
3. Field patterns in registry order, first match wins
4. Implicit audience / context phrasing

Every candidate also records whether it negates its field.
"""

import re
from dataclasses import dataclass

import structlog

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import FieldKey
from prompt_brief.pipeline.stages.segmentation import Statement, normalize_text

logger = structlog.get_logger(__name__)


# =============================================================================
# Pattern Definitions
# =============================================================================

EXPLICIT_LABEL_PATTERN = re.compile(r"^(.+?)\s*:\s*(.+)$")

# Checked in order, before the registry patterns
BOUNDARY_PATTERNS: list[tuple[FieldKey, re.Pattern]] = [
    (FieldKey.NON_GOALS, re.compile(r"\bnon[-\s]?goals?\b|\bout of scope\b")),
    (FieldKey.CONSTRAINTS, re.compile(r"\bconstraints?\b|\bno limits?\b")),
]

NEGATION_PATTERNS: dict[FieldKey, list[re.Pattern]] = {
    FieldKey.CONSTRAINTS: [
        re.compile(r"\b(no|without|not)\s+(hard\s+)?constraints?\b"),
        re.compile(r"\bno limits?\b"),
    ],
    FieldKey.NON_GOALS: [
        re.compile(r"\b(no|without|not)\s+non[-\s]?goals?\b"),
        re.compile(r"\bnothing\s+is\s+out\s+of\s+scope\b"),
    ],
}

IMPLICIT_AUDIENCE_PATTERN = re.compile(
    r"\bfor\s+(?:new|first[-\s]?time|beginner|beginners|executives?|managers?|students?"
    r"|engineers?|admins?|leaders?|teams?|customers?|users?)\b"
)
IMPLICIT_CONTEXT_CUE_PATTERN = re.compile(r"\b(based on|using|from|given)\b")
IMPLICIT_CONTEXT_NOUN_PATTERN = re.compile(
    r"\b(data|doc|docs|document|documents|transcript|report|notes?|dataset|source|background|input)\b"
)


# =============================================================================
# Inspectable Intermediate Structures
# =============================================================================

@dataclass
class Candidate:
    """A statement assigned to a field."""
    key: FieldKey
    value: str
    turn_index: int
    statement_index: int
    explicit: bool
    implicit: bool
    negated: bool
    normalized_value: str


@dataclass
class FieldDetection:
    """Raw classification of one statement, before negation is checked."""
    key: FieldKey
    value: str
    explicit: bool = False
    implicit: bool = False


# =============================================================================
# Detection
# =============================================================================

def detect_implicit_field(normalized: str) -> FieldKey | None:
    """Implicit audience ("for <persona>") or context ("based on <data noun>")."""
    if IMPLICIT_AUDIENCE_PATTERN.search(normalized):
        return FieldKey.AUDIENCE

    if IMPLICIT_CONTEXT_CUE_PATTERN.search(normalized) and IMPLICIT_CONTEXT_NOUN_PATTERN.search(normalized):
        return FieldKey.CONTEXT

    return None


def detect_field(
    statement: str,
    normalized: str | None = None,
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> FieldDetection | None:
    """Classify one statement.

    Args:
        statement: Raw statement text.
        normalized: Pre-normalized text, computed when omitted.
        schema: Field registry providing aliases and patterns.

    Returns:
        The detection, or None when no rule matches.
    """
    if normalized is None:
        normalized = normalize_text(statement)
    text = statement.strip()

    explicit_match = EXPLICIT_LABEL_PATTERN.match(text)
    if explicit_match:
        key = schema.alias_map.get(explicit_match.group(1).strip().lower())
        if key is None:
            # Labelled statements only ever count toward the field they name
            return None
        return FieldDetection(key=key, value=explicit_match.group(2).strip(), explicit=True)

    for key, pattern in BOUNDARY_PATTERNS:
        if pattern.search(normalized):
            return FieldDetection(key=key, value=text)

    implicit_key = detect_implicit_field(normalized)

    # First match in registry order wins. Broad cues (audience "for") shadow
    # narrower ones declared later; keep the order as declared.
    for definition in schema.fields:
        if definition.matches(normalized):
            return FieldDetection(
                key=definition.key,
                value=text,
                implicit=implicit_key == definition.key,
            )

    if implicit_key is not None:
        return FieldDetection(key=implicit_key, value=text, implicit=True)

    return None


def is_negated(key: FieldKey, normalized: str) -> bool:
    """Field-specific negation; only constraints and nonGoals can be negated."""
    return any(pattern.search(normalized) for pattern in NEGATION_PATTERNS.get(key, []))


def detect_candidates(
    statements: list[Statement],
    schema: SchemaRegistry = DEFAULT_SCHEMA,
) -> dict[FieldKey, list[Candidate]]:
    """Classify statements and group the resulting candidates by field.

    Every field key is present in the result; candidates keep transcript order.
    """
    by_field: dict[FieldKey, list[Candidate]] = {key: [] for key in schema.field_keys}
    dropped = 0

    for statement in statements:
        detection = detect_field(statement.text, statement.normalized, schema)
        if detection is None or not detection.value:
            dropped += 1
            continue

        by_field[detection.key].append(
            Candidate(
                key=detection.key,
                value=detection.value,
                turn_index=statement.turn_index,
                statement_index=statement.statement_index,
                explicit=detection.explicit,
                implicit=detection.implicit,
                negated=is_negated(detection.key, statement.normalized),
                normalized_value=normalize_text(detection.value),
            )
        )

    logger.debug(
        "field_detection_complete",
        statements=len(statements),
        dropped=dropped,
        candidates={key.value: len(items) for key, items in by_field.items() if items},
    )
    return by_field
