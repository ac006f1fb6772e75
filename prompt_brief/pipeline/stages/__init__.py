"""Pipeline stages - each stage has one focused responsibility.

Data flows strictly:
    segmentation -> detection -> resolution -> (arbitration) -> readiness

All stages are synchronous and side-effect free apart from logging.
"""

from prompt_brief.pipeline.stages.segmentation import (
    ConversationTurn,
    Statement,
    normalize_text,
    segment_statements,
    split_statements,
    split_turns,
    turns_from_messages,
)
from prompt_brief.pipeline.stages.detection import (
    Candidate,
    FieldDetection,
    detect_candidates,
    detect_field,
    is_negated,
)
from prompt_brief.pipeline.stages.resolution import (
    FIELD_CALIBRATION,
    ConfidenceCalibration,
    resolve_field,
    resolve_fields,
)
from prompt_brief.pipeline.stages.arbitration import (
    MODEL_DOMINANCE_MARGIN,
    arbitrate_fields,
    merge_conflicts,
    merge_field,
)
from prompt_brief.pipeline.stages.readiness import (
    FINAL_PROMPT_READINESS_THRESHOLD,
    evaluate_stage_progress,
    is_stage_complete,
    rule_set_met,
)

__all__ = [
    # Segmentation
    "ConversationTurn",
    "Statement",
    "normalize_text",
    "split_turns",
    "turns_from_messages",
    "split_statements",
    "segment_statements",
    # Detection
    "Candidate",
    "FieldDetection",
    "detect_field",
    "detect_candidates",
    "is_negated",
    # Resolution
    "ConfidenceCalibration",
    "FIELD_CALIBRATION",
    "resolve_field",
    "resolve_fields",
    # Arbitration
    "MODEL_DOMINANCE_MARGIN",
    "merge_field",
    "merge_conflicts",
    "arbitrate_fields",
    # Readiness
    "FINAL_PROMPT_READINESS_THRESHOLD",
    "rule_set_met",
    "is_stage_complete",
    "evaluate_stage_progress",
]
