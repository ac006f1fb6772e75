"""Brief extraction pipeline.

Stage Flow:
1. Segmentation   -> user turns and candidate statements
2. Detection      -> at most one field per statement
3. Resolution     -> heuristic FieldResults and conflicts
4. Arbitration    -> optional blend with the model reply
5. Readiness      -> StageProgress and the final-prompt gate

Usage:
    from prompt_brief.pipeline import evaluate_stage_progress, extract_heuristic_brief

    result = extract_heuristic_brief("user: objective: Draft a launch email")
    progress = evaluate_stage_progress(result.fields)
"""

from prompt_brief.pipeline.llm_helpers import ModelCall
from prompt_brief.pipeline.orchestrator import (
    BriefInputError,
    NormalizedHistory,
    extract_brief,
    extract_heuristic_brief,
    normalize_history,
)
from prompt_brief.pipeline.stages import evaluate_stage_progress

__all__ = [
    "BriefInputError",
    "ModelCall",
    "NormalizedHistory",
    "evaluate_stage_progress",
    "extract_brief",
    "extract_heuristic_brief",
    "normalize_history",
]
