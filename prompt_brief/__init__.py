"""Prompt Brief - structured brief extraction and stage readiness gating.

Usage:
    import asyncio
    from prompt_brief import evaluate_stage_progress, extract_brief

    result = asyncio.run(extract_brief(transcript="user: objective: Draft a memo"))
    progress = evaluate_stage_progress(result.fields)
    print(progress.can_generate_final_prompt)
"""

__version__ = "0.1.0"

from prompt_brief.config.schema import DEFAULT_SCHEMA, SchemaRegistry
from prompt_brief.models import (
    BriefExtractionResult,
    FieldKey,
    FieldResult,
    StageProgress,
    UnresolvedConflict,
)
from prompt_brief.pipeline import (
    BriefInputError,
    ModelCall,
    evaluate_stage_progress,
    extract_brief,
    extract_heuristic_brief,
)

__all__ = [
    "__version__",
    "DEFAULT_SCHEMA",
    "SchemaRegistry",
    "BriefExtractionResult",
    "FieldKey",
    "FieldResult",
    "StageProgress",
    "UnresolvedConflict",
    "BriefInputError",
    "ModelCall",
    "evaluate_stage_progress",
    "extract_brief",
    "extract_heuristic_brief",
]
