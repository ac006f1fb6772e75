"""
Request and response schemas for the API.

Wire format is camelCase; extraction internals are reused as-is.
"""

from typing import Any, Optional

from pydantic import Field

from prompt_brief.models import BriefExtractionResult, MissingStage, StageProgress
from prompt_brief.models.base import CamelModel


class BriefRequest(CamelModel):
    """Conversation to extract a brief from.

    ``messages`` stays loosely typed here so malformed entries reach the core
    validation and come back as a single 422 with the offending index.
    """
    transcript: Optional[str] = Field(default=None, description="Flat transcript with role prefixes")
    messages: Optional[list[Any]] = Field(default=None, description="Ordered {role, content} history")
    use_model: Optional[bool] = Field(default=None, description="Override model assistance for this call")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "messages": [
                        {"role": "user", "content": "objective: Draft an onboarding checklist"},
                        {"role": "assistant", "content": "Who is it for?"},
                        {"role": "user", "content": "Build it for first-time managers."},
                    ]
                }
            ]
        }
    }


class BriefResponse(CamelModel):
    """Extraction result with stage diagnostics."""
    brief: BriefExtractionResult
    stage_progress: StageProgress


class ReadinessFailure(CamelModel):
    """Body returned when required stages are insufficient."""
    error: str
    stage_progress: StageProgress
    missing_required_items: list[MissingStage]
