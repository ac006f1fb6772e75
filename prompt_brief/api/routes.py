"""
Brief Routes

Extraction and final-prompt readiness gating.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from prompt_brief.api.deps import get_model_call
from prompt_brief.api.schemas import BriefRequest, BriefResponse, ReadinessFailure
from prompt_brief.config import get_settings
from prompt_brief.llm import ModelCall
from prompt_brief.pipeline import BriefInputError, evaluate_stage_progress, extract_brief

router = APIRouter()

NOT_READY_ERROR = "Not enough required prompt stages are complete to generate a final prompt yet."


async def _extract(request: BriefRequest, model_call: ModelCall | None) -> BriefResponse:
    if request.use_model is False:
        model_call = None

    try:
        result = await extract_brief(
            transcript=request.transcript,
            messages=request.messages,
            model_call=model_call,
            model_timeout=get_settings().normalizer_timeout_seconds,
        )
    except BriefInputError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        ) from e

    return BriefResponse(brief=result, stage_progress=evaluate_stage_progress(result.fields))


@router.post("/brief", response_model=BriefResponse)
async def create_brief(
    request: BriefRequest,
    model_call: ModelCall | None = Depends(get_model_call),
) -> BriefResponse:
    """
    Extract a brief from a conversation and report stage progress.

    Never fails for missing information; only structurally invalid input is rejected.
    """
    return await _extract(request, model_call)


@router.post(
    "/readiness",
    response_model=BriefResponse,
    responses={400: {"model": ReadinessFailure}},
)
async def check_readiness(
    request: BriefRequest,
    model_call: ModelCall | None = Depends(get_model_call),
):
    """
    Gate final prompt generation on required stage completeness.

    Returns 400 with the missing required stages and their follow-up questions
    when the gate does not pass.
    """
    response = await _extract(request, model_call)
    progress = response.stage_progress

    if not progress.can_generate_final_prompt:
        failure = ReadinessFailure(
            error=NOT_READY_ERROR,
            stage_progress=progress,
            missing_required_items=progress.missing_required_items,
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failure.model_dump(mode="json", by_alias=True),
        )

    return response
