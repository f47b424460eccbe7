from typing import Annotated

from fastapi import APIRouter, Depends

from interview_copilot.api.dependencies import get_default_provider, get_pipeline
from interview_copilot.api.schemas import AnswerRequest
from interview_copilot.core.models import CanonicalResponse
from interview_copilot.core.pipeline import ResponsePipeline

router = APIRouter()


@router.post("/answers", response_model=CanonicalResponse)
async def create_answer(
    request: AnswerRequest,
    pipeline: Annotated[ResponsePipeline, Depends(get_pipeline)],
    default_provider: Annotated[str, Depends(get_default_provider)],
) -> CanonicalResponse:
    """Generate an answer. Failures come back as a 200 with `error` set."""
    return await pipeline.generate(
        question=request.question,
        provider=(request.provider or default_provider).strip().lower(),
        model=request.model,
        history=request.history,
        role_type=request.role_type,
        context=request.context,
        persona=request.persona,
    )
