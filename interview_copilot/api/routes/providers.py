from typing import Annotated

from fastapi import APIRouter, Depends, Query

from interview_copilot.api.dependencies import get_pipeline
from interview_copilot.api.error_responses import NotFoundError
from interview_copilot.api.schemas import (
    ModelsResponse,
    ResetResponse,
    ValidateKeyRequest,
    ValidateKeyResponse,
)
from interview_copilot.core.catalog import get_all_models, get_available_models
from interview_copilot.core.models import RateLimitStatus
from interview_copilot.core.pipeline import ResponsePipeline

router = APIRouter()


@router.get("/models", response_model=ModelsResponse)
async def list_models(provider: Annotated[str | None, Query()] = None) -> ModelsResponse:
    if provider:
        return ModelsResponse(models={provider: get_available_models(provider)})
    return ModelsResponse(models=get_all_models())


@router.post("/providers/{provider}/validate", response_model=ValidateKeyResponse)
async def validate_provider_key(
    provider: str,
    body: ValidateKeyRequest,
    pipeline: Annotated[ResponsePipeline, Depends(get_pipeline)],
) -> ValidateKeyResponse:
    valid = await pipeline.validate_provider(provider, body.api_key)
    return ValidateKeyResponse(provider=provider, valid=valid)


@router.get("/rate-limits/{provider}", response_model=RateLimitStatus)
async def rate_limit_status(
    provider: str,
    pipeline: Annotated[ResponsePipeline, Depends(get_pipeline)],
) -> RateLimitStatus:
    status = pipeline.rate_limiter.get_status(provider)
    if status is None:
        raise NotFoundError(f"No rate limits configured for provider '{provider}'")
    return status


@router.post("/rate-limits/{provider}/reset", response_model=ResetResponse)
async def reset_rate_limit(
    provider: str,
    pipeline: Annotated[ResponsePipeline, Depends(get_pipeline)],
) -> ResetResponse:
    pipeline.rate_limiter.reset(provider)
    return ResetResponse(provider=provider)


@router.delete("/cache", status_code=204)
async def clear_cache(pipeline: Annotated[ResponsePipeline, Depends(get_pipeline)]) -> None:
    pipeline.cache.clear()
