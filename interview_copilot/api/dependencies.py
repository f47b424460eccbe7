from fastapi import Request

from interview_copilot.core.pipeline import ResponsePipeline


def get_pipeline(request: Request) -> ResponsePipeline:
    """The process-wide pipeline created with the app."""
    return request.app.state.pipeline


def get_default_provider(request: Request) -> str:
    return request.app.state.default_provider
