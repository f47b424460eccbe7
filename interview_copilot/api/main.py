import os
from collections.abc import Callable

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interview_copilot.api.error_responses import StandardErrorResponse
from interview_copilot.api.routes import answers, providers
from interview_copilot.core.config import CopilotConfig
from interview_copilot.core.logging import set_request_id, short_uuid
from interview_copilot.core.pipeline import ResponsePipeline

load_dotenv()

API_VERSION = "0.1.0"


def create_app(pipeline: ResponsePipeline | None = None, config: CopilotConfig | None = None) -> FastAPI:
    """Build the HTTP app around one shared pipeline."""
    config = config or CopilotConfig()

    app = FastAPI(
        title="Interview Copilot API",
        description="HTTP API for generating interview answers through interchangeable AI providers",
        version=API_VERSION,
    )
    app.state.pipeline = pipeline or ResponsePipeline.create(config)
    app.state.default_provider = config.default_provider

    allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=86400,
    )

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or short_uuid()
        set_request_id(request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        body = StandardErrorResponse(
            error="validation_failed",
            message="Request validation failed",
            details=[{"type": err["type"], "message": err["msg"]} for err in exc.errors()],
            status_code=422,
        )
        return JSONResponse(status_code=422, content=body.model_dump())

    app.include_router(answers.router, prefix="/api/v1", tags=["answers"])
    app.include_router(providers.router, prefix="/api/v1", tags=["providers"])

    @app.get("/")
    async def root():
        return {"message": "Interview Copilot API", "version": API_VERSION}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "providers": app.state.pipeline.registry.names()}

    return app
