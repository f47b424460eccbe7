from fastapi import HTTPException, status
from pydantic import BaseModel


class StandardErrorResponse(BaseModel):
    """Standardized error response format."""

    error: str
    message: str
    details: list[dict] | None = None
    status_code: int


class NotFoundError(HTTPException):
    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=StandardErrorResponse(
                error="not_found",
                message=message,
                details=[],
                status_code=status.HTTP_404_NOT_FOUND,
            ).model_dump(),
        )
