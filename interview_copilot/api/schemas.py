from pydantic import BaseModel, ConfigDict, Field, field_validator

from interview_copilot.core.constants import DEFAULT_ROLE_TYPE, MAX_HISTORY_MESSAGES
from interview_copilot.core.models import HistoryMessage, ModelInfo, RetrievedContext


class AnswerRequest(BaseModel):
    """Request body for generating an interview answer."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1, max_length=10_000)
    provider: str | None = None
    model: str | None = None
    history: list[HistoryMessage] = []
    role_type: str = Field(default=DEFAULT_ROLE_TYPE, alias="roleType")
    context: RetrievedContext | None = None
    persona: str | None = None

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Question cannot be blank")
        return value

    @field_validator("history")
    @classmethod
    def keep_recent_history(cls, value: list[HistoryMessage]) -> list[HistoryMessage]:
        return value[-MAX_HISTORY_MESSAGES:]


class ValidateKeyRequest(BaseModel):
    api_key: str = Field(min_length=1, alias="apiKey")

    model_config = ConfigDict(populate_by_name=True)


class ValidateKeyResponse(BaseModel):
    provider: str
    valid: bool


class ModelsResponse(BaseModel):
    models: dict[str, list[ModelInfo]]


class ResetResponse(BaseModel):
    provider: str
    reset: bool = True
