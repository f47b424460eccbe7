from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from interview_copilot.core.constants import SUCCESS_SCORE


class HistoryMessage(BaseModel):
    role: str
    content: str


class RetrievedContext(BaseModel):
    """Long-term context the candidate's answers should draw on."""

    model_config = ConfigDict(populate_by_name=True)

    resume: str | None = None
    previous_answers: list[str] = Field(default_factory=list, alias="previousAnswers")


class CanonicalResponse(BaseModel):
    """Uniform answer shape returned for every backend and every failure mode.

    `answer` is always non-empty so consumers never branch on its absence. The
    score/strengths/weaknesses/suggestion/next_question fields are kept for older
    clients that still render them.
    """

    answer: str = Field(min_length=1)
    provider: str
    model: str
    experience_mentioned: list[str] = []
    key_technologies: list[str] = []
    follow_up_topics: list[str] = []
    error: str | None = None

    score: int = SUCCESS_SCORE
    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestion: str = ""
    next_question: str = ""

    @property
    def is_error(self) -> bool:
        return self.error is not None


class RateLimitDecision(BaseModel):
    allowed: bool
    reason: str | None = None
    retry_after_seconds: int | None = None


class WindowUsage(BaseModel):
    used: int
    remaining: int
    limit: int


class RateLimitUsage(BaseModel):
    per_minute: WindowUsage
    per_hour: WindowUsage


class RateLimitStatus(BaseModel):
    provider: str
    limits: RateLimitUsage


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str
    strengths: list[str] = []
    max_tokens: int
    speed: Literal["Ultra Fast", "Very Fast", "Fast", "Moderate"] = "Fast"
    provider: str
