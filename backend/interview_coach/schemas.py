# backend/interview_coach/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class FeedbackResult(BaseModel):
    """Normalized coaching feedback; built only by the response normalizer."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    tone: str
    filler_words: List[str] = Field(default_factory=list)
    grammar_issues: List[str] = Field(default_factory=list)
    relevance: str
    score: int = Field(ge=0, le=10)
    suggestions: str
    follow_up: str


# request bodies keep every field optional so blank/missing values get our own 400 message
class AnalyzeRequest(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None


class SaveResultRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[str] = None
    feedback: Optional[Any] = None


class SaveResultResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    session_id: str
    message: str = "Session saved successfully"


class SessionOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    question: str
    answer: str
    feedback: Any
    created_at: Optional[str] = None


class HistoryResponse(BaseModel):
    success: bool
    sessions: List[SessionOut]
    count: int


class ServiceFlags(BaseModel):
    model: bool
    identity: bool
    store: bool


class HealthOut(BaseModel):
    status: str
    timestamp: str
    uptime: float
    environment: str
    version: str
    memory: Dict[str, int]
    services: ServiceFlags
