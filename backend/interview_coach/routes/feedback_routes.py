# backend/interview_coach/routes/feedback_routes.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import config, schemas
from ..auth import AuthenticatedIdentity, require_identity
from ..errors import InputValidationError, StoreUnavailableError, UpstreamUnavailableError
from ..llm.normalizer import ResponseNormalizer, parse_leading_int
from ..llm.prompt_builder import build_feedback_prompt
from ..services.llm_service import ModelGateway
from ..store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["feedback"])


# -------- DEPENDENCIES --------
def get_gateway(request: Request) -> ModelGateway:
    return request.app.state.model_gateway


def get_store(request: Request) -> Optional[SessionStore]:
    return request.app.state.store


def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _log_diagnostic(event: str, detail: Dict[str, Any]) -> None:
    logger.warning("model output %s: %s", event, detail)


def _parse_limit(raw: Optional[str]) -> int:
    limit = parse_leading_int(raw or "")
    if limit is None or limit <= 0:
        limit = config.HISTORY_DEFAULT_LIMIT
    return min(limit, config.HISTORY_MAX_LIMIT)


# -------- ROUTES --------

@router.post("/analyze-response", response_model=schemas.FeedbackResult)
def analyze_response(payload: schemas.AnalyzeRequest, gateway: ModelGateway = Depends(get_gateway)):
    if not _filled(payload.question) or not _filled(payload.answer):
        raise InputValidationError("Missing required fields: question and answer")
    if gateway is None:
        raise UpstreamUnavailableError("Model provider not configured")

    prompt = build_feedback_prompt(payload.question, payload.answer)
    raw = gateway.complete(prompt)
    return ResponseNormalizer(diagnostics=_log_diagnostic).normalize(raw)


@router.post("/save-result", response_model=schemas.SaveResultResponse)
def save_result(
    payload: schemas.SaveResultRequest,
    identity: AuthenticatedIdentity = Depends(require_identity),
    store: Optional[SessionStore] = Depends(get_store),
):
    if not all(_filled(v) for v in (payload.user_id, payload.question, payload.answer)) or payload.feedback is None:
        raise InputValidationError("Missing required fields: userId, question, answer, feedback")
    if not isinstance(payload.feedback, dict):
        raise InputValidationError("feedback must be an object")

    if store is None:
        raise StoreUnavailableError("Session store not configured - session not saved", extra={"saved": False})

    feedback = ResponseNormalizer(diagnostics=_log_diagnostic).coerce(payload.feedback)
    record = {
        "question": payload.question,
        "answer": payload.answer,
        "feedback": feedback.model_dump(by_alias=True),
    }
    try:
        session_id = store.append(payload.user_id, record)
    except StoreUnavailableError as e:
        e.extra.setdefault("saved", False)
        raise

    logger.info("Session saved for user %s: %s (token uid %s)", payload.user_id, session_id, identity.uid)
    return {"success": True, "session_id": session_id}


@router.get("/history", response_model=schemas.HistoryResponse)
def history(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: Optional[str] = Query(None),
    identity: AuthenticatedIdentity = Depends(require_identity),
    store: Optional[SessionStore] = Depends(get_store),
):
    if not _filled(user_id):
        raise InputValidationError("Missing userId parameter")

    if store is None:
        raise StoreUnavailableError("Session store not configured", extra={"sessions": []})

    try:
        sessions = store.list_recent(user_id, _parse_limit(limit))
    except StoreUnavailableError as e:
        e.extra.setdefault("sessions", [])
        raise

    logger.info("Retrieved %d sessions for user %s", len(sessions), user_id)
    return {"success": True, "sessions": sessions, "count": len(sessions)}
