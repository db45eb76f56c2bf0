# backend/interview_coach/store.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from . import config, crud, models
from .database import Base, make_engine, make_session_factory
from .errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Feedback sessions keyed by user id, newest first.
    Every database failure surfaces as StoreUnavailableError.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, url: str) -> "SessionStore":
        engine = make_engine(url)
        Base.metadata.create_all(bind=engine)
        return cls(make_session_factory(engine))

    def append(self, user_id: str, record: Dict[str, Any]) -> str:
        row = models.FeedbackSession(
            user_id=user_id,
            question=record["question"],
            answer=record["answer"],
        )
        row.set_feedback(record["feedback"])
        db = self._session_factory()
        try:
            created = crud.create_session(db, row)
            return created.session_id
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreUnavailableError(f"Failed to save session: {e}")
        finally:
            db.close()

    def list_recent(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        db = self._session_factory()
        try:
            return [row.to_record() for row in crud.list_user_sessions(db, user_id, limit)]
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Failed to fetch session history: {e}")
        finally:
            db.close()


def build_store() -> Optional[SessionStore]:
    if not config.DATABASE_URL:
        logger.warning("DATABASE_URL empty. Sessions will not be saved.")
        return None
    try:
        return SessionStore.from_url(config.DATABASE_URL)
    except SQLAlchemyError as e:
        logger.error("Session store unavailable: %s", e)
        return None
