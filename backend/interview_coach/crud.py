# small helper CRUD functions
from sqlalchemy.orm import Session

from . import models


def create_session(db: Session, feedback_session: models.FeedbackSession):
    db.add(feedback_session)
    db.commit()
    db.refresh(feedback_session)
    return feedback_session


def list_user_sessions(db: Session, user_id: str, limit: int):
    return (
        db.query(models.FeedbackSession)
        .filter(models.FeedbackSession.user_id == user_id)
        .order_by(models.FeedbackSession.created_at.desc(), models.FeedbackSession.id.desc())
        .limit(limit)
        .all()
    )
