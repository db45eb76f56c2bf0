# SQLAlchemy models
import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from .database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class FeedbackSession(Base):
    __tablename__ = "feedback_sessions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(32), unique=True, index=True, nullable=False, default=lambda: uuid.uuid4().hex)
    user_id = Column(String, index=True, nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    feedback_json = Column(Text, nullable=False)  # normalized FeedbackResult as JSON
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)

    def set_feedback(self, obj):
        self.feedback_json = json.dumps(obj)

    def get_feedback(self):
        return json.loads(self.feedback_json or "{}")

    def to_record(self):
        created = self.created_at
        if created is not None and created.tzinfo is None:
            # sqlite drops the offset
            created = created.replace(tzinfo=timezone.utc)
        return {
            "id": self.session_id,
            "userId": self.user_id,
            "question": self.question,
            "answer": self.answer,
            "feedback": self.get_feedback(),
            "createdAt": created.isoformat() if created else None,
        }
