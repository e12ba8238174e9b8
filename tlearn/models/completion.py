"""Completion model: a user finished a task. The composite key allows one row per pair."""
from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from tlearn.db.session import Base
from tlearn.models.user import utcnow


class Completion(Base):
    __tablename__ = "completions"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
