"""Task model: the exercise attached to a lesson (at most one per lesson)."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tlearn.db.session import Base
from tlearn.models.user import utcnow


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    lesson_id = Column(
        Uuid, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    lesson = relationship("Lesson", back_populates="task")
    steps = relationship(
        "Step",
        back_populates="task",
        order_by="Step.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
