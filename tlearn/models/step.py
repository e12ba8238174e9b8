"""Step model: one command the CLI runs and the output it must print."""
import uuid

from sqlalchemy import Column, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from tlearn.db.session import Base


class Step(Base):
    __tablename__ = "steps"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    command = Column(Text, nullable=False)
    expected_output = Column(Text, nullable=False)

    task = relationship("Task", back_populates="steps")
