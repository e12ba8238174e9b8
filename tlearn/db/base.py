"""SQLAlchemy declarative base and model imports for Alembic."""
from tlearn.db.session import Base

# Import all models so Alembic can see them
from tlearn.models.completion import Completion  # noqa: F401
from tlearn.models.course import Course  # noqa: F401
from tlearn.models.lesson import Lesson  # noqa: F401
from tlearn.models.step import Step  # noqa: F401
from tlearn.models.task import Task  # noqa: F401
from tlearn.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Course", "Lesson", "Task", "Step", "Completion"]
