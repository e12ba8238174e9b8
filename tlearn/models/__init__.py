from tlearn.models.user import Role, User
from tlearn.models.course import Course
from tlearn.models.lesson import Lesson
from tlearn.models.task import Task
from tlearn.models.step import Step
from tlearn.models.completion import Completion

__all__ = ["Role", "User", "Course", "Lesson", "Task", "Step", "Completion"]
