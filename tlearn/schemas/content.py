"""Pydantic schemas for courses, lessons, tasks and steps."""
import uuid

from pydantic import BaseModel, ConfigDict, Field


class CourseCreateSchema(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""


class CourseOutSchema(BaseModel):
    id: uuid.UUID
    title: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class LessonCreateSchema(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = ""
    position: int = Field(ge=0)


class LessonOutSchema(BaseModel):
    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    content: str
    position: int

    model_config = ConfigDict(from_attributes=True)


class LessonListItemSchema(BaseModel):
    id: uuid.UUID
    title: str
    position: int
    completed: bool


class StepSchema(BaseModel):
    position: int = Field(ge=0)
    command: str = Field(min_length=1)
    expected_output: str

    model_config = ConfigDict(from_attributes=True)


class TaskCreateSchema(BaseModel):
    description: str = Field(min_length=1)
    steps: list[StepSchema] = Field(default_factory=list)


class TaskOutSchema(BaseModel):
    id: uuid.UUID
    lesson_id: uuid.UUID
    description: str
    steps: list[StepSchema]


class LessonTaskOutSchema(BaseModel):
    """What the CLI fetches for a lesson: the lesson text plus the steps to check."""

    lesson_id: uuid.UUID
    lesson_title: str
    lesson_content: str
    task_id: uuid.UUID
    task_description: str
    steps: list[StepSchema]


class CompletionOutSchema(BaseModel):
    status: str = "success"
