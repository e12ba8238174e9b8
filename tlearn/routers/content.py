"""Content routes: course and lesson listing, task retrieval, task completion."""
import uuid

from fastapi import APIRouter
from sqlalchemy import and_, select
from sqlalchemy.orm import selectinload

from tlearn.core.errors import NotFoundError
from tlearn.models.completion import Completion
from tlearn.models.course import Course
from tlearn.models.lesson import Lesson
from tlearn.models.task import Task
from tlearn.routers.deps import CurrentPrincipal, DbSession
from tlearn.schemas.content import (
    CompletionOutSchema,
    CourseOutSchema,
    LessonListItemSchema,
    LessonTaskOutSchema,
    StepSchema,
)
from tlearn.services.completion import complete_task

router = APIRouter(tags=["content"])


@router.get("/courses", response_model=list[CourseOutSchema])
async def list_courses(db: DbSession):
    result = await db.execute(select(Course).order_by(Course.created_at, Course.title))
    return result.scalars().all()


@router.get("/courses/{course_id}/lessons", response_model=list[LessonListItemSchema])
async def list_lessons(course_id: uuid.UUID, principal: CurrentPrincipal, db: DbSession):
    """Lessons of a course in order, each flagged with whether the caller completed its task."""
    if await db.get(Course, course_id) is None:
        raise NotFoundError("course_not_found")

    result = await db.execute(
        select(Lesson, Completion.completed_at)
        .outerjoin(Task, Task.lesson_id == Lesson.id)
        .outerjoin(
            Completion,
            and_(Completion.task_id == Task.id, Completion.user_id == principal.id),
        )
        .where(Lesson.course_id == course_id)
        .order_by(Lesson.position, Lesson.created_at)
    )
    return [
        LessonListItemSchema(
            id=lesson.id,
            title=lesson.title,
            position=lesson.position,
            completed=completed_at is not None,
        )
        for lesson, completed_at in result.all()
    ]


@router.get("/lessons/{lesson_id}/task", response_model=LessonTaskOutSchema)
async def get_lesson_task(lesson_id: uuid.UUID, db: DbSession):
    """Lesson text plus the task's steps, as the CLI consumes them."""
    # IMPORTANT: with AsyncSession don't rely on lazy relationship loading
    result = await db.execute(
        select(Lesson)
        .options(selectinload(Lesson.task).selectinload(Task.steps))
        .where(Lesson.id == lesson_id)
    )
    lesson = result.scalar_one_or_none()
    if lesson is None:
        raise NotFoundError("lesson_not_found")
    if lesson.task is None:
        raise NotFoundError("task_not_found")

    return LessonTaskOutSchema(
        lesson_id=lesson.id,
        lesson_title=lesson.title,
        lesson_content=lesson.content,
        task_id=lesson.task.id,
        task_description=lesson.task.description,
        steps=[StepSchema.model_validate(step) for step in lesson.task.steps],
    )


@router.post("/tasks/{task_id}/complete", response_model=CompletionOutSchema)
async def complete(task_id: uuid.UUID, principal: CurrentPrincipal, db: DbSession):
    """Mark the task done for the caller. Repeating the call is harmless."""
    await complete_task(db, principal.id, task_id)
    return CompletionOutSchema()
