"""Admin routes: create and delete courses, lessons and tasks. Every route requires the admin role."""
import logging
import uuid

from fastapi import APIRouter, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tlearn.core.errors import ConflictError, NotFoundError
from tlearn.models.course import Course
from tlearn.models.lesson import Lesson
from tlearn.models.step import Step
from tlearn.models.task import Task
from tlearn.routers.deps import AdminPrincipal, DbSession
from tlearn.schemas.content import (
    CourseCreateSchema,
    CourseOutSchema,
    LessonCreateSchema,
    LessonOutSchema,
    StepSchema,
    TaskCreateSchema,
    TaskOutSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


async def _delete_by_id(db: AsyncSession, model, entity_id: uuid.UUID, missing: str) -> None:
    # children go with the parent via ON DELETE CASCADE
    result = await db.execute(delete(model).where(model.id == entity_id))
    await db.commit()
    if result.rowcount == 0:
        raise NotFoundError(missing)


@router.post("/courses", response_model=CourseOutSchema, status_code=status.HTTP_201_CREATED)
async def create_course(body: CourseCreateSchema, admin: AdminPrincipal, db: DbSession):
    course = Course(title=body.title, description=body.description)
    db.add(course)
    await db.commit()
    await db.refresh(course)
    logger.info("admin %s created course %s", admin.username, course.id)
    return course


@router.post(
    "/courses/{course_id}/lessons",
    response_model=LessonOutSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_lesson(
    course_id: uuid.UUID,
    body: LessonCreateSchema,
    admin: AdminPrincipal,
    db: DbSession,
):
    if await db.get(Course, course_id) is None:
        raise NotFoundError("course_not_found")

    lesson = Lesson(course_id=course_id, title=body.title, content=body.content, position=body.position)
    db.add(lesson)
    await db.commit()
    await db.refresh(lesson)
    logger.info("admin %s created lesson %s in course %s", admin.username, lesson.id, course_id)
    return lesson


@router.post(
    "/lessons/{lesson_id}/task",
    response_model=TaskOutSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    lesson_id: uuid.UUID,
    body: TaskCreateSchema,
    admin: AdminPrincipal,
    db: DbSession,
):
    """Attach the task (and its ordered steps) to a lesson. A lesson holds at most one task."""
    if await db.get(Lesson, lesson_id) is None:
        raise NotFoundError("lesson_not_found")
    existing = await db.scalar(select(Task.id).where(Task.lesson_id == lesson_id))
    if existing is not None:
        raise ConflictError("task_exists")

    steps = sorted(body.steps, key=lambda s: s.position)
    task = Task(
        lesson_id=lesson_id,
        description=body.description,
        steps=[
            Step(position=s.position, command=s.command, expected_output=s.expected_output)
            for s in steps
        ],
    )
    db.add(task)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("task_exists")

    logger.info("admin %s created task %s for lesson %s", admin.username, task.id, lesson_id)
    return TaskOutSchema(
        id=task.id,
        lesson_id=lesson_id,
        description=task.description,
        steps=[StepSchema.model_validate(s) for s in steps],
    )


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: uuid.UUID, admin: AdminPrincipal, db: DbSession):
    await _delete_by_id(db, Course, course_id, "course_not_found")
    logger.info("admin %s deleted course %s", admin.username, course_id)


@router.delete("/lessons/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(lesson_id: uuid.UUID, admin: AdminPrincipal, db: DbSession):
    await _delete_by_id(db, Lesson, lesson_id, "lesson_not_found")
    logger.info("admin %s deleted lesson %s", admin.username, lesson_id)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: uuid.UUID, admin: AdminPrincipal, db: DbSession):
    await _delete_by_id(db, Task, task_id, "task_not_found")
    logger.info("admin %s deleted task %s", admin.username, task_id)
