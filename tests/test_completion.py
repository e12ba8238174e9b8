import asyncio
import uuid

import pytest
from sqlalchemy import func, select

from tlearn.core.errors import NotFoundError
from tlearn.models.completion import Completion
from tlearn.models.course import Course
from tlearn.models.lesson import Lesson
from tlearn.models.step import Step
from tlearn.models.task import Task
from tlearn.services import completion
from tlearn.services.completion import complete_task
from tlearn.services.users import create_user


@pytest.fixture()
async def user(db):
    return await create_user(db, username="carol", email="carol@example.com", password="pw1")


@pytest.fixture()
async def task(db):
    course = Course(title="Python Basics", description="Start your journey with Python 3.")
    lesson = Lesson(course=course, title="Hello Python", content="# Hello World", position=1)
    task = Task(
        lesson=lesson,
        description="Create main.py and print 'Hello Python'",
        steps=[Step(position=1, command="python3 main.py", expected_output="Hello Python")],
    )
    db.add(course)
    await db.commit()
    return task


async def _count(db, user_id, task_id) -> int:
    return await db.scalar(
        select(func.count())
        .select_from(Completion)
        .where(Completion.user_id == user_id, Completion.task_id == task_id)
    )


async def test_complete_records_one_row(db, user, task):
    await complete_task(db, user.id, task.id)
    assert await _count(db, user.id, task.id) == 1


async def test_repeated_completion_is_success_and_single_row(db, user, task):
    await complete_task(db, user.id, task.id)
    first_at = await db.scalar(select(Completion.completed_at).where(Completion.user_id == user.id))

    await complete_task(db, user.id, task.id)

    assert await _count(db, user.id, task.id) == 1
    # the original completion instant is kept
    assert await db.scalar(select(Completion.completed_at).where(Completion.user_id == user.id)) == first_at


async def test_concurrent_completions_leave_one_row(sessionmaker, db, user, task):
    async def attempt():
        async with sessionmaker() as session:
            await complete_task(session, user.id, task.id)

    results = await asyncio.gather(attempt(), attempt(), attempt(), return_exceptions=True)

    assert results == [None, None, None]
    assert await _count(db, user.id, task.id) == 1


async def test_unknown_task_is_not_found(db, user):
    with pytest.raises(NotFoundError):
        await complete_task(db, user.id, uuid.uuid4())
    assert await db.scalar(select(func.count()).select_from(Completion)) == 0


async def test_completions_are_per_user(db, user, task):
    other = await create_user(db, username="dave", email="dave@example.com", password="pw1")

    await complete_task(db, user.id, task.id)
    await complete_task(db, other.id, task.id)

    assert await _count(db, user.id, task.id) == 1
    assert await _count(db, other.id, task.id) == 1


@pytest.fixture()
def plain_insert(monkeypatch):
    # dialect without ON CONFLICT: duplicates surface as IntegrityError
    monkeypatch.setattr(completion, "_UPSERT_INSERTS", {})


async def test_plain_insert_repeat_is_success(plain_insert, db, user, task):
    # the rollback on conflict expires loaded objects
    user_id, task_id = user.id, task.id

    await complete_task(db, user_id, task_id)
    await complete_task(db, user_id, task_id)

    assert await _count(db, user_id, task_id) == 1


async def test_plain_insert_task_deleted_after_lookup_is_not_found(plain_insert, monkeypatch, db, user):
    async def stale_lookup(db, task_id):
        return True

    monkeypatch.setattr(completion, "_task_exists", stale_lookup)

    with pytest.raises(NotFoundError):
        await complete_task(db, user.id, uuid.uuid4())
    assert await db.scalar(select(func.count()).select_from(Completion)) == 0
