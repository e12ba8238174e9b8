"""Idempotent task completion."""
import logging
import uuid

from sqlalchemy import insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tlearn.core.errors import InternalError, NotFoundError
from tlearn.models.completion import Completion
from tlearn.models.task import Task
from tlearn.models.user import utcnow

logger = logging.getLogger(__name__)

# dialects with INSERT ... ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def _task_exists(db: AsyncSession, task_id: uuid.UUID) -> bool:
    return await db.scalar(select(Task.id).where(Task.id == task_id)) is not None


async def _completion_exists(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> bool:
    found = await db.scalar(
        select(Completion.task_id).where(Completion.user_id == user_id, Completion.task_id == task_id)
    )
    return found is not None


async def complete_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> None:
    """Record that `user_id` finished `task_id`.

    Calling it again, sequentially or concurrently, succeeds and leaves a single
    row: duplicates are absorbed by the (user_id, task_id) primary key.
    """
    try:
        found = await _task_exists(db, task_id)
    except SQLAlchemyError as exc:
        logger.exception("task lookup failed task_id=%s", task_id)
        raise InternalError("task lookup failed") from exc
    if not found:
        raise NotFoundError("task_not_found")

    values = {"user_id": user_id, "task_id": task_id, "completed_at": utcnow()}
    dialect = db.get_bind().dialect.name
    upsert_insert = _UPSERT_INSERTS.get(dialect)

    try:
        if upsert_insert is not None:
            stmt = upsert_insert(Completion).values(**values).on_conflict_do_nothing(
                index_elements=[Completion.user_id, Completion.task_id]
            )
            await db.execute(stmt)
            await db.commit()
            return

        try:
            await db.execute(insert(Completion).values(**values))
            await db.commit()
            return
        except IntegrityError:
            await db.rollback()

        # a duplicate key means it was already completed; anything else
        # (the task or user vanished since the lookup) stored nothing
        if await _completion_exists(db, user_id, task_id):
            return
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("completion write failed user_id=%s task_id=%s", user_id, task_id)
        raise InternalError("completion write failed") from exc

    logger.info("completion rejected, task gone user_id=%s task_id=%s", user_id, task_id)
    raise NotFoundError("task_not_found")
