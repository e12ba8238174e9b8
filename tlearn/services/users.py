"""User store: lookups by id, username and API key; registration; API key rotation."""
import logging
import secrets
import uuid

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from tlearn.core.errors import ConflictError
from tlearn.core.security import dummy_verify, hash_password, verify_password
from tlearn.models.user import Role, User, utcnow

logger = logging.getLogger(__name__)

# 32 random bytes, hex encoded
API_KEY_BYTES = 32


def generate_api_key() -> str:
    return secrets.token_hex(API_KEY_BYTES)


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_api_key(db: AsyncSession, api_key: str) -> User | None:
    result = await db.execute(select(User).where(User.api_key == api_key))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    existing = await db.execute(
        select(User.id).where(or_(User.username == username, User.email == email))
    )
    if existing.first() is not None:
        raise ConflictError("user_exists")

    # argon2 is CPU and memory bound; keep it off the event loop
    password_hash = await run_in_threadpool(hash_password, password)
    user = User(username=username, email=email, password_hash=password_hash, role=role)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        await db.rollback()
        raise ConflictError("user_exists")
    await db.refresh(user)
    logger.info("registered user id=%s username=%s", user.id, user.username)
    return user


async def authenticate_user(db: AsyncSession, username: str, password: str) -> User | None:
    """Return the user if the password matches. Unknown usernames cost the same hashing work."""
    user = await get_user_by_username(db, username)
    if user is None:
        await run_in_threadpool(dummy_verify)
        return None
    if not await run_in_threadpool(verify_password, password, user.password_hash):
        return None
    return user


async def rotate_api_key(db: AsyncSession, user_id: uuid.UUID) -> str:
    """Replace the user's API key; the previous key stops resolving immediately."""
    new_key = generate_api_key()
    await db.execute(
        update(User).where(User.id == user_id).values(api_key=new_key, updated_at=utcnow())
    )
    await db.commit()
    logger.info("rotated api key for user id=%s", user_id)
    return new_key


async def ensure_admin(db: AsyncSession, *, username: str, email: str, password: str) -> User:
    """Create the admin account if missing, then make sure it carries the admin role."""
    user = await get_user_by_username(db, username)
    if user is None:
        user = await create_user(db, username=username, email=email, password=password, role=Role.ADMIN)
        logger.info("created admin user %s", username)
        return user

    if user.role is not Role.ADMIN:
        user.role = Role.ADMIN
        await db.commit()
        await db.refresh(user)
        logger.info("promoted user %s to admin", username)
    return user
