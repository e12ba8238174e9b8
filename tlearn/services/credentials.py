"""Bearer credential extraction and resolution.

A bearer string is one of two things:

- an API key: opaque, long-lived, stored on the user row (CLI clients);
- a session token: HS256 JWT issued at login, valid for 24h (web terminal).

Resolution tries the API key first, then the token. Every failure, whatever
its cause, becomes the same UnauthorizedError so that a caller cannot tell an
unknown key from a forged token or a deleted user.
"""
import enum
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tlearn.core.errors import InternalError, UnauthorizedError
from tlearn.core.security import TokenError, verify_token
from tlearn.models.user import Role, User
from tlearn.services.users import get_user_by_api_key, get_user_by_id

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class CredentialKind(str, enum.Enum):
    API_KEY = "api_key"
    SESSION_TOKEN = "session_token"


@dataclass(frozen=True)
class Principal:
    """Read-only view of the authenticated user for one request."""

    id: uuid.UUID
    username: str
    role: Role
    credential: CredentialKind

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_user(cls, user: User, credential: CredentialKind) -> "Principal":
        return cls(id=user.id, username=user.username, role=Role(user.role), credential=credential)


def extract_bearer(authorization: str | None) -> str:
    """Return the credential from an `Authorization: Bearer <credential>` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError()
    credential = authorization[len(BEARER_PREFIX):]
    if not credential or any(ch.isspace() for ch in credential):
        raise UnauthorizedError()
    return credential


async def resolve_credential(db: AsyncSession, bearer: str, secret: str) -> Principal:
    try:
        user = await get_user_by_api_key(db, bearer)
        if user is not None:
            return Principal.from_user(user, CredentialKind.API_KEY)

        try:
            user_id = verify_token(bearer, secret)
        except TokenError as exc:
            logger.debug("bearer rejected: %s", exc.kind.value)
            raise UnauthorizedError()

        user = await get_user_by_id(db, user_id)
    except SQLAlchemyError as exc:
        logger.exception("credential lookup failed")
        raise InternalError("credential lookup failed") from exc

    if user is None:
        logger.debug("bearer rejected: token subject has no user")
        raise UnauthorizedError()
    return Principal.from_user(user, CredentialKind.SESSION_TOKEN)
