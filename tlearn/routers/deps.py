"""Request dependencies: DB session, settings, authenticated principal and role gates."""
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tlearn.core.config import Settings
from tlearn.core.errors import ForbiddenError
from tlearn.db.session import get_db
from tlearn.models.user import Role
from tlearn.services.credentials import Principal, extract_bearer, resolve_credential

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


async def get_current_principal(request: Request, db: DbSession, settings: AppSettings) -> Principal:
    """Resolve the Authorization header. Any failure is a plain 401."""
    bearer = extract_bearer(request.headers.get("Authorization"))
    return await resolve_credential(db, bearer, settings.secret_key)


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def require_role(role: Role):
    """Gate built on top of get_current_principal: 401 when unauthenticated, 403 on role mismatch."""

    async def _gate(principal: CurrentPrincipal) -> Principal:
        if principal.role is not role:
            raise ForbiddenError(f"{role.value}_required")
        return principal

    return _gate


require_admin = require_role(Role.ADMIN)

AdminPrincipal = Annotated[Principal, Depends(require_admin)]
