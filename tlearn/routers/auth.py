"""Auth routes: register, login, API key issue, current identity."""
import logging
from datetime import timedelta

from fastapi import APIRouter, status

from tlearn.core.errors import UnauthorizedError
from tlearn.core.security import issue_token
from tlearn.routers.deps import AppSettings, CurrentPrincipal, DbSession
from tlearn.schemas.auth import (
    ApiKeyOutSchema,
    LoginOutSchema,
    LoginSchema,
    LoginUserSchema,
    MeOutSchema,
    RegisterSchema,
    UserOutSchema,
)
from tlearn.services.users import authenticate_user, create_user, get_user_by_id, rotate_api_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOutSchema, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterSchema, db: DbSession):
    """Create a `user`-role account."""
    return await create_user(db, username=body.username, email=body.email, password=body.password)


@router.post("/login", response_model=LoginOutSchema)
async def login(body: LoginSchema, db: DbSession, settings: AppSettings):
    """Exchange username + password for a session token."""
    user = await authenticate_user(db, body.username, body.password)
    if user is None:
        logger.info("failed login for username=%s", body.username)
        raise UnauthorizedError()

    token = issue_token(user.id, settings.secret_key, ttl=timedelta(hours=settings.token_ttl_hours))
    return LoginOutSchema(token=token, user=LoginUserSchema(id=user.id, username=user.username))


@router.post("/token", response_model=ApiKeyOutSchema, status_code=status.HTTP_201_CREATED)
async def issue_api_key(principal: CurrentPrincipal, db: DbSession):
    """Issue a new API key for the caller, replacing any previous one."""
    api_key = await rotate_api_key(db, principal.id)
    return ApiKeyOutSchema(api_key=api_key)


@router.get("/me", response_model=MeOutSchema)
async def me(principal: CurrentPrincipal, db: DbSession):
    user = await get_user_by_id(db, principal.id)
    if user is None:
        raise UnauthorizedError()
    return user
