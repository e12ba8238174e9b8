import uuid

import pytest

from tlearn.core.errors import UnauthorizedError
from tlearn.core.security import issue_token
from tlearn.models.user import Role
from tlearn.services.credentials import CredentialKind, extract_bearer, resolve_credential
from tlearn.services.users import create_user, get_user_by_id, rotate_api_key

SECRET = "resolver-secret"


async def _user(db, username="alice", role=Role.USER):
    return await create_user(db, username=username, email=f"{username}@example.com", password="pw1", role=role)


async def _rejection(db, bearer: str) -> UnauthorizedError:
    with pytest.raises(UnauthorizedError) as exc_info:
        await resolve_credential(db, bearer, SECRET)
    return exc_info.value


# ---------- header extraction ----------

def test_extract_bearer():
    assert extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize(
    "header",
    [None, "", "Bearer", "Bearer ", "bearer abc", "BEARER abc", "Token abc", "Bearer  abc", "Bearer abc def", "abc"],
)
def test_extract_bearer_rejects_malformed_header(header):
    with pytest.raises(UnauthorizedError):
        extract_bearer(header)


# ---------- resolution ----------

async def test_resolves_api_key(db):
    user = await _user(db)
    api_key = await rotate_api_key(db, user.id)

    principal = await resolve_credential(db, api_key, SECRET)

    assert principal.id == user.id
    assert principal.username == "alice"
    assert principal.role is Role.USER
    assert principal.credential is CredentialKind.API_KEY


async def test_resolves_session_token(db):
    user = await _user(db, role=Role.ADMIN)

    principal = await resolve_credential(db, issue_token(user.id, SECRET), SECRET)

    assert principal.id == user.id
    assert principal.is_admin
    assert principal.credential is CredentialKind.SESSION_TOKEN


async def test_stored_key_wins_over_valid_token(db):
    alice = await _user(db, "alice")
    mallory = await _user(db, "mallory")
    # a string that is both a stored key (alice) and a valid token (mallory)
    shared = issue_token(mallory.id, SECRET)
    alice.api_key = shared
    await db.commit()

    principal = await resolve_credential(db, shared, SECRET)

    assert principal.id == alice.id
    assert principal.credential is CredentialKind.API_KEY


async def test_rotated_key_stops_resolving(db):
    user = await _user(db)
    user_id = user.id
    old_key = await rotate_api_key(db, user_id)
    new_key = await rotate_api_key(db, user_id)

    assert old_key != new_key
    assert (await resolve_credential(db, new_key, SECRET)).id == user_id
    await _rejection(db, old_key)

    db.expire_all()
    assert (await get_user_by_id(db, user_id)).api_key == new_key


async def test_failures_are_indistinguishable(db):
    user = await _user(db)
    ghost = uuid.uuid4()

    rejections = [
        await _rejection(db, "0" * 64),  # unknown key
        await _rejection(db, "not-a-token"),  # malformed
        await _rejection(db, issue_token(user.id, "some-other-secret")),  # forged
        await _rejection(db, issue_token(ghost, SECRET)),  # user gone
    ]

    assert {(r.status_code, r.detail, str(r)) for r in rejections} == {(401, "unauthorized", "unauthorized")}
