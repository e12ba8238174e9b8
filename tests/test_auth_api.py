
from conftest import bearer, login_token, register

from tlearn.core.errors import BadRequestError


def test_register_login_me_apikey_flow(client):
    r = register(client, "alice", password="pw1")
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"id", "created_at", "updated_at", "email", "username"}
    assert body["username"] == "alice"

    r = client.post("/auth/login", json={"username": "alice", "password": "pw1"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert r.json()["user"] == {"id": body["id"], "username": "alice"}

    r = client.post("/auth/login", json={"username": "alice", "password": "wrong"})
    assert r.status_code == 401

    r = client.get("/auth/me", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["username"] == "alice"
    assert r.json()["id"] == body["id"]
    assert r.json()["role"] == "user"

    r = client.post("/auth/token", headers=bearer(token))
    assert r.status_code == 201
    api_key = r.json()["api_key"]
    assert len(api_key) == 64

    r = client.get("/auth/me", headers=bearer(api_key))
    assert r.status_code == 200
    assert r.json()["username"] == "alice"


def test_password_hash_never_returned(client):
    r = register(client, "erin", password="s3cret-pw")
    token = login_token(client, "erin", password="s3cret-pw")
    me = client.get("/auth/me", headers=bearer(token))

    for payload in (r.json(), me.json()):
        assert "password" not in payload
        assert "password_hash" not in payload
        assert "api_key" not in payload


def test_login_unknown_user_looks_like_wrong_password(client):
    register(client, "frank")
    unknown = client.post("/auth/login", json={"username": "nobody", "password": "pw1"})
    wrong = client.post("/auth/login", json={"username": "frank", "password": "nope"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()


def test_duplicate_username_or_email_conflicts(client):
    assert register(client, "grace", email="grace@example.com").status_code == 201
    assert register(client, "grace", email="other@example.com").status_code == 409
    assert register(client, "grace2", email="grace@example.com").status_code == 409


def test_register_validates_body(client):
    assert client.post("/auth/register", json={"username": "h", "password": "pw1"}).status_code == 400
    assert register(client, "h", email="not-an-email").status_code == 400
    assert register(client, "h", password="").status_code == 400

    r = client.post(
        "/auth/register",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "bad_request"


def test_validation_error_uses_bad_request_error(client):
    r = client.post("/auth/login", json={"username": "alice"})
    assert r.status_code == BadRequestError.status_code
    assert r.json()["detail"] == BadRequestError.detail
    assert r.json()["errors"][0]["loc"] == ["body", "password"]


def test_missing_or_malformed_header_is_401(client, user_token):
    for headers in (
        {},
        {"Authorization": user_token},
        {"Authorization": f"bearer {user_token}"},
        {"Authorization": f"Bearer  {user_token}"},
        {"Authorization": f"Basic {user_token}"},
    ):
        r = client.get("/auth/me", headers=headers)
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == "Bearer"


def test_unauthorized_body_identical_for_every_cause(client, user_token):
    causes = [
        {},
        bearer("0" * 64),
        bearer("not-a-token"),
        bearer(user_token.rsplit(".", 1)[0] + "." + "A" * 43),  # forged signature
    ]
    bodies = {client.get("/auth/me", headers=h).text for h in causes}
    assert bodies == {'{"detail":"unauthorized"}'}


def test_reissued_api_key_replaces_previous(client, user_token):
    first = client.post("/auth/token", headers=bearer(user_token)).json()["api_key"]
    second = client.post("/auth/token", headers=bearer(first)).json()["api_key"]

    assert first != second
    assert client.get("/auth/me", headers=bearer(first)).status_code == 401
    assert client.get("/auth/me", headers=bearer(second)).status_code == 200
    # the session token is unaffected by key rotation
    assert client.get("/auth/me", headers=bearer(user_token)).status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
