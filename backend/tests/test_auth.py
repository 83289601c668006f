from datetime import timedelta

from taskboard.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("hunter22")
    assert hashed.startswith("pbkdf2:sha256:1000$")
    assert verify_password("hunter22", hashed)
    assert not verify_password("hunter23", hashed)
    assert not verify_password("hunter22", "not-a-hash")


async def test_register_login_and_me(client):
    registered = await client.post(
        "/auth/register",
        json={"email": "ada@example.com", "password": "hunter22", "name": "Ada"},
    )
    assert registered.status_code == 201
    body = registered.json()
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["name"] == "Ada"
    assert "passwordHash" not in body["user"]

    login = await client.post(
        "/auth/login", json={"email": "ADA@example.com", "password": "hunter22"}
    )
    assert login.status_code == 200
    token = login.json()["token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]


async def test_register_validation(client, register):
    missing = await client.post("/auth/register", json={"email": "  ", "password": "x"})
    assert missing.status_code == 400
    assert missing.json() == {"message": "Email and password are required"}

    await register("taken@example.com")
    duplicate = await client.post(
        "/auth/register", json={"email": "Taken@example.com", "password": "hunter22"}
    )
    assert duplicate.status_code == 400
    assert duplicate.json() == {"message": "Email already in use"}


async def test_login_rejects_bad_credentials(client, register):
    await register("bob@example.com")

    wrong = await client.post(
        "/auth/login", json={"email": "bob@example.com", "password": "nope"}
    )
    assert wrong.status_code == 401
    assert wrong.json() == {"message": "Invalid credentials"}

    unknown = await client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "nope"}
    )
    assert unknown.status_code == 401


async def test_protected_routes_require_a_valid_token(client, register):
    missing = await client.get("/boards")
    assert missing.status_code == 401
    assert missing.json() == {"message": "Missing or invalid Authorization header"}

    garbage = await client.get("/boards", headers={"Authorization": "Bearer garbage"})
    assert garbage.status_code == 401

    expired = create_access_token(1, expires_delta=timedelta(seconds=-5))
    response = await client.get("/boards", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401

    # Well-formed token for a user that does not exist
    orphan = create_access_token(12345)
    response = await client.get("/boards", headers={"Authorization": f"Bearer {orphan}"})
    assert response.status_code == 401


async def test_update_profile_name(client, register):
    _, headers = await register("carol@example.com", name="Carol")

    renamed = await client.put("/auth/me", json={"name": "  Caroline "}, headers=headers)
    assert renamed.json()["user"]["name"] == "Caroline"

    cleared = await client.put("/auth/me", json={"name": "   "}, headers=headers)
    assert cleared.json()["user"]["name"] is None


async def test_health_and_unknown_route(client):
    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.headers["X-Request-ID"]

    unknown = await client.get("/no-such-route")
    assert unknown.status_code == 404
    assert "message" in unknown.json()


async def test_readiness_reports_database(client):
    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "sqlite"}
