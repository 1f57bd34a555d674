import asyncio
from datetime import timedelta

from bson import ObjectId

from app.core.security import create_access_token
from app.models.user import PRIVATE_FIELDS, public_projection
from app.schemas.user import UserPublic
from app.services import auth_service, user_service


def test_signup_returns_user_and_token(client):
    response = client.post("/api/auth/signup", json={
        "fullName": "Alice Doe",
        "email": "Alice@Example.com",
        "password": "secret123",
        "bio": "Hi",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["message"] == "Account created successfully"
    user = body["userData"]
    assert user["fullName"] == "Alice Doe"
    assert user["email"] == "alice@example.com"
    assert user["bio"] == "Hi"
    assert user["profilePic"] == ""
    assert "_id" in user
    assert "password" not in user


def test_signup_stores_hashed_password(client, database):
    client.post("/api/auth/signup", json={
        "fullName": "Alice", "email": "alice@example.com", "password": "secret123", "bio": "Hi",
    })
    stored = asyncio.run(database["users"].find_one({"email": "alice@example.com"}))
    assert stored["password"] != "secret123"
    assert stored["password"].startswith("$2")


def test_signup_missing_details(client):
    response = client.post("/api/auth/signup", json={
        "fullName": "Alice", "email": "alice@example.com", "password": "secret123",
    })
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Missing Details"


def test_signup_invalid_email(client):
    response = client.post("/api/auth/signup", json={
        "fullName": "Alice", "email": "not-an-email", "password": "secret123", "bio": "Hi",
    })
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_signup_duplicate_email_conflicts(client, database, make_user):
    make_user("Alice", email="alice@example.com")

    response = client.post("/api/auth/signup", json={
        "fullName": "Other Alice", "email": "ALICE@example.com", "password": "different", "bio": "Hey",
    })
    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "CONFLICT"
    assert body["message"] == "Account already exists"
    assert asyncio.run(database["users"].count_documents({"email": "alice@example.com"})) == 1


def test_login_round_trip_resolves_session(client, make_user):
    user, _ = make_user("Alice", email="alice@example.com", password="secret123")

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["userData"]["_id"] == user["_id"]

    check = client.get("/api/auth/check", headers={"Authorization": f"Bearer {body['token']}"})
    assert check.status_code == 200
    assert check.json()["user"]["_id"] == user["_id"]
    assert "password" not in check.json()["user"]


def test_login_wrong_password(client, make_user):
    make_user("Alice", email="alice@example.com", password="secret123")

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_check_without_token(client):
    response = client.get("/api/auth/check")
    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_FAILED"


def test_check_with_garbage_token(client):
    response = client.get("/api/auth/check", headers={"Authorization": "Bearer not.a.jwt"})
    assert response.status_code == 401


def test_check_with_expired_token(client, make_user):
    user, _ = make_user("Alice")
    expired = create_access_token(user["_id"], expires_delta=timedelta(seconds=-60))

    response = client.get("/api/auth/check", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_check_accepts_token_header(client, make_user):
    user, headers = make_user("Alice")
    token = headers["Authorization"].split(" ", 1)[1]

    response = client.get("/api/auth/check", headers={"token": token})
    assert response.status_code == 200
    assert response.json()["user"]["_id"] == user["_id"]


async def test_profile_lookups_do_not_break_later_logins(make_user):
    user, _ = make_user("Alice", email="alice@example.com", password="secret123")
    user_id = ObjectId(user["_id"])

    for _ in range(2):
        found = await user_service.get_user_by_id(user_id)
        assert "password" not in found
        await user_service.list_users_except(ObjectId())

    assert PRIVATE_FIELDS == frozenset({"password"})
    assert public_projection() == {"password": 0}

    logged_in, _ = await auth_service.login("alice@example.com", "secret123")
    assert logged_in["_id"] == user_id
    assert "password" not in logged_in
    assert UserPublic.model_validate(logged_in).id == user["_id"]

    carol, _ = await auth_service.signup("Carol", "carol@example.com", "secret123", "hi")
    assert "_id" in carol


def test_signup_after_session_check(client, make_user):
    _, headers = make_user("Alice")
    assert client.get("/api/auth/check", headers=headers).status_code == 200

    response = client.post("/api/auth/signup", json={
        "fullName": "Bob", "email": "bob@example.com", "password": "secret123", "bio": "Hey",
    })
    assert response.status_code == 200
    assert response.json()["userData"]["_id"]
