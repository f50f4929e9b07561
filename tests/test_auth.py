from datetime import datetime, timedelta, timezone

import jwt

from educk.utils.settings import JWT_ALGORITHM, JWT_SECRET


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_missing_token(client):
    resp = client.get("/users/me")

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authentication token not provided"


def test_garbage_token(client):
    assert client.get("/users/me", headers=bearer("not-a-jwt")).status_code == 401


def test_wrong_secret(client, make_user):
    token = jwt.encode({"sub": str(make_user().id), "role": "student"}, "other-secret", algorithm="HS256")

    assert client.get("/users/me", headers=bearer(token)).status_code == 401


def test_expired_token(client, make_user):
    claims = {
        "sub": str(make_user().id),
        "role": "student",
        "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
    }
    token = jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)

    resp = client.get("/users/me", headers=bearer(token))

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_unknown_role_claim(client, make_user):
    token = jwt.encode({"sub": str(make_user().id), "role": "superuser"}, JWT_SECRET, algorithm=JWT_ALGORITHM)

    assert client.get("/users/me", headers=bearer(token)).status_code == 401


def test_valid_token(client, make_user, auth):
    user = make_user("Dora")

    resp = client.get("/users/me", headers=auth(user))

    assert resp.status_code == 200
    assert resp.json()["name"] == "Dora"
    assert resp.json()["role"] == "student"


def test_student_cannot_use_teacher_routes(client, make_user, auth):
    body = {
        "title": "T",
        "description": "D",
        "shortDescription": "S",
        "category": "c",
        "price": 10,
    }

    resp = client.post("/courses", json=body, headers=auth(make_user()))

    assert resp.status_code == 403
