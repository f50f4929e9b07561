from educk.data.models import NotificationModel
from educk.services import notification_service
from educk.services.notification_service import enrollment_message, send_enrollment_notification_task


def test_admin_creates_user(client, make_user, auth):
    admin = make_user("Root", role="admin")

    resp = client.post(
        "/users",
        json={"name": "Lia", "email": "Lia@Educk.test", "role": "teacher"},
        headers=auth(admin),
    )

    assert resp.status_code == 201
    assert resp.json()["email"] == "lia@educk.test"
    assert resp.json()["role"] == "teacher"

    duplicate = client.post("/users", json={"name": "Lia", "email": "lia@educk.test"}, headers=auth(admin))
    assert duplicate.status_code == 400


def test_student_cannot_create_users(client, make_user, auth):
    resp = client.post("/users", json={"name": "X", "email": "x@educk.test"}, headers=auth(make_user()))

    assert resp.status_code == 403


def test_my_courses_after_checkout(client, make_user, make_course, fill_cart, auth):
    user = make_user()
    course = make_course("Kotlin")
    fill_cart(user, course)
    client.post("/cart/checkout", json={"paymentMethod": "credit_card"}, headers=auth(user))

    body = client.get("/users/me/courses", headers=auth(user)).json()

    assert [c["title"] for c in body] == ["Kotlin"]
    assert body[0]["studentCount"] == 1
    assert body[0]["salesCount"] == 1


def test_notifications_inbox(client, db, make_user, auth):
    user = make_user()
    db.add_all([
        NotificationModel(user_id=user.id, message="first"),
        NotificationModel(user_id=user.id, message="second"),
    ])
    db.commit()

    body = client.get("/users/me/notifications", headers=auth(user)).json()
    assert {n["message"] for n in body} == {"first", "second"}
    assert all(n["read"] is False for n in body)

    resp = client.put("/users/me/notifications/read", headers=auth(user))
    assert resp.json()["message"] == "2 notification(s) marked as read"
    assert all(n["read"] for n in client.get("/users/me/notifications", headers=auth(user)).json())


def test_notification_task_stores_message(db, make_user, session_factory, monkeypatch):
    user = make_user()
    monkeypatch.setattr(notification_service, "SessionLocal", session_factory)

    result = send_enrollment_notification_task(user.id, 7, ["Go", "Rust"])

    assert result["status"] == "stored"
    stored = db.query(NotificationModel).filter_by(user_id=user.id).one()
    assert stored.message == enrollment_message(7, ["Go", "Rust"])
    assert "Go, Rust" in stored.message


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "ok"}
