import pytest
from sqlalchemy import func, select

from educk.data.models import CourseModel, EnrollmentModel
from educk.services.notification_service import get_notification_service


@pytest.fixture
def admin(make_user):
    return make_user("Root", role="admin")


@pytest.fixture
def checkout(client, auth, fill_cart):
    def run(user, *courses, method="boleto", coupon=None):
        fill_cart(user, *courses)
        payload = {"paymentMethod": method}
        if coupon:
            payload["couponCode"] = coupon
        resp = client.post("/cart/checkout", json=payload, headers=auth(user))
        assert resp.status_code == 201
        return resp.json()["order"]

    return run


def enrollment_count(db, user_id):
    return db.execute(
        select(func.count(EnrollmentModel.id)).where(EnrollmentModel.user_id == user_id)
    ).scalar_one()


def test_my_orders_newest_first(client, make_user, make_course, checkout, auth):
    user = make_user()
    first = checkout(user, make_course("A"))
    second = checkout(user, make_course("B"))

    resp = client.get("/orders/me", headers=auth(user))

    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()] == [second["id"], first["id"]]
    assert resp.json()[0]["items"][0]["title"] == "B"


def test_order_of_another_user_is_forbidden(client, make_user, make_course, checkout, auth, admin):
    owner = make_user()
    order = checkout(owner, make_course())

    assert client.get(f"/orders/{order['id']}", headers=auth(make_user("Eve"))).status_code == 403
    assert client.get(f"/orders/{order['id']}", headers=auth(admin)).status_code == 200


def test_missing_order(client, make_user, auth):
    assert client.get("/orders/12345", headers=auth(make_user())).status_code == 404


def test_payment_status(client, make_user, make_course, checkout, auth):
    user = make_user()
    order = checkout(user, make_course(), method="pix")

    body = client.get(f"/orders/{order['id']}/payment-status", headers=auth(user)).json()

    assert body["orderId"] == order["id"]
    assert body["paymentStatus"] == "completed"
    assert body["paymentMethod"] == "pix"


def test_receipt(client, make_user, make_course, checkout, auth):
    user = make_user("Carla")
    order = checkout(user, make_course("Rust", price="80.00", discount_price="20.00"), method="credit_card", coupon="WELCOME10")

    body = client.get(f"/orders/{order['id']}/receipt", headers=auth(user)).json()

    assert body["receiptNumber"] == f"REC-{order['id']:08d}"
    assert body["customer"]["name"] == "Carla"
    assert body["items"] == [
        {"courseId": body["items"][0]["courseId"], "title": "Rust", "price": 80.0, "discountPrice": 20.0, "finalPrice": 60.0}
    ]
    # 80 - 20 markdown - 10% of 60
    assert body["discountAmount"] == 26.0
    assert body["finalAmount"] == 54.0


def test_admin_list_requires_admin(client, make_user, auth):
    assert client.get("/orders", headers=auth(make_user())).status_code == 403


def test_admin_list_filter_and_pagination(client, make_user, make_course, checkout, auth, admin):
    user = make_user()
    checkout(user, make_course("A"), method="pix")
    checkout(user, make_course("B"), method="boleto")
    checkout(user, make_course("C"), method="boleto")

    body = client.get("/orders?status=pending&page=1&limit=1", headers=auth(admin)).json()

    assert body["pagination"] == {"total": 2, "page": 1, "limit": 1, "pages": 2}
    assert len(body["orders"]) == 1
    assert body["orders"][0]["status"] == "pending"


def test_admin_completes_boleto_payment_once(client, db, make_user, make_course, checkout, auth, admin, notifier):
    user = make_user()
    course = make_course()
    order = checkout(user, course, method="boleto")

    url = f"/orders/{order['id']}/status"
    first = client.put(url, json={"paymentStatus": "completed", "status": "completed"}, headers=auth(admin))
    second = client.put(url, json={"paymentStatus": "completed"}, headers=auth(admin))

    assert first.status_code == 200
    assert first.json()["order"] == {"id": order["id"], "status": "completed", "paymentStatus": "completed"}
    assert second.status_code == 200

    db.expire_all()
    assert enrollment_count(db, user.id) == 1
    assert db.get(CourseModel, course.id).sales_count == 1
    assert len(notifier.sent) == 1


def test_completing_immediately_settled_order_again_is_noop(client, db, make_user, make_course, checkout, auth, admin):
    user = make_user()
    course = make_course()
    order = checkout(user, course, method="credit_card")

    resp = client.put(f"/orders/{order['id']}/status", json={"paymentStatus": "completed"}, headers=auth(admin))

    assert resp.status_code == 200
    db.expire_all()
    assert enrollment_count(db, user.id) == 1
    assert db.get(CourseModel, course.id).sales_count == 1


def test_failed_then_completed_grants_access(client, db, make_user, make_course, checkout, auth, admin):
    user = make_user()
    order = checkout(user, make_course(), method="boleto")
    url = f"/orders/{order['id']}/status"

    assert client.put(url, json={"paymentStatus": "failed"}, headers=auth(admin)).status_code == 200
    db.expire_all()
    assert enrollment_count(db, user.id) == 0

    assert client.put(url, json={"paymentStatus": "completed"}, headers=auth(admin)).status_code == 200
    db.expire_all()
    assert enrollment_count(db, user.id) == 1


def test_status_change_alone_grants_nothing(client, db, make_user, make_course, checkout, auth, admin):
    user = make_user()
    order = checkout(user, make_course(), method="boleto")

    resp = client.put(f"/orders/{order['id']}/status", json={"status": "processing"}, headers=auth(admin))

    assert resp.json()["order"]["status"] == "processing"
    assert enrollment_count(db, user.id) == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"status": "pending"},
        {"paymentStatus": "pending"},
        {"paymentStatus": "failed"},
    ],
)
def test_invalid_transitions_rejected(client, make_user, make_course, checkout, auth, admin, payload):
    order = checkout(make_user(), make_course(), method="credit_card")

    resp = client.put(f"/orders/{order['id']}/status", json=payload, headers=auth(admin))

    assert resp.status_code == 400


def test_rejected_transition_changes_nothing(client, make_user, make_course, checkout, auth, admin):
    order = checkout(make_user(), make_course(), method="boleto")
    url = f"/orders/{order['id']}/status"

    resp = client.put(url, json={"status": "processing", "paymentStatus": "refunded"}, headers=auth(admin))

    assert resp.status_code == 400
    body = client.get(f"/orders/{order['id']}", headers=auth(admin)).json()
    assert body["status"] == "pending"


def test_refund_after_completion(client, make_user, make_course, checkout, auth, admin):
    order = checkout(make_user(), make_course(), method="pix")

    resp = client.put(f"/orders/{order['id']}/status", json={"paymentStatus": "refunded"}, headers=auth(admin))

    assert resp.json()["order"]["paymentStatus"] == "refunded"


def test_status_update_requires_admin(client, make_user, make_course, checkout, auth):
    user = make_user()
    order = checkout(user, make_course(), method="boleto")

    resp = client.put(f"/orders/{order['id']}/status", json={"paymentStatus": "completed"}, headers=auth(user))

    assert resp.status_code == 403


def test_unknown_status_value_is_422(client, make_user, make_course, checkout, auth, admin):
    order = checkout(make_user(), make_course(), method="boleto")

    resp = client.put(f"/orders/{order['id']}/status", json={"status": "shipped"}, headers=auth(admin))

    assert resp.status_code == 422


class BrokenNotifier:
    def send_enrollment_notification(self, user_id, order_id, course_titles):
        raise ConnectionError("broker unreachable")


def test_status_update_succeeds_when_notification_cannot_be_queued(client, app, db, make_user, make_course, checkout, auth, admin):
    user = make_user()
    order = checkout(user, make_course(), method="boleto")
    app.dependency_overrides[get_notification_service] = lambda: BrokenNotifier()

    resp = client.put(f"/orders/{order['id']}/status", json={"paymentStatus": "completed"}, headers=auth(admin))

    assert resp.status_code == 200
    assert resp.json()["order"]["paymentStatus"] == "completed"
    db.expire_all()
    assert enrollment_count(db, user.id) == 1
