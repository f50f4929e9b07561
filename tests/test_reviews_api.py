import pytest

from educk.data.models import EnrollmentModel


@pytest.fixture
def enroll(db):
    def run(user, course):
        db.add(EnrollmentModel(user_id=user.id, course_id=course.id))
        db.commit()

    return run


@pytest.fixture
def review(client, auth):
    def post(user, course, rating, comment=""):
        return client.post(
            "/reviews",
            json={"courseId": course.id, "rating": rating, "comment": comment},
            headers=auth(user),
        )

    return post


def test_enrolled_user_reviews_course(client, make_user, make_course, enroll, review):
    user = make_user("Bia")
    course = make_course()
    enroll(user, course)

    resp = review(user, course, 5, "Great")

    assert resp.status_code == 201
    body = resp.json()["review"]
    assert body["rating"] == 5
    assert body["user"] == {"id": user.id, "name": "Bia"}
    assert body["courseTitle"] == course.title

    detail = client.get(f"/courses/{course.id}").json()
    assert detail["averageRating"] == 5.0
    assert detail["totalReviews"] == 1


def test_review_requires_enrollment(make_user, make_course, review):
    resp = review(make_user(), make_course(), 4)

    assert resp.status_code == 403


def test_review_twice_rejected(make_user, make_course, enroll, review):
    user = make_user()
    course = make_course()
    enroll(user, course)
    review(user, course, 4)

    resp = review(user, course, 2)

    assert resp.status_code == 400


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range(make_user, make_course, enroll, review, rating):
    user = make_user()
    course = make_course()
    enroll(user, course)

    assert review(user, course, rating).status_code == 422


def test_review_unknown_course(client, make_user, auth):
    resp = client.post("/reviews", json={"courseId": 999, "rating": 3}, headers=auth(make_user()))

    assert resp.status_code == 404


def test_course_reviews_average_and_pagination(client, make_user, make_course, enroll, review):
    course = make_course()
    for name, rating in [("A", 4), ("B", 5), ("C", 3)]:
        user = make_user(name)
        enroll(user, course)
        review(user, course, rating)

    body = client.get(f"/reviews/course/{course.id}?page=1&limit=2").json()

    assert body["averageRating"] == 4.0
    assert body["totalReviews"] == 3
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}
    assert len(body["reviews"]) == 2


def test_reviews_of_missing_course(client):
    assert client.get("/reviews/course/999").status_code == 404


def test_only_author_or_admin_edits(client, auth, make_user, make_course, enroll, review):
    author = make_user("Ana")
    course = make_course()
    enroll(author, course)
    review_id = review(author, course, 2).json()["review"]["id"]

    other = client.put(f"/reviews/{review_id}", json={"rating": 1}, headers=auth(make_user("Eve")))
    mine = client.put(f"/reviews/{review_id}", json={"rating": 4, "comment": "Better now"}, headers=auth(author))

    assert other.status_code == 403
    assert mine.status_code == 200
    assert mine.json()["review"]["rating"] == 4
    assert client.get(f"/courses/{course.id}").json()["averageRating"] == 4.0

    admin = make_user("Root", role="admin")
    assert client.delete(f"/reviews/{review_id}", headers=auth(admin)).status_code == 200
    assert client.get(f"/courses/{course.id}").json()["totalReviews"] == 0
    assert client.delete(f"/reviews/{review_id}", headers=auth(admin)).status_code == 404


def test_admin_lists_all_reviews(client, auth, make_user, make_course, enroll, review):
    user = make_user()
    for title in ("One", "Two"):
        course = make_course(title)
        enroll(user, course)
        review(user, course, 5)

    assert client.get("/reviews", headers=auth(user)).status_code == 403

    body = client.get("/reviews", headers=auth(make_user("Root", role="admin"))).json()
    assert body["pagination"]["total"] == 2
    assert sorted(r["courseTitle"] for r in body["reviews"]) == ["One", "Two"]
