from pymongo.errors import PyMongoError

from classconnect.core.config import db
from classconnect.routers import courses as courses_router
from classconnect.routers import reviews as reviews_router


def _review_payload(**overrides):
    payload = {
        "rating": 4.0,
        "comment": "Great course, the projects were worth it.",
        "professor_first_name": "Ada",
        "professor_last_name": "Lovelace",
    }
    payload.update(overrides)
    return payload


def _backend_down(*args, **kwargs):
    raise PyMongoError("connection refused")


class _UnavailableCollection:
    insert_one = staticmethod(_backend_down)


class TestAddReview:
    """Test POST /courses/{id}/reviews."""

    def test_requires_login(self, client, courses):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload())
        assert response.status_code == 401

    def test_creates_review_and_updates_course(self, client, courses, user, headers):
        course = courses["MATH 2410"]
        course_id = str(course["_id"])
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload(rating=4.5), headers=headers)
        assert response.status_code == 201
        created = response.json()
        assert created["rating"] == 4.5
        assert created["author"]["first_name"] == "John"
        assert [p["last_name"] for p in created["professors"]] == ["Lovelace"]

        stored = db["courses"].find_one({"_id": course["_id"]})
        assert stored["reviews"] == [created["id"]]
        assert stored["average_rating"] == 4.5
        assert len(stored["professors"]) == 1
        assert db["users"].find_one({"_id": user["_id"]})["reviews"] == [created["id"]]

    def test_average_is_mean_of_all_reviews(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        client.post(f"/courses/{course_id}/reviews", json=_review_payload(rating=4.5), headers=headers)
        client.post(f"/courses/{course_id}/reviews", json=_review_payload(rating=4.0), headers=headers)

        stored = db["courses"].find_one({"_id": courses["CS 2201"]["_id"]})
        assert stored["average_rating"] == 4.25
        # The same professor is reused, not duplicated
        assert len(stored["professors"]) == 1
        assert db["professors"].count_documents({}) == 1

        data = client.get("/courses/CS 2201").json()
        assert data["average_rating"] == 4.25
        assert data["num_reviews"] == 2

    def test_anonymous_review(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(
            f"/courses/{course_id}/reviews", json=_review_payload(anonymous=True), headers=headers
        )
        assert response.status_code == 201
        assert response.json()["author"] is None

    def test_syllabus_is_attached_to_course(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        client.post(
            f"/courses/{course_id}/reviews", json=_review_payload(syllabus="cs2201.pdf"), headers=headers
        )
        assert db["courses"].find_one({"_id": courses["CS 2201"]["_id"]})["syllabus"] == "cs2201.pdf"

    def test_without_professor(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(
            f"/courses/{course_id}/reviews",
            json=_review_payload(professor_first_name="", professor_last_name=""),
            headers=headers,
        )
        assert response.status_code == 201
        assert response.json()["professors"] == []
        assert db["professors"].count_documents({}) == 0

    def test_rejects_missing_rating(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload(rating=0), headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Please provide a valid rating."

    def test_rejects_rating_above_five(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload(rating=6), headers=headers)
        assert response.status_code == 422

    def test_rejects_blank_comment(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload(comment="   "), headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Please provide a comment."

    def test_rejects_long_comment(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        response = client.post(
            f"/courses/{course_id}/reviews", json=_review_payload(comment="word " * 401), headers=headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Your comment exceeds the maximum word limit of 400 words."
        assert db["reviews"].count_documents({}) == 0

    def test_unknown_course(self, client, headers):
        response = client.post("/courses/000000000000000000000000/reviews", json=_review_payload(), headers=headers)
        assert response.status_code == 404

    def test_backend_error(self, client, courses, headers, monkeypatch):
        course_id = str(courses["CS 2201"]["_id"])
        monkeypatch.setattr(courses_router, "_find_or_create_professor", _backend_down)
        response = client.post(f"/courses/{course_id}/reviews", json=_review_payload(), headers=headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Error saving review."
        assert db["reviews"].count_documents({}) == 0


class TestReportReview:
    """Test POST /reviews/{id}/report."""

    def _create_review(self, client, courses, headers):
        course_id = str(courses["CS 2201"]["_id"])
        return client.post(f"/courses/{course_id}/reviews", json=_review_payload(), headers=headers).json()["id"]

    def test_requires_login(self, client, courses, headers):
        review_id = self._create_review(client, courses, headers)
        response = client.post(f"/reviews/{review_id}/report")
        assert response.status_code == 401
        assert response.json()["detail"] == "You must be logged in to report a review."

    def test_report(self, client, courses, user, headers, user_factory, headers_for):
        review_id = self._create_review(client, courses, headers)
        reporter = user_factory(username="mjones", email="mary.jones@example.edu", first_name="Mary", last_name="Jones")

        response = client.post(f"/reviews/{review_id}/report", headers=headers_for(reporter))
        assert response.status_code == 201
        assert response.json()["message"] == "Review has been reported and will be reviewed further."

        report = db["review_reports"].find_one({"review": review_id})
        assert report["reporter"] == str(reporter["_id"])
        assert report["review_creator"] == str(user["_id"])

    def test_unknown_review(self, client, headers):
        response = client.post("/reviews/000000000000000000000000/report", headers=headers)
        assert response.status_code == 404

    def test_backend_error(self, client, courses, headers, monkeypatch):
        review_id = self._create_review(client, courses, headers)
        monkeypatch.setattr(
            reviews_router, "db", {"reviews": db["reviews"], "review_reports": _UnavailableCollection()}
        )
        response = client.post(f"/reviews/{review_id}/report", headers=headers)
        assert response.status_code == 500
        assert response.json()["detail"] == "Error reporting review."
