import os
import pytest
import mongomock

os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

# Route every pymongo.MongoClient to an in-memory server before the app imports it
_mongo_patch = mongomock.patch(servers=(("localhost", 27017),))
_mongo_patch.start()

from fastapi.testclient import TestClient

from classconnect.core.config import db
from classconnect.core import security
from classconnect.main import app
from classconnect.services import course_service


@pytest.fixture(autouse=True)
def clean_state():
    """Empty every collection and cache around each test."""
    for name in db.list_collection_names():
        db.drop_collection(name)
    course_service.course_cache.clear()
    course_service.saved_courses_cache.clear()
    yield
    course_service.course_cache.clear()
    course_service.saved_courses_cache.clear()


@pytest.fixture
def client():
    """FastAPI test client (runs startup tasks)."""
    with TestClient(app) as c:
        yield c


def make_user(username="jsmith", email="john.smith@example.edu", first_name="John", last_name="Smith"):
    doc = {
        "username": username,
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
        "graduation_year": "2026",
        "profile_picture": None,
        "hashed_password": security.get_password_hash("Testpassword123!"),
        "is_active": True,
        "saved_courses": [],
        "courses_tutored": [],
        "reviews": [],
    }
    doc["_id"] = db["users"].insert_one(doc).inserted_id
    return doc


def auth_headers(user: dict) -> dict:
    token = security.create_access_token({"sub": user["username"], "user_id": str(user["_id"])})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def courses():
    """Two courses matching the saved-courses page fixtures, plus a third."""
    docs = [
        {"code": "CS 2201", "name": "Program Design and Data Structures", "average_rating": 4.5,
         "professors": [], "reviews": [], "tutors": []},
        {"code": "MATH 2410", "name": "Methods of Linear Algebra", "average_rating": 4.0,
         "professors": [], "reviews": [], "tutors": []},
        {"code": "CS 3251", "name": "Intermediate Software Design", "average_rating": 3.2,
         "professors": [], "reviews": [], "tutors": []},
    ]
    for d in docs:
        d["_id"] = db["courses"].insert_one(d).inserted_id
    return {d["code"]: d for d in docs}


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def headers_for():
    return auth_headers
