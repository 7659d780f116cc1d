"""
Fixtures compartidos: cada test corre contra una base mongomock y un
fakeredis nuevos, con los índices únicos creados.
"""
import fakeredis
import mongomock
import pytest
from fastapi.testclient import TestClient

from src.config.database import ensure_indexes, set_mongo_db, set_redis_client
from src.repositories.mongo_repository import MongoRepository

from main import app

DEFAULT_PASSWORD = "Passw0rd"


@pytest.fixture(autouse=True)
def stores():
    db = mongomock.MongoClient()["coursehub_test"]
    r = fakeredis.FakeRedis(decode_responses=True)
    set_mongo_db(db)
    set_redis_client(r)
    ensure_indexes(db)
    yield db, r
    set_mongo_db(None)
    set_redis_client(None)


@pytest.fixture
def db(stores):
    return stores[0]


@pytest.fixture
def client():
    # sin "with": el lifespan intentaría conectarse a Mongo/Redis reales
    return TestClient(app)


# ==================================
# Helpers
# ==================================
def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email, password=DEFAULT_PASSWORD, full_name="Test Student"):
    res = client.post(
        "/api/v1/auth/register",
        json={"fullName": full_name, "email": email, "phone": "15551234567", "password": password},
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


def login(client, email, password=DEFAULT_PASSWORD):
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


def make_admin(client, email="admin@example.com"):
    user = register(client, email, full_name="Site Admin")
    MongoRepository("users").update(user["_id"], {"role": "admin"})
    return user, login(client, email)


def make_student(client, email="student@example.com"):
    user = register(client, email)
    return user, login(client, email)


def course_payload(title="Python for Data Analysis", price=49.99, lessons=2, **extra):
    payload = {
        "title": title,
        "category": "Programming",
        "experienceLevel": "Beginner",
        "shortDescription": "Learn Python from scratch",
        "longDescription": "A complete introduction to Python for analysts and engineers.",
        "price": price,
        "instructor": "Ada Lovelace",
        "courseCurriculum": [
            {
                "module": "Basics",
                "lessons": [
                    {"lessonTitle": f"Lesson {i}", "lessonContent": "Content", "duration": "10 mins"}
                    for i in range(1, lessons + 1)
                ],
            }
        ],
    }
    payload.update(extra)
    return payload


def create_course(client, admin_token, **kwargs):
    res = client.post("/api/v1/courses", json=course_payload(**kwargs), headers=auth(admin_token))
    assert res.status_code == 201, res.text
    return res.json()["data"]


@pytest.fixture
def admin(client):
    return make_admin(client)


@pytest.fixture
def student(client):
    return make_student(client)


@pytest.fixture
def course(client, admin):
    return create_course(client, admin[1])
