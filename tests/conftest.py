import sys
import os
import tempfile
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="learnhub-uploads-")

import uuid
import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

import main
from learnhub.core.constants import RoleEnum, LessonTypeEnum
from learnhub.core.database import Base, build_engine, get_db
from learnhub.crud.user import user as crud_user
from learnhub.crud.course import course as crud_course
from learnhub.crud.lesson import lesson as crud_lesson
from learnhub.crud.enrollment import enrollment as crud_enrollment
from learnhub.models import registry  # noqa: F401
from learnhub.schemas.user import UserCreate

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="session")
def database_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(database_engine):
    Base.metadata.create_all(bind=database_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=database_engine)


@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, email: str = None, name: str = None, password: str = TEST_PASSWORD):
        user_in = UserCreate(
            name=name or f"Test {role.value.title()}",
            email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@test.com",
            password=password,
            role=role,
        )
        user = crud_user.create_with_password(db_session, obj_in=user_in)
        db_session.commit()
        return user
    return _user_factory


@pytest.fixture
def login(client):
    def _login(user, password: str = TEST_PASSWORD) -> dict:
        response = client.post("/api/auth/login", json={"email": user.email, "password": password})
        body = response.json()
        token = body.get("data", {}).get("token", {}).get("accessToken")
        assert token, f"Login failed or token missing: {body}"
        return {"Authorization": f"Bearer {token}"}
    return _login


@pytest.fixture
def token_for_role(user_factory, login):
    """Create a fresh user of the role and return ``(user, headers)``."""
    def _create_token_for_role(role_name: str):
        user = user_factory(role=getattr(RoleEnum, role_name.upper()))
        return user, login(user)
    return _create_token_for_role


@pytest.fixture
def course_factory(db_session):
    def _course_factory(teacher, title: str = "Intro Course", category: str = "General", is_published: bool = True, lessons: int = 0):
        course = crud_course.create(db_session, obj_in={
            "title": title,
            "category": category,
            "description": f"{title} description",
            "is_published": is_published,
            "teacher_id": teacher.id,
        })
        for i in range(lessons):
            crud_lesson.create(db_session, obj_in={
                "course_id": course.id,
                "title": f"Lesson {i + 1}",
                "lesson_type": LessonTypeEnum.TEXT,
                "content": f"Content {i + 1}",
                "order": i + 1,
            })
        db_session.commit()
        db_session.refresh(course)
        return course
    return _course_factory


@pytest.fixture
def enroll(db_session):
    def _enroll(user, course):
        enrollment, _ = crud_enrollment.create_if_absent(db_session, user_id=user.id, course_id=course.id)
        db_session.commit()
        return enrollment
    return _enroll
