import os

TEST_DB_FILE = "test_gradeflow.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# the app's own engine (used by the startup hook) must point at the test file too
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["BLOB_BACKEND"] = "memory"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from gradeflow.core.deps import get_blob_store, get_db  # noqa: E402
from gradeflow.core.security import create_access_token  # noqa: E402
from gradeflow.db.base import Base  # noqa: E402
from gradeflow.db.session import make_engine  # noqa: E402
from gradeflow.main import app  # noqa: E402
from gradeflow.models.course import Course  # noqa: E402
from gradeflow.models.exam import Exam, ExamType  # noqa: E402
from gradeflow.models.grievance import Grievance  # noqa: E402
from gradeflow.models.submission import Submission  # noqa: E402
from gradeflow.models.user import Instructor, Role, Student, User  # noqa: E402
from gradeflow.storage import InMemoryBlobStore  # noqa: E402

engine = make_engine(TEST_DB_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

STUDENT_IDS = ["abc123", "stu2", "stu3", "stu4", "stu5"]


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def token_for(user_id: str, role: Role) -> str:
    return create_access_token({"sub": user_id, "role": role.value})


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed a clean minimal dataset for each test."""
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(Grievance).delete()
        db.query(Submission).delete()
        db.query(Exam).delete()
        db.query(Course).delete()
        db.query(Student).delete()
        db.query(Instructor).delete()
        db.query(User).delete()
        db.commit()

        # Users: the user id doubles as the filename identity
        db.add_all(
            [
                User(id="inst1", email="instructor1@example.com", name="Instructor One", role=Role.INSTRUCTOR),
                User(id="inst2", email="instructor2@example.com", name="Instructor Two", role=Role.INSTRUCTOR),
            ]
            + [
                User(id=uid, email=f"{uid}@example.com", name=f"Student {uid}", role=Role.STUDENT)
                for uid in STUDENT_IDS
            ]
        )
        db.commit()

        db.add_all(
            [
                Instructor(id="I1", user_id="inst1"),
                Instructor(id="I2", user_id="inst2"),
            ]
            + [Student(id=f"S-{uid}", user_id=uid) for uid in STUDENT_IDS]
        )
        db.commit()

        db.add(Course(id="C1", course_code="CS101", course_name="Intro to CS", instructor_id="I1"))
        db.commit()

        db.add_all(
            [
                Exam(id="E", instructor_id="I1", course_id="C1", title="Midterm", exam_type=ExamType.MIXED),
                Exam(id="E2", instructor_id="I2", title="Other Midterm", exam_type=ExamType.MCQ),
                Exam(id="E3", instructor_id="I1", title="Closed Quiz", exam_type=ExamType.MCQ, is_active=False),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture()
def client(blob_store):
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def instructor_headers():
    return auth_header(token_for("inst1", Role.INSTRUCTOR))


@pytest.fixture()
def other_instructor_headers():
    return auth_header(token_for("inst2", Role.INSTRUCTOR))


@pytest.fixture()
def student_headers():
    return auth_header(token_for("abc123", Role.STUDENT))


@pytest.fixture()
def other_student_headers():
    return auth_header(token_for("stu2", Role.STUDENT))
