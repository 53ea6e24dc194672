import pytest

from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import ValidationFailed
from gradeflow.models.exam import Exam
from gradeflow.models.grievance import Grievance, GrievanceType
from gradeflow.models.submission import Submission
from gradeflow.models.user import Role
from gradeflow.services.exams import update_exam

PDF = b"%PDF-1.4 model answer"


def test_create_and_list_exams(client, instructor_headers):
    r = client.post(
        "/exams",
        headers=instructor_headers,
        json={
            "title": "Final",
            "description": "End of term",
            "exam_type": "SHORT_ANSWER",
            "rubric": "2 marks per answer",
            "course_id": "C1",
        },
    )
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["instructor_id"] == "I1"
    assert created["is_active"] is True

    rows = client.get("/exams", headers=instructor_headers).json()
    assert {e["id"] for e in rows} == {"E", "E3", created["id"]}
    assert all(e["total_submissions"] == 0 for e in rows)


def test_create_exam_validates_input(client, instructor_headers):
    r = client.post("/exams", headers=instructor_headers, json={"title": "", "exam_type": "MCQ"})
    assert r.status_code == 400

    r = client.post("/exams", headers=instructor_headers, json={"title": "X", "exam_type": "ESSAY"})
    assert r.status_code == 400

    r = client.post(
        "/exams",
        headers=instructor_headers,
        json={"title": "X", "exam_type": "MCQ", "course_id": "nope"},
    )
    assert r.status_code == 404


def test_partial_update_keeps_other_fields(client, instructor_headers):
    r = client.patch("/exams/E", headers=instructor_headers, json={"rubric": "new rubric"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["rubric"] == "new rubric"
    assert body["title"] == "Midterm"
    assert body["course_id"] == "C1"


@pytest.mark.parametrize("field", ["title", "exam_type", "is_active"])
def test_required_fields_cannot_be_cleared(client, instructor_headers, field):
    r = client.patch("/exams/E", headers=instructor_headers, json={field: None})
    assert r.status_code == 400, r.text
    assert r.json()["kind"] == "VALIDATION_FAILED"

    body = client.get("/exams/E", headers=instructor_headers).json()
    assert body["title"] == "Midterm"
    assert body["exam_type"] == "MIXED"
    assert body["is_active"] is True


def test_update_service_rejects_null_required_field(db):
    with pytest.raises(ValidationFailed):
        update_exam(db, AuthContext(user_id="inst1", role=Role.INSTRUCTOR), "E", {"title": None})

    db.expire_all()
    assert db.get(Exam, "E").title == "Midterm"


def test_only_owner_reads_updates_or_deletes(client, other_instructor_headers, student_headers):
    assert client.get("/exams/E", headers=other_instructor_headers).status_code == 403
    assert client.patch("/exams/E", headers=other_instructor_headers, json={"title": "x"}).status_code == 403
    assert client.delete("/exams/E", headers=other_instructor_headers).status_code == 403
    assert client.get("/exams/E", headers=student_headers).status_code == 403
    assert client.get("/exams/nope", headers=other_instructor_headers).status_code == 404


def test_delete_cascades_submissions_and_grievances(client, instructor_headers, db):
    s = Submission(student_id="S-abc123", exam_id="E", original_answers={"answer": "x"})
    db.add(s)
    db.commit()
    db.add(
        Grievance(
            submission_id=s.id,
            student_id="S-abc123",
            exam_id="E",
            grievance_type=GrievanceType.OTHER,
            description="x" * 60,
        )
    )
    db.commit()

    r = client.delete("/exams/E", headers=instructor_headers)
    assert r.status_code == 204

    db.expire_all()
    assert db.query(Submission).count() == 0
    assert db.query(Grievance).count() == 0


def test_model_answer_upload(client, instructor_headers, blob_store):
    r = client.post(
        "/exams/E/model-answer",
        headers=instructor_headers,
        files={"file": ("key.pdf", PDF, "application/pdf")},
    )
    assert r.status_code == 200, r.text
    assert r.json()["model_answer"] == "memory://model-answers/E/model-answer.pdf"
    assert blob_store.get("model-answers/E/model-answer.pdf") == PDF

    r = client.post(
        "/exams/E/model-answer",
        headers=instructor_headers,
        files={"file": ("key.docx", b"doc", "application/msword")},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Only PDF files are allowed"


def test_courses_for_instructor(client, instructor_headers, other_instructor_headers):
    rows = client.get("/courses", headers=instructor_headers).json()
    assert [c["course_code"] for c in rows] == ["CS101"]
    assert client.get("/courses", headers=other_instructor_headers).json() == []


def test_me_and_health(client, student_headers):
    assert client.get("/health").json() == {"status": "ok"}

    me = client.get("/auth/me", headers=student_headers).json()
    assert me["id"] == "abc123"
    assert me["role"] == "student"
