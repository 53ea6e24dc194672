import pytest

from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import Forbidden, NotFound, ValidationFailed
from gradeflow.models.submission import Submission, SubmissionStatus
from gradeflow.models.user import Role
from gradeflow.services.submissions import grade_submission

INSTRUCTOR = AuthContext(user_id="inst1", role=Role.INSTRUCTOR)


@pytest.fixture()
def submission_id(db):
    s = Submission(student_id="S-abc123", exam_id="E", file_link="memory://sheet")
    db.add(s)
    db.commit()
    return s.id


def test_grade_sets_status_marks_and_timestamp(client, instructor_headers, submission_id, db):
    r = client.patch(
        f"/submissions/{submission_id}/grade",
        headers=instructor_headers,
        json={"marks": 85, "feedback": "Good"},
    )
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["status"] == "GRADED"
    assert body["marks"] == 85
    assert body["feedback"] == "Good"
    assert body["graded_at"] is not None

    db.expire_all()
    row = db.get(Submission, submission_id)
    assert row.status == SubmissionStatus.GRADED
    assert row.marks == 85
    assert row.graded_at is not None


def test_regrade_overwrites_previous_grade(client, instructor_headers, submission_id):
    client.patch(
        f"/submissions/{submission_id}/grade",
        headers=instructor_headers,
        json={"marks": 40, "feedback": "Weak", "match_percentage": 55.5},
    )
    r = client.patch(
        f"/submissions/{submission_id}/grade",
        headers=instructor_headers,
        json={"marks": 72},
    )
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["status"] == "GRADED"
    assert body["marks"] == 72
    assert body["feedback"] is None
    assert body["match_percentage"] is None


@pytest.mark.parametrize(
    "payload",
    [
        {"marks": -1},
        {"marks": 10, "match_percentage": 101},
        {"feedback": "no marks"},
    ],
)
def test_invalid_grades_are_rejected(client, instructor_headers, submission_id, payload):
    r = client.patch(f"/submissions/{submission_id}/grade", headers=instructor_headers, json=payload)
    assert r.status_code == 400, r.text
    assert r.json()["kind"] == "VALIDATION_FAILED"


def test_other_instructor_cannot_grade(client, other_instructor_headers, submission_id):
    r = client.patch(
        f"/submissions/{submission_id}/grade",
        headers=other_instructor_headers,
        json={"marks": 50},
    )
    assert r.status_code == 403
    assert r.json()["kind"] == "FORBIDDEN"


def test_unknown_submission_is_not_found(client, instructor_headers):
    r = client.patch("/submissions/nope/grade", headers=instructor_headers, json={"marks": 50})
    assert r.status_code == 404
    assert r.json()["kind"] == "NOT_FOUND"


def test_service_validates_marks_without_the_http_layer(db, submission_id):
    with pytest.raises(ValidationFailed):
        grade_submission(db, INSTRUCTOR, submission_id, marks=-5)
    with pytest.raises(ValidationFailed):
        grade_submission(db, INSTRUCTOR, submission_id, marks=5, match_percentage=-1)
    with pytest.raises(NotFound):
        grade_submission(db, INSTRUCTOR, "missing", marks=5)

    student = AuthContext(user_id="abc123", role=Role.STUDENT)
    with pytest.raises(Forbidden):
        grade_submission(db, student, submission_id, marks=5)


def test_exam_results_list_graded_rows(client, instructor_headers, submission_id):
    client.patch(
        f"/submissions/{submission_id}/grade",
        headers=instructor_headers,
        json={"marks": 91, "feedback": "Great"},
    )

    r = client.get("/exams/E/results", headers=instructor_headers)
    assert r.status_code == 200, r.text

    body = r.json()
    assert body["exam"]["course_code"] == "CS101"
    assert len(body["submissions"]) == 1
    row = body["submissions"][0]
    assert row["student_email"] == "abc123@example.com"
    assert row["marks"] == 91
    assert row["status"] == "GRADED"
