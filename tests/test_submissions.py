from gradeflow.models.submission import Submission


def test_student_submits_answer(client, student_headers, db):
    r = client.post(
        "/submissions",
        headers=student_headers,
        json={"exam_id": "E", "original_answer": "first"},
    )
    assert r.status_code == 201, r.text

    body = r.json()
    assert body["status"] == "PENDING"
    assert body["student_id"] == "S-abc123"
    assert body["original_answers"] == {"answer": "first"}
    assert body["marks"] is None
    assert body["graded_at"] is None


def test_second_self_submission_is_conflict(client, student_headers, db):
    r1 = client.post(
        "/submissions",
        headers=student_headers,
        json={"exam_id": "E", "original_answer": "first"},
    )
    assert r1.status_code == 201, r1.text

    r2 = client.post(
        "/submissions",
        headers=student_headers,
        json={"exam_id": "E", "original_answer": "second"},
    )
    assert r2.status_code == 409, r2.text
    assert r2.json()["kind"] == "CONFLICT"

    rows = db.query(Submission).filter(Submission.exam_id == "E").all()
    assert len(rows) == 1
    assert rows[0].original_answers == {"answer": "first"}


def test_inactive_or_unknown_exam_is_not_found(client, student_headers):
    for exam_id in ("E3", "nope"):
        r = client.post(
            "/submissions",
            headers=student_headers,
            json={"exam_id": exam_id, "original_answer": "text"},
        )
        assert r.status_code == 404, r.text
        assert r.json()["kind"] == "NOT_FOUND"


def test_empty_answer_is_validation_failure(client, student_headers):
    r = client.post(
        "/submissions",
        headers=student_headers,
        json={"exam_id": "E", "original_answer": ""},
    )
    assert r.status_code == 400
    assert r.json()["kind"] == "VALIDATION_FAILED"


def test_instructor_cannot_self_submit(client, instructor_headers):
    r = client.post(
        "/submissions",
        headers=instructor_headers,
        json={"exam_id": "E", "original_answer": "text"},
    )
    assert r.status_code == 403
    assert r.json()["kind"] == "FORBIDDEN"


def test_missing_or_bad_token_is_unauthorized(client):
    r = client.post("/submissions", json={"exam_id": "E", "original_answer": "text"})
    assert r.status_code == 401
    assert r.json()["kind"] == "UNAUTHORIZED"

    r = client.post(
        "/submissions",
        headers={"Authorization": "Bearer not-a-token"},
        json={"exam_id": "E", "original_answer": "text"},
    )
    assert r.status_code == 401
    assert r.json()["kind"] == "UNAUTHORIZED"


def test_student_results_and_available_exams(client, student_headers):
    client.post(
        "/submissions",
        headers=student_headers,
        json={"exam_id": "E", "original_answer": "text"},
    )

    results = client.get("/student/results", headers=student_headers).json()
    assert [r["exam_id"] for r in results] == ["E"]
    assert results[0]["exam_title"] == "Midterm"
    assert results[0]["status"] == "PENDING"

    one = client.get("/student/results/E", headers=student_headers)
    assert one.status_code == 200
    assert client.get("/student/results/E2", headers=student_headers).status_code == 404

    exams = {e["id"]: e for e in client.get("/student/exams", headers=student_headers).json()}
    assert set(exams) == {"E", "E2"}
    assert exams["E"]["has_submitted"] is True
    assert exams["E"]["submission_status"] == "PENDING"
    assert exams["E2"]["has_submitted"] is False
