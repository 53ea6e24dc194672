import pytest

from gradeflow.core.errors import NotFound, ValidationFailed
from gradeflow.repositories.students import StudentDirectory
from gradeflow.services.identity import extract_external_id, resolve_student


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("abc123.pdf", "abc123"),
        ("abc123.PDF", "abc123"),
        ("abc123", "abc123"),
        ("abc.pdf.pdf", "abc.pdf"),
        ("notes.txt", "notes.txt"),
        (".pdf", None),
        ("", None),
    ],
)
def test_extract_external_id(filename, expected):
    assert extract_external_id(filename) == expected


def test_resolve_student_by_user_reference(db):
    external_id, student = resolve_student(StudentDirectory(db), "stu3.pdf")
    assert external_id == "stu3"
    assert student.id == "S-stu3"


def test_resolve_student_errors(db):
    directory = StudentDirectory(db)

    with pytest.raises(ValidationFailed):
        resolve_student(directory, ".pdf")

    with pytest.raises(NotFound) as exc:
        resolve_student(directory, "ghost.pdf")
    assert exc.value.message == "Student ghost not found"

    # instructors are not students
    with pytest.raises(NotFound):
        resolve_student(directory, "inst1.pdf")
