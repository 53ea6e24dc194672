import re

from gradeflow.core.errors import NotFound, ValidationFailed
from gradeflow.models.user import Student
from gradeflow.repositories.students import StudentDirectory

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)

ID_EXTRACT_FAILED = "Could not extract student ID from filename"


def extract_external_id(filename: str) -> str | None:
    """``abc123.PDF`` -> ``abc123``; ``None`` when nothing is left."""
    name = _PDF_SUFFIX.sub("", filename or "", count=1)
    return name or None


def resolve_student(directory: StudentDirectory, filename: str) -> tuple[str, Student]:
    external_id = extract_external_id(filename)
    if external_id is None:
        raise ValidationFailed(ID_EXTRACT_FAILED)

    student = directory.find_by_external_id(external_id)
    if student is None:
        raise NotFound(f"Student {external_id} not found")

    return external_id, student
