import logging

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from gradeflow.core import config
from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import NotFound, ValidationFailed
from gradeflow.models.course import Course
from gradeflow.models.exam import Exam
from gradeflow.models.submission import Submission, SubmissionStatus
from gradeflow.repositories.submissions import SubmissionStore
from gradeflow.services.access import get_instructor, get_owned_exam, get_student
from gradeflow.services.uploads import IncomingFile, validate_pdf
from gradeflow.storage.base import BlobStore, model_answer_key

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("title", "description", "exam_type", "deadline", "model_answer", "rubric", "course_id", "is_active")
_REQUIRED_FIELDS = ("title", "exam_type", "is_active")


def _ensure_course_exists(db: Session, course_id: str | None) -> None:
    if course_id is not None and db.get(Course, course_id) is None:
        raise NotFound("Course not found")


def create_exam(db: Session, caller: AuthContext, data: dict) -> Exam:
    instructor = get_instructor(db, caller)
    _ensure_course_exists(db, data.get("course_id"))

    exam = Exam(instructor_id=instructor.id, **{k: v for k, v in data.items() if k in _EDITABLE_FIELDS})
    db.add(exam)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(exam)
    logger.info("Exam %s created by instructor %s", exam.id, instructor.id)
    return exam


def list_exams(db: Session, caller: AuthContext) -> list[dict]:
    instructor = get_instructor(db, caller)
    rows = (
        db.query(
            Exam,
            func.count(Submission.id).label("total_submissions"),
            func.sum(case((Submission.status == SubmissionStatus.GRADED, 1), else_=0)).label("graded_submissions"),
        )
        .outerjoin(Submission, Submission.exam_id == Exam.id)
        .filter(Exam.instructor_id == instructor.id)
        .group_by(Exam.id)
        .order_by(Exam.created_at.desc(), Exam.id.asc())
        .all()
    )
    return [
        {
            "exam": exam,
            "total_submissions": int(total or 0),
            "graded_submissions": int(graded or 0),
        }
        for exam, total, graded in rows
    ]


def get_exam(db: Session, caller: AuthContext, exam_id: str) -> Exam:
    instructor = get_instructor(db, caller)
    return get_owned_exam(db, exam_id, instructor)


def update_exam(db: Session, caller: AuthContext, exam_id: str, changes: dict) -> Exam:
    """Apply only the fields present in ``changes``."""
    exam = get_exam(db, caller, exam_id)
    for name in _REQUIRED_FIELDS:
        if name in changes and changes[name] is None:
            raise ValidationFailed(f"{name} cannot be null")

    if "course_id" in changes:
        _ensure_course_exists(db, changes["course_id"])

    for name, value in changes.items():
        if name in _EDITABLE_FIELDS:
            setattr(exam, name, value)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(exam)
    return exam


def delete_exam(db: Session, caller: AuthContext, exam_id: str) -> None:
    # submissions and grievances go with it
    exam = get_exam(db, caller, exam_id)
    db.delete(exam)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Exam %s deleted", exam_id)


def upload_model_answer(
    db: Session,
    caller: AuthContext,
    exam_id: str,
    upload: IncomingFile,
    blob_store: BlobStore,
) -> Exam:
    exam = get_exam(db, caller, exam_id)
    validate_pdf(upload)

    locator = blob_store.put(model_answer_key(exam.id), upload.content, config.PDF_CONTENT_TYPE)
    exam.model_answer = locator
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(exam)
    return exam


def exam_results(db: Session, caller: AuthContext, exam_id: str) -> tuple[Exam, list[Submission]]:
    exam = get_exam(db, caller, exam_id)
    return exam, SubmissionStore(db).find_by_exam(exam.id)


def list_available_exams(db: Session, caller: AuthContext) -> list[dict]:
    """Active exams, each tagged with the caller's submission status (if any)."""
    student = get_student(db, caller)
    exams = (
        db.query(Exam)
        .filter(Exam.is_active.is_(True))
        .order_by(Exam.created_at.desc(), Exam.id.asc())
        .all()
    )
    statuses = {s.exam_id: s.status for s in SubmissionStore(db).find_by_student(student.id)}
    return [
        {
            "exam": exam,
            "has_submitted": exam.id in statuses,
            "submission_status": statuses.get(exam.id),
        }
        for exam in exams
    ]


def list_courses(db: Session, caller: AuthContext) -> list[Course]:
    instructor = get_instructor(db, caller)
    return (
        db.query(Course)
        .filter(Course.is_active.is_(True), Course.instructor_id == instructor.id)
        .order_by(Course.course_code.asc(), Course.course_name.asc())
        .all()
    )
