"""
Submission lifecycle: PENDING on creation, GRADED after an instructor grades
it. Re-grading overwrites the previous grade; only a new batch upload sends a
graded submission back to PENDING (see ``services.ingestion``).
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from gradeflow.models.exam import Exam
from gradeflow.models.submission import Submission, SubmissionStatus
from gradeflow.repositories.submissions import SubmissionStore
from gradeflow.services.access import get_instructor, get_student

logger = logging.getLogger(__name__)


def create_submission(db: Session, caller: AuthContext, exam_id: str, answer: str) -> Submission:
    """Student self-submission. A second attempt for the same exam is a Conflict."""
    student = get_student(db, caller)

    if not answer or not answer.strip():
        raise ValidationFailed("Answer is required")

    exam = db.get(Exam, exam_id)
    if not exam or not exam.is_active:
        raise NotFound("Exam not found or not available for submission")

    store = SubmissionStore(db)
    if store.find_by_student_exam(student.id, exam.id):
        raise Conflict("You have already submitted this exam")

    submission = store.create(
        Submission(
            student_id=student.id,
            exam_id=exam.id,
            original_answers={"answer": answer},
            status=SubmissionStatus.PENDING,
        )
    )
    logger.info("Student %s submitted exam %s", student.id, exam.id)
    return submission


def grade_submission(
    db: Session,
    caller: AuthContext,
    submission_id: str,
    marks: float,
    feedback: str | None = None,
    match_percentage: float | None = None,
) -> Submission:
    instructor = get_instructor(db, caller)

    if marks is None or marks < 0:
        raise ValidationFailed("Marks cannot be negative")
    if match_percentage is not None and not 0 <= match_percentage <= 100:
        raise ValidationFailed("Match percentage must be between 0 and 100")

    store = SubmissionStore(db)
    submission = store.get(submission_id)
    if not submission:
        raise NotFound("Submission not found")
    if submission.exam.instructor_id != instructor.id:
        raise Forbidden("Access denied. You do not own this exam.")

    submission.marks = marks
    submission.match_percentage = match_percentage
    submission.feedback = feedback
    submission.status = SubmissionStatus.GRADED
    submission.graded_at = datetime.now(timezone.utc)

    submission = store.save(submission)
    logger.info("Submission %s graded: %s marks", submission.id, marks)
    return submission


def list_student_results(db: Session, caller: AuthContext) -> list[Submission]:
    student = get_student(db, caller)
    return SubmissionStore(db).find_by_student(student.id)


def get_student_result(db: Session, caller: AuthContext, exam_id: str) -> Submission:
    student = get_student(db, caller)
    submission = SubmissionStore(db).find_by_student_exam(student.id, exam_id)
    if not submission:
        raise NotFound("Result not found")
    return submission


def list_grievable_submissions(db: Session, caller: AuthContext) -> list[Submission]:
    """The caller's submissions (pending or graded) with no grievance filed yet.

    Most recently graded first, then ungraded ones by newest submission.
    """
    student = get_student(db, caller)
    submissions = [s for s in SubmissionStore(db).find_by_student(student.id) if s.grievance is None]

    # find_by_student already orders by created_at desc; the sort is stable
    submissions.sort(
        key=lambda s: (s.graded_at is not None, s.graded_at or datetime.min),
        reverse=True,
    )
    return submissions
