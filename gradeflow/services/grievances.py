"""
Grievance lifecycle.

    PENDING -> UNDER_REVIEW -> RESOLVED | REJECTED
    PENDING ---------------> RESOLVED | REJECTED

``respond`` may repeat while the grievance is open. RESOLVED and REJECTED
are terminal: any further action raises ``ValidationFailed``.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from gradeflow.core import config
from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import Conflict, Forbidden, NotFound, ValidationFailed
from gradeflow.models.grievance import (
    TERMINAL_GRIEVANCE_STATUSES,
    Grievance,
    GrievanceAction,
    GrievanceStatus,
    GrievanceType,
)
from gradeflow.repositories.grievances import GrievanceStore
from gradeflow.repositories.submissions import SubmissionStore
from gradeflow.services.access import get_instructor, get_student

logger = logging.getLogger(__name__)


def apply_action(
    grievance: Grievance,
    action: GrievanceAction,
    instructor_response: str | None = None,
    now: datetime | None = None,
) -> Grievance:
    """Move ``grievance`` to its next state in place."""
    if grievance.status in TERMINAL_GRIEVANCE_STATUSES:
        raise ValidationFailed(f"Grievance is already {grievance.status.value} and cannot be changed")

    now = now or datetime.now(timezone.utc)
    response = instructor_response.strip() if instructor_response else None

    if action == GrievanceAction.RESPOND:
        if not response:
            raise ValidationFailed("Instructor response is required for respond action")
        grievance.instructor_response = response
        grievance.status = GrievanceStatus.UNDER_REVIEW
        grievance.reviewed_at = now
    elif action == GrievanceAction.RESOLVE:
        grievance.status = GrievanceStatus.RESOLVED
        grievance.resolved_at = now
        if response:
            grievance.instructor_response = response
    elif action == GrievanceAction.DISMISS:
        grievance.status = GrievanceStatus.REJECTED
        grievance.reviewed_at = now
    else:
        raise ValidationFailed(f"Unknown action: {action}")

    return grievance


def create_grievance(
    db: Session,
    caller: AuthContext,
    submission_id: str,
    grievance_type: GrievanceType,
    description: str,
    question_number: int | None = None,
) -> Grievance:
    student = get_student(db, caller)

    description = (description or "").strip()
    if len(description) < config.GRIEVANCE_MIN_DESCRIPTION:
        raise ValidationFailed(
            f"Description must be at least {config.GRIEVANCE_MIN_DESCRIPTION} characters"
        )
    if question_number is not None and question_number < 1:
        raise ValidationFailed("Question number must be positive")

    submission = SubmissionStore(db).get(submission_id)
    if not submission:
        raise NotFound("Submission not found")
    if submission.student_id != student.id:
        raise Forbidden("Submission does not belong to you")

    store = GrievanceStore(db)
    if store.find_by_submission(submission.id):
        raise Conflict("Grievance already submitted for this exam")

    grievance = store.create(
        Grievance(
            grievance_type=grievance_type,
            question_number=question_number,
            description=description,
            student_id=student.id,
            exam_id=submission.exam_id,
            submission_id=submission.id,
            status=GrievanceStatus.PENDING,
        )
    )
    logger.info("Grievance %s filed on submission %s", grievance.id, submission.id)
    return grievance


def _owned_grievance(db: Session, caller: AuthContext, grievance_id: str) -> Grievance:
    instructor = get_instructor(db, caller)
    grievance = GrievanceStore(db).get(grievance_id)
    if not grievance:
        raise NotFound("Grievance not found")
    if grievance.exam.instructor_id != instructor.id:
        raise Forbidden("Access denied. You do not own this exam.")
    return grievance


def get_grievance(db: Session, caller: AuthContext, grievance_id: str) -> Grievance:
    return _owned_grievance(db, caller, grievance_id)


def list_grievances(db: Session, caller: AuthContext) -> list[Grievance]:
    instructor = get_instructor(db, caller)
    return GrievanceStore(db).find_for_instructor(instructor.id)


def transition_grievance(
    db: Session,
    caller: AuthContext,
    grievance_id: str,
    action: GrievanceAction,
    instructor_response: str | None = None,
) -> Grievance:
    grievance = _owned_grievance(db, caller, grievance_id)
    previous = grievance.status

    apply_action(grievance, action, instructor_response)
    grievance = GrievanceStore(db).update(grievance)

    logger.info(
        "Grievance %s: %s -> %s (%s)",
        grievance.id,
        previous.value,
        grievance.status.value,
        action.value,
    )
    return grievance
