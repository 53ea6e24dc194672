from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from gradeflow.core.errors import Conflict
from gradeflow.models.exam import Exam
from gradeflow.models.grievance import Grievance
from gradeflow.models.user import Student


class GrievanceStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, grievance_id: str) -> Grievance | None:
        return (
            self.db.query(Grievance)
            .options(
                joinedload(Grievance.exam),
                joinedload(Grievance.submission),
                joinedload(Grievance.student).joinedload(Student.user),
            )
            .filter(Grievance.id == grievance_id)
            .first()
        )

    def find_by_submission(self, submission_id: str) -> Grievance | None:
        return self.db.query(Grievance).filter(Grievance.submission_id == submission_id).first()

    def find_for_instructor(self, instructor_id: str) -> list[Grievance]:
        return (
            self.db.query(Grievance)
            .join(Exam, Exam.id == Grievance.exam_id)
            .options(
                joinedload(Grievance.exam),
                joinedload(Grievance.submission),
                joinedload(Grievance.student).joinedload(Student.user),
            )
            .filter(Exam.instructor_id == instructor_id)
            .order_by(Grievance.created_at.desc(), Grievance.id.asc())
            .all()
        )

    def create(self, grievance: Grievance) -> Grievance:
        self.db.add(grievance)
        try:
            self.db.commit()
        except IntegrityError:
            # uq_grievance_submission: another grievance won the race
            self.db.rollback()
            raise Conflict("Grievance already submitted for this exam")
        self.db.refresh(grievance)
        return grievance

    def update(self, grievance: Grievance) -> Grievance:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(grievance)
        return grievance
