"""
Persistence for submissions keyed by (student, exam).

``upsert_by_student_exam`` relies on the ``uq_submission_student_exam``
constraint and a single ``INSERT ... ON CONFLICT DO UPDATE`` statement, so
two writers racing on the same pair always end up with one row.
"""
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradeflow.core.errors import Conflict
from gradeflow.models.exam import Exam
from gradeflow.models.submission import Submission, SubmissionStatus
from gradeflow.models.user import new_id

logger = logging.getLogger(__name__)

_CONFLICT_TARGET = ["student_id", "exam_id"]


@dataclass(frozen=True)
class SubmissionFilter:
    exam_id: str | None = None
    student_id: str | None = None
    instructor_id: str | None = None
    status: SubmissionStatus | None = None
    graded_with_marks: bool = False


class SubmissionStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, submission_id: str) -> Submission | None:
        return self.db.get(Submission, submission_id)

    def find_by_student_exam(self, student_id: str, exam_id: str) -> Submission | None:
        return (
            self.db.query(Submission)
            .filter(Submission.student_id == student_id, Submission.exam_id == exam_id)
            .first()
        )

    def find_by_exam(self, exam_id: str) -> list[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.exam_id == exam_id)
            .order_by(Submission.created_at.desc(), Submission.id.asc())
            .all()
        )

    def find_by_student(self, student_id: str) -> list[Submission]:
        return (
            self.db.query(Submission)
            .filter(Submission.student_id == student_id)
            .order_by(Submission.created_at.desc(), Submission.id.asc())
            .all()
        )

    def _filtered(self, query, flt: SubmissionFilter):
        if flt.exam_id is not None:
            query = query.filter(Submission.exam_id == flt.exam_id)
        if flt.student_id is not None:
            query = query.filter(Submission.student_id == flt.student_id)
        if flt.instructor_id is not None:
            query = query.join(Exam, Exam.id == Submission.exam_id).filter(
                Exam.instructor_id == flt.instructor_id
            )
        if flt.status is not None:
            query = query.filter(Submission.status == flt.status)
        if flt.graded_with_marks:
            query = query.filter(
                Submission.status == SubmissionStatus.GRADED,
                Submission.marks.is_not(None),
            )
        return query

    def count(self, flt: SubmissionFilter) -> int:
        query = self.db.query(func.count(Submission.id))
        return int(self._filtered(query, flt).scalar() or 0)

    def find(self, flt: SubmissionFilter) -> list[Submission]:
        return self._filtered(self.db.query(Submission), flt).all()

    def create(self, submission: Submission) -> Submission:
        """Insert a new row; a second row for the same pair is a Conflict."""
        self.db.add(submission)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("A submission already exists for this student and exam")
        self.db.refresh(submission)
        return submission

    def save(self, submission: Submission) -> Submission:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(submission)
        return submission

    def upsert_by_student_exam(
        self,
        student_id: str,
        exam_id: str,
        fields: dict[str, Any],
    ) -> Submission:
        """Create the (student, exam) submission or overwrite ``fields`` on it."""
        dialect = self.db.get_bind().dialect.name

        if dialect == "sqlite":
            submission_id = self._upsert_on_conflict(sqlite.insert, student_id, exam_id, fields)
        elif dialect == "postgresql":
            submission_id = self._upsert_on_conflict(postgresql.insert, student_id, exam_id, fields)
        else:
            submission_id = self._upsert_locked(student_id, exam_id, fields)

        return self.db.execute(
            select(Submission)
            .where(Submission.id == submission_id)
            .execution_options(populate_existing=True)
        ).scalar_one()

    def _upsert_on_conflict(self, insert, student_id: str, exam_id: str, fields: dict[str, Any]) -> str:
        stmt = insert(Submission).values(
            id=new_id(),
            student_id=student_id,
            exam_id=exam_id,
            **fields,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=_CONFLICT_TARGET,
            set_={**fields, "updated_at": func.now()},
        ).returning(Submission.id)

        try:
            submission_id = self.db.execute(stmt).scalar_one()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return submission_id

    def _upsert_locked(self, student_id: str, exam_id: str, fields: dict[str, Any]) -> str:
        # no native upsert: the unique constraint still rejects a concurrent insert
        existing = (
            self.db.query(Submission)
            .filter(Submission.student_id == student_id, Submission.exam_id == exam_id)
            .with_for_update()
            .first()
        )
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            submission = existing
        else:
            submission = Submission(student_id=student_id, exam_id=exam_id, **fields)
            self.db.add(submission)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Concurrent upsert for student=%s exam=%s", student_id, exam_id)
            raise Conflict("Submission was modified concurrently, retry the upload")
        return submission.id
