"""
Dashboard aggregates, recomputed from the database on every request.

The summarising functions are pure: they take submissions (or anything with
``status`` and ``marks``) and return plain dicts.
"""
import math
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from gradeflow.core import config
from gradeflow.core.current_user import AuthContext
from gradeflow.models.exam import Exam
from gradeflow.models.submission import Submission, SubmissionStatus
from gradeflow.repositories.submissions import SubmissionFilter, SubmissionStore
from gradeflow.services.access import get_instructor, get_student

# (band, inclusive lower bound), checked top down
GRADE_BANDS = (("A", 90), ("B", 80), ("C", 70), ("D", 60), ("F", 0))


def grade_band(marks: float) -> str:
    for band, lower in GRADE_BANDS:
        if marks >= lower:
            return band
    return "F"


def _graded_marks(submissions: Iterable) -> list[float]:
    return [
        s.marks
        for s in submissions
        if s.status == SubmissionStatus.GRADED and s.marks is not None
    ]


def grade_distribution(submissions: Iterable) -> dict[str, int]:
    """Bucket graded submissions; ungraded or mark-less ones are left out."""
    distribution = {band: 0 for band, _ in GRADE_BANDS}
    for marks in _graded_marks(submissions):
        distribution[grade_band(marks)] += 1
    return distribution


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def summarize_instructor(total_exams: int, submissions: list) -> dict:
    total = len(submissions)
    pending = sum(1 for s in submissions if s.status == SubmissionStatus.PENDING)
    return {
        "statistics": {
            "total_exams": total_exams,
            "total_submissions": total,
            "pending_submissions": pending,
            "students_graded": total - pending,
        },
        "grade_distribution": grade_distribution(submissions),
    }


def summarize_student(submissions: list) -> dict:
    marks = _graded_marks(submissions)
    average = sum(marks) / len(marks) if marks else 0
    return {
        "total_exams_taken": len(submissions),
        "average_score": round_half_up(average),
        "pending_grading": len(submissions) - len(marks),
    }


def instructor_dashboard(db: Session, caller: AuthContext) -> dict:
    instructor = get_instructor(db, caller)

    total_exams = (
        db.query(func.count(Exam.id)).filter(Exam.instructor_id == instructor.id).scalar()
    ) or 0
    submissions = SubmissionStore(db).find(SubmissionFilter(instructor_id=instructor.id))

    summary = summarize_instructor(total_exams, submissions)

    recent = (
        db.query(Exam, func.count(Submission.id).label("total_submissions"))
        .outerjoin(Submission, Submission.exam_id == Exam.id)
        .filter(Exam.instructor_id == instructor.id)
        .group_by(Exam.id)
        .order_by(Exam.created_at.desc(), Exam.id.asc())
        .limit(config.RECENT_ITEMS_LIMIT)
        .all()
    )
    summary["recent_exams"] = [
        {
            "id": exam.id,
            "title": exam.title,
            "exam_type": exam.exam_type,
            "deadline": exam.deadline,
            "created_at": exam.created_at,
            "total_submissions": int(count or 0),
        }
        for exam, count in recent
    ]
    return summary


def student_dashboard(db: Session, caller: AuthContext) -> dict:
    student = get_student(db, caller)
    submissions = SubmissionStore(db).find_by_student(student.id)

    graded = [
        s for s in submissions
        if s.status == SubmissionStatus.GRADED and s.marks is not None
    ]
    by_graded_at = sorted(graded, key=lambda s: (s.graded_at, s.id))

    return {
        "statistics": summarize_student(submissions),
        "recently_graded": [
            {
                "id": s.id,
                "exam_id": s.exam_id,
                "exam_title": s.exam.title,
                "marks": s.marks,
                "graded_at": s.graded_at,
            }
            for s in reversed(by_graded_at[-config.RECENT_ITEMS_LIMIT:])
        ],
        "score_data": [{"name": s.exam.title, "marks": s.marks} for s in by_graded_at],
    }
