"""Caller lookups and exam ownership checks shared by the services."""
from sqlalchemy.orm import Session

from gradeflow.core.current_user import AuthContext
from gradeflow.core.errors import Forbidden, NotFound
from gradeflow.models.exam import Exam
from gradeflow.models.user import Instructor, Role, Student


def get_instructor(db: Session, caller: AuthContext) -> Instructor:
    if caller.role != Role.INSTRUCTOR:
        raise Forbidden("Access denied. Instructor role required.")
    instructor = db.query(Instructor).filter(Instructor.user_id == caller.user_id).first()
    if not instructor:
        raise NotFound("Instructor record not found")
    return instructor


def get_student(db: Session, caller: AuthContext) -> Student:
    if caller.role != Role.STUDENT:
        raise Forbidden("Access denied. Student role required.")
    student = db.query(Student).filter(Student.user_id == caller.user_id).first()
    if not student:
        raise NotFound("Student record not found")
    return student


def get_owned_exam(db: Session, exam_id: str, instructor: Instructor) -> Exam:
    exam = db.get(Exam, exam_id)
    if not exam:
        raise NotFound("Exam not found")
    if exam.instructor_id != instructor.id:
        raise Forbidden("Access denied. You do not own this exam.")
    return exam
