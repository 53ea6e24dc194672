from sqlalchemy.orm import Session

from gradeflow.models.user import Instructor, Student


class StudentDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find_by_external_id(self, external_id: str) -> Student | None:
        """Global lookup of a student by the user reference used in filenames."""
        return self.db.query(Student).filter(Student.user_id == external_id).first()

    def find_instructor_by_user(self, user_id: str) -> Instructor | None:
        return self.db.query(Instructor).filter(Instructor.user_id == user_id).first()
