from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gradeflow.db.base_class import Base
from gradeflow.models.user import new_id


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    course_code: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    instructor_id: Mapped[str | None] = mapped_column(
        ForeignKey("instructors.id", ondelete="SET NULL"), index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    exams = relationship("Exam", back_populates="course")
