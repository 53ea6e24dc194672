"""create exam and submission tables

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-09-28 10:14:02.311842

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.Enum("instructor", "student", name="user_role"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    for table in ("students", "instructors"):
        op.create_table(
            table,
            sa.Column("id", sa.String(64), primary_key=True),
            sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("course_code", sa.String(32), nullable=False),
        sa.Column("course_name", sa.String(255), nullable=False),
        sa.Column("instructor_id", sa.String(64), sa.ForeignKey("instructors.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_courses_course_code", "courses", ["course_code"])
    op.create_index("ix_courses_instructor_id", "courses", ["instructor_id"])

    op.create_table(
        "exams",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("instructor_id", sa.String(64), sa.ForeignKey("instructors.id", ondelete="CASCADE"), nullable=False),
        sa.Column("course_id", sa.String(64), sa.ForeignKey("courses.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("exam_type", sa.Enum("MCQ", "TRUE_FALSE", "SHORT_ANSWER", "MIXED", name="exam_type"), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("model_answer", sa.Text(), nullable=True),
        sa.Column("rubric", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_exams_instructor_id", "exams", ["instructor_id"])
    op.create_index("ix_exams_course_id", "exams", ["course_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("student_id", sa.String(64), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("exam_id", sa.String(64), sa.ForeignKey("exams.id", ondelete="CASCADE"), nullable=False),
        sa.Column("file_link", sa.Text(), nullable=True),
        sa.Column("original_answers", sa.JSON(), nullable=True),
        sa.Column("status", sa.Enum("PENDING", "GRADED", name="submission_status"), nullable=False),
        sa.Column("marks", sa.Float(), nullable=True),
        sa.Column("match_percentage", sa.Float(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("graded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("student_id", "exam_id", name="uq_submission_student_exam"),
        sa.CheckConstraint(
            "(status = 'GRADED' AND marks IS NOT NULL AND graded_at IS NOT NULL) OR "
            "(status = 'PENDING' AND marks IS NULL AND feedback IS NULL AND graded_at IS NULL)",
            name="ck_submission_grade_fields",
        ),
        sa.CheckConstraint(
            "file_link IS NOT NULL OR original_answers IS NOT NULL",
            name="ck_submission_has_answer",
        ),
    )
    op.create_index("ix_submissions_student_id", "submissions", ["student_id"])
    op.create_index("ix_submissions_exam_id", "submissions", ["exam_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("submissions")
    op.drop_table("exams")
    op.drop_table("courses")
    op.drop_table("instructors")
    op.drop_table("students")
    op.drop_table("users")
