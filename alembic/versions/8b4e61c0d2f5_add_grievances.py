"""add grievances

Revision ID: 8b4e61c0d2f5
Revises: 3f1c2a9d7b10
Create Date: 2026-10-06 16:41:37.902115

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b4e61c0d2f5'
down_revision: Union[str, Sequence[str], None] = '3f1c2a9d7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "grievances",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("submission_id", sa.String(64), sa.ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", sa.String(64), sa.ForeignKey("students.id", ondelete="CASCADE"), nullable=False),
        sa.Column("exam_id", sa.String(64), sa.ForeignKey("exams.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "grievance_type",
            sa.Enum("SCORE_DISAGREEMENT", "INCORRECT_FEEDBACK", "MISSING_ANSWER", "OTHER", name="grievance_type"),
            nullable=False,
        ),
        sa.Column("question_number", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "UNDER_REVIEW", "RESOLVED", "REJECTED", name="grievance_status"),
            nullable=False,
        ),
        sa.Column("instructor_response", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("submission_id", name="uq_grievance_submission"),
    )
    op.create_index("ix_grievances_student_id", "grievances", ["student_id"])
    op.create_index("ix_grievances_exam_id", "grievances", ["exam_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("grievances")
