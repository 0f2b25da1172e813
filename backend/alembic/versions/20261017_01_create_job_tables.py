"""create job applications and job files

Revision ID: 20261017_01
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261017_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "job_applications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("job_title", sa.String(length=255), nullable=False),
        sa.Column("job_description", sa.Text(), nullable=True),
        sa.Column("job_url", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="TO_APPLY"),
        sa.Column("has_been_contacted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("date_submitted", sa.Date(), nullable=True),
        sa.Column("date_of_interview", sa.Date(), nullable=True),
        sa.Column("confirmation_received", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rejection_received", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_job_applications_id"), "job_applications", ["id"], unique=False)
    op.create_index(op.f("ix_job_applications_updated_at"), "job_applications", ["updated_at"], unique=False)

    op.create_table(
        "job_files",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("job_application_id", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(length=512), nullable=False),
        sa.Column("file_type", sa.String(length=255), nullable=True),
        sa.Column("size_bytes", sa.BigInteger(), nullable=True),
        sa.Column("nextcloud_path", sa.String(length=1024), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["job_application_id"], ["job_applications.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("nextcloud_path"),
    )
    op.create_index(op.f("ix_job_files_id"), "job_files", ["id"], unique=False)
    op.create_index(op.f("ix_job_files_job_application_id"), "job_files", ["job_application_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_job_files_job_application_id"), table_name="job_files")
    op.drop_index(op.f("ix_job_files_id"), table_name="job_files")
    op.drop_table("job_files")
    op.drop_index(op.f("ix_job_applications_updated_at"), table_name="job_applications")
    op.drop_index(op.f("ix_job_applications_id"), table_name="job_applications")
    op.drop_table("job_applications")
