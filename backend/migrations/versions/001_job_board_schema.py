"""Job board schema.

Creates:
- users / user_roles: login identity and its single role record
- jobs: postings with moderation status
- job_views / job_link_clicks: append-only engagement events
- student_profiles, saved_jobs, job_applications: student side
- app_settings: admin feature flags (seeded with defaults)
- deleted_users_audit / user_status_audit: account audit trail

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # 1. users
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # 2. user_roles
    op.create_table(
        "user_roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("phone_number", sa.String(50)),
        sa.Column("bio", sa.Text),
        sa.Column("profile_picture_url", sa.Text),
        sa.Column("major", sa.String(255)),
        sa.Column("graduation_year", sa.Integer),
        sa.Column("gpa", sa.Float),
        sa.Column("resume_url", sa.Text),
        sa.Column("linkedin_url", sa.Text),
        sa.Column("company_name", sa.String(255)),
        sa.Column("job_title", sa.String(255)),
        sa.Column("company_website", sa.Text),
        sa.Column("department", sa.String(255)),
        sa.Column("office_location", sa.String(255)),
        sa.Column("office_hours", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_user_roles_role", "user_roles", ["role"])

    # 3. jobs
    op.create_table(
        "jobs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(100), nullable=False),
        sa.Column("job_type", sa.String(20), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("salary_range", sa.String(255)),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("requirements", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("skills", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("deadline", sa.Date, nullable=False),
        sa.Column("apply_url", sa.Text),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("rejection_note", sa.Text),
        sa.Column("created_by", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_jobs_industry", "jobs", ["industry"])
    op.create_index("ix_jobs_job_type", "jobs", ["job_type"])
    op.create_index("ix_jobs_status", "jobs", ["status"])
    op.create_index("ix_jobs_created_by", "jobs", ["created_by"])
    op.create_index("idx_jobs_status_deadline", "jobs", ["status", "deadline"])
    op.create_index("idx_jobs_creator_status", "jobs", ["created_by", "status"])

    # 4. engagement events
    op.create_table(
        "job_views",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("viewed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_job_views_job", "job_views", ["job_id"])

    op.create_table(
        "job_link_clicks",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("clicked_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_job_link_clicks_job", "job_link_clicks", ["job_id"])

    # 5. student side
    op.create_table(
        "student_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("interests", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("skills", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("preferred_job_types", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("preferred_industries", JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "saved_jobs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "job_id", name="uq_saved_jobs_user_job"),
    )
    op.create_index("ix_saved_jobs_user_id", "saved_jobs", ["user_id"])
    op.create_index("ix_saved_jobs_job_id", "saved_jobs", ["job_id"])

    op.create_table(
        "job_applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("status", sa.String(20), server_default="applied", nullable=False),
        sa.Column("applied_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("job_id", "student_id", name="uq_job_applications_job_student"),
    )
    op.create_index("ix_job_applications_job_id", "job_applications", ["job_id"])
    op.create_index("ix_job_applications_student_id", "job_applications", ["student_id"])

    # 6. feature flags
    app_settings = op.create_table(
        "app_settings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("setting_key", sa.String(100), unique=True, nullable=False),
        sa.Column("setting_value", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_by", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL")),
    )
    op.bulk_insert(
        app_settings,
        [
            {"setting_key": "rep_can_post_jobs", "setting_value": True},
            {"setting_key": "faculty_can_post_jobs", "setting_value": True},
        ],
    )

    # 7. audit trail
    op.create_table(
        "deleted_users_audit",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("role", sa.String(20)),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("company_name", sa.String(255)),
        sa.Column("deleted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("self_deleted", sa.Boolean, server_default=sa.text("true"), nullable=False),
        sa.Column("deleted_by_admin_email", sa.String(255)),
        sa.Column("deletion_reason", sa.Text),
    )
    op.create_index("ix_deleted_users_audit_user_id", "deleted_users_audit", ["user_id"])

    op.create_table(
        "user_status_audit",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("changed_by_admin_email", sa.String(255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_user_status_audit_user_id", "user_status_audit", ["user_id"])


def downgrade() -> None:
    op.drop_table("user_status_audit")
    op.drop_table("deleted_users_audit")
    op.drop_table("app_settings")
    op.drop_table("job_applications")
    op.drop_table("saved_jobs")
    op.drop_table("student_profiles")
    op.drop_table("job_link_clicks")
    op.drop_table("job_views")
    op.drop_table("jobs")
    op.drop_table("user_roles")
    op.drop_table("users")
