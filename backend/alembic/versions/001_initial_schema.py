"""Initial AgroStudy schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

This migration creates the complete AgroStudy database schema:
- Extensions: uuid-ossp, citext
- Tables: users, semesters, subjects, notes, events, visits, visit_photos, pdf_library
- Indexes: owner-scoped list indexes in each hook's sort order
- Triggers: updated_at auto-update function and triggers
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES_WITH_UPDATED_AT = [
    "users",
    "semesters",
    "subjects",
    "notes",
    "events",
    "visits",
    "visit_photos",
    "pdf_library",
]


def _id_column() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("uuid_generate_v4()"), nullable=False)


def _owner_column() -> sa.Column:
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    ]


def upgrade() -> None:
    # ==========================================================================
    # EXTENSIONS
    # ==========================================================================
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')
    op.execute('CREATE EXTENSION IF NOT EXISTS "citext"')

    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", postgresql.CITEXT(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # ==========================================================================
    # SEMESTERS TABLE
    # ==========================================================================
    op.create_table(
        "semesters",
        _id_column(),
        _owner_column(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("end_date >= start_date", name="valid_semester_range"),
    )
    op.create_index("idx_semesters_user_start", "semesters", ["user_id", "start_date"])

    # ==========================================================================
    # SUBJECTS TABLE
    # ==========================================================================
    op.create_table(
        "subjects",
        _id_column(),
        _owner_column(),
        sa.Column("semester_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("color", sa.String(7), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        # A semester that still has subjects cannot be deleted
        sa.ForeignKeyConstraint(["semester_id"], ["semesters.id"], ondelete="RESTRICT"),
        sa.CheckConstraint("color ~* '^#[0-9A-Fa-f]{6}$'", name="valid_color"),
    )
    op.create_index("idx_subjects_user_name", "subjects", ["user_id", "name"])
    op.create_index("ix_subjects_semester_id", "subjects", ["semester_id"])

    # ==========================================================================
    # NOTES TABLE
    # ==========================================================================
    op.create_table(
        "notes",
        _id_column(),
        _owner_column(),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content_md", sa.Text(), nullable=True),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_notes_user_created_at", "notes", ["user_id", sa.text("created_at DESC")])
    op.create_index("ix_notes_subject_id", "notes", ["subject_id"])
    op.execute("CREATE INDEX idx_notes_tags ON notes USING GIN(tags)")

    # ==========================================================================
    # EVENTS TABLE
    # ==========================================================================
    op.create_table(
        "events",
        _id_column(),
        _owner_column(),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("starts_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("ends_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("type", sa.String(20), server_default="outro", nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("priority", sa.String(10), nullable=True),
        sa.Column("reminders_min_before", postgresql.ARRAY(sa.Integer()), server_default="{15,60}", nullable=False),
        sa.Column("source", sa.String(20), server_default="manual", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
        sa.CheckConstraint("ends_at IS NULL OR ends_at >= starts_at", name="valid_event_range"),
        sa.CheckConstraint("priority IS NULL OR priority IN ('high', 'medium', 'low')", name="valid_priority"),
    )
    op.create_index("idx_events_user_starts_at", "events", ["user_id", "starts_at"])
    op.create_index("ix_events_subject_id", "events", ["subject_id"])

    # ==========================================================================
    # VISITS TABLE
    # ==========================================================================
    op.create_table(
        "visits",
        _id_column(),
        _owner_column(),
        sa.Column("subject_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("location_text", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("observations_md", sa.Text(), nullable=True),
        sa.Column("gps", postgresql.JSONB(), nullable=True),
        sa.Column("offline_status", sa.String(20), server_default="synced", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["subject_id"], ["subjects.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_visits_user_date", "visits", ["user_id", sa.text("date DESC")])
    op.create_index("ix_visits_subject_id", "visits", ["subject_id"])

    # ==========================================================================
    # VISIT_PHOTOS TABLE
    # ==========================================================================
    op.create_table(
        "visit_photos",
        _id_column(),
        _owner_column(),
        sa.Column("visit_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=True),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("taken_at", postgresql.TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("exif_json", postgresql.JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["visit_id"], ["visits.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_visit_photos_visit_id", "visit_photos", ["visit_id"])

    # ==========================================================================
    # PDF_LIBRARY TABLE
    # ==========================================================================
    op.create_table(
        "pdf_library",
        _id_column(),
        _owner_column(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("tags", postgresql.ARRAY(sa.Text()), server_default="{}", nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("favorite", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_pdf_library_user_created_at", "pdf_library", ["user_id", sa.text("created_at DESC")])
    op.create_index("idx_pdf_library_file_path", "pdf_library", ["file_path"], unique=True)

    # ==========================================================================
    # UPDATED_AT TRIGGER FUNCTION
    # ==========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    for table in TABLES_WITH_UPDATED_AT:
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
        """)


def downgrade() -> None:
    for table in TABLES_WITH_UPDATED_AT:
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    # Drop tables in reverse dependency order
    op.drop_table("pdf_library")
    op.drop_table("visit_photos")
    op.drop_table("visits")
    op.drop_table("events")
    op.drop_table("notes")
    op.drop_table("subjects")
    op.drop_table("semesters")
    op.drop_table("users")
