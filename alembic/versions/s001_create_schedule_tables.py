"""Create schedule, rule, room, session type and attendance session tables

Revision ID: s001_create_schedule_tables
Revises:
Create Date: 2026-01-12

This migration creates the tables used by schedule session generation:
- class_rooms / class_sections / class_section_subject_teachers: teaching context
- class_schedules / class_schedule_rules: recurring schedules
- class_attendance_session_types: per-school session categories
- class_attendance_sessions: generated sessions, unique per (school, date, schedule)
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

# revision identifiers, used by Alembic.
revision = 's001_create_schedule_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'class_rooms',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('is_virtual', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_class_rooms_school_id', 'class_rooms', ['school_id'])
    op.create_index(
        'uq_class_rooms_school_slug_alive',
        'class_rooms',
        ['school_id', 'slug'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
    )

    op.create_table(
        'class_sections',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('room_id', sa.String(), sa.ForeignKey('class_rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_class_sections_school_id', 'class_sections', ['school_id'])

    op.create_table(
        'class_section_subject_teachers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('subject_name', sa.String(), nullable=True),
        sa.Column('teacher_id', sa.String(), nullable=True),  # No FK - teacher roster lives elsewhere
        sa.Column('room_id', sa.String(), sa.ForeignKey('class_rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column('section_id', sa.String(), sa.ForeignKey('class_sections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        'ix_class_section_subject_teachers_school_id', 'class_section_subject_teachers', ['school_id']
    )

    op.create_table(
        'class_schedules',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('end_date >= start_date', name='check_schedule_date_range'),
    )
    op.create_index('ix_class_schedules_school_id', 'class_schedules', ['school_id'])

    op.create_table(
        'class_schedule_rules',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('schedule_id', sa.String(), sa.ForeignKey('class_schedules.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('interval_weeks', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('start_offset_weeks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('week_parity', sa.String(10), nullable=True),
        sa.Column('weeks_of_month', ARRAY(sa.Integer()), nullable=True),
        sa.Column('last_week_of_month', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column(
            'csst_id',
            sa.String(),
            sa.ForeignKey('class_section_subject_teachers.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('day_of_week BETWEEN 1 AND 7', name='check_rule_day_of_week'),
        sa.CheckConstraint('start_offset_weeks >= 0', name='check_rule_start_offset'),
    )
    op.create_index('ix_class_schedule_rules_school_id', 'class_schedule_rules', ['school_id'])
    op.create_index('ix_class_schedule_rules_schedule_id', 'class_schedule_rules', ['schedule_id'])
    op.create_index('ix_class_schedule_rules_csst_id', 'class_schedule_rules', ['csst_id'])

    op.create_table(
        'class_attendance_session_types',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('icon', sa.String(64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('allow_student_self_attendance', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('allow_teacher_mark_attendance', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('require_teacher_attendance', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('require_attendance_reason', ARRAY(sa.String()), nullable=True),
        sa.Column('attendance_window_mode', sa.String(32), nullable=False, server_default='same_day'),
        sa.Column('attendance_open_offset_minutes', sa.Integer(), nullable=True),
        sa.Column('attendance_close_offset_minutes', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        'ix_class_attendance_session_types_school_id', 'class_attendance_session_types', ['school_id']
    )
    op.execute(
        "CREATE UNIQUE INDEX uq_castype_school_slug_alive "
        "ON class_attendance_session_types (school_id, lower(slug)) "
        "WHERE deleted_at IS NULL"
    )

    op.create_table(
        'class_attendance_sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('school_id', sa.String(), nullable=False),
        sa.Column('schedule_id', sa.String(), sa.ForeignKey('class_schedules.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rule_id', sa.String(), sa.ForeignKey('class_schedule_rules.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('teacher_id', sa.String(), nullable=True),
        sa.Column('room_id', sa.String(), sa.ForeignKey('class_rooms.id', ondelete='SET NULL'), nullable=True),
        sa.Column(
            'csst_id',
            sa.String(),
            sa.ForeignKey('class_section_subject_teachers.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column(
            'type_id',
            sa.String(),
            sa.ForeignKey('class_attendance_session_types.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('type_snapshot', JSONB(), nullable=True),
        sa.Column('csst_snapshot', JSONB(), nullable=True),
        sa.Column('rule_snapshot', JSONB(), nullable=True),
        sa.Column('meeting_number', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('slug', sa.String(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('attendance_status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('is_locked', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_override', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_canceled', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('general_info', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_class_attendance_sessions_school_id', 'class_attendance_sessions', ['school_id'])
    op.create_index('ix_class_attendance_sessions_schedule_id', 'class_attendance_sessions', ['schedule_id'])
    op.create_index('ix_class_attendance_sessions_teacher_id', 'class_attendance_sessions', ['teacher_id'])
    op.create_index('ix_class_attendance_sessions_csst_id', 'class_attendance_sessions', ['csst_id'])
    op.create_index('idx_cas_csst_meeting_number', 'class_attendance_sessions', ['csst_id', 'meeting_number'])

    # Idempotent generation relies on this index: one live session per
    # school, date and schedule (manual sessions have no schedule).
    op.execute(
        "CREATE UNIQUE INDEX uq_cas_school_date_schedule_alive "
        "ON class_attendance_sessions (school_id, date, COALESCE(schedule_id, '')) "
        "WHERE deleted_at IS NULL"
    )


def downgrade() -> None:
    op.drop_table('class_attendance_sessions')
    op.drop_table('class_attendance_session_types')
    op.drop_table('class_schedule_rules')
    op.drop_table('class_schedules')
    op.drop_table('class_section_subject_teachers')
    op.drop_table('class_sections')
    op.drop_table('class_rooms')
