"""create lesson tables

Revision ID: 5c1d7e2a9b40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1d7e2a9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

record_status = sa.Enum('DRAFT', 'PUBLISHED', name='recordstatusenum')
approval_status = sa.Enum('MAIL_PENDING', 'PENDING', 'APPROVED', 'REJECTED', name='approvalstatusenum')


def upgrade() -> None:
    op.create_table(
        'school_years',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('status', record_status, nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_school_years_id'), 'school_years', ['id'], unique=False)

    op.create_table(
        'teacher_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_teacher_accounts_id'), 'teacher_accounts', ['id'], unique=False)
    op.create_index(op.f('ix_teacher_accounts_full_name'), 'teacher_accounts', ['full_name'], unique=False)
    op.create_index(op.f('ix_teacher_accounts_email'), 'teacher_accounts', ['email'], unique=True)

    op.create_table(
        'school_year_teachers',
        sa.Column('school_year_id', sa.Integer(), nullable=False),
        sa.Column('teacher_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['school_year_id'], ['school_years.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('school_year_id', 'teacher_id')
    )

    op.create_table(
        'student_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('approval_status', approval_status, nullable=False),
        sa.Column('teacher_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher_accounts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_student_accounts_id'), 'student_accounts', ['id'], unique=False)
    op.create_index(op.f('ix_student_accounts_full_name'), 'student_accounts', ['full_name'], unique=False)
    op.create_index(op.f('ix_student_accounts_email'), 'student_accounts', ['email'], unique=True)
    op.create_index(op.f('ix_student_accounts_teacher_id'), 'student_accounts', ['teacher_id'], unique=False)

    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('status', record_status, nullable=False),
        sa.Column('order_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('video_url', sa.String(length=255), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('teacher_id', sa.Integer(), nullable=False),
        sa.Column('school_year_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['school_year_id'], ['school_years.id']),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher_accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('teacher_id', 'school_year_id', 'order_number', name='uq_lessons_teacher_year_order')
    )
    op.create_index(op.f('ix_lessons_id'), 'lessons', ['id'], unique=False)
    op.create_index(op.f('ix_lessons_title'), 'lessons', ['title'], unique=False)
    op.create_index(op.f('ix_lessons_slug'), 'lessons', ['slug'], unique=True)
    op.create_index(op.f('ix_lessons_teacher_id'), 'lessons', ['teacher_id'], unique=False)
    op.create_index(op.f('ix_lessons_school_year_id'), 'lessons', ['school_year_id'], unique=False)

    op.create_table(
        'lesson_schedules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_lesson_schedules_id'), 'lesson_schedules', ['id'], unique=False)
    op.create_index(op.f('ix_lesson_schedules_start_date'), 'lesson_schedules', ['start_date'], unique=False)
    op.create_index(op.f('ix_lesson_schedules_lesson_id'), 'lesson_schedules', ['lesson_id'], unique=False)

    op.create_table(
        'lesson_schedule_students',
        sa.Column('lesson_schedule_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['lesson_schedule_id'], ['lesson_schedules.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['student_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('lesson_schedule_id', 'student_id')
    )

    op.create_table(
        'lesson_completions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['student_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('lesson_id', 'student_id', name='uq_lesson_completions_lesson_student')
    )
    op.create_index(op.f('ix_lesson_completions_id'), 'lesson_completions', ['id'], unique=False)
    op.create_index(op.f('ix_lesson_completions_lesson_id'), 'lesson_completions', ['lesson_id'], unique=False)
    op.create_index(op.f('ix_lesson_completions_student_id'), 'lesson_completions', ['student_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_lesson_completions_student_id'), table_name='lesson_completions')
    op.drop_index(op.f('ix_lesson_completions_lesson_id'), table_name='lesson_completions')
    op.drop_index(op.f('ix_lesson_completions_id'), table_name='lesson_completions')
    op.drop_table('lesson_completions')
    op.drop_table('lesson_schedule_students')
    op.drop_index(op.f('ix_lesson_schedules_lesson_id'), table_name='lesson_schedules')
    op.drop_index(op.f('ix_lesson_schedules_start_date'), table_name='lesson_schedules')
    op.drop_index(op.f('ix_lesson_schedules_id'), table_name='lesson_schedules')
    op.drop_table('lesson_schedules')
    op.drop_index(op.f('ix_lessons_school_year_id'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_teacher_id'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_slug'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_title'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_id'), table_name='lessons')
    op.drop_table('lessons')
    op.drop_index(op.f('ix_student_accounts_teacher_id'), table_name='student_accounts')
    op.drop_index(op.f('ix_student_accounts_email'), table_name='student_accounts')
    op.drop_index(op.f('ix_student_accounts_full_name'), table_name='student_accounts')
    op.drop_index(op.f('ix_student_accounts_id'), table_name='student_accounts')
    op.drop_table('student_accounts')
    op.drop_table('school_year_teachers')
    op.drop_index(op.f('ix_teacher_accounts_email'), table_name='teacher_accounts')
    op.drop_index(op.f('ix_teacher_accounts_full_name'), table_name='teacher_accounts')
    op.drop_index(op.f('ix_teacher_accounts_id'), table_name='teacher_accounts')
    op.drop_table('teacher_accounts')
    op.drop_index(op.f('ix_school_years_id'), table_name='school_years')
    op.drop_table('school_years')
    approval_status.drop(op.get_bind(), checkfirst=True)
    record_status.drop(op.get_bind(), checkfirst=True)
