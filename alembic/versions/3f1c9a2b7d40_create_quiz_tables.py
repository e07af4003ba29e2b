"""create_quiz_tables

Revision ID: 3f1c9a2b7d40
Revises:
Create Date: 2026-10-16 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('quizzes',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('time_limit', sa.Integer(), nullable=True),
        sa.Column('course_id', sa.String(64), nullable=False),
        sa.Column('lesson_id', sa.String(64), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quizzes_id', 'quizzes', ['id'])
    op.create_index('ix_quizzes_course_id', 'quizzes', ['course_id'])
    op.create_index('ix_quizzes_lesson_id', 'quizzes', ['lesson_id'])

    op.create_table('quiz_questions',
        sa.Column('pk', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('slot_count', sa.Integer(), nullable=True),
        sa.Column('explanation', sa.Text(), nullable=True),
        sa.Column('options_json', sa.Text(), nullable=True),
        sa.Column('correct_answers_json', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('pk'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('quiz_id', 'id', name='uq_quiz_question_id')
    )
    op.create_index('ix_quiz_questions_pk', 'quiz_questions', ['pk'])
    op.create_index('ix_quiz_questions_quiz_id', 'quiz_questions', ['quiz_id'])

    op.create_table('quiz_submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quiz_id', sa.String(64), nullable=False),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('answers_json', sa.Text(), nullable=True),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('highest_score', sa.Integer(), nullable=False),
        sa.Column('attempt_count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['quiz_id'], ['quizzes.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('quiz_id', 'user_id', name='uq_submission_quiz_user')
    )
    op.create_index('ix_quiz_submissions_id', 'quiz_submissions', ['id'])
    op.create_index('ix_quiz_submissions_quiz_id', 'quiz_submissions', ['quiz_id'])
    op.create_index('ix_quiz_submissions_user_id', 'quiz_submissions', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_quiz_submissions_user_id', table_name='quiz_submissions')
    op.drop_index('ix_quiz_submissions_quiz_id', table_name='quiz_submissions')
    op.drop_index('ix_quiz_submissions_id', table_name='quiz_submissions')
    op.drop_table('quiz_submissions')
    op.drop_index('ix_quiz_questions_quiz_id', table_name='quiz_questions')
    op.drop_index('ix_quiz_questions_pk', table_name='quiz_questions')
    op.drop_table('quiz_questions')
    op.drop_index('ix_quizzes_lesson_id', table_name='quizzes')
    op.drop_index('ix_quizzes_course_id', table_name='quizzes')
    op.drop_index('ix_quizzes_id', table_name='quizzes')
    op.drop_table('quizzes')
