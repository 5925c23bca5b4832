"""create user, budget, savings goal, transaction and progress tables

Revision ID: 5b2e0c7d41a9
Revises:
Create Date: 2026-10-18 10:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b2e0c7d41a9'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False, server_default='America/Chicago'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_email', 'user', ['email'], unique=True)

    op.create_table(
        'savings_goal',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('current_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('target_amount', sa.Float(), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('status', sa.Enum('active', 'completed', 'archived', name='goalstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_savings_goal_user_id', 'savings_goal', ['user_id'])

    # linked_savings_goal_id and budget_id are weak references: no FKs
    op.create_table(
        'budget',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('expense_allocation', sa.Float(), nullable=False, server_default='0'),
        sa.Column('savings_allocation', sa.Float(), nullable=False, server_default='0'),
        sa.Column('expense_spent', sa.Float(), nullable=False, server_default='0'),
        sa.Column('linked_savings_goal_id', sa.Integer(), nullable=True),
        sa.Column('last_reset', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_budget_user_id', 'budget', ['user_id'])
    op.create_index('ix_budget_linked_savings_goal_id', 'budget', ['linked_savings_goal_id'])

    op.create_table(
        'transaction',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('type', sa.Enum('income', 'expense', name='transactiontype'), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False, server_default=''),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('budget_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_transaction_user_id', 'transaction', ['user_id'])
    op.create_index('ix_transaction_date', 'transaction', ['date'])
    op.create_index('ix_transaction_budget_id', 'transaction', ['budget_id'])

    op.create_table(
        'goal_progress_history',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('goal_id', sa.Integer(), nullable=False),
        sa.Column('goal_name', sa.String(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('added_amount', sa.Float(), nullable=True),
        sa.Column('added_by', sa.Enum('user', 'ai', 'monthly_transfer', name='contributionsource'), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_goal_progress_history_user_id', 'goal_progress_history', ['user_id'])
    op.create_index('ix_goal_progress_history_goal_id', 'goal_progress_history', ['goal_id'])


def downgrade() -> None:
    op.drop_table('goal_progress_history')
    op.drop_table('transaction')
    op.drop_table('budget')
    op.drop_table('savings_goal')
    op.drop_index('ix_user_email', table_name='user')
    op.drop_table('user')
