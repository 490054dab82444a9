"""add plan usage counters to users

Revision ID: b2e6d4a81c57
Revises: 7f3b1c2d9a10
Create Date: 2026-10-17 12:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = 'b2e6d4a81c57'
down_revision = '7f3b1c2d9a10'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.add_column(sa.Column('plan', sa.String(length=20), server_default=sa.text("'free'"), nullable=False))
        batch_op.add_column(sa.Column('resumes_uploaded', sa.Integer(), server_default=sa.text('0'), nullable=False))
        batch_op.add_column(sa.Column('analyses_performed', sa.Integer(), server_default=sa.text('0'), nullable=False))
        batch_op.add_column(sa.Column('usage_reset_at', sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column('resumes_per_month', sa.Integer(), server_default=sa.text('3'), nullable=False))
        batch_op.add_column(sa.Column('analyses_per_month', sa.Integer(), server_default=sa.text('10'), nullable=False))
        batch_op.create_check_constraint(
            op.f('ck_users_plan_allowed'), "plan IN ('free', 'pro', 'enterprise')"
        )


def downgrade():
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.drop_constraint(op.f('ck_users_plan_allowed'), type_='check')
        batch_op.drop_column('analyses_per_month')
        batch_op.drop_column('resumes_per_month')
        batch_op.drop_column('usage_reset_at')
        batch_op.drop_column('analyses_performed')
        batch_op.drop_column('resumes_uploaded')
        batch_op.drop_column('plan')
