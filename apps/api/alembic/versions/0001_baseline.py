"""Baseline migration - profiles, invitations, marketplace and ledger tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Table and column names follow the backend contract (camelCase columns on
the marketplace tables, snake_case on invitations).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())
        for name in names
    ]


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Profiles
    # ==========================================================================
    op.create_table(
        'User',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('is_superadmin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('provisioned_via', sa.String(20), nullable=False),
        *_timestamps('createdAt', 'updatedAt'),
    )
    op.create_index('ix_user_role', 'User', ['role'])

    # ==========================================================================
    # Invitations
    # ==========================================================================
    op.create_table(
        'invitations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('token', sa.String(64), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column(
            'invited_by',
            sa.String(64),
            sa.ForeignKey('User.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps('created_at', 'updated_at'),
    )
    op.create_index('ix_invitations_invited_by', 'invitations', ['invited_by'])
    op.create_index('ix_invitations_email', 'invitations', ['email'])

    # ==========================================================================
    # Categories
    # ==========================================================================
    op.create_table(
        'ProjectCategory',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        sa.Column(
            'managerId',
            sa.String(64),
            sa.ForeignKey('User.id', ondelete='CASCADE'),
            nullable=False,
        ),
        *_timestamps('createdAt', 'updatedAt'),
    )
    op.create_table(
        'CategoryStatus',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'categoryId',
            sa.String(36),
            sa.ForeignKey('ProjectCategory.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps('createdAt'),
    )

    # ==========================================================================
    # Projects and offers
    # ==========================================================================
    op.create_table(
        'Project',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('budget', sa.Numeric(12, 2), nullable=True),
        sa.Column('deadline', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='OPEN'),
        sa.Column(
            'managerId',
            sa.String(64),
            sa.ForeignKey('User.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'categoryId',
            sa.String(36),
            sa.ForeignKey('ProjectCategory.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column(
            'statusId',
            sa.String(36),
            sa.ForeignKey('CategoryStatus.id', ondelete='SET NULL'),
            nullable=True,
        ),
        *_timestamps('createdAt', 'updatedAt'),
    )
    op.create_index('ix_project_manager', 'Project', ['managerId'])
    op.create_index('ix_project_status', 'Project', ['status'])

    op.create_table(
        'Offer',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'projectId',
            sa.String(36),
            sa.ForeignKey('Project.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'freelancerId',
            sa.String(64),
            sa.ForeignKey('User.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('deliveryTime', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        *_timestamps('createdAt'),
    )
    op.create_index('ix_offer_project', 'Offer', ['projectId'])
    op.create_index('ix_offer_freelancer', 'Offer', ['freelancerId'])

    # ==========================================================================
    # Payment ledger
    # ==========================================================================
    op.create_table(
        'Financial',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'projectId',
            sa.String(36),
            sa.ForeignKey('Project.id', ondelete='CASCADE'),
            nullable=False,
            unique=True,
        ),
        sa.Column('acceptedPrice', sa.Numeric(12, 2), nullable=False),
        sa.Column('estimatedBudget', sa.Numeric(12, 2), nullable=True),
        sa.Column('amountPaid', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('paymentStatus', sa.String(20), nullable=False, server_default='PENDING'),
        *_timestamps('createdAt', 'updatedAt'),
    )
    op.create_table(
        'FinancialUpdate',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'financialId',
            sa.String(36),
            sa.ForeignKey('Financial.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('amount', sa.Numeric(12, 2), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('updatedById', sa.String(64), sa.ForeignKey('User.id'), nullable=False),
        *_timestamps('createdAt'),
    )


def downgrade() -> None:
    op.drop_table('FinancialUpdate')
    op.drop_table('Financial')
    op.drop_index('ix_offer_freelancer', table_name='Offer')
    op.drop_index('ix_offer_project', table_name='Offer')
    op.drop_table('Offer')
    op.drop_index('ix_project_status', table_name='Project')
    op.drop_index('ix_project_manager', table_name='Project')
    op.drop_table('Project')
    op.drop_table('CategoryStatus')
    op.drop_table('ProjectCategory')
    op.drop_index('ix_invitations_email', table_name='invitations')
    op.drop_index('ix_invitations_invited_by', table_name='invitations')
    op.drop_table('invitations')
    op.drop_index('ix_user_role', table_name='User')
    op.drop_table('User')
