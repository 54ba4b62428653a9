"""Initial schema with RLS

Revision ID: 4b1f0c2ad7e9
Revises:
Create Date: 2026-10-12 10:30:41.204113+00:00

This migration creates:
1. Core tables (organizations, users, organization_members, services, visitors)
2. Indexes for month/year windows and visitor counts
3. Row-Level Security (RLS) policies for tenant isolation on services and visitors
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1f0c2ad7e9'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""

    # =========================================================================
    # 1. CREATE TABLES
    # =========================================================================

    # Organizations (no organization_id since it IS the tenant)
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, comment='Organization name'),
        sa.Column('type', sa.String(100), nullable=False, comment='Category label (church, fellowship, ministry, ...)'),
        sa.Column('country', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False, server_default=''),
        sa.Column('owner_id', sa.Uuid(), nullable=False, comment='User who created the organization'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='UTC'),
        sa.Column('estimated_attendance', sa.String(50), nullable=True),
        sa.Column('how_did_you_hear', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_organizations_owner_id', 'organizations', ['owner_id'])

    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, comment='Email address (used for login)'),
        sa.Column('full_name', sa.String(255), nullable=False, server_default=''),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Memberships (composite key = set semantics)
    op.create_table(
        'organization_members',
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_organization_members_organization_id', 'organization_members', ['organization_id'])

    # Services (attendance records)
    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('service_day', sa.Date(), nullable=False, comment='Calendar day of service_date'),
        sa.Column('service_type', sa.String(100), nullable=False),
        sa.Column('total_attendance', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint(
            'total_attendance >= 1 AND total_attendance <= 1000000',
            name='ck_services_total_attendance_range',
        ),
    )
    op.create_index('ix_services_organization_id', 'services', ['organization_id'])
    op.create_index('idx_services_organization_date', 'services', ['organization_id', 'service_date'])

    # Visitors (children of services)
    op.create_table(
        'visitors',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('organization_id', sa.Uuid(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('visitor_name', sa.String(100), nullable=True),
        sa.Column('visitor_contact', sa.String(500), nullable=True),
        sa.Column('visit_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_visitors_organization_id', 'visitors', ['organization_id'])
    op.create_index('ix_visitors_service_id', 'visitors', ['service_id'])
    op.create_index('idx_visitors_organization_service', 'visitors', ['organization_id', 'service_id'])

    # =========================================================================
    # 2. ENABLE ROW-LEVEL SECURITY (RLS)
    # =========================================================================

    op.execute('ALTER TABLE services ENABLE ROW LEVEL SECURITY')
    op.execute('ALTER TABLE visitors ENABLE ROW LEVEL SECURITY')

    # =========================================================================
    # 3. CREATE RLS POLICIES
    # =========================================================================

    # NULLIF: an unset or empty setting matches no rows
    op.execute("""
        CREATE POLICY services_tenant_isolation ON services
        USING (organization_id = NULLIF(current_setting('app.organization_id', TRUE), '')::UUID)
        WITH CHECK (organization_id = NULLIF(current_setting('app.organization_id', TRUE), '')::UUID)
    """)

    op.execute("""
        CREATE POLICY visitors_tenant_isolation ON visitors
        USING (organization_id = NULLIF(current_setting('app.organization_id', TRUE), '')::UUID)
        WITH CHECK (organization_id = NULLIF(current_setting('app.organization_id', TRUE), '')::UUID)
    """)


def downgrade() -> None:
    """Downgrade database schema."""

    # =========================================================================
    # 1. DROP RLS POLICIES
    # =========================================================================
    op.execute('DROP POLICY IF EXISTS visitors_tenant_isolation ON visitors')
    op.execute('DROP POLICY IF EXISTS services_tenant_isolation ON services')

    # =========================================================================
    # 2. DROP TABLES
    # =========================================================================
    op.drop_table('visitors')
    op.drop_table('services')
    op.drop_table('organization_members')
    op.drop_table('users')
    op.drop_table('organizations')
