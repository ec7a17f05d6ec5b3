"""Initial schema: users, sites, services, assets, assessments and registers

Revision ID: 7c1e2d9a4b30
Revises:
Create Date: 2026-10-19 10:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '7c1e2d9a4b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Shared by risks.criticality and issues.severity, so created once up front
severity = postgresql.ENUM('CRITICAL', 'HIGH', 'MEDIUM', 'LOW', name='severity', create_type=False)

ENUM_TYPES = (
    'sitetype', 'sitetier', 'businessimpact', 'criticality',
    'assessmentstatus', 'riskstatus', 'issuestatus', 'severity',
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    severity.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('lark_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('avatar_url', sa.String(length=2000), nullable=True),
        sa.Column('lark_access_token', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_lark_id'), 'users', ['lark_id'], unique=True)

    op.create_table(
        'office_sites',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('city', sa.String(length=255), nullable=False),
        sa.Column('country', sa.String(length=255), nullable=False),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=100), nullable=False),
        sa.Column('type', sa.Enum('OFFICE', 'DATA_CENTER', 'WAREHOUSE', 'OTHER',
                                  name='sitetype'), nullable=False),
        sa.Column('tier', sa.Enum('TIER_1', 'TIER_2', 'TIER_3', name='sitetier'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False),
        sa.Column('employee_count', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_office_sites_name'), 'office_sites', ['name'], unique=True)

    op.create_table(
        'it_services',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('business_impact', sa.Enum('CRITICAL', 'HIGH', 'MEDIUM', 'LOW',
                                             name='businessimpact'), nullable=False),
        sa.Column('responsible', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_it_services_name'), 'it_services', ['name'], unique=True)
    op.create_index(op.f('ix_it_services_category'), 'it_services', ['category'], unique=False)

    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=False),
        sa.Column('service_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('criticality', sa.Enum('HIGH', 'MEDIUM', 'LOW', name='criticality'),
                  nullable=False),
        sa.Column('owner', sa.String(length=255), nullable=False),
        sa.Column('vendor', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['office_sites.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_id'], ['it_services.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assets_site_id'), 'assets', ['site_id'], unique=False)
    op.create_index(op.f('ix_assets_service_id'), 'assets', ['service_id'], unique=False)
    op.create_index('ix_assets_site_service', 'assets', ['site_id', 'service_id'], unique=False)

    op.create_table(
        'config_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('manufacturer', sa.String(length=255), nullable=False),
        sa.Column('eol_date', sa.Date(), nullable=True),
        sa.Column('eow_date', sa.Date(), nullable=True),
        sa.Column('rma', sa.String(length=50), nullable=False),
        sa.Column('in_use', sa.Integer(), nullable=False),
        sa.Column('in_stock', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_config_items_asset_id'), 'config_items', ['asset_id'], unique=False)

    op.create_table(
        'assessments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=False),
        sa.Column('service_id', sa.Integer(), nullable=True),
        sa.Column('assessed_by_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.Enum('IN_PROGRESS', 'COMPLETED', name='assessmentstatus'),
                  nullable=False),
        sa.Column('overall_score', sa.Float(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('formula_settings', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['office_sites.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_id'], ['it_services.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['assessed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_assessments_site_id'), 'assessments', ['site_id'], unique=False)
    op.create_index(op.f('ix_assessments_status'), 'assessments', ['status'], unique=False)
    op.create_index(op.f('ix_assessments_completed_at'), 'assessments', ['completed_at'],
                    unique=False)

    op.create_table(
        'parameter_scores',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('assessment_id', sa.Integer(), nullable=False),
        sa.Column('asset_id', sa.Integer(), nullable=False),
        sa.Column('parameter_id', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=True),
        sa.Column('value', sa.String(length=2000), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assessment_id', 'asset_id', 'parameter_id',
                            name='uq_parameter_score_entry'),
    )
    op.create_index(op.f('ix_parameter_scores_assessment_id'), 'parameter_scores',
                    ['assessment_id'], unique=False)

    op.create_table(
        'risks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('status', sa.Enum('OPEN', 'MITIGATED', 'ACCEPTED', 'CLOSED',
                                    name='riskstatus'), nullable=False),
        sa.Column('impact', sa.String(length=50), nullable=False),
        sa.Column('probability', sa.String(length=50), nullable=False),
        sa.Column('criticality', severity, nullable=False),
        sa.Column('mitigation_plan', sa.Text(), nullable=False),
        sa.Column('assigned_to', sa.String(length=255), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('site_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['office_sites.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_risks_status'), 'risks', ['status'], unique=False)
    op.create_index(op.f('ix_risks_site_id'), 'risks', ['site_id'], unique=False)

    op.create_table(
        'issues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('site_id', sa.Integer(), nullable=True),
        sa.Column('severity', severity, nullable=False),
        sa.Column('status', sa.Enum('OPEN', 'IN_PROGRESS', 'RESOLVED', 'CLOSED',
                                    name='issuestatus'), nullable=False),
        sa.Column('reported_by', sa.String(length=255), nullable=False),
        sa.Column('reported_date', sa.Date(), nullable=False),
        sa.Column('resolved_date', sa.Date(), nullable=True),
        sa.Column('owner', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['site_id'], ['office_sites.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_issues_site_id'), 'issues', ['site_id'], unique=False)
    op.create_index(op.f('ix_issues_status'), 'issues', ['status'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_issues_status'), table_name='issues')
    op.drop_index(op.f('ix_issues_site_id'), table_name='issues')
    op.drop_table('issues')
    op.drop_index(op.f('ix_risks_site_id'), table_name='risks')
    op.drop_index(op.f('ix_risks_status'), table_name='risks')
    op.drop_table('risks')
    op.drop_index(op.f('ix_parameter_scores_assessment_id'), table_name='parameter_scores')
    op.drop_table('parameter_scores')
    op.drop_index(op.f('ix_assessments_completed_at'), table_name='assessments')
    op.drop_index(op.f('ix_assessments_status'), table_name='assessments')
    op.drop_index(op.f('ix_assessments_site_id'), table_name='assessments')
    op.drop_table('assessments')
    op.drop_index(op.f('ix_config_items_asset_id'), table_name='config_items')
    op.drop_table('config_items')
    op.drop_index('ix_assets_site_service', table_name='assets')
    op.drop_index(op.f('ix_assets_service_id'), table_name='assets')
    op.drop_index(op.f('ix_assets_site_id'), table_name='assets')
    op.drop_table('assets')
    op.drop_index(op.f('ix_it_services_category'), table_name='it_services')
    op.drop_index(op.f('ix_it_services_name'), table_name='it_services')
    op.drop_table('it_services')
    op.drop_index(op.f('ix_office_sites_name'), table_name='office_sites')
    op.drop_table('office_sites')
    op.drop_index(op.f('ix_users_lark_id'), table_name='users')
    op.drop_table('users')

    # Enum types outlive their tables in PostgreSQL
    bind = op.get_bind()
    for name in ENUM_TYPES:
        sa.Enum(name=name).drop(bind, checkfirst=True)
