"""Initial migration - organizations, licenses, devices, health_metrics

Revision ID: 001
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Organizations table
    op.create_table(
        'organizations',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('subscription_status', sa.String(30), nullable=True),
        sa.Column('device_limit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # Licenses table
    op.create_table(
        'licenses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('license_key', sa.String(100), unique=True, index=True, nullable=False),
        sa.Column('organization_id', sa.String(64), sa.ForeignKey('organizations.id'), index=True, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('tier', sa.String(30), nullable=True),
        sa.Column('device_limit', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    # Devices table
    op.create_table(
        'devices',
        sa.Column('device_id', sa.String(100), primary_key=True),
        sa.Column('license_key', sa.String(100), index=True, nullable=True),
        sa.Column('device_name', sa.String(200), nullable=True),
        sa.Column('hostname', sa.String(200), nullable=True),
        sa.Column('os_name', sa.String(100), nullable=True),
        sa.Column('os_version', sa.String(100), nullable=True),
        sa.Column('device_type', sa.String(50), nullable=True),
        sa.Column('mac_address', sa.String(50), nullable=True),
        sa.Column('ip_address', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('activation_date', sa.DateTime(), nullable=True),
        sa.Column('last_seen', sa.TIMESTAMP(timezone=True), nullable=True),
    )

    # Health metrics table
    op.create_table(
        'health_metrics',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('device_id', sa.String(100), sa.ForeignKey('devices.device_id'), index=True, nullable=False),
        sa.Column('metric_type', sa.String(50), index=True, nullable=False),
        sa.Column('timestamp', sa.TIMESTAMP(timezone=True), index=True, nullable=False),
        sa.Column('value', sa.Float(), nullable=True),
        sa.Column('performance_metrics', sa.JSON(), nullable=True),
        sa.Column('disk_health', sa.JSON(), nullable=True),
        sa.Column('memory_health', sa.JSON(), nullable=True),
        sa.Column('network_health', sa.JSON(), nullable=True),
        sa.Column('service_health', sa.JSON(), nullable=True),
        sa.Column('security_health', sa.JSON(), nullable=True),
    )

    # Latest-record lookups per device and type
    op.create_index(
        'idx_health_metrics_device_type_ts',
        'health_metrics',
        ['device_id', 'metric_type', sa.text('timestamp DESC')],
    )


def downgrade() -> None:
    op.drop_index('idx_health_metrics_device_type_ts', table_name='health_metrics')
    op.drop_table('health_metrics')
    op.drop_table('devices')
    op.drop_table('licenses')
    op.drop_table('organizations')
