"""initial schema

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-16
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('email'),
    )
    op.create_table('drivers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('license', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table('clients',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_clients_name', 'clients', ['name'])
    op.create_table('companies',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_table('trips',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('created_by_user_id', sa.String(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('driver_id', sa.String(), sa.ForeignKey('drivers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('client_id', sa.String(), sa.ForeignKey('clients.id', ondelete='RESTRICT'), nullable=True),
        sa.Column('company_id', sa.String(), sa.ForeignKey('companies.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('vehicle_type', sa.String(length=20), nullable=True),
        sa.Column('cnf', sa.String(), nullable=True),
        sa.Column('flight_number', sa.String(), nullable=True),
        sa.Column('meet_greet', sa.Text(), nullable=False, server_default=''),
        sa.Column('client_phone', sa.String(), nullable=True),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('origin', sa.String(), nullable=False),
        sa.Column('destination', sa.String(), nullable=False),
        sa.Column('stop', sa.String(), nullable=True),
        sa.Column('miles', sa.Float(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('received', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_trips_created_by_user_id', 'trips', ['created_by_user_id'])
    op.create_index('ix_trips_driver_id', 'trips', ['driver_id'])
    op.create_index('ix_trips_client_id', 'trips', ['client_id'])
    op.create_index('ix_trips_company_id', 'trips', ['company_id'])
    op.create_index('ix_trips_start_at', 'trips', ['start_at'])
    op.create_index('ix_trips_cnf', 'trips', ['cnf'])
    op.create_index('ix_trips_flight_number', 'trips', ['flight_number'])
    op.create_index('ix_trips_meet_greet', 'trips', ['meet_greet'])

def downgrade():
    op.drop_table('trips')
    op.drop_table('companies')
    op.drop_table('clients')
    op.drop_table('drivers')
    op.drop_table('users')
