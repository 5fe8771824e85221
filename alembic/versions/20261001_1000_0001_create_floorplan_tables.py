"""create floor plan tables

Revision ID: 0001_create_floorplan_tables
Revises:
Create Date: 2026-10-01 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_floorplan_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create table catalog
    op.create_table('tables',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('default_x', sa.Integer(), nullable=False),
        sa.Column('default_y', sa.Integer(), nullable=False),
        sa.Column('width', sa.Integer(), nullable=False),
        sa.Column('height', sa.Integer(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create layout_instances table
    op.create_table('layout_instances',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('layout_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('layout_date')
    )

    # Create table_groups table
    op.create_table('table_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('layout_instance_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['layout_instance_id'], ['layout_instances.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index(op.f('ix_table_groups_layout_instance_id'), 'table_groups', ['layout_instance_id'], unique=False)

    # Create table_state table
    op.create_table('table_state',
        sa.Column('layout_instance_id', sa.Integer(), nullable=False),
        sa.Column('table_id', sa.Integer(), nullable=False),
        sa.Column('x', sa.Integer(), nullable=False),
        sa.Column('y', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['layout_instance_id'], ['layout_instances.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['table_id'], ['tables.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['table_groups.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('layout_instance_id', 'table_id')
    )
    op.create_index('idx_table_state_layout', 'table_state', ['layout_instance_id'], unique=False)
    op.create_index('idx_table_state_group', 'table_state', ['group_id'], unique=False)

    # Create reservations table
    op.create_table('reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('layout_instance_id', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('time', sa.String(length=5), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('party_size > 0', name='chk_reservation_party_size'),
        sa.ForeignKeyConstraint(['layout_instance_id'], ['layout_instances.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['table_groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', name='uix_reservation_group'),
        sqlite_autoincrement=True
    )
    op.create_index(op.f('ix_reservations_layout_instance_id'), 'reservations', ['layout_instance_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_reservations_layout_instance_id'), table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('idx_table_state_group', table_name='table_state')
    op.drop_index('idx_table_state_layout', table_name='table_state')
    op.drop_table('table_state')
    op.drop_index(op.f('ix_table_groups_layout_instance_id'), table_name='table_groups')
    op.drop_table('table_groups')
    op.drop_table('layout_instances')
    op.drop_table('tables')
