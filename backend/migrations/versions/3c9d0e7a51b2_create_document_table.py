"""create document table for lobby, code map and player index documents

Revision ID: 3c9d0e7a51b2
Revises:
Create Date: 2026-10-18 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9d0e7a51b2'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'document' in set(insp.get_table_names()):
        return
    op.create_table(
        'document',
        sa.Column('path', sa.String(length=255), primary_key=True),
        sa.Column('value', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )


def downgrade():
    op.drop_table('document')
