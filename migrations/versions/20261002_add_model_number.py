"""
Add the ModelNumber column to inventory.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'inventory_20261002'
down_revision = 'inventory_20261001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('inventory', sa.Column('ModelNumber', sa.Text(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table('inventory') as batch:
        batch.drop_column('ModelNumber')
