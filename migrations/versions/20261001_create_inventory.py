"""
Create the inventory table.

Matches the table written by the earlier command-line tool (PascalCase
columns, no ModelNumber), so existing inventory.db files can be stamped at
this revision and then upgraded.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'inventory_20261001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'inventory',
        sa.Column('Id', sa.String(length=36), primary_key=True),
        sa.Column('Name', sa.Text(), nullable=False),
        sa.Column('AcquiredDate', sa.String(length=10), nullable=True),
        sa.Column('PurchasePrice', sa.Integer(), nullable=True),
        sa.Column('PurchaseCurrency', sa.String(length=8), nullable=True),
        sa.Column('IsUsed', sa.Boolean(), nullable=True),
        sa.Column('ReceivedFrom', sa.Text(), nullable=True),
        sa.Column('SerialNumber', sa.Text(), nullable=True),
        sa.Column('PurchaseReference', sa.Text(), nullable=True),
        sa.Column('Notes', sa.Text(), nullable=True),
        sa.Column('Extra', sa.Text(), nullable=True),
        sa.Column('FuturePurchase', sa.Boolean(), nullable=True),
    )
    op.create_index('idx_inventory_name', 'inventory', ['Name'])
    op.create_index('idx_inventory_acquired_date', 'inventory', ['AcquiredDate'])


def downgrade() -> None:
    op.drop_index('idx_inventory_acquired_date', table_name='inventory')
    op.drop_index('idx_inventory_name', table_name='inventory')
    op.drop_table('inventory')
