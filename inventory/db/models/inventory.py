from sqlalchemy import Boolean, Column, Index, Integer, String, Text
from .base import Base, new_item_id


class InventoryItem(Base):
    # Column names follow the on-disk schema of existing inventory.db files;
    # ModelNumber is newer and is added to older files on startup.
    __tablename__ = 'inventory'
    id = Column('Id', String(36), primary_key=True, default=new_item_id)
    name = Column('Name', Text, nullable=False)
    acquired_date = Column('AcquiredDate', String(10), nullable=True)
    purchase_price = Column('PurchasePrice', Integer, nullable=True)
    purchase_currency = Column('PurchaseCurrency', String(8), nullable=True)
    is_used = Column('IsUsed', Boolean, nullable=True, default=False)
    received_from = Column('ReceivedFrom', Text, nullable=True)
    model_number = Column('ModelNumber', Text, nullable=True)
    serial_number = Column('SerialNumber', Text, nullable=True)
    purchase_reference = Column('PurchaseReference', Text, nullable=True)
    notes = Column('Notes', Text, nullable=True)
    extra = Column('Extra', Text, nullable=True)
    future_purchase = Column('FuturePurchase', Boolean, nullable=True, default=False)

    __table_args__ = (
        Index('idx_inventory_name', 'Name'),
        Index('idx_inventory_acquired_date', 'AcquiredDate'),
    )

    def __repr__(self) -> str:
        return f"<InventoryItem id={self.id!r} name={self.name!r}>"
