"""
Valet transaction and block entry models.

Both tables are written by the driver app; this backend only counts them
for the dashboards.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from valet_backend.app.db.session import Base
from valet_backend.app.models.enums import ValetTransactionStatus, BlockEntryStatus


class ValetTransaction(Base):
    __tablename__ = "valet_transactions"

    transaction_id = Column(Integer, primary_key=True, autoincrement=True)
    location_id = Column(String(20), ForeignKey("locations.location_id"), nullable=False, index=True)
    status = Column(Enum(ValetTransactionStatus, name="valet_transaction_status"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ValetTransaction(id={self.transaction_id}, location='{self.location_id}', status='{self.status.value}')>"


class BlockEntry(Base):
    __tablename__ = "block_entries"

    block_entry_id = Column(Integer, primary_key=True, autoincrement=True)
    location_id = Column(String(20), ForeignKey("locations.location_id"), nullable=False, index=True)
    status = Column(Enum(BlockEntryStatus, name="block_entry_status"), default=BlockEntryStatus.AVAILABLE, nullable=False)

    def __repr__(self):
        return f"<BlockEntry(id={self.block_entry_id}, location='{self.location_id}', status='{self.status.value}')>"
