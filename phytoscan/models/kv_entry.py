"""KVEntry model backing the SQL key-value storage."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from phytoscan.database import Base


class KVEntry(Base):
    """One named string blob (e.g. the serialized history log)."""

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<KVEntry(key={self.key}, size={len(self.value or '')})>"
