"""SQLAlchemy ORM models for the Bank API service."""
from datetime import datetime, timezone

from sqlalchemy import Column, BigInteger, DateTime, Integer, Text

from bankapi.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountRecord(Base):
    """Persisted bank account."""
    __tablename__ = "account"

    # Integer (not BigInteger) so SQLite treats it as the rowid alias
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    number = Column(BigInteger, nullable=False, unique=True, index=True)
    encrypted_password = Column(Text, nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
