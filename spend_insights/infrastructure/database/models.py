"""SQLAlchemy ORM models for the transaction store"""

import uuid
from sqlalchemy import Column, Float, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class TransactionRecord(Base):
    """User transaction (positive amount = spend, negative = income)"""

    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=True, default="")
    date = Column(DateTime(timezone=False), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
