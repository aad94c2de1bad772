import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey
from backend.db import Base
from sqlalchemy.orm import relationship


class TransactionType(enum.IntEnum):
    INCOME = 1
    EXPENSE = 2


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)

    amount = Column(Numeric(18, 2), nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(Date, nullable=False, index=True)
    type = Column(Integer, nullable=False)  # TransactionType value

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")

    @property
    def is_expense(self):
        return self.type == TransactionType.EXPENSE
