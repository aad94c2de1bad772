from decimal import Decimal
from datetime import datetime

from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, UniqueConstraint
from backend.db import Base
from sqlalchemy.orm import relationship


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", "month", "year", name="uq_budget_user_category_period"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)

    amount = Column(Numeric(18, 2), nullable=False)
    spent_amount = Column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="budgets")
    category = relationship("Category", back_populates="budgets")

    @property
    def remaining_amount(self) -> Decimal:
        return Decimal(self.amount or 0) - Decimal(self.spent_amount or 0)

    @property
    def percentage_used(self) -> Decimal:
        amount = Decimal(self.amount or 0)
        if amount <= 0:
            return Decimal("0")
        return Decimal(self.spent_amount or 0) / amount * 100
