from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from backend.models.transaction import TransactionType
from backend.schemas.base import CamelModel
from backend.utils.validators import MAX_ID, check_amount


class TransactionRequest(CamelModel):
    amount: Decimal
    description: str = Field(min_length=1, max_length=500)
    date: date
    type: TransactionType
    category_id: int = Field(gt=0, le=MAX_ID)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value):
        return check_amount(value)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value):
        if not value.strip():
            raise ValueError("Description is required.")
        return value

    @field_validator("date")
    @classmethod
    def validate_date(cls, value):
        if value > date.today() + timedelta(days=1):
            raise ValueError("Transactions cannot be dated in the future.")
        return value


class CreateTransactionRequest(TransactionRequest):
    pass


class UpdateTransactionRequest(TransactionRequest):
    pass


class TransactionFilter(CamelModel):
    type: Optional[TransactionType] = None
    category_id: Optional[int] = Field(default=None, gt=0, le=MAX_ID)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    page: int = Field(default=1, gt=0, le=MAX_ID)
    page_size: int = Field(default=10, gt=0, le=1000)

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("Start date cannot be after end date.")
        return self


class TransactionOut(CamelModel):
    id: int
    amount: float
    description: str
    date: date
    type: TransactionType
    category_id: int
    category_name: str
    category_color: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class PaginatedTransactions(CamelModel):
    transactions: List[TransactionOut]
    total_count: int
    page: int
    page_size: int
    total_pages: int


class MonthlySummary(CamelModel):
    total_income: float
    total_expense: float
    balance: float
    month: int
    year: int


class MonthlyTrend(CamelModel):
    month: int
    year: int
    income: float
    expense: float
    balance: float


class CategorySpending(CamelModel):
    category_id: int
    category_name: str
    category_color: str
    total_amount: float
    transaction_count: int
    percentage: float
