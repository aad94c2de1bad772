from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from backend.schemas.base import CamelModel
from backend.utils.validators import MAX_ID, MIN_BUDGET_YEAR, check_amount, max_year


def _check_year(value):
    if value < MIN_BUDGET_YEAR:
        raise ValueError(f"Year must be {MIN_BUDGET_YEAR} or later.")
    if value > max_year():
        raise ValueError(f"Year must be {max_year()} or earlier.")
    return value


class BudgetRequest(CamelModel):
    amount: Decimal
    month: int = Field(ge=1, le=12)
    year: int
    category_id: int = Field(gt=0, le=MAX_ID)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value):
        return check_amount(value, "Budget amount")

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        return _check_year(value)


class CreateBudgetRequest(BudgetRequest):
    pass


class UpdateBudgetRequest(BudgetRequest):
    pass


class BudgetFilter(CamelModel):
    category_id: Optional[int] = Field(default=None, gt=0, le=MAX_ID)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        return value if value is None else _check_year(value)


class BudgetOut(CamelModel):
    id: int
    amount: float
    spent_amount: float
    remaining_amount: float
    percentage_used: float
    month: int
    year: int
    category_id: int
    category_name: str
    category_color: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class BudgetProgress(CamelModel):
    budget_id: int
    category_id: int
    category_name: str
    category_color: str
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    progress_percentage: float
    is_over_budget: bool
    month: int
    year: int
