from datetime import date
from typing import Annotated, Optional

from fastapi import Path, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from backend.schemas.budget_schemas import BudgetFilter
from backend.schemas.transaction_schemas import TransactionFilter
from backend.utils.validators import MAX_ID

# Path ids beyond the key range fail validation instead of reaching the database
EntityId = Annotated[int, Path(le=MAX_ID)]


def _build(model, **values):
    # Query params are validated through the model so its rules apply;
    # failures surface as a normal request validation error (400 envelope)
    try:
        return model(**{model.model_fields[k].alias or k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        errors = []
        for error in e.errors():
            error = dict(error)
            error["loc"] = ("query",) + tuple(error.get("loc", ()))
            errors.append(error)
        raise RequestValidationError(errors)


def transaction_filter(
    type: Optional[int] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
) -> TransactionFilter:
    return _build(
        TransactionFilter,
        type=type,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )


def budget_filter(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
) -> BudgetFilter:
    return _build(BudgetFilter, category_id=category_id, month=month, year=year)
