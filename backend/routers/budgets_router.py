from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from backend.db import get_db
from backend.routers.dependencies import EntityId, budget_filter
from backend.schemas.budget_schemas import BudgetFilter, BudgetOut, BudgetProgress, CreateBudgetRequest, UpdateBudgetRequest
from backend.services import budget_service, report_service
from backend.utils.security import get_current_user_id

budgets_router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@budgets_router.get("", response_model=List[BudgetOut])
def list_budgets(
    filters: BudgetFilter = Depends(budget_filter),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return budget_service.get_budgets(db, filters, user_id)


@budgets_router.get("/progress", response_model=List[BudgetProgress])
def budget_progress(
    year: int = Query(...),
    month: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return report_service.get_budget_progress(db, year, month, user_id)


@budgets_router.get("/{budget_id}", response_model=BudgetOut)
def get_budget(budget_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return budget_service.get_budget(db, budget_id, user_id)


@budgets_router.post("", response_model=BudgetOut, status_code=status.HTTP_201_CREATED)
def create_budget(body: CreateBudgetRequest, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return budget_service.create_budget(db, body, user_id)


@budgets_router.put("/{budget_id}", response_model=BudgetOut)
def update_budget(
    budget_id: EntityId,
    body: UpdateBudgetRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return budget_service.update_budget(db, budget_id, body, user_id)


@budgets_router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(budget_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    budget_service.delete_budget(db, budget_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
