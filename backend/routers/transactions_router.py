from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from backend.db import get_db
from backend.routers.dependencies import EntityId, transaction_filter
from backend.schemas.transaction_schemas import (
    CategorySpending,
    CreateTransactionRequest,
    MonthlySummary,
    MonthlyTrend,
    PaginatedTransactions,
    TransactionFilter,
    TransactionOut,
    UpdateTransactionRequest,
)
from backend.services import report_service, transaction_service
from backend.utils.security import get_current_user_id

transactions_router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@transactions_router.get("", response_model=PaginatedTransactions)
def list_transactions(
    txn_filter: TransactionFilter = Depends(transaction_filter),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return transaction_service.get_transactions(db, txn_filter, user_id)


# Reports (declared before /{transaction_id})
@transactions_router.get("/summary", response_model=MonthlySummary)
def monthly_summary(
    year: int = Query(...),
    month: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return report_service.get_monthly_summary(db, year, month, user_id)


@transactions_router.get("/trends", response_model=List[MonthlyTrend])
def monthly_trends(
    months_back: int = Query(6, alias="monthsBack"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return report_service.get_monthly_trends(db, months_back, user_id)


@transactions_router.get("/category-spending", response_model=List[CategorySpending])
def category_spending(
    year: int = Query(...),
    month: int = Query(...),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return report_service.get_category_spending(db, year, month, user_id)


@transactions_router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return transaction_service.get_transaction(db, transaction_id, user_id)


@transactions_router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(body: CreateTransactionRequest, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return transaction_service.create_transaction(db, body, user_id)


@transactions_router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: EntityId,
    body: UpdateTransactionRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return transaction_service.update_transaction(db, transaction_id, body, user_id)


@transactions_router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: EntityId, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    transaction_service.delete_transaction(db, transaction_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
