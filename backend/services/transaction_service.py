import math
from decimal import Decimal

from sqlalchemy import desc
from sqlalchemy.orm import Session

from backend.models import Category, Transaction, TransactionType
from backend.schemas.transaction_schemas import (
    CreateTransactionRequest,
    PaginatedTransactions,
    TransactionFilter,
    TransactionOut,
    UpdateTransactionRequest,
)
from backend.services.budget_service import adjust_budget_spent
from backend.services.category_service import get_owned_category
from backend.utils.exceptions import NotFoundException
from backend.utils.logger import get_logger

logger = get_logger("transactions")


def to_transaction_out(transaction: Transaction, category: Category = None) -> TransactionOut:
    category = category or transaction.category
    return TransactionOut(
        id=transaction.id,
        amount=transaction.amount,
        description=transaction.description,
        date=transaction.date,
        type=transaction.type,
        category_id=transaction.category_id,
        category_name=category.name,
        category_color=category.color,
        created_at=transaction.created_at,
        updated_at=transaction.updated_at,
    )


def _get_owned_transaction(db: Session, transaction_id: int, user_id: int) -> Transaction:
    transaction = db.query(Transaction).filter_by(id=transaction_id, user_id=user_id).first()
    if not transaction:
        raise NotFoundException("Transaction", transaction_id)
    return transaction


def get_transactions(db: Session, txn_filter: TransactionFilter, user_id: int) -> PaginatedTransactions:
    query = db.query(Transaction).filter(Transaction.user_id == user_id)

    if txn_filter.type is not None:
        query = query.filter(Transaction.type == int(txn_filter.type))
    if txn_filter.category_id is not None:
        query = query.filter(Transaction.category_id == txn_filter.category_id)
    if txn_filter.start_date is not None:
        query = query.filter(Transaction.date >= txn_filter.start_date)
    if txn_filter.end_date is not None:
        query = query.filter(Transaction.date <= txn_filter.end_date)

    total_count = query.count()

    transactions = (
        query.order_by(desc(Transaction.date), desc(Transaction.created_at), desc(Transaction.id))
        .offset((txn_filter.page - 1) * txn_filter.page_size)
        .limit(txn_filter.page_size)
        .all()
    )

    return PaginatedTransactions(
        transactions=[to_transaction_out(t) for t in transactions],
        total_count=total_count,
        page=txn_filter.page,
        page_size=txn_filter.page_size,
        total_pages=math.ceil(total_count / txn_filter.page_size),
    )


def get_transaction(db: Session, transaction_id: int, user_id: int) -> TransactionOut:
    return to_transaction_out(_get_owned_transaction(db, transaction_id, user_id))


def create_transaction(db: Session, req: CreateTransactionRequest, user_id: int) -> TransactionOut:
    category = get_owned_category(db, req.category_id, user_id)

    transaction = Transaction(
        user_id=user_id,
        category_id=req.category_id,
        amount=req.amount,
        description=req.description,
        date=req.date,
        type=int(req.type),
    )
    db.add(transaction)

    if req.type == TransactionType.EXPENSE:
        adjust_budget_spent(db, req.category_id, user_id, req.date, req.amount)

    db.commit()
    db.refresh(transaction)

    logger.info(f"Transaction {transaction.id} created for user {user_id}")
    return to_transaction_out(transaction, category)


def update_transaction(db: Session, transaction_id: int, req: UpdateTransactionRequest, user_id: int) -> TransactionOut:
    transaction = _get_owned_transaction(db, transaction_id, user_id)
    new_category = get_owned_category(db, req.category_id, user_id)

    # Revert the old expense, then apply the new one
    if transaction.is_expense:
        adjust_budget_spent(db, transaction.category_id, user_id, transaction.date, -Decimal(transaction.amount))
    if req.type == TransactionType.EXPENSE:
        adjust_budget_spent(db, req.category_id, user_id, req.date, req.amount)

    transaction.amount = req.amount
    transaction.description = req.description
    transaction.date = req.date
    transaction.type = int(req.type)
    transaction.category_id = req.category_id

    db.commit()
    db.refresh(transaction)

    logger.info(f"Transaction {transaction_id} updated for user {user_id}")
    return to_transaction_out(transaction, new_category)


def delete_transaction(db: Session, transaction_id: int, user_id: int):
    transaction = _get_owned_transaction(db, transaction_id, user_id)

    if transaction.is_expense:
        adjust_budget_spent(db, transaction.category_id, user_id, transaction.date, -Decimal(transaction.amount))

    db.delete(transaction)
    db.commit()
    logger.info(f"Transaction {transaction_id} deleted for user {user_id}")
