from datetime import date
from decimal import Decimal

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from backend.models import Budget, Category, Transaction, TransactionType
from backend.schemas.budget_schemas import BudgetFilter, BudgetOut, CreateBudgetRequest, UpdateBudgetRequest
from backend.services.category_service import get_owned_category
from backend.utils.exceptions import ConflictException, NotFoundException
from backend.utils.logger import get_logger
from backend.utils.periods import month_range

logger = get_logger("budgets")


def to_budget_out(budget: Budget, category: Category = None) -> BudgetOut:
    category = category or budget.category
    return BudgetOut(
        id=budget.id,
        amount=budget.amount,
        spent_amount=budget.spent_amount,
        remaining_amount=budget.remaining_amount,
        percentage_used=budget.percentage_used,
        month=budget.month,
        year=budget.year,
        category_id=budget.category_id,
        category_name=category.name,
        category_color=category.color,
        created_at=budget.created_at,
        updated_at=budget.updated_at,
    )


def calculate_spent_amount(db: Session, category_id: int, user_id: int, month: int, year: int) -> Decimal:
    """Sum of the category's expense transactions in the given month."""
    start_date, end_date = month_range(year, month)
    amounts = (
        db.query(Transaction.amount)
        .filter(
            Transaction.user_id == user_id,
            Transaction.category_id == category_id,
            Transaction.type == TransactionType.EXPENSE,
            Transaction.date >= start_date,
            Transaction.date <= end_date,
        )
        .all()
    )
    return sum((Decimal(a) for (a,) in amounts), Decimal("0"))


def adjust_budget_spent(db: Session, category_id: int, user_id: int, on_date: date, delta: Decimal):
    """Add ``delta`` to the spent amount of the budget covering on_date, if there is one.

    Does not commit; callers commit together with the transaction change.
    """
    budget = (
        db.query(Budget)
        .filter_by(category_id=category_id, user_id=user_id, month=on_date.month, year=on_date.year)
        .first()
    )
    if budget:
        budget.spent_amount = Decimal(budget.spent_amount or 0) + Decimal(delta)
    return budget


def _get_owned_budget(db: Session, budget_id: int, user_id: int) -> Budget:
    budget = db.query(Budget).filter_by(id=budget_id, user_id=user_id).first()
    if not budget:
        raise NotFoundException("Budget", budget_id)
    return budget


def _period_taken(db: Session, user_id: int, category_id: int, month: int, year: int, exclude_id: int = None) -> bool:
    query = db.query(Budget).filter_by(user_id=user_id, category_id=category_id, month=month, year=year)
    if exclude_id is not None:
        query = query.filter(Budget.id != exclude_id)
    return query.first() is not None


def get_budgets(db: Session, budget_filter: BudgetFilter, user_id: int):
    query = db.query(Budget).join(Budget.category).filter(Budget.user_id == user_id)

    if budget_filter.category_id is not None:
        query = query.filter(Budget.category_id == budget_filter.category_id)
    if budget_filter.month is not None:
        query = query.filter(Budget.month == budget_filter.month)
    if budget_filter.year is not None:
        query = query.filter(Budget.year == budget_filter.year)

    budgets = query.order_by(desc(Budget.year), desc(Budget.month), asc(Category.name)).all()
    return [to_budget_out(b) for b in budgets]


def get_budget(db: Session, budget_id: int, user_id: int) -> BudgetOut:
    return to_budget_out(_get_owned_budget(db, budget_id, user_id))


def create_budget(db: Session, req: CreateBudgetRequest, user_id: int) -> BudgetOut:
    category = get_owned_category(db, req.category_id, user_id)

    if _period_taken(db, user_id, req.category_id, req.month, req.year):
        raise ConflictException("Budget", "category and period combination already exists")

    budget = Budget(
        user_id=user_id,
        category_id=req.category_id,
        amount=req.amount,
        spent_amount=calculate_spent_amount(db, req.category_id, user_id, req.month, req.year),
        month=req.month,
        year=req.year,
    )
    db.add(budget)
    db.commit()
    db.refresh(budget)

    logger.info(f"Budget {budget.id} created for user {user_id} ({req.month}/{req.year})")
    return to_budget_out(budget, category)


def update_budget(db: Session, budget_id: int, req: UpdateBudgetRequest, user_id: int) -> BudgetOut:
    budget = _get_owned_budget(db, budget_id, user_id)
    category = get_owned_category(db, req.category_id, user_id)

    if _period_taken(db, user_id, req.category_id, req.month, req.year, exclude_id=budget_id):
        raise ConflictException("Budget", "category and period combination already exists")

    period_changed = (
        budget.category_id != req.category_id
        or budget.month != req.month
        or budget.year != req.year
    )
    if period_changed:
        budget.spent_amount = calculate_spent_amount(db, req.category_id, user_id, req.month, req.year)

    budget.amount = req.amount
    budget.month = req.month
    budget.year = req.year
    budget.category_id = req.category_id

    db.commit()
    db.refresh(budget)
    return to_budget_out(budget, category)


def delete_budget(db: Session, budget_id: int, user_id: int):
    budget = _get_owned_budget(db, budget_id, user_id)
    db.delete(budget)
    db.commit()
    logger.info(f"Budget {budget_id} deleted for user {user_id}")
