"""Aggregations behind the dashboard charts.

Transactions for the requested period are loaded and summed in Python,
so amounts stay exact Decimals whatever the database backend.
"""
from collections import OrderedDict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from backend.models import Budget, Transaction, TransactionType
from backend.schemas.budget_schemas import BudgetProgress
from backend.schemas.transaction_schemas import CategorySpending, MonthlySummary, MonthlyTrend
from backend.services.budget_service import calculate_spent_amount
from backend.utils.exceptions import BusinessRuleViolationException
from backend.utils.periods import add_months, iter_months, month_range
from backend.utils.validators import MIN_REPORT_YEAR, max_year

MIN_MONTHS_BACK = 1
MAX_MONTHS_BACK = 24

ZERO = Decimal("0")


def _round2(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def validate_period(year: int, month: int, today: date = None):
    if month < 1 or month > 12:
        raise BusinessRuleViolationException("INVALID_MONTH", "Month must be between 1 and 12")
    if year < MIN_REPORT_YEAR or year > max_year(today):
        raise BusinessRuleViolationException(
            "INVALID_YEAR", f"Year must be between {MIN_REPORT_YEAR} and {max_year(today)}"
        )


def _transactions_between(db: Session, user_id: int, start_date: date, end_date: date, only_type=None):
    query = db.query(Transaction).filter(
        Transaction.user_id == user_id,
        Transaction.date >= start_date,
        Transaction.date <= end_date,
    )
    if only_type is not None:
        query = query.filter(Transaction.type == int(only_type))
    return query.all()


def _totals(transactions):
    income = sum((Decimal(t.amount) for t in transactions if t.type == TransactionType.INCOME), ZERO)
    expense = sum((Decimal(t.amount) for t in transactions if t.type == TransactionType.EXPENSE), ZERO)
    return income, expense


def get_monthly_summary(db: Session, year: int, month: int, user_id: int, today: date = None) -> MonthlySummary:
    validate_period(year, month, today)

    start_date, end_date = month_range(year, month)
    income, expense = _totals(_transactions_between(db, user_id, start_date, end_date))

    return MonthlySummary(
        total_income=income,
        total_expense=expense,
        balance=income - expense,
        month=month,
        year=year,
    )


def get_monthly_trends(db: Session, months_back: int, user_id: int, today: date = None):
    months_back = max(MIN_MONTHS_BACK, min(MAX_MONTHS_BACK, months_back))
    end_date = today or date.today()
    start_date = add_months(end_date, -months_back)

    transactions = _transactions_between(db, user_id, start_date, end_date)

    buckets = OrderedDict(((y, m), []) for y, m in iter_months(start_date, end_date))
    for t in transactions:
        buckets[(t.date.year, t.date.month)].append(t)

    trends = []
    for (year, month), month_transactions in buckets.items():
        income, expense = _totals(month_transactions)
        trends.append(MonthlyTrend(month=month, year=year, income=income, expense=expense, balance=income - expense))
    return trends


def get_category_spending(db: Session, year: int, month: int, user_id: int, today: date = None):
    validate_period(year, month, today)

    start_date, end_date = month_range(year, month)
    expenses = _transactions_between(db, user_id, start_date, end_date, only_type=TransactionType.EXPENSE)

    groups = OrderedDict()
    for t in expenses:
        group = groups.setdefault(t.category_id, {"category": t.category, "total": ZERO, "count": 0})
        group["total"] += Decimal(t.amount)
        group["count"] += 1

    total_spending = sum((g["total"] for g in groups.values()), ZERO)

    spending = []
    for category_id, group in groups.items():
        percentage = _round2(group["total"] / total_spending * 100) if total_spending > 0 else ZERO
        spending.append(CategorySpending(
            category_id=category_id,
            category_name=group["category"].name,
            category_color=group["category"].color,
            total_amount=group["total"],
            transaction_count=group["count"],
            percentage=percentage,
        ))

    spending.sort(key=lambda s: s.total_amount, reverse=True)
    return spending


def get_budget_progress(db: Session, year: int, month: int, user_id: int, today: date = None):
    validate_period(year, month, today)

    budgets = db.query(Budget).filter_by(user_id=user_id, month=month, year=year).all()

    progress = []
    for budget in budgets:
        amount = Decimal(budget.amount)
        spent = calculate_spent_amount(db, budget.category_id, user_id, month, year)
        percentage = _round2(spent / amount * 100) if amount > 0 else ZERO

        progress.append(BudgetProgress(
            budget_id=budget.id,
            category_id=budget.category_id,
            category_name=budget.category.name,
            category_color=budget.category.color,
            budget_amount=amount,
            spent_amount=spent,
            remaining_amount=amount - spent,
            progress_percentage=percentage,
            is_over_budget=spent > amount,
            month=month,
            year=year,
        ))

    progress.sort(key=lambda p: p.progress_percentage, reverse=True)
    return progress
