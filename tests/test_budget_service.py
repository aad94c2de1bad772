import datetime
from decimal import Decimal

import pytest

from backend.models import Budget, TransactionType
from backend.schemas.budget_schemas import BudgetFilter, CreateBudgetRequest, UpdateBudgetRequest
from backend.services.budget_service import (
    adjust_budget_spent,
    calculate_spent_amount,
    create_budget,
    delete_budget,
    get_budget,
    get_budgets,
    update_budget,
)
from backend.utils.exceptions import ConflictException, NotFoundException


def test_calculate_spent_amount(session, make_user, make_category, make_transaction):
    user = make_user()
    food = make_category(user)
    make_transaction(user, food, "10.25", datetime.date(2024, 5, 1))
    make_transaction(user, food, "4.75", datetime.date(2024, 5, 31))
    make_transaction(user, food, 99, datetime.date(2024, 6, 1))
    make_transaction(user, food, 500, datetime.date(2024, 5, 15), TransactionType.INCOME)

    assert calculate_spent_amount(session, food.id, user.id, 5, 2024) == Decimal("15.00")


def test_adjust_without_budget_is_noop(session, make_user, make_category):
    user = make_user()
    food = make_category(user)

    assert adjust_budget_spent(session, food.id, user.id, datetime.date(2024, 5, 1), Decimal("5")) is None


def test_create_budget_picks_up_existing_spending(session, make_user, make_category, make_transaction):
    user = make_user()
    food = make_category(user)
    make_transaction(user, food, 120, datetime.date(2024, 5, 3))

    out = create_budget(
        session, CreateBudgetRequest(amount=Decimal("400"), month=5, year=2024, category_id=food.id), user.id
    )

    assert out.spent_amount == 120.0
    assert out.remaining_amount == 280.0
    assert out.percentage_used == 30.0
    assert out.category_name == "Food"


def test_create_duplicate_period(session, make_user, make_category, make_budget):
    user = make_user()
    food = make_category(user)
    make_budget(user, food, 100, 5, 2024)

    with pytest.raises(ConflictException):
        create_budget(
            session, CreateBudgetRequest(amount=Decimal("200"), month=5, year=2024, category_id=food.id), user.id
        )


def test_create_for_foreign_category(session, make_user, make_category):
    owner, stranger = make_user(), make_user()
    food = make_category(owner)

    with pytest.raises(NotFoundException):
        create_budget(
            session, CreateBudgetRequest(amount=Decimal("200"), month=5, year=2024, category_id=food.id), stranger.id
        )


def test_list_order_and_filters(session, make_user, make_category, make_budget):
    user = make_user()
    food = make_category(user, name="Food")
    auto = make_category(user, name="Auto")
    make_budget(user, food, 100, 1, 2024)
    make_budget(user, food, 100, 3, 2024)
    make_budget(user, auto, 100, 3, 2024)
    make_budget(user, food, 100, 12, 2023)

    budgets = get_budgets(session, BudgetFilter(), user.id)
    march = get_budgets(session, BudgetFilter(month=3, year=2024), user.id)
    food_only = get_budgets(session, BudgetFilter(category_id=food.id), user.id)

    assert [(b.year, b.month, b.category_name) for b in budgets] == [
        (2024, 3, "Auto"),
        (2024, 3, "Food"),
        (2024, 1, "Food"),
        (2023, 12, "Food"),
    ]
    assert len(march) == 2
    assert len(food_only) == 3


def test_update_amount_keeps_spent(session, make_user, make_category, make_budget):
    user = make_user()
    food = make_category(user)
    budget = make_budget(user, food, 100, 5, 2024, spent=40)

    out = update_budget(
        session, budget.id, UpdateBudgetRequest(amount=Decimal("200"), month=5, year=2024, category_id=food.id), user.id
    )

    assert out.amount == 200.0
    assert out.spent_amount == 40.0
    assert out.updated_at is not None


def test_update_period_recalculates_spent(session, make_user, make_category, make_budget, make_transaction):
    user = make_user()
    food = make_category(user)
    budget = make_budget(user, food, 100, 5, 2024, spent=40)
    make_transaction(user, food, 15, datetime.date(2024, 6, 2))

    out = update_budget(
        session, budget.id, UpdateBudgetRequest(amount=Decimal("100"), month=6, year=2024, category_id=food.id), user.id
    )

    assert out.spent_amount == 15.0


def test_update_into_taken_period(session, make_user, make_category, make_budget):
    user = make_user()
    food = make_category(user)
    make_budget(user, food, 100, 5, 2024)
    other = make_budget(user, food, 100, 6, 2024)

    with pytest.raises(ConflictException):
        update_budget(
            session, other.id, UpdateBudgetRequest(amount=Decimal("100"), month=5, year=2024, category_id=food.id), user.id
        )


def test_delete_budget(session, make_user, make_category, make_budget):
    user = make_user()
    food = make_category(user)
    budget = make_budget(user, food, 100, 5, 2024)

    delete_budget(session, budget.id, user.id)

    assert session.query(Budget).count() == 0


def test_budget_of_other_user(session, make_user, make_category, make_budget):
    owner, stranger = make_user(), make_user()
    budget = make_budget(owner, make_category(owner), 100, 5, 2024)

    with pytest.raises(NotFoundException):
        get_budget(session, budget.id, stranger.id)
    with pytest.raises(NotFoundException):
        delete_budget(session, budget.id, stranger.id)
