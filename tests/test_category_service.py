import pytest

from backend.models import Category
from backend.schemas.category_schemas import CreateCategoryRequest, UpdateCategoryRequest
from backend.services.category_service import (
    DEFAULT_CATEGORIES,
    create_category,
    delete_category,
    get_categories,
    get_category,
    seed_default_categories,
    update_category,
)
from backend.utils.exceptions import BusinessRuleViolationException, ConflictException, NotFoundException


def test_seed_default_categories(session, make_user):
    user = make_user()

    added = seed_default_categories(session, user.id)
    session.commit()

    assert added == len(DEFAULT_CATEGORIES)
    categories = session.query(Category).filter_by(user_id=user.id).all()
    assert all(c.is_default for c in categories)


def test_seed_skips_existing_names(session, make_user, make_category):
    user = make_user()
    make_category(user, name="salary")

    added = seed_default_categories(session, user.id)

    assert added == len(DEFAULT_CATEGORIES) - 1


def test_list_is_sorted_and_scoped(session, make_user, make_category):
    alice, bob = make_user(), make_user()
    make_category(alice, name="Rent")
    make_category(alice, name="Books")
    make_category(bob, name="Hidden")

    names = [c.name for c in get_categories(session, alice.id)]

    assert names == ["Books", "Rent"]


def test_get_other_users_category_is_not_found(session, make_user, make_category):
    alice, bob = make_user(), make_user()
    category = make_category(alice)

    with pytest.raises(NotFoundException) as exc_info:
        get_category(session, category.id, bob.id)

    assert exc_info.value.context == {"entityName": "Category", "identifier": category.id}


def test_create_category(session, make_user):
    user = make_user()

    out = create_category(session, CreateCategoryRequest(name="Travel", color="#123abc"), user.id)

    assert out.id is not None
    assert out.name == "Travel"
    assert out.color == "#123abc"
    assert out.is_default is False
    assert out.updated_at is None


def test_create_duplicate_name_is_case_insensitive(session, make_user, make_category):
    user = make_user()
    make_category(user, name="Travel")

    with pytest.raises(ConflictException):
        create_category(session, CreateCategoryRequest(name="TRAVEL"), user.id)


def test_same_name_allowed_for_different_users(session, make_user, make_category):
    alice, bob = make_user(), make_user()
    make_category(alice, name="Travel")

    out = create_category(session, CreateCategoryRequest(name="Travel"), bob.id)

    assert out.name == "Travel"


def test_update_category(session, make_user, make_category):
    user = make_user()
    category = make_category(user, name="Old")

    out = update_category(
        session, category.id, UpdateCategoryRequest(name="New", description="desc", color="#ffffff"), user.id
    )

    assert out.name == "New"
    assert out.description == "desc"
    assert out.updated_at is not None


def test_update_keeping_own_name(session, make_user, make_category):
    user = make_user()
    category = make_category(user, name="Travel")

    out = update_category(session, category.id, UpdateCategoryRequest(name="travel"), user.id)

    assert out.name == "travel"


def test_update_to_taken_name(session, make_user, make_category):
    user = make_user()
    make_category(user, name="Travel")
    other = make_category(user, name="Food")

    with pytest.raises(ConflictException):
        update_category(session, other.id, UpdateCategoryRequest(name="Travel"), user.id)


def test_delete_category(session, make_user, make_category):
    user = make_user()
    category = make_category(user)

    delete_category(session, category.id, user.id)

    assert session.query(Category).filter_by(id=category.id).first() is None


def test_delete_with_transactions(session, make_user, make_category, make_transaction, today):
    user = make_user()
    category = make_category(user)
    make_transaction(user, category, 10, today)

    with pytest.raises(BusinessRuleViolationException) as exc_info:
        delete_category(session, category.id, user.id)

    assert exc_info.value.error_code == "BUSINESS_RULE_CATEGORY_HAS_TRANSACTIONS"


def test_delete_with_budgets(session, make_user, make_category, make_budget):
    user = make_user()
    category = make_category(user)
    make_budget(user, category, 100, 5, 2025)

    with pytest.raises(BusinessRuleViolationException) as exc_info:
        delete_category(session, category.id, user.id)

    assert exc_info.value.error_code == "BUSINESS_RULE_CATEGORY_HAS_BUDGETS"


def test_transactions_checked_before_default_flag(session, make_user, make_category, make_transaction, today):
    user = make_user()
    category = make_category(user, is_default=True)
    make_transaction(user, category, 10, today)

    with pytest.raises(BusinessRuleViolationException) as exc_info:
        delete_category(session, category.id, user.id)

    assert exc_info.value.error_code == "BUSINESS_RULE_CATEGORY_HAS_TRANSACTIONS"


def test_delete_default_category(session, make_user, make_category):
    user = make_user()
    category = make_category(user, is_default=True)

    with pytest.raises(BusinessRuleViolationException) as exc_info:
        delete_category(session, category.id, user.id)

    assert exc_info.value.error_code == "BUSINESS_RULE_DEFAULT_CATEGORY_READONLY"
