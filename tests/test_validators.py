import datetime

import pytest
from pydantic import ValidationError

from backend.schemas.auth_schemas import LoginUserRequest, RegisterUserRequest
from backend.schemas.budget_schemas import BudgetFilter, CreateBudgetRequest
from backend.schemas.category_schemas import CreateCategoryRequest
from backend.schemas.transaction_schemas import CreateTransactionRequest, TransactionFilter
from backend.utils.validators import is_valid_email


@pytest.mark.parametrize("email", [
    "user@example.com",
    "first.last@sub.domain.org",
    "test+special@domain.co.uk",
    "UPPER@EXAMPLE.COM",
])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", [
    "",
    "   ",
    "plainaddress",
    "@example.com",
    "user@",
    "user@localhost",
    "user..name@example.com",
    ".user@example.com",
    "user.@example.com",
    "user@-example.com",
    "user@example.c",
    "üser@example.com",
    "a" * 250 + "@example.com",
])
def test_invalid_emails(email):
    assert not is_valid_email(email)


def _register(**overrides):
    data = {"email": "a@example.com", "password": "secret123", "firstName": "Ann", "lastName": "Lee"}
    data.update(overrides)
    return RegisterUserRequest(**data)


def test_register_accepts_camel_case_payload():
    req = _register()
    assert req.first_name == "Ann"
    assert req.last_name == "Lee"


@pytest.mark.parametrize("overrides", [
    {"email": "not-an-email"},
    {"password": "12345"},
    {"password": "x" * 101},
    {"firstName": ""},
    {"lastName": "   "},
    {"firstName": "x" * 101},
])
def test_register_rejects_invalid_fields(overrides):
    with pytest.raises(ValidationError):
        _register(**overrides)


def test_login_requires_password():
    with pytest.raises(ValidationError):
        LoginUserRequest(email="a@example.com", password="")


def _transaction(**overrides):
    data = {
        "amount": "25.50",
        "description": "Groceries",
        "date": datetime.date.today().isoformat(),
        "type": 2,
        "categoryId": 1,
    }
    data.update(overrides)
    return CreateTransactionRequest(**data)


def test_valid_transaction_request():
    req = _transaction()
    assert str(req.amount) == "25.50"
    assert req.category_id == 1


@pytest.mark.parametrize("overrides", [
    {"amount": "0"},
    {"amount": "-1"},
    {"amount": "10.123"},
    {"amount": "1000000000"},
    {"description": ""},
    {"description": "x" * 501},
    {"date": (datetime.date.today() + datetime.timedelta(days=2)).isoformat()},
    {"type": 3},
    {"categoryId": 0},
])
def test_transaction_request_rejects(overrides):
    with pytest.raises(ValidationError):
        _transaction(**overrides)


def test_transaction_date_tomorrow_allowed():
    tomorrow = datetime.date.today() + datetime.timedelta(days=1)
    assert _transaction(date=tomorrow.isoformat()).date == tomorrow


@pytest.mark.parametrize("values", [
    {"page": 0},
    {"page_size": 0},
    {"page_size": 1001},
    {"category_id": 0},
    {"start_date": datetime.date(2025, 2, 1), "end_date": datetime.date(2025, 1, 1)},
])
def test_transaction_filter_rejects(values):
    with pytest.raises(ValidationError):
        TransactionFilter(**values)


def test_transaction_filter_defaults():
    f = TransactionFilter()
    assert f.page == 1
    assert f.page_size == 10


@pytest.mark.parametrize("color", ["red", "#FFF", "FF0000", "#GG0000", ""])
def test_category_rejects_bad_colors(color):
    with pytest.raises(ValidationError):
        CreateCategoryRequest(name="Food", color=color)


def test_category_defaults_to_black():
    assert CreateCategoryRequest(name="Food").color == "#000000"


@pytest.mark.parametrize("overrides", [
    {"month": 0},
    {"month": 13},
    {"year": 1999},
    {"year": datetime.date.today().year + 11},
    {"amount": "0"},
    {"categoryId": -1},
])
def test_budget_request_rejects(overrides):
    data = {"amount": "500", "month": 5, "year": 2025, "categoryId": 1}
    data.update(overrides)
    with pytest.raises(ValidationError):
        CreateBudgetRequest(**data)


def test_budget_filter_allows_empty():
    f = BudgetFilter()
    assert f.month is None and f.year is None and f.category_id is None
