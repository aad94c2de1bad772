import os
import tempfile
import datetime
from decimal import Decimal

# Point the app at throwaway storage before backend modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="finance-tracker-logs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.db import get_db, init_db
from backend.main import create_app
from backend.models import Budget, Category, Transaction, TransactionType, User
from backend.utils.circuit_breaker import CircuitBreaker
from backend.utils.security import hash_password


@pytest.fixture
def engine():
    """
    In-memory SQLite engine with the schema created; one per test.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def app(session_factory):
    app = create_app(CircuitBreaker())

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/auth/register", json={
        "email": "alice@example.com",
        "password": "secret123",
        "firstName": "Alice",
        "lastName": "Smith",
    })
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


# Factories

@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make(email=None, first_name="Test", last_name="User", password="secret123"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
        )
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture
def make_category(session):
    def _make(user, name="Food", color="#3b82f6", is_default=False):
        category = Category(user_id=user.id, name=name, color=color, is_default=is_default)
        session.add(category)
        session.commit()
        return category

    return _make


@pytest.fixture
def make_transaction(session):
    def _make(user, category, amount, day, ttype=TransactionType.EXPENSE, description="Test"):
        transaction = Transaction(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(str(amount)),
            date=day,
            type=int(ttype),
            description=description,
        )
        session.add(transaction)
        session.commit()
        return transaction

    return _make


@pytest.fixture
def make_budget(session):
    def _make(user, category, amount, month, year, spent=0):
        budget = Budget(
            user_id=user.id,
            category_id=category.id,
            amount=Decimal(str(amount)),
            spent_amount=Decimal(str(spent)),
            month=month,
            year=year,
        )
        session.add(budget)
        session.commit()
        return budget

    return _make


@pytest.fixture
def today():
    return datetime.date.today()
