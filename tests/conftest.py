from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from homeledger.db.mongo import get_db
from homeledger.engine.balance import PrimaryPair
from homeledger.main import app
from homeledger.models.contact import Contact
from homeledger.models.expense import Expense
from homeledger.models.user import User


@pytest.fixture
def user_a():
    return User(id=str(ObjectId()), name="Lucia")


@pytest.fixture
def user_b():
    return User(id=str(ObjectId()), name="Martin")


@pytest.fixture
def pair(user_a, user_b):
    return PrimaryPair(user_a=user_a, user_b=user_b)


@pytest.fixture
def contacts():
    return [
        Contact(id=str(ObjectId()), name="Sofia"),
        Contact(id=str(ObjectId()), name="Hardware store", kind="business"),
    ]


@pytest.fixture
def make_expense(user_a):
    """Build a stored expense with sensible defaults."""
    def _make(**overrides):
        fields = {
            "id": str(ObjectId()),
            "description": "Groceries",
            "amount": Decimal("1000"),
            "currency": "ARS",
            "paid_by": user_a.id,
            "date": date(2024, 6, 1),
        }
        fields.update(overrides)
        return Expense(**fields)
    return _make


@pytest.fixture
def mock_db():
    """
    Stand-in for an AsyncIOMotorDatabase.

    Collections are MagicMocks with async write methods; sessions and
    transactions work as async context managers.
    """
    db = MagicMock()
    collections = {}

    def _collection(name):
        if name not in collections:
            collection = MagicMock()
            collection.insert_one = AsyncMock()
            collection.insert_many = AsyncMock()
            collection.find_one = AsyncMock()
            collection.find_one_and_update = AsyncMock()
            collection.update_one = AsyncMock()
            collections[name] = collection
        return collections[name]

    db.__getitem__.side_effect = _collection

    session = MagicMock()
    session.start_transaction = MagicMock(return_value=MagicMock())
    db.client.start_session = AsyncMock(return_value=MagicMock(
        __aenter__=AsyncMock(return_value=session),
        __aexit__=AsyncMock(return_value=False)
    ))
    db.session = session
    return db


@pytest.fixture
def cursor_returning():
    """Factory for find() cursor mocks whose to_list returns the given docs."""
    def _cursor(docs):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=docs)
        return cursor
    return _cursor


@pytest.fixture
def client(mock_db):
    """TestClient without lifespan events, so no MongoDB is contacted."""
    app.dependency_overrides[get_db] = lambda: mock_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
