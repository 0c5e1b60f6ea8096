"""
Shared fixtures for the certification tests.

Uses a single in-memory SQLite database; every table is emptied after each test.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest

from db import Base, SessionLocal, engine, init_db
from certification.errors import GatewayError
from certification.logic.contracts import GatewayVerification
from certification.payments.config import PaymentSettings


class FakeGateway:
    """Stands in for Paystack; records every verified reference."""

    def __init__(self, status="success", amount=250000, error=None):
        self.status = status
        self.amount = amount
        self.error = error
        self.calls = []

    async def verify(self, reference):
        self.calls.append(reference)
        if self.error is not None:
            raise self.error
        body = {
            "status": True,
            "message": "Verification successful",
            "data": {"reference": reference, "status": self.status, "amount": self.amount},
        }
        return GatewayVerification(status=self.status, amount=self.amount, raw=body)


@pytest.fixture(autouse=True)
def _clean_tables():
    init_db()
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return PaymentSettings(public_key="pk_test_123456", secret_key="sk_test_abcdefghijkl")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(error=GatewayError("Paystack verify error: 503 - unavailable", status_code=503))


@pytest.fixture
def user(db):
    from utils.crud_user import create_user

    created = create_user(db, email="amina@example.com", full_name="amina wanjiru", password_hash="x")
    db.commit()
    return created
