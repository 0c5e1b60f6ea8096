import uuid
from datetime import datetime
from sqlalchemy import JSON, Boolean, Column, Integer, String, DateTime, ForeignKey, Float
from db import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class TestAttempt(Base):
    __tablename__ = "test_attempts"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    # raw scores as reported by the marking pipeline; may be null or noisy
    listening_score = Column(Float, nullable=True)
    reading_score = Column(Float, nullable=True)
    writing_score = Column(Float, nullable=True)
    speaking_score = Column(Float, nullable=True)
    test_date = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    paid_reference = Column(String(64), nullable=True)
    # set to user_id on the free first attempt only; one per user
    free_attempt_owner = Column(String(36), unique=True, nullable=True)


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    test_attempt_id = Column(String(36), ForeignKey("test_attempts.id"), unique=True, nullable=False)
    certificate_id = Column(String(64), unique=True, nullable=False)
    issued_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    reference = Column(String(64), unique=True, index=True, nullable=False)
    amount = Column(Integer, nullable=False)  # minor units
    currency = Column(String(8), nullable=False, default="KES")
    purpose = Column(String(32), nullable=False, default="reattempt")
    status = Column(String(16), nullable=False, default="pending")
    gateway_response = Column(JSON, nullable=True)
    consumed_at = Column(DateTime(timezone=False), nullable=True)
    consumed_by_attempt_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow)
