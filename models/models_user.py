import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey
from db import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_uuid_str)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)


class Profile(Base):
    __tablename__ = "profiles"
    id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    full_name = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow)
