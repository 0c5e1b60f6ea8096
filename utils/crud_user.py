from sqlalchemy.orm import Session
from sqlalchemy import select
from models.models_user import User, Profile

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

def create_user(db: Session, *, email: str, full_name: str | None, password_hash: str) -> User:
    user = User(email=email.lower(), password_hash=password_hash)
    db.add(user)
    db.flush()
    db.add(Profile(id=user.id, full_name=full_name))
    return user

def get_profile_name(db: Session, user_id: str) -> str | None:
    return db.execute(select(Profile.full_name).where(Profile.id == user_id)).scalar_one_or_none()
