import logging
import jwt
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from db import get_db
from models.models_user import User
from models.schemas_user import UserOut
from utils.auth_utils import bearer_token, decode_token
from utils.crud_user import get_profile_name

logger = logging.getLogger(__name__)

def auth_user(authorization: str | None = Header(default=None), db: Session = Depends(get_db)) -> UserOut:
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")
    try:
        data = decode_token(token)
    except jwt.PyJWTError as e:
        logger.error(f"Token decode failed: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    user_id = data.get("sub")
    user = db.get(User, user_id) if user_id else None
    if not user:
        logger.error(f"User not found for id: {user_id}")
        raise HTTPException(status_code=401, detail=f"User not found for id: {user_id}")
    payload = {
        "id": str(user.id),
        "email": user.email,
        "full_name": get_profile_name(db, user.id),
        "created_at": user.created_at,
    }
    return UserOut.model_validate(payload)
