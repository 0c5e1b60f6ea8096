from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import os
import logging

from db import get_db, init_db
from models.schemas_user import UserRegister, UserLogin, UserOut, TokenResponse
from utils.crud_user import get_user_by_email, create_user
from utils.auth_utils import hash_password, verify_password, create_token
from utils.auth_deps import auth_user
from certification.routes import certificates_router, payments_router, attempts_router
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="IELTS Pro Certification API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

app.include_router(certificates_router)
app.include_router(payments_router)
app.include_router(attempts_router)


@app.post("/auth/register", response_model=TokenResponse, status_code=201, tags=["auth"], summary="Register & get token")
def register(payload: UserRegister, db: Session = Depends(get_db)):
    if get_user_by_email(db, payload.email.lower()):
        raise HTTPException(status_code=400, detail="Email already registered")
    try:
        user = create_user(
            db,
            email=payload.email,
            full_name=payload.full_name,
            password_hash=hash_password(payload.password),
        )
        db.commit()
    except IntegrityError:
        # concurrent registration with the same email
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    logging.info(f"Registered user {user.email}")
    return TokenResponse(access_token=create_token(str(user.id), user.email))


@app.post("/auth/login", response_model=TokenResponse, tags=["auth"], summary="Login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = get_user_by_email(db, payload.email.lower())
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return TokenResponse(access_token=create_token(str(user.id), user.email))


@app.get("/users/me", response_model=UserOut, tags=["users"], summary="Current user")
def me(current: UserOut = Depends(auth_user)):
    return current


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
