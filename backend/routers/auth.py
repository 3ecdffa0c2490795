import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from auth_utils import normalize_email, verify_password
from config import ACCESS_TOKEN_MINUTES, COOKIE_SECURE
from database import get_db
from deps_auth import get_current_admin
from errors import Unauthorized
from jwt_utils import COOKIE_NAME, create_session_token
from models import Admin
from schemas_auth import AdminOut, LoginIn, TokenOut

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=TokenOut)
def login(data: LoginIn, response: Response, db: Session = Depends(get_db)):
    email = normalize_email(data.email)
    admin = db.query(Admin).filter(Admin.email == email).first()

    if not admin or not verify_password(data.password, admin.password_hash):
        logger.info("Failed admin login for %s", email)
        raise Unauthorized("Invalid email or password")

    token = create_session_token(admin.id, admin.email)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=COOKIE_SECURE,
        max_age=ACCESS_TOKEN_MINUTES * 60,
        path="/",
    )
    return {"access_token": token, "token_type": "bearer"}


@auth_router.get("/me", response_model=AdminOut)
def me(current_admin: Admin = Depends(get_current_admin)):
    return current_admin


@auth_router.post("/logout")
def logout(response: Response):
    response.delete_cookie(key=COOKIE_NAME, path="/")
    return {"ok": True}
