# auth_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from isoyard.database import get_db
from isoyard.models.login_session_model import LoginSession
from isoyard.models.user_model import User
from isoyard.schemas.yard import LoginRequest
from isoyard.security import verify_password, start_session, get_current_session, get_current_user
from isoyard.utils import success_resp, error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login_user(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Log in by user id (case-insensitive) and password.
    - Unknown user or wrong password -> success: false, message: "Invalid user id or password"
    - On success -> data: { user_id, name, role, is_super, token }
    """
    user_id = body.user_id.strip().lower()
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.password_hash or not user.password_salt:
        return error_resp("Invalid user id or password", 401)

    if not verify_password(body.password, user.password_hash, user.password_salt):
        logger.info("Failed login for %s", user_id)
        return error_resp("Invalid user id or password", 401)

    token = start_session(db, user)
    logger.info("User %s logged in", user.id)
    return success_resp("Login successful", {
        "user_id": user.id,
        "name": user.name or user.id,
        "role": user.role,
        "is_super": bool(user.is_super),
        "token": token,
    })


@router.post("/logout")
def logout_user(session: LoginSession = Depends(get_current_session), db: Session = Depends(get_db)):
    session.still_logged_in = False
    db.commit()
    logger.info("User %s logged out", session.user_id)
    return success_resp("Logged out")


@router.get("/me")
def whoami(user: User = Depends(get_current_user)):
    return success_resp("Current user", user.as_dict())
