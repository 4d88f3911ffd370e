from datetime import datetime, timedelta
from typing import Optional
import binascii
import hashlib
import hmac
import logging
import os

import jwt  # PyJWT
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from isoyard.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXP_HOURS, IDLE_TIMEOUT_MINUTES
from isoyard.database import get_db
from isoyard.models.login_session_model import LoginSession
from isoyard.models.user_model import User, ROLES

logger = logging.getLogger(__name__)


def hash_password(password: str, salt: Optional[str] = None):
    """
    PBKDF2-HMAC-SHA256 password hashing with salt.
    Returns (hash, salt).
    """
    if salt is None:
        salt = binascii.hexlify(os.urandom(16)).decode()
    # PBKDF2-HMAC-SHA256 with 100k iterations
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), 100_000)
    return binascii.hexlify(dk).decode(), salt


def verify_password(password: str, expected_hash: str, salt: str) -> bool:
    pwd_hash, _ = hash_password(password, salt)
    return hmac.compare_digest(pwd_hash, expected_hash)


def create_jwt_token(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=JWT_EXP_HOURS)
    expire = datetime.utcnow() + expires_delta
    to_encode.update({"exp": expire, "iat": datetime.utcnow()})
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def start_session(db: Session, user: User) -> str:
    """Open a login session for the user and return its bearer token."""
    session = LoginSession(user_id=user.id, last_activity_at=datetime.now(), still_logged_in=True)
    db.add(session)
    db.commit()
    db.refresh(session)
    return create_jwt_token({"sub": user.id, "sid": session.id})


def _decode_bearer(authorization: Optional[str]) -> dict:
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization required")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    try:
        return jwt.decode(parts[1], JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_session(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> LoginSession:
    """
    Resolve the login session behind the bearer token and refresh its activity
    timestamp. A session left idle longer than IDLE_TIMEOUT_MINUTES is closed.
    """
    payload = _decode_bearer(authorization)
    sid = payload.get("sid")
    session = db.query(LoginSession).filter(LoginSession.id == sid).first() if sid is not None else None
    if session is None or not session.still_logged_in or session.user_id != payload.get("sub"):
        raise HTTPException(status_code=401, detail="Session ended, please log in again")

    now = datetime.now()
    if now - session.last_activity_at > timedelta(minutes=IDLE_TIMEOUT_MINUTES):
        session.still_logged_in = False
        db.commit()
        logger.info("Session %s for %s closed after %s idle minutes", session.id, session.user_id, IDLE_TIMEOUT_MINUTES)
        raise HTTPException(status_code=401, detail="Session expired due to inactivity")

    session.last_activity_at = now
    db.commit()
    return session


def get_current_user(
    session: LoginSession = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == session.user_id).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User no longer exists")
    return user


def require_role(min_role: str):
    """Dependency factory: the caller's role must rank at least min_role."""
    min_rank = ROLES.index(min_role)

    def checker(user: User = Depends(get_current_user)) -> User:
        rank = ROLES.index(user.role) if user.role in ROLES else -1
        if rank < min_rank:
            raise HTTPException(status_code=403, detail=f"Role '{min_role}' required")
        return user

    return checker


def require_super(user: User = Depends(get_current_user)) -> User:
    if not user.is_super:
        raise HTTPException(status_code=403, detail="Super user permission required")
    return user
