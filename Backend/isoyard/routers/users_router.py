from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
import logging

from isoyard.database import get_db
from isoyard.models.user_model import User, ROLES, ROLE_ADMIN
from isoyard.schemas.yard import UserCreate, PermissionUpdate, PasswordUpdate
from isoyard.security import hash_password, require_role
from isoyard.utils import success_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])

require_admin = require_role(ROLE_ADMIN)


def _check_role(role: str):
    if role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(ROLES)}")


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id.strip().lower()).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("")
def get_all_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Get all users"""
    users = db.query(User).order_by(User.id).all()
    return success_resp("Users fetched successfully", [u.as_dict() for u in users])


@router.post("", status_code=201)
def create_user(body: UserCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user_id = body.id.strip().lower()
    if not user_id:
        raise HTTPException(status_code=400, detail="User id is required")
    _check_role(body.role)
    if db.query(User).filter(User.id == user_id).first():
        raise HTTPException(status_code=409, detail="User with same id already exists")

    pwd_hash, salt = hash_password(body.password)
    user = User(
        id=user_id,
        name=body.name,
        password_hash=pwd_hash,
        password_salt=salt,
        role=body.role,
        is_super=body.is_super,
    )
    db.add(user)
    db.commit()
    logger.info("User %s created by %s (role=%s, super=%s)", user_id, admin.id, body.role, body.is_super)
    return success_resp("User created successfully", user.as_dict(), 201)


@router.put("/{user_id}/permission")
def update_user_permission(user_id: str, body: PermissionUpdate, db: Session = Depends(get_db),
                           admin: User = Depends(require_admin)):
    """Change role and super-user flag"""
    _check_role(body.role)
    user = _get_user_or_404(db, user_id)
    user.role = body.role
    user.is_super = body.is_super
    db.commit()
    logger.info("Permissions for %s set to role=%s super=%s by %s", user.id, body.role, body.is_super, admin.id)
    return success_resp("Permission updated", user.as_dict())


@router.put("/{user_id}/password")
def reset_user_password(user_id: str, body: PasswordUpdate, db: Session = Depends(get_db),
                        admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    user.password_hash, user.password_salt = hash_password(body.password)
    db.commit()
    logger.info("Password for %s reset by %s", user.id, admin.id)
    return success_resp("Password updated")


@router.delete("/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = _get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by %s", user_id, admin.id)
    return success_resp("User deleted successfully", {"id": user_id})
