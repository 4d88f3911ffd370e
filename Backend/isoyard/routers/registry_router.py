from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session
import logging

from isoyard.database import get_db
from isoyard.models.registry_model import RegistryItem
from isoyard.models.user_model import User, ROLE_OP
from isoyard.schemas.yard import RegistryUpdate
from isoyard.security import get_current_user, require_role
from isoyard.services.gate import tank_maintenance, update_registry
from isoyard.utils import success_resp, error_resp

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/registry", tags=["registry"])

require_op = require_role(ROLE_OP)


@router.get("")
def list_registry(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    items = db.query(RegistryItem).order_by(RegistryItem.id).all()
    return success_resp("Registry fetched successfully", [i.as_dict() for i in items])


@router.get("/{tank_id}")
def get_tank_maintenance(tank_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Remembered weights, current location and movement history for one tank"""
    return success_resp("Tank data fetched successfully", tank_maintenance(db, tank_id))


@router.put("/{tank_id}")
def update_tank_registry(tank_id: str, body: RegistryUpdate, db: Session = Depends(get_db),
                         user: User = Depends(require_op)):
    try:
        result = update_registry(db, tank_id, body, user.id)
        return success_resp("Tank data updated", result)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Registry update failed for %s", tank_id)
        return error_resp(f"Write failed: {str(e)}", 500)
