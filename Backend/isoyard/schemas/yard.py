from pydantic import BaseModel, Field
from typing import Optional, Union, List
from datetime import datetime

# weighbridge readings arrive from form inputs, so blank strings are allowed
Weight = Optional[Union[float, str]]


# ---------------------------------------------------------
# GATE-IN: zone is the zone id, not the display name
# ---------------------------------------------------------
class GateInRequest(BaseModel):
    id: str = Field(..., description="Tank (container) number")
    content: Optional[str] = ""
    zone: str = Field(..., description="Destination zone id")
    total_weight: Weight = None
    head_weight: Weight = None
    empty_weight: Weight = None
    remark: Optional[str] = ""
    slot: Optional[str] = None
    custom_time: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "TNKU1234567",
                "content": "ACETONE",
                "zone": "Z-01",
                "total_weight": 28000,
                "head_weight": 0,
                "empty_weight": 3500,
                "remark": "",
                "slot": "A區-3",
                "custom_time": "2024-05-01T08:30",
            }
        }


# ---------------------------------------------------------
# WEIGHT MAINTENANCE
# ---------------------------------------------------------
class RegistryUpdate(BaseModel):
    empty: Weight = None
    content: Optional[str] = ""
    total: Weight = None
    head: Weight = None
    remark: Optional[str] = None


# ---------------------------------------------------------
# ZONES
# ---------------------------------------------------------
class ZoneIn(BaseModel):
    id: str
    name: str
    capacity: Optional[int] = Field(None, ge=0)


class ZoneListSave(BaseModel):
    zones: List[ZoneIn]


# ---------------------------------------------------------
# LOG EDIT: super users only, every field optional
# ---------------------------------------------------------
class LogUpdate(BaseModel):
    time: Optional[datetime] = None
    tank: Optional[str] = None
    action: Optional[str] = None
    zone: Optional[str] = None
    user: Optional[str] = None
    content: Optional[str] = None
    weight: Optional[float] = None
    total: Optional[float] = None
    head: Optional[float] = None
    empty: Optional[float] = None
    remark: Optional[str] = None
    slot: Optional[str] = None


# ---------------------------------------------------------
# AUTH / USERS
# ---------------------------------------------------------
class LoginRequest(BaseModel):
    user_id: str
    password: str


class UserCreate(BaseModel):
    id: str
    name: Optional[str] = None
    password: str = Field(..., min_length=1)
    role: str = "view"
    is_super: bool = False


class PermissionUpdate(BaseModel):
    role: str
    is_super: bool = False


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=1)
