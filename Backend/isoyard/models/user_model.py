from sqlalchemy import Column, String, Boolean, DateTime, func
from isoyard.database import Base

ROLE_VIEW = "view"
ROLE_OP = "op"
ROLE_ADMIN = "admin"

# lowest to highest
ROLES = (ROLE_VIEW, ROLE_OP, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"

    # login id, stored lower-case
    id = Column(String(50), primary_key=True)
    name = Column(String(100), nullable=True)

    # Stored credentials
    password_hash = Column(String(255), nullable=False)
    password_salt = Column(String(64), nullable=False)

    role = Column(String(10), nullable=False, default=ROLE_VIEW)
    is_super = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name or "",
            "role": self.role,
            "is_super": bool(self.is_super),
        }
