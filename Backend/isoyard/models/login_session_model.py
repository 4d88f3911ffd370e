from sqlalchemy import Column, Integer, String, DateTime, Boolean, func
from isoyard.database import Base


class LoginSession(Base):
    __tablename__ = "login_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(50), nullable=False, index=True)
    logged_in_at = Column(DateTime, server_default=func.now())
    last_activity_at = Column(DateTime, nullable=False)
    still_logged_in = Column(Boolean, default=True)
