from sqlalchemy import Column, Integer, String, DateTime, func
from isoyard.database import Base


class Zone(Base):
    __tablename__ = "zones"

    id = Column(String(20), primary_key=True)
    name = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False, default=35)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "capacity": self.capacity,
        }
