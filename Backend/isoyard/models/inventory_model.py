from sqlalchemy import Column, String, Float, DateTime, func
from isoyard.database import Base
from isoyard.utils import fmt_time


class InventoryItem(Base):
    """A tank currently standing in the yard. Primary key is the container number."""
    __tablename__ = "inventory"

    id = Column(String(20), primary_key=True)
    content = Column(String(100), nullable=True)
    zone_id = Column(String(20), nullable=False, index=True)  # zones.id, not enforced
    time = Column(DateTime, nullable=False)  # arrival time
    weight = Column(Float, nullable=False, default=0)  # net weight (kg)
    remark = Column(String(255), nullable=True)
    slot = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "content": self.content or "",
            "zone": self.zone_id,
            "time": fmt_time(self.time),
            "weight": self.weight,
            "remark": self.remark or "",
            "slot": self.slot or "",
        }
