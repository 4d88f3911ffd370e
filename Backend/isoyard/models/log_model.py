from sqlalchemy import Column, Integer, String, Float, DateTime, func
from isoyard.database import Base
from isoyard.utils import fmt_time

ACTION_ENTRY = "進場"
ACTION_EXIT = "出場"
ACTION_TRANSFER = "移區"
ACTION_UPDATE = "更新"

LOG_ACTIONS = (ACTION_ENTRY, ACTION_EXIT, ACTION_TRANSFER, ACTION_UPDATE)


class LogEntry(Base):
    """Movement log row. Zone, content and weights are a snapshot taken when the action happened."""
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    time = Column(DateTime, nullable=False, index=True)
    tank = Column(String(20), nullable=False, index=True)
    action = Column(String(10), nullable=False)
    zone = Column(String(100), nullable=True)
    user = Column(String(50), nullable=True)
    content = Column(String(100), nullable=True)
    weight = Column(Float, nullable=True)
    total = Column(Float, nullable=True)
    head = Column(Float, nullable=True)
    empty = Column(Float, nullable=True)
    remark = Column(String(255), nullable=True)
    slot = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "time": fmt_time(self.time),
            "tank": self.tank,
            "action": self.action,
            "zone": self.zone or "",
            "user": self.user or "",
            "content": self.content or "",
            "weight": self.weight,
            "total": self.total,
            "head": self.head,
            "empty": self.empty,
            "remark": self.remark or "",
            "slot": self.slot or "",
        }
