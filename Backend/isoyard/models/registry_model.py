from sqlalchemy import Column, String, Float, DateTime, func
from isoyard.database import Base


class RegistryItem(Base):
    __tablename__ = "registry"

    id = Column(String(20), primary_key=True)
    empty = Column(Float, nullable=True)  # tare weight
    content = Column(String(100), nullable=True)
    last_total = Column(Float, nullable=True)
    last_head = Column(Float, nullable=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def as_dict(self):
        return {
            "id": self.id,
            "empty": self.empty,
            "content": self.content or "",
            "last_total": self.last_total,
            "last_head": self.last_head,
        }
