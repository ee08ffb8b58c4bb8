from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from supervision.database import Base


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    start_date = Column(DateTime, nullable=False)
    start_time = Column(String(10), nullable=False)  # "HH:MM", 24-hour
    end_date = Column(DateTime, nullable=False)
    end_time = Column(String(10), nullable=False)  # "HH:MM", 24-hour
    description = Column(Text, nullable=True)
    color = Column(String(50), nullable=False, default="#3b82f6")
    supervisor_id = Column(Integer, ForeignKey("supervisors.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    supervisor = relationship("Supervisor")
