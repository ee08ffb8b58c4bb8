from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from datetime import datetime
from supervision.database import Base


class RefreshToken(Base):
    """Issued refresh tokens; one table for every role, keyed by (subject_id, role)"""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(Text, unique=True, nullable=False)
    subject_id = Column(Integer, nullable=False, index=True)
    role = Column(String(50), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
