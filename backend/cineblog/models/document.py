from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from cineblog.db import Base

class DocumentRecord(Base):
    __tablename__ = "documents"
    id = Column(String(36), primary_key=True, index=True)
    collection = Column(String(64), index=True, nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
