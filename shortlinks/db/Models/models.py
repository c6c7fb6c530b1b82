from sqlalchemy import Column, String, Integer, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class Link(Base):
    __tablename__ = "links"

    # Short identifier; the primary key is the uniqueness authority for generated codes
    id = Column(String(16), primary_key=True)
    target = Column(String(2048), nullable=False)
    # Only ever changed through "clicks = clicks + 1"
    clicks = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
