"""Brand model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from storehub.database import Base, BigId


class Brand(Base):
    """Product brand, usable as a discount restriction."""

    __tablename__ = 'brand'

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Brand(id={self.id}, name='{self.name}')>"
