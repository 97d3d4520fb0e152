"""Product model."""
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storehub.database import Base, BigId
from storehub.models.collection import collection_product


class Product(Base):
    """Product model."""

    __tablename__ = 'product'

    id = Column(BigId, primary_key=True, autoincrement=True)
    sku = Column(String, nullable=True)
    name = Column(String, nullable=False)
    brand_id = Column(BigId, ForeignKey('brand.id'), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    sale_price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    brand = relationship('Brand', foreign_keys=[brand_id])
    collections = relationship('Collection', secondary=collection_product, back_populates='products')

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', sku='{self.sku}')>"
