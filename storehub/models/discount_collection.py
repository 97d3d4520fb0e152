"""Discount Collection model."""
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from storehub.database import Base, BigId


class DiscountCollection(Base):
    """Link between a discount and a collection, typed by its role (currently 'restriction')."""

    __tablename__ = 'discount_collection'
    __table_args__ = (
        UniqueConstraint('discount_id', 'collection_id', name='uq_discount_collection'),
    )

    RESTRICTION = 'restriction'

    id = Column(BigId, primary_key=True, autoincrement=True)
    discount_id = Column(BigId, ForeignKey('discount.id', ondelete='CASCADE'), nullable=False, index=True)
    collection_id = Column(BigId, ForeignKey('collection.id', ondelete='CASCADE'), nullable=False)
    type = Column(String(20), nullable=False, default=RESTRICTION)

    # Relationships
    discount = relationship('Discount', back_populates='collections')
    collection = relationship('Collection')

    def __repr__(self):
        return f"<DiscountCollection(discount_id={self.discount_id}, collection_id={self.collection_id}, type='{self.type}')>"
