"""Collection model."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storehub.database import Base, BigId


collection_product = Table(
    'collection_product',
    Base.metadata,
    Column('collection_id', BigId, ForeignKey('collection.id', ondelete='CASCADE'), primary_key=True),
    Column('product_id', BigId, ForeignKey('product.id', ondelete='CASCADE'), primary_key=True),
)


class Collection(Base):
    """Product collection (category tree node)."""

    __tablename__ = 'collection'

    id = Column(BigId, primary_key=True, autoincrement=True)
    parent_id = Column(BigId, ForeignKey('collection.id'), nullable=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    parent = relationship('Collection', remote_side=[id])
    products = relationship('Product', secondary=collection_product, back_populates='collections')

    def __repr__(self):
        return f"<Collection(id={self.id}, name='{self.name}')>"

    @property
    def breadcrumb(self):
        """Names of the ancestors, root first (excludes this collection)."""
        names = []
        node = self.parent
        while node is not None:
            names.insert(0, node.name)
            node = node.parent
        return names
