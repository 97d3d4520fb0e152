"""Discount model."""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, ForeignKey, Table, and_, or_
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storehub.database import Base, BigId


brand_discount = Table(
    'brand_discount',
    Base.metadata,
    Column('brand_id', BigId, ForeignKey('brand.id', ondelete='CASCADE'), primary_key=True),
    Column('discount_id', BigId, ForeignKey('discount.id', ondelete='CASCADE'), primary_key=True),
)


def utcnow():
    """Current time as naive UTC, the convention used by every discount timestamp."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value):
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Discount(Base):
    """
    Discount - a configured promotion.

    `type` is the tag of the discount type (strategy) that evaluates it,
    `data` its type-specific parameters. Lower priority values are
    evaluated first.
    """

    __tablename__ = 'discount'

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    handle = Column(String(120), nullable=False, unique=True, index=True)
    type = Column(String(120), nullable=False)
    priority = Column(Integer, nullable=False, default=1, index=True)
    active = Column(Boolean, nullable=False, default=True)
    starts_at = Column(DateTime, nullable=True)
    ends_at = Column(DateTime, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    brands = relationship('Brand', secondary=brand_discount, order_by='Brand.id')
    collections = relationship('DiscountCollection', back_populates='discount',
                               cascade='all, delete-orphan', order_by='DiscountCollection.id')

    def __repr__(self):
        return f"<Discount(id={self.id}, handle='{self.handle}', type='{self.type}', priority={self.priority})>"

    @classmethod
    def active_filter(cls, moment=None):
        """SQL criterion matching discounts that are switched on and inside their window at moment."""
        moment = as_naive_utc(moment) or utcnow()
        return and_(
            cls.active.is_(True),
            or_(cls.starts_at.is_(None), cls.starts_at <= moment),
            or_(cls.ends_at.is_(None), cls.ends_at > moment),
        )

    def is_active_at(self, moment=None):
        """Python-side twin of active_filter."""
        moment = as_naive_utc(moment) or utcnow()
        if not self.active:
            return False
        starts_at = as_naive_utc(self.starts_at)
        ends_at = as_naive_utc(self.ends_at)
        if starts_at is not None and starts_at > moment:
            return False
        if ends_at is not None and ends_at <= moment:
            return False
        return True

    @property
    def sort_key(self):
        """Evaluation order: priority, then id (unsaved discounts last within a priority)."""
        return (
            self.priority if self.priority is not None else 1,
            self.id is None,
            self.id or 0,
        )
