"""Cart model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from storehub.database import Base, BigId


class Cart(Base):
    """
    Cart - aggregate owning the lines that get priced.

    The coupon code entered by the customer lives here; coupon
    discounts compare against it when evaluating each line.
    """

    __tablename__ = 'cart'

    id = Column(BigId, primary_key=True, autoincrement=True)
    coupon_code = Column(String(64), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    # Relationships
    lines = relationship('CartLine', back_populates='cart', cascade='all, delete-orphan',
                         order_by='CartLine.id')

    def __repr__(self):
        return f"<Cart(id={self.id}, coupon_code={self.coupon_code!r})>"

    @property
    def sub_total(self):
        """Pre-discount total of every line."""
        return sum((line.quantity * line.unit_price for line in self.lines), 0)
