"""Cart Line model."""
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import Column, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship, reconstructor
from storehub.database import Base, BigId

CENT = Decimal('0.01')


class CartLine(Base):
    """
    Cart Line - a product, quantity and unit price inside a cart.

    sub_total, discount_total and total are written by the discount
    pipeline; applied_discounts is a transient annotation of the
    discounts that touched the line during the current pricing pass.
    """

    __tablename__ = 'cart_line'

    id = Column(BigId, primary_key=True, autoincrement=True)
    cart_id = Column(BigId, ForeignKey('cart.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(BigId, ForeignKey('product.id'), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)

    sub_total = Column(Numeric(10, 2), nullable=True)
    discount_total = Column(Numeric(10, 2), nullable=False, default=Decimal('0'))
    total = Column(Numeric(10, 2), nullable=True)

    # Relationships
    cart = relationship('Cart', back_populates='lines')
    product = relationship('Product')

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.applied_discounts = []
        if self.sub_total is None and self.unit_price is not None:
            self.reset_totals()

    @reconstructor
    def _init_on_load(self):
        self.applied_discounts = []

    def __repr__(self):
        return f"<CartLine(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"

    def reset_totals(self):
        """Return the line to its pre-discount state before a pricing pass."""
        quantity = self.quantity if self.quantity is not None else 1
        self.sub_total = (Decimal(quantity) * Decimal(self.unit_price)).quantize(CENT, rounding=ROUND_HALF_UP)
        self.discount_total = Decimal('0.00')
        self.total = self.sub_total
        self.applied_discounts = []
        return self

    def take_discount(self, amount):
        """
        Take amount off the running total, never going below zero.

        Returns the amount actually deducted.
        """
        amount = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
        current = Decimal(self.total if self.total is not None else 0)
        amount = max(Decimal('0.00'), min(amount, current))
        self.discount_total = Decimal(self.discount_total or 0) + amount
        self.total = current - amount
        return amount
