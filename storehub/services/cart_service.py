"""Cart Service - cart lines and discount repricing."""

import logging
from decimal import Decimal
from datetime import datetime
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session
from storehub.models import Cart, CartLine, Product
from storehub.exceptions import BusinessLogicError, NotFoundError

logger = logging.getLogger(__name__)


def get_cart(session: Session, cart_id: int) -> Cart:
    """Load a cart or raise NotFoundError."""
    cart = session.query(Cart).filter(Cart.id == cart_id).first()
    if not cart:
        raise NotFoundError('Cart not found.')
    return cart


def add_product_to_cart(
    session: Session,
    cart_id: int,
    product_id: int,
    quantity: int = 1
) -> CartLine:
    """Add product to cart or increase quantity if already there."""
    if quantity <= 0:
        raise BusinessLogicError('Quantity must be greater than 0.')

    cart = get_cart(session, cart_id)

    product = session.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError('Product not found.')
    if not product.active:
        raise BusinessLogicError(f'Product "{product.name}" is not active.')

    line = session.query(CartLine).filter(
        CartLine.cart_id == cart_id,
        CartLine.product_id == product_id
    ).first()

    if line:
        line.quantity = line.quantity + quantity
    else:
        line = CartLine(cart=cart, product=product, quantity=quantity, unit_price=product.sale_price)
        session.add(line)

    line.reset_totals()
    cart.updated_at = datetime.now()
    session.flush()
    return line


def set_coupon_code(session: Session, cart_id: int, code: Optional[str]) -> Cart:
    """Store the coupon code entered for the cart (blank clears it)."""
    cart = get_cart(session, cart_id)
    code = (code or '').strip()
    cart.coupon_code = code or None
    cart.updated_at = datetime.now()
    session.flush()
    return cart


def calculate_cart_totals(cart: Cart) -> Dict[str, Any]:
    """Totals for the cart from the current state of its lines."""
    lines_details = []
    sub_total = Decimal('0')
    discount_total = Decimal('0')

    for line in cart.lines:
        line_sub_total = Decimal(line.sub_total or 0)
        line_discount = Decimal(line.discount_total or 0)

        lines_details.append({
            'line_id': line.id,
            'product_id': line.product_id,
            'product_name': line.product.name if line.product else '',
            'quantity': line.quantity,
            'unit_price': line.unit_price,
            'sub_total': line_sub_total.quantize(Decimal('0.01')),
            'discount_total': line_discount.quantize(Decimal('0.01')),
            'total': Decimal(line.total if line.total is not None else line_sub_total).quantize(Decimal('0.01')),
            'discounts': [
                {'handle': discount.handle, 'name': discount.name}
                for discount in line.applied_discounts
            ],
        })
        sub_total += line_sub_total
        discount_total += line_discount

    return {
        'sub_total': sub_total.quantize(Decimal('0.01')),
        'discount_total': discount_total.quantize(Decimal('0.01')),
        'total': (sub_total - discount_total).quantize(Decimal('0.01')),
        'lines': lines_details
    }


def reprice_cart(session: Session, cart_id: int, manager=None) -> Dict[str, Any]:
    """
    Reset every line of the cart and run the discount pipeline over it once.

    A new manager is built when none is given, so the applied log only
    covers this pass. The session is flushed but not committed.
    """
    if manager is None:
        from storehub.discounts import get_discount_manager
        manager = get_discount_manager(session)

    cart = get_cart(session, cart_id)

    for line in cart.lines:
        line.reset_totals()
        manager.apply(line)

    session.flush()

    totals = calculate_cart_totals(cart)
    totals['applied'] = [
        {'line_id': applied.line.id, 'discount_id': applied.discount.id, 'handle': applied.discount.handle}
        for applied in manager.get_applied()
    ]
    logger.info(
        f"[DISCOUNTS] Repriced cart {cart.id}: {len(totals['applied'])} application(s), "
        f"discount {totals['discount_total']}"
    )
    return totals
