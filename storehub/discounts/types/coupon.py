"""Coupon discount: applies when the cart carries the matching coupon code."""
from decimal import Decimal

from storehub.discounts.types.base import AbstractDiscountType
from storehub.exceptions import InvalidDiscountDataError


def normalize_code(code):
    """Coupon codes compare trimmed and case-insensitively."""
    return (code or '').strip().upper()


class Coupon(AbstractDiscountType):
    """
    Data payload:
        coupon        code the customer has to enter (required)
        min_subtotal  optional minimum pre-discount cart subtotal
        fixed_value / value / percentage  the reward, see AbstractDiscountType
    """

    tag = 'coupon'
    name = 'Coupon'

    @property
    def code(self):
        code = normalize_code(self.data.get('coupon'))
        if not code:
            raise InvalidDiscountDataError(self.discount, 'coupon')
        return code

    def execute(self, cart_line):
        code = self.code
        cart = cart_line.cart
        if cart is None or normalize_code(cart.coupon_code) != code:
            return cart_line

        min_subtotal = self.data_decimal('min_subtotal', default=Decimal('0'))
        if min_subtotal and Decimal(cart.sub_total) < min_subtotal:
            return cart_line

        if not self.matches_restrictions(cart_line):
            return cart_line

        return self.apply_reward(cart_line)
