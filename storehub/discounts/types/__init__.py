"""Built-in discount types."""
from storehub.discounts.types.base import AbstractDiscountType
from storehub.discounts.types.coupon import Coupon
from storehub.discounts.types.product_discount import ProductDiscount

DEFAULT_TYPES = [Coupon, ProductDiscount]

__all__ = ['AbstractDiscountType', 'Coupon', 'ProductDiscount', 'DEFAULT_TYPES']
