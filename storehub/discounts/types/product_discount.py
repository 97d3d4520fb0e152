"""Product discount: percentage or fixed amount off lines whose product matches the restrictions."""
from storehub.discounts.types.base import AbstractDiscountType


class ProductDiscount(AbstractDiscountType):
    """
    Applies to every line whose product passes the brand and collection
    restrictions. An optional `min_quantity` in the data payload requires
    the line to hold at least that many units.
    """

    tag = 'product_discount'
    name = 'Product discount'

    def execute(self, cart_line):
        if not self.matches_restrictions(cart_line):
            return cart_line

        min_quantity = self.data.get('min_quantity')
        if min_quantity is not None and (cart_line.quantity or 0) < self.data_decimal('min_quantity'):
            return cart_line

        return self.apply_reward(cart_line)
