"""
Base class for discount types.

A discount type is the strategy behind a Discount record: the record's
`type` column holds the type's tag, and the manager builds one instance
per (discount, pricing pass) and calls execute() on each cart line.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

from storehub.discounts import restrictions
from storehub.exceptions import InvalidDiscountDataError

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')
CENT = Decimal('0.01')

TRUE_FLAGS = ('true', '1')
FALSE_FLAGS = ('false', '0', '')


class AbstractDiscountType:
    """
    Strategy contract for a discount type.

    Subclasses set `tag` and `name` and implement execute(). execute()
    must return the line untouched when its conditions are not met, and
    must not write to the database.
    """

    tag: str = None
    name: str = None

    def __init__(self, discount=None, manager=None):
        self.discount = discount
        self.manager = manager
        self.data: Dict[str, Any] = {}
        if discount is not None and discount.data is not None:
            if not isinstance(discount.data, dict):
                raise InvalidDiscountDataError(discount, 'data', 'must be an object')
            self.data = dict(discount.data)

    def __repr__(self):
        handle = getattr(self.discount, 'handle', None)
        return f"<{type(self).__name__}(tag='{self.tag}', discount={handle!r})>"

    def execute(self, cart_line):
        raise NotImplementedError

    def to_dict(self) -> Dict[str, str]:
        """Summary used by configuration screens."""
        return {'tag': self.tag, 'name': self.name}

    # Data payload helpers

    def data_decimal(self, key: str, default: Optional[Decimal] = None) -> Optional[Decimal]:
        """
        Read a numeric data value as Decimal.

        Raises InvalidDiscountDataError when the key is missing (and no
        default is given) or when the value is not a non-negative number.
        """
        raw = self.data.get(key)
        if raw is None or raw == '':
            if default is not None:
                return default
            raise InvalidDiscountDataError(self.discount, key)
        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidDiscountDataError(self.discount, key, f"is not a number ({raw!r})")
        if not value.is_finite() or value < 0:
            raise InvalidDiscountDataError(self.discount, key, f"must be a non-negative number ({raw!r})")
        return value

    def is_fixed_value(self) -> bool:
        """Read the fixed_value flag; form-bound payloads may store it as a string."""
        raw = self.data.get('fixed_value', False)
        if raw is None or isinstance(raw, bool):
            return bool(raw)
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        if isinstance(raw, str):
            flag = raw.strip().lower()
            if flag in TRUE_FLAGS:
                return True
            if flag in FALSE_FLAGS:
                return False
        raise InvalidDiscountDataError(self.discount, 'fixed_value', f"is not a boolean ({raw!r})")

    def reward_amount(self, cart_line) -> Decimal:
        """Amount this discount takes off the line's running total."""
        if self.is_fixed_value():
            return self.data_decimal('value')

        percentage = self.data_decimal('percentage')
        if percentage > HUNDRED:
            raise InvalidDiscountDataError(self.discount, 'percentage', f"cannot exceed 100 ({percentage})")
        running_total = Decimal(cart_line.total or 0)
        return (running_total * percentage / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)

    # Application helpers

    def matches_restrictions(self, cart_line) -> bool:
        return restrictions.line_matches(cart_line, self.discount)

    def apply_reward(self, cart_line):
        """Deduct the reward from the line and record the application."""
        amount = self.reward_amount(cart_line)
        taken = cart_line.take_discount(amount)
        logger.debug(f"[DISCOUNTS] {self.discount.handle} took {taken} off line {cart_line.id}")
        if self.manager is not None:
            self.manager.add_applied(cart_line, self.discount)
        return cart_line
