"""
Discount manager - applies the active discounts to cart lines.

One manager per request (or batch job): it caches the active discount
set on first use and keeps the log of which discount touched which line.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from storehub.exceptions import DiscountConfigurationError, InvalidDiscountDataError, UnknownDiscountTypeError
from storehub.models import CartLine, Discount, DiscountCollection, utcnow

logger = logging.getLogger(__name__)

SKIP = 'skip'
RAISE = 'raise'
INVALID_DATA_POLICIES = (SKIP, RAISE)


class AppliedDiscount(NamedTuple):
    """A discount that was applied to a cart line."""
    line: CartLine
    discount: Discount


def load_active_discounts(session: Session, moment=None) -> List[Discount]:
    """Active discounts at moment, ordered by priority then id."""
    return (
        session.query(Discount)
        .options(
            selectinload(Discount.brands),
            selectinload(Discount.collections).selectinload(DiscountCollection.collection),
        )
        .filter(Discount.active_filter(moment))
        .order_by(Discount.priority.asc(), Discount.id.asc())
        .all()
    )


class DiscountManager:
    """
    Folds the active discounts over a cart line in priority order.

    Either pass a session (discounts are loaded on the first apply()) or
    inject the candidate discounts directly. Injected discounts go through
    the same active-window filter and ordering as loaded ones.
    """

    def __init__(
        self,
        registry,
        session: Optional[Session] = None,
        discounts: Optional[Iterable[Discount]] = None,
        now=None,
        on_invalid_data: str = SKIP,
    ):
        if session is None and discounts is None:
            raise DiscountConfigurationError("DiscountManager needs a session or an explicit discount list")
        if on_invalid_data not in INVALID_DATA_POLICIES:
            raise DiscountConfigurationError(
                f"Unknown invalid data policy '{on_invalid_data}' (expected one of {', '.join(INVALID_DATA_POLICIES)})"
            )

        self.registry = registry
        self.session = session
        self.now = now or utcnow()
        self.on_invalid_data = on_invalid_data
        self._candidates = list(discounts) if discounts is not None else None
        self._discounts: Optional[List[Discount]] = None
        self._applied: List[AppliedDiscount] = []

    @property
    def discounts(self) -> List[Discount]:
        """Active discounts in evaluation order, loaded once per manager."""
        if self._discounts is None:
            if self._candidates is not None:
                candidates = self._candidates
            else:
                candidates = load_active_discounts(self.session, self.now)
            active = [discount for discount in candidates if discount.is_active_at(self.now)]
            self._discounts = sorted(active, key=lambda discount: discount.sort_key)
            logger.info(f"[DISCOUNTS] Loaded {len(self._discounts)} active discount(s)")
        return self._discounts

    def apply(self, cart_line: CartLine) -> CartLine:
        """Run every active discount's type over the line, threading the result through."""
        for discount in self.discounts:
            try:
                discount_type = self.registry.resolve(discount.type)
            except UnknownDiscountTypeError as e:
                logger.error(f"[DISCOUNTS] Cannot price line {cart_line.id}: {e.message}")
                raise UnknownDiscountTypeError(discount.type, discount) from e

            try:
                strategy = discount_type(discount=discount, manager=self)
                cart_line = strategy.execute(cart_line)
            except InvalidDiscountDataError as e:
                if self.on_invalid_data == RAISE:
                    raise
                logger.warning(f"[DISCOUNTS] Skipping discount: {e.message}")

        return cart_line

    def add_applied(self, cart_line: CartLine, discount: Discount) -> 'DiscountManager':
        """Record that discount was applied to cart_line. No deduplication."""
        self._applied.append(AppliedDiscount(cart_line, discount))
        cart_line.applied_discounts.append(discount)
        return self

    record_applied = add_applied

    def get_applied(self) -> Tuple[AppliedDiscount, ...]:
        return tuple(self._applied)

    def get_applied_for(self, cart_line: CartLine) -> Tuple[AppliedDiscount, ...]:
        return tuple(applied for applied in self._applied if applied.line is cart_line)
