"""Registry of discount types, keyed by the tag stored on Discount.type."""

import logging
from typing import Dict, List, Type

from storehub.discounts.types.base import AbstractDiscountType
from storehub.exceptions import DiscountConfigurationError, UnknownDiscountTypeError

logger = logging.getLogger(__name__)


class DiscountRegistry:
    """
    Ordered set of discount type classes.

    Types are registered at process start. Registering a second class
    for an existing tag keeps the first one: resolution is first match.
    """

    def __init__(self, types=None):
        self._types: List[Type[AbstractDiscountType]] = []
        self._by_tag: Dict[str, Type[AbstractDiscountType]] = {}
        for discount_type in types or []:
            self.register(discount_type)

    def __len__(self):
        return len(self._types)

    def __contains__(self, tag):
        return tag in self._by_tag

    def register(self, discount_type):
        """Append a discount type class. Returns the class so it can be used as a decorator."""
        tag = getattr(discount_type, 'tag', None)
        if not tag:
            raise DiscountConfigurationError(f"Discount type {discount_type!r} has no tag")

        self._types.append(discount_type)
        if tag in self._by_tag:
            logger.warning(
                f"[DISCOUNTS] Tag '{tag}' already registered by {self._by_tag[tag].__name__}; "
                f"{discount_type.__name__} will be ignored"
            )
        else:
            self._by_tag[tag] = discount_type
        return discount_type

    def resolve(self, tag):
        """Class registered for tag."""
        try:
            return self._by_tag[tag]
        except KeyError:
            raise UnknownDiscountTypeError(tag) from None

    def get_types(self):
        """One unbound instance of every registered type, in registration order."""
        return [discount_type() for discount_type in self._types]

    list_types = get_types

    def tags(self):
        return list(self._by_tag)
