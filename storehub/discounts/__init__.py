"""
Discount pipeline: registry of discount types and the per-request manager.

init_discounts(app) builds the registry once at startup; each request or
batch job gets its own DiscountManager from get_discount_manager().
"""

import logging
from typing import Optional

from flask import Flask, current_app, has_app_context
from werkzeug.utils import import_string

logger = logging.getLogger(__name__)

_registry = None


def init_discounts(app: Flask) -> None:
    """Initialize the discount type registry singleton."""
    global _registry
    from storehub.discounts.registry import DiscountRegistry
    from storehub.discounts.types import DEFAULT_TYPES

    registry = DiscountRegistry(DEFAULT_TYPES)
    for path in app.config.get('DISCOUNT_EXTRA_TYPES', []):
        registry.register(import_string(path))
        logger.info(f"[DISCOUNTS] Registered extra discount type {path}")

    _registry = registry
    if not hasattr(app, 'extensions'):
        app.extensions = {}
    app.extensions['discounts'] = registry


def get_registry():
    """Get the discount type registry of the current app, or the last one initialized."""
    if has_app_context() and 'discounts' in current_app.extensions:
        return current_app.extensions['discounts']
    if _registry is None:
        raise RuntimeError("Discounts not initialized.")
    return _registry


def get_discount_manager(session, now=None, on_invalid_data: Optional[str] = None):
    """Fresh DiscountManager bound to session, using the app's invalid data policy."""
    from storehub.discounts.manager import DiscountManager

    if on_invalid_data is None:
        on_invalid_data = current_app.config.get('DISCOUNT_INVALID_DATA_POLICY', 'skip')
    return DiscountManager(get_registry(), session=session, now=now, on_invalid_data=on_invalid_data)
