"""Discount Service - discount administration (create/update, restrictions, type listing)."""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, Iterable, List
from sqlalchemy import or_
from sqlalchemy.orm import Session
from storehub.models import Brand, Collection, Discount, DiscountCollection
from storehub.models.discount import as_naive_utc
from storehub.exceptions import BusinessLogicError, NotFoundError

logger = logging.getLogger(__name__)


def get_active_discounts(session: Session, moment: Optional[datetime] = None) -> List[Discount]:
    """Discounts active at moment (default now), ordered by priority then id."""
    from storehub.discounts.manager import load_active_discounts
    return load_active_discounts(session, moment)


def get_discount_types() -> List[Dict[str, str]]:
    """Available discount types for configuration screens."""
    from storehub.discounts import get_registry
    return [discount_type.to_dict() for discount_type in get_registry().get_types()]


def get_discount(session: Session, discount_id: int) -> Discount:
    discount = session.query(Discount).filter(Discount.id == discount_id).first()
    if not discount:
        raise NotFoundError('Discount not found.')
    return discount


def list_discounts(session: Session, search: Optional[str] = None) -> List[Discount]:
    """All discounts in evaluation order, optionally filtered by name or handle."""
    query = session.query(Discount)
    if search:
        query = query.filter(
            or_(
                Discount.name.ilike(f'%{search}%'),
                Discount.handle.ilike(f'%{search}%')
            )
        )
    return query.order_by(Discount.priority.asc(), Discount.id.asc()).all()


def sync_discount_data(discount: Discount, data: Optional[Dict[str, Any]]) -> Discount:
    """Replace the type-specific data payload."""
    discount.data = dict(data or {})
    return discount


def sync_brands(session: Session, discount: Discount, brand_ids: Iterable[int]) -> Discount:
    """Make the discount's brand restrictions exactly brand_ids."""
    brand_ids = list(dict.fromkeys(brand_ids or []))
    brands = session.query(Brand).filter(Brand.id.in_(brand_ids)).all() if brand_ids else []
    missing = set(brand_ids) - {brand.id for brand in brands}
    if missing:
        raise NotFoundError(f'Brand(s) not found: {", ".join(str(i) for i in sorted(missing))}.')
    discount.brands = brands
    return discount


def sync_collections(session: Session, discount: Discount, collection_ids: Iterable[int]) -> Discount:
    """
    Make the discount's collection restrictions exactly collection_ids.

    Links no longer selected are removed; existing links are kept as they
    are and only new collections get a link.
    """
    collection_ids = list(dict.fromkeys(collection_ids or []))
    wanted = set(collection_ids)

    for link in list(discount.collections):
        if link.type == DiscountCollection.RESTRICTION and link.collection_id not in wanted:
            discount.collections.remove(link)

    existing = {link.collection_id for link in discount.collections}
    new_ids = [collection_id for collection_id in collection_ids if collection_id not in existing]
    if new_ids:
        collections = session.query(Collection).filter(Collection.id.in_(new_ids)).all()
        found = {collection.id: collection for collection in collections}
        missing = set(new_ids) - set(found)
        if missing:
            raise NotFoundError(f'Collection(s) not found: {", ".join(str(i) for i in sorted(missing))}.')
        for collection_id in new_ids:
            discount.collections.append(DiscountCollection(
                collection=found[collection_id],
                collection_id=collection_id,
                type=DiscountCollection.RESTRICTION
            ))
    return discount


def remove_collection(discount: Discount, collection_id: int) -> Discount:
    """Drop one collection restriction from the discount."""
    for link in list(discount.collections):
        if link.collection_id == collection_id:
            discount.collections.remove(link)
    return discount


def save_discount(
    session: Session,
    discount_id: Optional[int] = None,
    *,
    name: str,
    handle: str,
    type: str,
    priority: int = 1,
    active: bool = True,
    starts_at: Optional[datetime] = None,
    ends_at: Optional[datetime] = None,
    data: Optional[Dict[str, Any]] = None,
    brand_ids: Iterable[int] = (),
    collection_ids: Iterable[int] = ()
) -> Discount:
    """Create or update a discount together with its brand and collection restrictions."""
    from storehub.discounts import get_registry

    name = (name or '').strip()
    handle = (handle or '').strip()
    if not name:
        raise BusinessLogicError('Discount name is required.')
    if not handle:
        raise BusinessLogicError('Discount handle is required.')
    if type not in get_registry():
        raise BusinessLogicError(f'Unknown discount type "{type}".')
    if starts_at and ends_at and ends_at <= starts_at:
        raise BusinessLogicError('The end date must be after the start date.')

    duplicate = session.query(Discount).filter(Discount.handle == handle)
    if discount_id is not None:
        duplicate = duplicate.filter(Discount.id != discount_id)
    if duplicate.first():
        raise BusinessLogicError(f'A discount with handle "{handle}" already exists.')

    if discount_id is None:
        discount = Discount()
        session.add(discount)
    else:
        discount = get_discount(session, discount_id)

    discount.name = name
    discount.handle = handle
    discount.type = type
    discount.priority = int(priority)
    discount.active = bool(active)
    discount.starts_at = as_naive_utc(starts_at)
    discount.ends_at = as_naive_utc(ends_at)
    sync_discount_data(discount, data)
    sync_brands(session, discount, brand_ids)
    sync_collections(session, discount, collection_ids)

    session.flush()
    logger.info(f"Discount saved: {discount.handle} (id={discount.id}, type={discount.type})")
    return discount
