"""Brand and collection membership checks used by discount types."""
from storehub.models.discount_collection import DiscountCollection


def brand_ids(discount):
    """Ids of the brands a discount is restricted to (empty means any brand)."""
    return {brand.id for brand in (discount.brands or [])}


def collection_ids(discount):
    """Ids of the collections a discount is restricted to (empty means any collection)."""
    ids = set()
    for link in discount.collections or []:
        if (link.type or DiscountCollection.RESTRICTION) != DiscountCollection.RESTRICTION:
            continue
        ids.add(link.collection_id if link.collection_id is not None else link.collection.id)
    return ids


def _brand_id(product):
    # Transient products may carry the relationship before the FK is populated
    if product.brand_id is not None:
        return product.brand_id
    return product.brand.id if product.brand is not None else None


def product_collection_ids(product):
    """Ids of the product's collections and all of their ancestors."""
    ids = set()
    for collection in product.collections or []:
        node = collection
        while node is not None and node.id not in ids:
            ids.add(node.id)
            node = node.parent
    return ids


def line_matches(cart_line, discount):
    """True when the line's product satisfies the discount's brand and collection restrictions."""
    product = cart_line.product
    allowed_brands = brand_ids(discount)
    allowed_collections = collection_ids(discount)

    if allowed_brands:
        if product is None or _brand_id(product) not in allowed_brands:
            return False

    if allowed_collections:
        if product is None or not (product_collection_ids(product) & allowed_collections):
            return False

    return True
