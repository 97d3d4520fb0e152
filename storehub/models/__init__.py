"""Models package - exports all SQLAlchemy models."""
# Catalog
from storehub.models.brand import Brand
from storehub.models.collection import Collection, collection_product
from storehub.models.product import Product

# Cart
from storehub.models.cart import Cart
from storehub.models.cart_line import CartLine

# Discounts
from storehub.models.discount import Discount, brand_discount, utcnow
from storehub.models.discount_collection import DiscountCollection

__all__ = [
    # Catalog
    'Brand', 'Collection', 'collection_product', 'Product',
    # Cart
    'Cart', 'CartLine',
    # Discounts
    'Discount', 'brand_discount', 'utcnow', 'DiscountCollection',
]
