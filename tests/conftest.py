import pytest
from decimal import Decimal
from itertools import count

from storehub import create_app
from storehub.database import get_session, create_schema, drop_schema
from storehub.discounts.manager import DiscountManager
from storehub.discounts.registry import DiscountRegistry
from storehub.discounts.types import DEFAULT_TYPES
from storehub.models import (
    Brand, Collection, Product, Cart, CartLine, Discount, DiscountCollection
)


_ids = count(1000)


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    return app


@pytest.fixture(scope='function')
def session(app):
    """Create database session for testing on a fresh schema, inside an app context."""
    with app.app_context():
        create_schema()
        session = get_session()
        yield session
        session.rollback()
        session.remove()
        drop_schema()


@pytest.fixture
def registry():
    """Registry with the built-in discount types."""
    return DiscountRegistry(DEFAULT_TYPES)


@pytest.fixture
def make_manager(registry):
    """Build a manager over an explicit discount list."""
    def _make(discounts, **kwargs):
        return DiscountManager(registry, discounts=discounts, **kwargs)
    return _make


# Transient object factories (no database needed)

@pytest.fixture
def make_discount():
    def _make(handle, type='product_discount', priority=1, data=None, active=True,
              starts_at=None, ends_at=None, brands=(), collections=(), id=None):
        discount = Discount(
            id=id if id is not None else next(_ids),
            name=handle.replace('-', ' ').title(),
            handle=handle,
            type=type,
            priority=priority,
            active=active,
            starts_at=starts_at,
            ends_at=ends_at,
            data=data if data is not None else {'percentage': '10'},
        )
        discount.brands = list(brands)
        discount.collections = [
            DiscountCollection(collection=collection, collection_id=collection.id, type='restriction')
            for collection in collections
        ]
        return discount
    return _make


@pytest.fixture
def make_product():
    def _make(name='Widget', price='100.00', brand=None, collections=()):
        product = Product(
            id=next(_ids),
            name=name,
            sale_price=Decimal(price),
            active=True,
            brand=brand,
            brand_id=brand.id if brand is not None else None,
        )
        product.collections = list(collections)
        return product
    return _make


@pytest.fixture
def make_line(make_product):
    def _make(price='100.00', quantity=1, product=None, cart=None):
        product = product or make_product(price=price)
        cart = cart or Cart(id=next(_ids))
        return CartLine(
            id=next(_ids),
            cart=cart,
            product=product,
            quantity=quantity,
            unit_price=Decimal(price),
        )
    return _make


@pytest.fixture
def brand_acme():
    return Brand(id=next(_ids), name='Acme')


@pytest.fixture
def brand_globex():
    return Brand(id=next(_ids), name='Globex')


@pytest.fixture
def collection_shoes():
    return Collection(id=next(_ids), name='Shoes')


# Persisted fixtures

@pytest.fixture(scope='function')
def brand(session):
    brand = Brand(name='Acme')
    session.add(brand)
    session.commit()
    return brand


@pytest.fixture(scope='function')
def other_brand(session):
    brand = Brand(name='Globex')
    session.add(brand)
    session.commit()
    return brand


@pytest.fixture(scope='function')
def collection(session):
    collection = Collection(name='Shoes')
    session.add(collection)
    session.commit()
    return collection


@pytest.fixture(scope='function')
def other_collection(session):
    collection = Collection(name='Hats')
    session.add(collection)
    session.commit()
    return collection


@pytest.fixture(scope='function')
def product(session, brand, collection):
    product = Product(
        name='Runner',
        sku='RUN-001',
        brand_id=brand.id,
        sale_price=Decimal('100.00'),
        active=True
    )
    product.collections.append(collection)
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def other_product(session, other_brand):
    product = Product(
        name='Cap',
        sku='CAP-001',
        brand_id=other_brand.id,
        sale_price=Decimal('20.00'),
        active=True
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def cart(session):
    cart = Cart()
    session.add(cart)
    session.commit()
    return cart
