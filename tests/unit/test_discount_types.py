"""
Unit tests for the built-in discount types.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from storehub.discounts.types import Coupon, ProductDiscount
from storehub.exceptions import InvalidDiscountDataError
from storehub.models import Cart, Collection

NOW = datetime(2026, 6, 1, 12, 0, 0)


class TestProductDiscount:
    """Tests for the product discount type."""

    def test_unrestricted_applies_to_every_line(self, make_manager, make_discount, make_line):
        discount = make_discount('everything', data={'percentage': '20'})
        manager = make_manager([discount], now=NOW)
        line = make_line(price='30.00', quantity=2)

        manager.apply(line)

        assert line.total == Decimal('48.00')
        assert manager.get_applied()[0].discount is discount

    def test_brand_restriction(self, make_manager, make_discount, make_line, make_product,
                               brand_acme, brand_globex):
        discount = make_discount('acme-only', brands=[brand_acme])
        manager = make_manager([discount], now=NOW)
        acme_line = make_line(product=make_product(brand=brand_acme))
        globex_line = make_line(product=make_product(brand=brand_globex))
        unbranded_line = make_line(product=make_product())

        for line in (acme_line, globex_line, unbranded_line):
            manager.apply(line)

        assert acme_line.total == Decimal('90.00')
        assert globex_line.total == Decimal('100.00')
        assert unbranded_line.total == Decimal('100.00')
        assert [a.line for a in manager.get_applied()] == [acme_line]

    def test_collection_restriction(self, make_manager, make_discount, make_line, make_product,
                                    collection_shoes):
        discount = make_discount('shoes', collections=[collection_shoes])
        manager = make_manager([discount], now=NOW)
        shoe_line = make_line(product=make_product(collections=[collection_shoes]))
        other_line = make_line(product=make_product())

        manager.apply(shoe_line)
        manager.apply(other_line)

        assert shoe_line.total == Decimal('90.00')
        assert other_line.total == Decimal('100.00')

    def test_collection_restriction_covers_child_collections(self, make_manager, make_discount, make_line,
                                                           make_product, collection_shoes):
        running = Collection(id=collection_shoes.id + 500, name='Running', parent=collection_shoes)
        trail = Collection(id=collection_shoes.id + 501, name='Trail', parent=running)
        discount = make_discount('shoes', collections=[collection_shoes])
        manager = make_manager([discount], now=NOW)
        trail_line = make_line(product=make_product(collections=[trail]))

        manager.apply(trail_line)

        assert trail_line.total == Decimal('90.00')

    def test_child_restriction_does_not_cover_parent(self, make_manager, make_discount, make_line,
                                                     make_product, collection_shoes):
        running = Collection(id=collection_shoes.id + 500, name='Running', parent=collection_shoes)
        discount = make_discount('running', collections=[running])
        manager = make_manager([discount], now=NOW)
        shoe_line = make_line(product=make_product(collections=[collection_shoes]))

        manager.apply(shoe_line)

        assert shoe_line.total == Decimal('100.00')

    def test_min_quantity(self, make_manager, make_discount, make_line):
        discount = make_discount('bulk', data={'percentage': '50', 'min_quantity': 3})
        manager = make_manager([discount], now=NOW)
        small = make_line(price='10.00', quantity=2)
        large = make_line(price='10.00', quantity=3)

        manager.apply(small)
        manager.apply(large)

        assert small.total == Decimal('20.00')
        assert large.total == Decimal('15.00')

    def test_percentage_rounds_half_up(self, make_manager, make_discount, make_line):
        discount = make_discount('odd', data={'percentage': '12.5'})
        manager = make_manager([discount], now=NOW)
        line = make_line(price='0.99')  # 0.12375 -> 0.12

        manager.apply(line)

        assert line.discount_total == Decimal('0.12')
        assert line.total == Decimal('0.87')

    def test_percentage_over_hundred_is_invalid(self, make_discount, make_line):
        discount_type = ProductDiscount(discount=make_discount('too-much', data={'percentage': '150'}))

        with pytest.raises(InvalidDiscountDataError):
            discount_type.execute(make_line())

    def test_fixed_value_is_capped_at_line_total(self, make_manager, make_discount, make_line):
        discount = make_discount('big', data={'fixed_value': True, 'value': '500'})
        manager = make_manager([discount], now=NOW)
        line = make_line(price='100.00')

        manager.apply(line)

        assert line.total == Decimal('0.00')
        assert line.discount_total == Decimal('100.00')

    @pytest.mark.parametrize('flag', ['false', 'False', '0', 0, False, None])
    def test_string_false_flag_means_percentage(self, make_manager, make_discount, make_line, flag):
        discount = make_discount('pct', data={'fixed_value': flag, 'percentage': '10'})
        manager = make_manager([discount], now=NOW)
        line = make_line(price='100.00')

        manager.apply(line)

        assert line.total == Decimal('90.00')

    @pytest.mark.parametrize('flag', ['true', 'TRUE', '1', 1, True])
    def test_string_true_flag_means_fixed_value(self, make_manager, make_discount, make_line, flag):
        discount = make_discount('five', data={'fixed_value': flag, 'value': '5'})
        manager = make_manager([discount], now=NOW)
        line = make_line(price='100.00')

        manager.apply(line)

        assert line.total == Decimal('95.00')

    @pytest.mark.parametrize('flag', ['yes', 'maybe', 2, [True]])
    def test_unrecognised_flag_is_invalid(self, make_discount, make_line, flag):
        discount_type = ProductDiscount(discount=make_discount('odd-flag', data={'fixed_value': flag, 'percentage': '10'}))

        with pytest.raises(InvalidDiscountDataError) as exc_info:
            discount_type.execute(make_line())

        assert exc_info.value.key == 'fixed_value'

    def test_negative_value_is_invalid(self, make_discount, make_line):
        discount_type = ProductDiscount(discount=make_discount('neg', data={'fixed_value': True, 'value': '-5'}))

        with pytest.raises(InvalidDiscountDataError):
            discount_type.execute(make_line())


class TestCoupon:
    """Tests for the coupon discount type."""

    def coupon(self, make_discount, **data):
        payload = {'coupon': 'SAVE10', 'percentage': '10'}
        payload.update(data)
        return make_discount('save-ten', type='coupon', data=payload)

    def test_applies_when_code_matches(self, make_manager, make_discount, make_line):
        discount = self.coupon(make_discount)
        manager = make_manager([discount], now=NOW)
        line = make_line(price='100.00', cart=Cart(coupon_code='  save10 '))

        manager.apply(line)

        assert line.total == Decimal('90.00')
        assert manager.get_applied()[0].discount is discount

    def test_no_code_no_discount(self, make_manager, make_discount, make_line):
        manager = make_manager([self.coupon(make_discount)], now=NOW)
        line = make_line(price='100.00', cart=Cart(coupon_code=None))

        manager.apply(line)

        assert line.total == Decimal('100.00')
        assert manager.get_applied() == ()

    def test_wrong_code_no_discount(self, make_manager, make_discount, make_line):
        manager = make_manager([self.coupon(make_discount)], now=NOW)
        line = make_line(price='100.00', cart=Cart(coupon_code='SAVE20'))

        manager.apply(line)

        assert line.total == Decimal('100.00')

    def test_cart_minimum(self, make_manager, make_discount, make_line):
        manager = make_manager([self.coupon(make_discount, min_subtotal='150')], now=NOW)
        cart = Cart(coupon_code='SAVE10')
        first = make_line(price='100.00', cart=cart)

        manager.apply(first)
        assert first.total == Decimal('100.00')

        second = make_line(price='60.00', cart=cart)
        first.reset_totals()
        manager.apply(first)
        manager.apply(second)

        assert first.total == Decimal('90.00')
        assert second.total == Decimal('54.00')

    def test_missing_code_is_invalid(self, make_discount, make_line):
        discount = make_discount('no-code', type='coupon', data={'percentage': '10'})

        with pytest.raises(InvalidDiscountDataError) as exc_info:
            Coupon(discount=discount).execute(make_line(cart=Cart(coupon_code='X')))

        assert exc_info.value.key == 'coupon'

    def test_respects_brand_restriction(self, make_manager, make_discount, make_line, make_product,
                                        brand_acme, brand_globex):
        discount = make_discount('acme-coupon', type='coupon', brands=[brand_acme],
                                 data={'coupon': 'ACME', 'fixed_value': True, 'value': '3'})
        manager = make_manager([discount], now=NOW)
        cart = Cart(coupon_code='ACME')
        acme_line = make_line(product=make_product(brand=brand_acme), cart=cart)
        globex_line = make_line(product=make_product(brand=brand_globex), cart=cart)

        manager.apply(acme_line)
        manager.apply(globex_line)

        assert acme_line.total == Decimal('97.00')
        assert globex_line.total == Decimal('100.00')


class TestDiscountTypeListing:
    """Tests for the configuration summary."""

    def test_to_dict(self):
        assert Coupon().to_dict() == {'tag': 'coupon', 'name': 'Coupon'}
        assert ProductDiscount().to_dict() == {'tag': 'product_discount', 'name': 'Product discount'}
