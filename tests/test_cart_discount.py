import pytest

from catalog_admin.enums.catalog import DiscountType
from catalog_admin.schemas.discount import CartItem
from catalog_admin.services.pricing_service.cart_discount import (
    FULL_AMOUNT_RATE, UnknownProductError, calculate_cart_discount, resolve_discount,
)


def _catalog(*products):
    return {p.id: p for p in products}


def _cart(*pairs):
    return [CartItem(product_id=product_id, quantity=quantity) for product_id, quantity in pairs]


def test_category_discount_scenario(product_factory):
    catalog = _catalog(product_factory(1, "Headphones", "electronics", price=100))

    result = calculate_cart_discount(catalog, _cart((1, 2)))

    line = result.discounts[0]
    assert result.original_total == pytest.approx(200)
    assert line.discount_type == DiscountType.category
    assert line.discount_rate == pytest.approx(0.85)
    assert line.final_subtotal == pytest.approx(170)
    assert line.saved == pytest.approx(30)
    assert result.applied_discount == DiscountType.category


def test_full_amount_scenario(product_factory):
    catalog = _catalog(
        product_factory(1, "Monitor", "electronics", price=9800),
        product_factory(2, "Jacket", "clothing", price=1100),
    )

    result = calculate_cart_discount(catalog, _cart((1, 1), (2, 2)))

    assert result.original_total == pytest.approx(12000)
    assert all(d.discount_type == DiscountType.full_amount for d in result.discounts)
    assert all(d.discount_rate == pytest.approx(FULL_AMOUNT_RATE) for d in result.discounts)
    assert result.applied_discount == DiscountType.full_amount
    assert result.final_total == pytest.approx(10800)
    assert result.total_saved == pytest.approx(1200)


def test_no_discount(product_factory):
    catalog = _catalog(product_factory(1, "Novel", "books", price=300))

    result = calculate_cart_discount(catalog, _cart((1, 4)))

    assert result.discounts[0].discount_type == DiscountType.none
    assert result.discounts[0].discount_rate == 1
    assert result.final_total == pytest.approx(1200)
    assert result.total_saved == pytest.approx(0)
    assert result.applied_discount == DiscountType.none


def test_category_beats_full_amount_when_cheaper(product_factory):
    catalog = _catalog(
        product_factory(1, "Laptop", "electronics", price=5000),
        product_factory(2, "Notebook", "books", price=500),
    )

    result = calculate_cart_discount(catalog, _cart((1, 2), (2, 1)))

    laptop, notebook = result.discounts
    assert laptop.discount_type == DiscountType.category
    assert laptop.final_subtotal == pytest.approx(8500)
    assert notebook.discount_type == DiscountType.full_amount
    assert notebook.final_subtotal == pytest.approx(450)
    assert result.applied_discount == DiscountType.mixed
    assert result.final_total == pytest.approx(8950)


def test_category_quantity_is_aggregated_across_lines(product_factory):
    catalog = _catalog(
        product_factory(1, "Shirt", "clothing", price=100),
        product_factory(2, "Socks", "clothing", price=50),
        product_factory(3, "Cap", "clothing", price=80),
    )

    result = calculate_cart_discount(catalog, _cart((1, 1), (2, 1), (3, 1)))

    assert [d.discount_type for d in result.discounts] == [DiscountType.category] * 3
    assert [d.discount_rate for d in result.discounts] == [pytest.approx(0.8)] * 3


@pytest.mark.parametrize(
    "category, threshold, rate",
    [("electronics", 2, 0.85), ("clothing", 3, 0.80), ("books", 5, 0.70)],
)
def test_category_thresholds(product_factory, category, threshold, rate):
    catalog = _catalog(product_factory(1, "Item", category, price=10))

    below = calculate_cart_discount(catalog, _cart((1, threshold - 1)))
    at = calculate_cart_discount(catalog, _cart((1, threshold)))

    assert below.discounts[0].discount_type == DiscountType.none
    assert at.discounts[0].discount_type == DiscountType.category
    assert at.discounts[0].discount_rate == pytest.approx(rate)


def test_reaching_threshold_never_raises_a_line_price(product_factory):
    catalog = _catalog(
        product_factory(1, "Atlas", "books", price=100),
        product_factory(2, "Poems", "books", price=40),
    )

    before = calculate_cart_discount(catalog, _cart((1, 1), (2, 3)))
    after = calculate_cart_discount(catalog, _cart((1, 1), (2, 4)))

    assert after.discounts[0].final_subtotal <= before.discounts[0].final_subtotal
    assert after.discounts[0].final_subtotal == pytest.approx(70)


def test_rate_bounds(product_factory):
    catalog = _catalog(
        product_factory(1, "Phone", "electronics", price=7000),
        product_factory(2, "Coat", "clothing", price=2000),
        product_factory(3, "Guide", "books", price=30),
    )

    result = calculate_cart_discount(catalog, _cart((1, 1), (2, 3), (3, 2)))

    for line in result.discounts:
        assert 0 < line.discount_rate <= 1
        assert line.final_subtotal <= line.original_subtotal
        assert line.saved == pytest.approx(line.original_subtotal - line.final_subtotal)


def test_lines_follow_cart_order(product_factory):
    catalog = _catalog(*(product_factory(i, category="books") for i in (1, 2, 3)))

    result = calculate_cart_discount(catalog, _cart((3, 1), (1, 1), (2, 1)))

    assert [d.product_id for d in result.discounts] == [3, 1, 2]
    assert [d.product_name for d in result.discounts] == ["Product 3", "Product 1", "Product 2"]


@pytest.mark.parametrize(
    "category_rate, full_rate, expected",
    [
        (0.85, 0.85, (DiscountType.category, 0.85)),
        (0.85, 0.9, (DiscountType.category, 0.85)),
        (1.0, 0.9, (DiscountType.full_amount, 0.9)),
        (0.95, 0.9, (DiscountType.full_amount, 0.9)),
        (0.8, 1.0, (DiscountType.category, 0.8)),
        (1.0, 1.0, (DiscountType.none, 1.0)),
    ],
)
def test_resolve_discount_table(category_rate, full_rate, expected):
    assert resolve_discount(category_rate, full_rate) == expected


def test_unknown_product_fails_fast(product_factory):
    catalog = _catalog(product_factory(1))

    with pytest.raises(UnknownProductError) as exc_info:
        calculate_cart_discount(catalog, _cart((1, 1), (99, 1)))

    assert exc_info.value.product_id == 99
    assert isinstance(exc_info.value, LookupError)


def test_non_positive_quantity_is_rejected(product_factory):
    catalog = _catalog(product_factory(1))

    with pytest.raises(ValueError):
        calculate_cart_discount(catalog, _cart((1, 0)))


def test_empty_cart(product_factory):
    result = calculate_cart_discount(_catalog(product_factory(1)), [])

    assert result.discounts == []
    assert result.original_total == 0
    assert result.applied_discount == DiscountType.none
