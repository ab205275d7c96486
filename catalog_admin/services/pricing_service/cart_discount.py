from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from catalog_admin.enums.catalog import Category, DiscountType
from catalog_admin.schemas.discount import CalculationResult, CartItem, DiscountDetail


class CategoryDiscountRule(NamedTuple):
    min_quantity: int
    rate: float


# ===================== DISCOUNT RULES =====================

# Buying at least `min_quantity` units of a category prices every line of
# that category at `rate`.
CATEGORY_DISCOUNT_RULES: Dict[Category, CategoryDiscountRule] = {
    Category.electronics: CategoryDiscountRule(min_quantity=2, rate=0.85),
    Category.clothing: CategoryDiscountRule(min_quantity=3, rate=0.80),
    Category.books: CategoryDiscountRule(min_quantity=5, rate=0.70),
}

# Orders worth at least this much before discounts get `FULL_AMOUNT_RATE`.
FULL_AMOUNT_THRESHOLD = 10000
FULL_AMOUNT_RATE = 0.9

NO_DISCOUNT_RATE = 1.0


class UnknownProductError(LookupError):
    """A cart item references a product id that is not in the catalog."""

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not in the catalog")
        self.product_id = product_id


def _as_category(value: Any) -> Optional[Category]:
    try:
        return Category(getattr(value, "value", value))
    except ValueError:
        return None


def _lookup(catalog: Mapping[int, Any], product_id: int) -> Any:
    product = catalog.get(product_id)
    if product is None:
        raise UnknownProductError(product_id)
    return product


# ===================== DECISION TABLE =====================


def resolve_discount(category_rate: float, full_rate: float) -> Tuple[DiscountType, float]:
    """
    Pick one discount per line; discounts never stack.

    category_rate <= full_rate and category_rate < 1  -> category
    full_rate < category_rate                          -> full_amount
    otherwise (both 1)                                 -> none

    When both rates are equal and below 1 the category discount wins.
    """
    if category_rate <= full_rate and category_rate < NO_DISCOUNT_RATE:
        return DiscountType.category, category_rate
    if full_rate < category_rate:
        return DiscountType.full_amount, full_rate
    return DiscountType.none, NO_DISCOUNT_RATE


def category_rate_for(category: Optional[Category], category_counts: Mapping[Category, int]) -> float:
    rule = CATEGORY_DISCOUNT_RULES.get(category) if category is not None else None
    if rule is None:
        return NO_DISCOUNT_RATE
    if category_counts.get(category, 0) >= rule.min_quantity:
        return rule.rate
    return NO_DISCOUNT_RATE


def summarize_applied(discount_types: Sequence[DiscountType]) -> DiscountType:
    has_full = DiscountType.full_amount in discount_types
    has_category = DiscountType.category in discount_types

    if has_full and has_category:
        return DiscountType.mixed
    if has_full:
        return DiscountType.full_amount
    if has_category:
        return DiscountType.category
    return DiscountType.none


# ===================== CALCULATION =====================


def calculate_cart_discount(
    catalog: Mapping[int, Any],
    cart: Sequence[CartItem],
) -> CalculationResult:
    """
    Price a cart against a catalog snapshot (product id -> object with
    `name`, `price` and `category`).

    Business rules:
    - Category discounts are unlocked by the total quantity of that category
      across the whole cart.
    - The full amount discount is unlocked by the pre-discount order total.
    - Each line gets exactly one discount, the cheaper one, see
      `resolve_discount`.

    Output lines follow cart order.
    """

    # ---- 1) Aggregate pass ----
    category_counts: Dict[Category, int] = {}
    original_total = 0.0

    for item in cart:
        if item.quantity <= 0:
            raise ValueError(f"Quantity must be positive (product {item.product_id})")
        product = _lookup(catalog, item.product_id)
        category = _as_category(product.category)
        if category is not None:
            category_counts[category] = category_counts.get(category, 0) + item.quantity
        original_total += float(product.price) * item.quantity

    is_full_amount_eligible = original_total >= FULL_AMOUNT_THRESHOLD
    full_rate = FULL_AMOUNT_RATE if is_full_amount_eligible else NO_DISCOUNT_RATE

    # ---- 2) Resolution pass ----
    discounts: List[DiscountDetail] = []

    for item in cart:
        product = catalog[item.product_id]
        original_price = float(product.price)
        original_subtotal = original_price * item.quantity

        category_rate = category_rate_for(_as_category(product.category), category_counts)
        discount_type, rate = resolve_discount(category_rate, full_rate)

        final_price = original_price * rate
        final_subtotal = final_price * item.quantity

        discounts.append(
            DiscountDetail(
                product_id=item.product_id,
                product_name=product.name,
                quantity=item.quantity,
                original_price=original_price,
                original_subtotal=original_subtotal,
                discount_type=discount_type,
                discount_rate=rate,
                final_price=final_price,
                final_subtotal=final_subtotal,
                saved=original_subtotal - final_subtotal,
            )
        )

    # ---- 3) Totals ----
    final_total = sum(d.final_subtotal for d in discounts)

    return CalculationResult(
        original_total=original_total,
        final_total=final_total,
        total_saved=original_total - final_total,
        applied_discount=summarize_applied([d.discount_type for d in discounts]),
        discounts=discounts,
    )
