import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Sequence, Tuple

from catalog_admin.enums.catalog import SortKey, SortOrder, StockStatus
from catalog_admin.schemas.product import ProductPage, ProductResponse
from catalog_admin.schemas.query import ProductQuery

LOW_STOCK_LIMIT = 10


# --------------------------
# FILTER
# --------------------------
def _matches_search(product: ProductResponse, search: str) -> bool:
    return search.lower() in product.name.lower()


def _matches_stock_status(product: ProductResponse, stock_status: str) -> bool:
    if stock_status == StockStatus.in_stock.value:
        return product.stock > 0
    if stock_status == StockStatus.low_stock.value:
        return 0 < product.stock <= LOW_STOCK_LIMIT
    if stock_status == StockStatus.out_of_stock.value:
        return product.stock == 0
    # unknown bucket: no constraint
    return True


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def build_predicates(query: ProductQuery) -> List[Callable[[ProductResponse], bool]]:
    """
    One predicate per active filter. Filters are plain conjunctions, so the
    order of the returned list does not affect the result.
    """
    predicates: List[Callable[[ProductResponse], bool]] = []

    if query.search:
        predicates.append(lambda p: _matches_search(p, query.search))

    if query.category:
        predicates.append(lambda p: _enum_value(p.category) == query.category)

    if query.stock_status:
        predicates.append(lambda p: _matches_stock_status(p, query.stock_status))

    if query.status:
        predicates.append(lambda p: _enum_value(p.status) == query.status)

    if query.min_price is not None:
        predicates.append(lambda p: p.price >= query.min_price)

    if query.max_price is not None:
        predicates.append(lambda p: p.price <= query.max_price)

    return predicates


def filter_products(
    products: Sequence[ProductResponse],
    query: ProductQuery,
) -> List[ProductResponse]:
    predicates = build_predicates(query)
    return [p for p in products if all(check(p) for check in predicates)]


# --------------------------
# SORT
# --------------------------
def collation_key(value: str) -> Tuple[str, str]:
    """
    Locale-style ordering: accents and case are ignored first, then
    lowercase sorts before uppercase ("apple" < "Apple" < "banana").
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value.swapcase()


def _timestamp(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


_SORT_KEYS: Dict[str, Callable[[ProductResponse], Any]] = {
    SortKey.name.value: lambda p: collation_key(p.name),
    SortKey.category.value: lambda p: collation_key(_enum_value(p.category)),
    SortKey.price.value: lambda p: p.price,
    SortKey.stock.value: lambda p: p.stock,
    SortKey.sales.value: lambda p: p.sales,
    SortKey.created_at.value: lambda p: _timestamp(p.created_at),
}


def sort_products(
    products: Sequence[ProductResponse],
    sort_key: str = SortKey.created_at.value,
    sort_order: str = SortOrder.desc.value,
) -> List[ProductResponse]:
    """
    Stable sort. `sorted(..., reverse=True)` keeps equal elements in their
    original order, so ties are preserved in both directions.
    """
    key = _SORT_KEYS.get(sort_key, _SORT_KEYS[SortKey.created_at.value])
    descending = sort_order != SortOrder.asc.value
    return sorted(products, key=key, reverse=descending)


# --------------------------
# PAGINATE
# --------------------------
def paginate(
    products: Sequence[ProductResponse],
    page: int,
    page_size: int,
) -> Tuple[List[ProductResponse], int]:
    """
    Returns (items, total_count)
    page is 1-based.
    """
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = 1

    total = len(products)
    offset = (page - 1) * page_size
    return list(products[offset:offset + page_size]), total


# --------------------------
# QUERY
# --------------------------
def query_products(
    products: Sequence[ProductResponse],
    query: ProductQuery,
) -> ProductPage:
    """Filter, then sort, then paginate a product snapshot. Never mutates its input."""
    filtered = filter_products(products, query)
    ordered = sort_products(filtered, query.sort_key, query.sort_order)
    data, total = paginate(ordered, query.page, query.page_size)

    return ProductPage(
        data=data,
        total=total,
        page=query.page,
        page_size=query.page_size,
    )
