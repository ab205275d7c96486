from enum import Enum


class Category(str, Enum):
    electronics = "electronics"
    clothing = "clothing"
    books = "books"


class ProductStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class StockStatus(str, Enum):
    in_stock = "in_stock"
    low_stock = "low_stock"
    out_of_stock = "out_of_stock"


class SortKey(str, Enum):
    name = "name"
    category = "category"
    price = "price"
    stock = "stock"
    sales = "sales"
    created_at = "createdAt"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class DiscountType(str, Enum):
    none = "none"
    category = "category"
    full_amount = "full_amount"
    mixed = "mixed"
