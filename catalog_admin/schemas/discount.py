from typing import List

from catalog_admin.enums.catalog import DiscountType
from catalog_admin.schemas.product import CamelModel


class CartItem(CamelModel):
    product_id: int
    quantity: int


class CartCalculateRequest(CamelModel):
    items: List[CartItem]


class DiscountDetail(CamelModel):
    product_id: int
    product_name: str
    quantity: int
    original_price: float
    original_subtotal: float
    discount_type: DiscountType
    discount_rate: float
    final_price: float
    final_subtotal: float
    saved: float


class CalculationResult(CamelModel):
    original_total: float
    final_total: float
    total_saved: float
    applied_discount: DiscountType
    discounts: List[DiscountDetail]
