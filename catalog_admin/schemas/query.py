from typing import Optional

from pydantic import ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from catalog_admin.core.config import settings
from catalog_admin.enums.catalog import SortKey, SortOrder
from catalog_admin.schemas.product import CamelModel


class ProductQuery(CamelModel):
    """
    Filter / sort / pagination parameters for one list request.

    Values are already resolved by the caller. Enum-like fields are kept as
    plain strings so that unknown values degrade to "no match" (category,
    status), "no constraint" (stock_status) or the default (sort_key,
    sort_order) instead of failing the request.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE

    search: str = ""
    category: Optional[str] = None
    stock_status: Optional[str] = None
    status: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    sort_key: str = SortKey.created_at.value
    sort_order: str = SortOrder.desc.value

    @field_validator("page", mode="before")
    @classmethod
    def _normalize_page(cls, value):
        if value is None:
            return 1
        return max(int(value), 1)

    @field_validator("page_size", mode="before")
    @classmethod
    def _normalize_page_size(cls, value):
        if value is None:
            return settings.DEFAULT_PAGE_SIZE
        return min(max(int(value), 1), settings.MAX_PAGE_SIZE)

    @field_validator("search", mode="before")
    @classmethod
    def _normalize_search(cls, value):
        return value or ""

    @field_validator("category", "stock_status", "status", mode="before")
    @classmethod
    def _empty_as_none(cls, value):
        return value or None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def _blank_price_as_none(cls, value):
        # "?minPrice=" means no bound
        if isinstance(value, str) and not value.strip():
            return None
        return value
