from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic.alias_generators import to_camel

from catalog_admin.enums.catalog import Category, ProductStatus


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductBase(CamelModel):
    name: str
    category: Category
    # strict: JSON booleans and numeric strings are not prices or stock counts
    price: Union[StrictInt, StrictFloat]
    stock: StrictInt
    status: ProductStatus = ProductStatus.active
    sales: float = 0
    image: str = ""


class ProductCreate(ProductBase):
    created_at: Optional[datetime] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    category: Optional[Category] = None
    price: Optional[Union[StrictInt, StrictFloat]] = None
    stock: Optional[StrictInt] = None
    status: Optional[ProductStatus] = None
    sales: Optional[float] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None


class ProductResponse(ProductBase):
    """Read-only view of a stored product. Snapshots handed to the engines are lists of these."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: int
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # sqlite drops tzinfo; everything is stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ProductPage(CamelModel):
    data: List[ProductResponse]
    total: int
    page: int
    page_size: int


class BulkDeleteRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)


class BulkStatusRequest(BaseModel):
    ids: List[int]
    status: ProductStatus


class BulkStatusResponse(BaseModel):
    updated: int
