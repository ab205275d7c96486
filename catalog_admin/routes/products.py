from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from catalog_admin.core.config import settings
from catalog_admin.database.connection import get_db
from catalog_admin.enums.catalog import SortKey, SortOrder
from catalog_admin.schemas.product import (
    BulkDeleteRequest, BulkStatusRequest, BulkStatusResponse,
    ProductCreate, ProductPage, ProductResponse, ProductUpdate,
)
from catalog_admin.schemas.query import ProductQuery
from catalog_admin.services.product_service import (
    InvalidProductError, bulk_delete_products, bulk_update_status,
    create_product, delete_product, get_product, list_products, update_product,
)
from catalog_admin.services.query_engine import query_products


router = APIRouter(prefix="/api/products", tags=["Product Management"])

# LIST (filter / sort / paginate)
@router.get("", response_model=ProductPage)
def list_all(
    page: int = 1,
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize"),
    search: str = "",
    category: Optional[str] = None,
    stock_status: Optional[str] = Query(None, alias="stockStatus"),
    status_filter: Optional[str] = Query(None, alias="status"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    sort_key: Optional[str] = Query(None, alias="sortKey"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: Session = Depends(get_db),
):
    try:
        query = ProductQuery(
            page=page,
            page_size=page_size,
            search=search,
            category=category,
            stock_status=stock_status,
            status=status_filter,
            min_price=min_price,
            max_price=max_price,
            sort_key=sort_key or SortKey.created_at.value,
            sort_order=sort_order or SortOrder.desc.value,
        )
    except ValidationError as e:
        detail = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise HTTPException(status_code=400, detail=f"Bad Request: {detail}")
    return query_products(list_products(db), query)

# CREATE
@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create(data: ProductCreate, db: Session = Depends(get_db)):
    try:
        return create_product(db, data)
    except InvalidProductError as e:
        raise HTTPException(status_code=400, detail=str(e))

# BULK DELETE
@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def bulk_delete(request: BulkDeleteRequest, db: Session = Depends(get_db)):
    bulk_delete_products(db, request.ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# BULK STATUS
@router.post("/bulk-status", response_model=BulkStatusResponse)
def bulk_status(request: BulkStatusRequest, db: Session = Depends(get_db)):
    updated = bulk_update_status(db, request.ids, request.status)
    return BulkStatusResponse(updated=updated)

# GET BY ID
@router.get("/{product_id}", response_model=ProductResponse)
def get(product_id: int, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product

# UPDATE
@router.put("/{product_id}", response_model=ProductResponse)
def update(product_id: int, data: ProductUpdate, db: Session = Depends(get_db)):
    try:
        product = update_product(db, product_id, data)
    except InvalidProductError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not product:
        raise HTTPException(404, "Product not found")
    return product

# DELETE
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(product_id: int, db: Session = Depends(get_db)):
    success = delete_product(db, product_id)
    if not success:
        raise HTTPException(404, "Product not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
