import logging
from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from catalog_admin.core.config import settings
from catalog_admin.database.connection import get_db
from catalog_admin.schemas.discount import CalculationResult, CartCalculateRequest
from catalog_admin.services.product_service import get_catalog
from catalog_admin.services.pricing_service.cart_discount import (
    UnknownProductError,
    calculate_cart_discount,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Pricing & Calculation"])


@router.post("/calculate", response_model=CalculationResult)
def calculate_discount(request: CartCalculateRequest, db: Session = Depends(get_db)):
    """
    Price a cart against the current catalog.

    Each line gets the cheaper of:
    1. Category discount (enough units of one category in the cart)
    2. Full amount discount (order total above the threshold)

    Discounts never stack; on a tie the category discount wins.
    """

    if any(item.quantity <= 0 for item in request.items):
        raise HTTPException(status_code=400, detail="Quantity must be positive")

    catalog = get_catalog(db)

    # ---- measure calculation time ----
    start = perf_counter()
    try:
        result = calculate_cart_discount(catalog, request.items)
    except UnknownProductError as e:
        raise HTTPException(status_code=404, detail=f"Product {e.product_id} not found")
    duration_ms = (perf_counter() - start) * 1000.0

    if duration_ms > settings.SLOW_CALCULATION_MS:
        logger.warning(
            "Discount calculation for %s cart lines took %.2f ms",
            len(request.items),
            duration_ms,
        )

    return result
