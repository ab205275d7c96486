import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_admin.database.connection import get_db
from catalog_admin.enums.catalog import ProductStatus
from catalog_admin.models.product import Product
from catalog_admin.schemas.system import HealthCheckResponse, SystemMetricsResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


def _uptime_seconds(request: Request, now: datetime) -> float:
    start_time = getattr(request.app.state, "start_time", now)
    return (now - start_time).total_seconds()


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Lightweight public health check.
    Returns ok + DB connectivity check (SELECT 1).
    """
    now = datetime.utcnow()

    db_ok = True
    extra = {}
    try:
        db.execute(select(1))
    except SQLAlchemyError as e:
        logger.error("Health check query failed: %s", e)
        db_ok = False
        extra["db_error"] = str(e)

    return HealthCheckResponse(
        status="ok" if db_ok else "degraded",
        now=now,
        uptime_seconds=_uptime_seconds(request, now),
        db_ok=db_ok,
        extra=extra or None,
    )


@router.get("/metrics", response_model=SystemMetricsResponse)
def system_metrics(request: Request, db: Session = Depends(get_db)):
    now = datetime.utcnow()

    metrics = getattr(request.app.state, "metrics", None) or {}
    requests_count = int(metrics.get("requests", 0))
    total_ms = float(metrics.get("total_response_ms", 0.0))
    avg_response_ms = total_ms / requests_count if requests_count else None

    total_products = db.query(func.count(Product.id)).scalar() or 0
    active_products = (
        db.query(func.count(Product.id))
        .filter(Product.status == ProductStatus.active.value)
        .scalar()
        or 0
    )
    out_of_stock_products = (
        db.query(func.count(Product.id))
        .filter(Product.stock == 0)
        .scalar()
        or 0
    )

    return SystemMetricsResponse(
        uptime_seconds=_uptime_seconds(request, now),
        now=now,
        requests_count=requests_count,
        avg_response_ms=avg_response_ms,
        total_products=int(total_products),
        active_products=int(active_products),
        out_of_stock_products=int(out_of_stock_products),
    )
