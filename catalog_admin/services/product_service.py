import json
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from catalog_admin.models.product import Product
from catalog_admin.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from catalog_admin.enums.catalog import ProductStatus

logger = logging.getLogger(__name__)

SEED_SPREAD = timedelta(days=30)


class InvalidProductError(ValueError):
    """A write would leave a product violating its invariants."""


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_product_fields(values: Dict[str, Any]) -> None:
    """Raise InvalidProductError unless `values` describes a storable product."""
    if not values.get("name"):
        raise InvalidProductError("name is required")
    if not values.get("category"):
        raise InvalidProductError("category is required")

    price = values.get("price")
    stock = values.get("stock")
    if not _is_number(price):
        raise InvalidProductError("price must be a number")
    if not _is_number(stock):
        raise InvalidProductError("stock must be a number")
    if price <= 0:
        raise InvalidProductError("price must be greater than 0")
    if stock < 0:
        raise InvalidProductError("stock must not be negative")


# --------------------------
# CREATE PRODUCT
# --------------------------
def next_product_id(db: Session) -> int:
    return (db.query(func.max(Product.id)).scalar() or 0) + 1


def create_product(db: Session, data: ProductCreate) -> Product:
    values = {key: _column_value(value) for key, value in data.model_dump().items()}
    try:
        validate_product_fields(values)
    except InvalidProductError as e:
        logger.warning("Rejected product create: %s", e)
        raise

    if values.get("created_at") is None:
        values["created_at"] = datetime.utcnow()

    product = Product(id=next_product_id(db), **values)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


# --------------------------
# GET PRODUCT
# --------------------------
def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


# --------------------------
# LIST PRODUCTS (SNAPSHOT)
# --------------------------
def list_products(db: Session) -> List[ProductResponse]:
    """
    Immutable snapshot of the whole collection in insertion order.
    The query and discount engines only ever see this, never the session.
    """
    rows = db.query(Product).order_by(Product.id).all()
    return [ProductResponse.model_validate(row) for row in rows]


def get_catalog(db: Session) -> Dict[int, ProductResponse]:
    return {product.id: product for product in list_products(db)}


# --------------------------
# UPDATE PRODUCT
# --------------------------
def update_product(db: Session, product_id: int, data: ProductUpdate) -> Optional[Product]:
    product = get_product(db, product_id)
    if not product:
        return None

    changes = {key: _column_value(value) for key, value in data.model_dump(exclude_unset=True).items()}

    merged = {
        "name": product.name,
        "category": product.category,
        "price": product.price,
        "stock": product.stock,
    }
    merged.update(changes)
    try:
        validate_product_fields(merged)
    except InvalidProductError as e:
        logger.warning("Rejected update of product %s: %s", product_id, e)
        raise

    for key, value in changes.items():
        # explicit nulls on optional fields leave the stored value alone
        if value is None:
            continue
        setattr(product, key, value)

    db.commit()
    db.refresh(product)
    logger.info("Updated product %s (%s)", product_id, ", ".join(sorted(changes)) or "no changes")
    return product


# --------------------------
# DELETE PRODUCT
# --------------------------
def delete_product(db: Session, product_id: int) -> bool:
    product = get_product(db, product_id)
    if not product:
        return False

    db.delete(product)
    db.commit()
    logger.info("Deleted product %s", product_id)
    return True


# --------------------------
# BULK OPERATIONS
# --------------------------
def bulk_delete_products(db: Session, ids: Iterable[int]) -> int:
    """Delete every product whose id is in `ids`. Unknown ids are ignored."""
    id_set = set(ids)
    if not id_set:
        return 0

    removed = (
        db.query(Product)
        .filter(Product.id.in_(list(id_set)))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Bulk deleted %s of %s requested products", removed, len(id_set))
    return removed


def bulk_update_status(db: Session, ids: Iterable[int], status: ProductStatus) -> int:
    """Set `status` on every product whose id is in `ids`. Returns how many matched."""
    id_set = set(ids)
    if not id_set:
        return 0

    updated = (
        db.query(Product)
        .filter(Product.id.in_(list(id_set)))
        .update({Product.status: _column_value(status)}, synchronize_session=False)
    )
    db.commit()
    logger.info("Bulk set status=%s on %s of %s requested products", _column_value(status), updated, len(id_set))
    return updated


# --------------------------
# SEED DATA
# --------------------------
def seed_products(db: Session, path: str, now: Optional[datetime] = None) -> int:
    """
    Load the bundled catalog into an empty store.

    Records without `createdAt` get ascending timestamps spread over the
    previous 30 days, so earlier records are older.
    """
    if db.query(Product.id).first() is not None:
        logger.info("Store already populated, skipping seed")
        return 0

    records = json.loads(Path(path).read_text(encoding="utf-8"))
    now = now or datetime.utcnow()
    step = SEED_SPREAD / max(len(records), 1)

    for index, record in enumerate(records):
        record = {key: value for key, value in record.items() if key != "id"}
        if not record.get("createdAt"):
            record["createdAt"] = now - SEED_SPREAD + step * index
        create_product(db, ProductCreate(**record))

    logger.info("Seeded %s products from %s", len(records), path)
    return len(records)
