from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.core.errors import RestrictionError, ValidationError
from storefront.core.logging import get_logger
from storefront.models import CartItem, Country, Destination, Notification, OrderItem, Shipping, Sku, StockLevel
from storefront.schemas import CountryCreate, SkuCreate, SkuUpdate
from storefront.validators import SKU_FIELDS, coerce_sku_values, validate_sku

logger = get_logger(__name__)


# -------------------------
# SKUs
# -------------------------
def _raise_if_invalid(errors, action: str, sku_id: Optional[int] = None) -> None:
    if errors:
        logger.info("SKU %s rejected (id=%s): %s", action, sku_id, sorted(errors))
        raise ValidationError(errors)


def create_sku(db: Session, payload: SkuCreate) -> Sku:
    attrs = payload.model_dump()
    _raise_if_invalid(validate_sku(db, attrs, on_create=True), "create")

    sku = Sku(**coerce_sku_values(attrs))
    db.add(sku)
    db.commit()
    db.refresh(sku)
    logger.info("SKU created id=%s code=%s product_id=%s", sku.id, sku.code, sku.product_id)
    return sku


def update_sku(db: Session, sku: Sku, payload: SkuUpdate) -> Sku:
    """
    Apply the changes in ``payload`` to ``sku`` and persist them.

    The stock/warning-level comparison is not re-checked on update. After the
    write, cart item weights are always re-derived from the SKU weight.
    """
    attrs = {field: getattr(sku, field) for field in SKU_FIELDS}
    attrs.update(payload.model_dump(exclude_unset=True))
    _raise_if_invalid(validate_sku(db, attrs, sku_id=sku.id), "update", sku.id)

    for field, value in coerce_sku_values(attrs).items():
        setattr(sku, field, value)
    db.commit()
    db.refresh(sku)
    logger.info("SKU updated id=%s", sku.id)

    propagate_cart_item_weight(db, sku)
    return sku


def propagate_cart_item_weight(db: Session, sku: Sku) -> int:
    """
    Set every cart item's weight to ``sku.weight * item.quantity``.

    Items are committed one at a time, so a failure partway leaves the earlier
    items updated. The failure is logged with the progress made and re-raised.
    """
    items = db.execute(select(CartItem).where(CartItem.sku_id == sku.id).order_by(CartItem.id)).scalars().all()
    updated = 0
    try:
        for item in items:
            item.weight = sku.weight * item.quantity
            db.commit()
            updated += 1
    except Exception:
        logger.exception(
            "Cart item weight refresh failed for sku_id=%s after %d of %d items", sku.id, updated, len(items)
        )
        db.rollback()
        raise
    if items:
        logger.info("Cart item weights refreshed for sku_id=%s (%d items)", sku.id, len(items))
    return len(items)


def delete_sku(db: Session, sku: Sku) -> None:
    has_orders = db.execute(select(OrderItem.id).where(OrderItem.sku_id == sku.id).limit(1)).first()
    if has_orders is not None:
        logger.info("SKU delete refused id=%s: order items exist", sku.id)
        raise RestrictionError("sku", "order_items")

    db.execute(
        delete(Notification).where(Notification.notifiable_type == "Sku", Notification.notifiable_id == sku.id)
    )
    db.execute(delete(StockLevel).where(StockLevel.sku_id == sku.id))
    # Cart items survive with their sku_id cleared by the ORM.
    db.expire(sku, ["stock_levels", "cart_items"])
    db.delete(sku)
    db.commit()
    logger.info("SKU deleted id=%s", sku.id)


def get_sku(db: Session, sku_id: int) -> Sku | None:
    return db.get(Sku, sku_id)


def list_skus(db: Session) -> list[Sku]:
    return db.execute(select(Sku).order_by(Sku.id)).scalars().all()


def active_skus(db: Session) -> list[Sku]:
    return db.execute(select(Sku).where(Sku.active.is_(True)).order_by(Sku.id)).scalars().all()


# -------------------------
# Countries
# -------------------------
def create_country(db: Session, payload: CountryCreate) -> Country:
    country = Country(name=payload.name)
    db.add(country)
    db.commit()
    db.refresh(country)
    return country


def list_countries(db: Session) -> list[Country]:
    return db.execute(select(Country).order_by(Country.name)).scalars().all()


def get_country(db: Session, country_id: int) -> Country | None:
    return db.get(Country, country_id)


def list_country_shippings(db: Session, country: Country) -> list[Shipping]:
    stmt = (
        select(Shipping)
        .join(Destination, Destination.shipping_id == Shipping.id)
        .where(Destination.country_id == country.id)
        .order_by(Shipping.id)
    )
    return db.execute(stmt).scalars().all()


def delete_country(db: Session, country: Country) -> None:
    db.execute(delete(Destination).where(Destination.country_id == country.id))
    db.expire(country, ["destinations"])
    db.delete(country)
    db.commit()
    logger.info("Country deleted id=%s", country.id)
