"""
Record-level validation for SKUs.

Field rules come from ``SkuRecord``. The rules that need the database
(per-scope uniqueness, the single-SKU exemption) and the create-only stock
comparison are added to the same error map, so callers get every message for
a record in one ``ValidationError``.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import pydantic
from pydantic import TypeAdapter
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.models import Product, Sku
from storefront.schemas import SkuRecord, StockCount

STOCK_RELATIONSHIP_MESSAGE = "stock warning level value must not be below your stock count."

BLANK = "can't be blank"
NOT_A_NUMBER = "is not a number"
NOT_AN_INTEGER = "must be an integer"
INVALID = "is invalid"
TAKEN = "has already been taken"

# pydantic error type -> message
MESSAGES = {
    "missing": BLANK,
    "decimal_parsing": NOT_A_NUMBER,
    "decimal_type": NOT_A_NUMBER,
    "finite_number": NOT_A_NUMBER,
    "int_parsing": NOT_A_NUMBER,
    "int_type": NOT_A_NUMBER,
    "int_from_float": NOT_AN_INTEGER,
    "whole_number": NOT_AN_INTEGER,
    "string_too_long": "is too long (maximum is 255 characters)",
}

SKU_FIELDS = tuple(SkuRecord.model_fields)

Errors = Dict[str, List[str]]

_stock_count = TypeAdapter(StockCount)
_record_id = TypeAdapter(int)
_flag = TypeAdapter(bool)


def _add(errors: Errors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _message(error: Mapping[str, Any]) -> str:
    if error["type"] == "greater_than_equal":
        return "must be greater than or equal to %s" % error["ctx"]["ge"]
    return MESSAGES.get(error["type"], INVALID)


def _check_record(errors: Errors, attrs: Mapping[str, Any]) -> None:
    try:
        SkuRecord.model_validate(attrs)
    except pydantic.ValidationError as exc:
        for error in exc.errors():
            _add(errors, str(error["loc"][0]), _message(error))


def _check_presence(errors: Errors, attrs: Mapping[str, Any], *fields: str) -> None:
    for field in fields:
        if _blank(attrs.get(field)):
            _add(errors, field, BLANK)


def _check_stock_relationship(errors: Errors, attrs: Mapping[str, Any]) -> None:
    if "stock" in errors or "stock_warning_level" in errors:
        return
    stock = _stock_count.validate_python(attrs.get("stock"))
    warning = _stock_count.validate_python(attrs.get("stock_warning_level"))
    if stock <= warning:
        _add(errors, "sku", STOCK_RELATIONSHIP_MESSAGE)


def parse_currency(value: Any) -> Decimal:
    """Turn an accepted currency value ("$12", "12,5", Decimal) into a Decimal."""
    text = str(value).lstrip("$").replace(",", ".")
    return Decimal(text)


def _taken(db: Session, field: str, attrs: Mapping[str, Any], sku_id: Optional[int]) -> bool:
    column = getattr(Sku, field)
    value = attrs.get(field)
    product_id = attrs.get("product_id")

    stmt = select(Sku.id).where(
        column.is_(None) if value is None else column == value,
        Sku.product_id.is_(None) if product_id is None else Sku.product_id == product_id,
        Sku.active.is_(bool(attrs.get("active"))),
    )
    if sku_id is not None:
        stmt = stmt.where(Sku.id != sku_id)
    return db.execute(stmt.limit(1)).first() is not None


def requires_variation_attributes(db: Session, attrs: Mapping[str, Any], sku_id: Optional[int] = None) -> bool:
    """
    False only for the single active SKU of a product flagged ``single``.

    Unsaved records have no id yet, so the product's SKUs are counted by their
    active flag: every persisted active SKU other than this one, plus this one
    if it is active.
    """
    product_id = attrs.get("product_id")
    if product_id is None:
        return True

    product = db.get(Product, product_id)
    if product is None or not product.single:
        return True

    stmt = select(func.count(Sku.id)).where(Sku.product_id == product_id, Sku.active.is_(True))
    if sku_id is not None:
        stmt = stmt.where(Sku.id != sku_id)
    active_count = db.execute(stmt).scalar_one()
    if attrs.get("active"):
        active_count += 1

    return active_count != 1


def validate_sku(
    db: Session,
    attrs: Mapping[str, Any],
    *,
    sku_id: Optional[int] = None,
    on_create: bool = False,
) -> Errors:
    """
    Run every SKU rule against the candidate attributes and return the errors.

    ``attrs`` holds the full candidate record (persisted values overlaid with
    the incoming changes for an update). ``sku_id`` excludes the record itself
    from the uniqueness and single-SKU queries. The stock/warning-level
    comparison only runs when ``on_create`` is set.
    """
    errors: Errors = {}

    _check_record(errors, attrs)

    if on_create:
        _check_stock_relationship(errors, attrs)

    # The scope queries need a well-typed product id and active flag.
    if "product_id" in errors or "active" in errors:
        return errors
    product_id = attrs.get("product_id")
    scope = dict(
        attrs,
        product_id=None if _blank(product_id) else _record_id.validate_python(product_id),
        active=_flag.validate_python(attrs.get("active")),
    )

    for field in ("attribute_value", "code"):
        if field not in errors and _taken(db, field, scope, sku_id):
            _add(errors, field, TAKEN)

    if requires_variation_attributes(db, scope, sku_id):
        _check_presence(errors, attrs, "attribute_value", "attribute_type_id")

    return errors


def coerce_sku_values(attrs: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert validated candidate attributes to column values."""
    values = SkuRecord.model_validate(attrs).model_dump()
    for field in ("price", "cost_value"):
        values[field] = parse_currency(values[field])
    for field in ("stock", "stock_warning_level"):
        values[field] = int(values[field])
    return values
