import logging
from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.core.errors import RestrictionError, ValidationError
from storefront.models import Cart, CartItem, Notification, Order, OrderItem, Product, Sku, StockLevel
from storefront.repositories import (
    active_skus,
    create_sku,
    delete_sku,
    get_sku,
    list_skus,
    propagate_cart_item_weight,
    update_sku,
)
from storefront.schemas import SkuUpdate


def _add_cart_item(db, sku, quantity, weight=None):
    cart = Cart()
    item = CartItem(cart=cart, sku_id=sku.id, quantity=quantity, weight=weight)
    db.add_all([cart, item])
    db.commit()
    return item


def test_created_active_sku_is_listed_as_active(db, sku_payload):
    sku = create_sku(db, sku_payload())

    assert sku in active_skus(db)
    assert sku.created_at is not None
    assert sku.updated_at is not None


def test_inactive_sku_is_excluded_from_active(db, sku_payload):
    live = create_sku(db, sku_payload(code="001"))
    retired = create_sku(db, sku_payload(code="002", attribute_value="Blue", active=False))

    assert active_skus(db) == [live]
    assert list_skus(db) == [live, retired]


def test_weight_change_is_propagated_to_cart_items(db, sku_payload):
    sku = create_sku(db, sku_payload(weight=Decimal("2.0")))
    item = _add_cart_item(db, sku, quantity=4, weight=Decimal("8.00"))

    update_sku(db, sku, SkuUpdate(weight=Decimal("3.0")))

    db.refresh(item)
    assert item.weight == Decimal("12.00")


def test_propagation_runs_even_when_weight_is_unchanged(db, sku_payload):
    sku = create_sku(db, sku_payload(weight=Decimal("2.0")))
    stale = _add_cart_item(db, sku, quantity=3, weight=Decimal("0"))

    update_sku(db, sku, SkuUpdate(price="15"))

    db.refresh(stale)
    assert stale.weight == Decimal("6.00")
    assert sku.price == Decimal("15.00")


def test_propagation_only_touches_items_of_that_sku(db, sku_payload):
    sku = create_sku(db, sku_payload(code="001"))
    other = create_sku(db, sku_payload(code="002", attribute_value="Blue"))
    mine = _add_cart_item(db, sku, quantity=2)
    theirs = _add_cart_item(db, other, quantity=5, weight=Decimal("1.00"))

    assert propagate_cart_item_weight(db, sku) == 1

    assert mine.weight == Decimal("4.00")
    assert theirs.weight == Decimal("1.00")


def test_failed_propagation_is_logged_and_keeps_earlier_items(db, sku_payload, monkeypatch, caplog):
    sku = create_sku(db, sku_payload(weight=Decimal("2.0")))
    first = _add_cart_item(db, sku, quantity=1)
    _add_cart_item(db, sku, quantity=2)

    commit = db.commit
    calls = []

    def commit_then_fail():
        calls.append(1)
        if len(calls) == 2:
            raise RuntimeError("connection lost")
        commit()

    monkeypatch.setattr(db, "commit", commit_then_fail)
    with caplog.at_level(logging.ERROR, logger="storefront.repositories"):
        with pytest.raises(RuntimeError):
            propagate_cart_item_weight(db, sku)
    monkeypatch.undo()

    assert f"sku_id={sku.id} after 1 of 2 items" in caplog.text
    assert caplog.records[-1].exc_info is not None
    db.refresh(first)
    assert first.weight == Decimal("2.00")


def test_update_skips_stock_relationship_check(db, sku_payload):
    sku = create_sku(db, sku_payload(stock=10, stock_warning_level=5))

    update_sku(db, sku, SkuUpdate(stock=3))

    assert get_sku(db, sku.id).stock == 3


def test_invalid_update_leaves_record_and_cart_untouched(db, sku_payload):
    sku = create_sku(db, sku_payload(weight=Decimal("2.0")))
    item = _add_cart_item(db, sku, quantity=4, weight=Decimal("1.00"))

    with pytest.raises(ValidationError) as excinfo:
        update_sku(db, sku, SkuUpdate(weight=Decimal("5.0"), price="1.999"))

    assert excinfo.value.errors == {"price": ["is invalid"]}
    db.refresh(sku)
    db.refresh(item)
    assert sku.weight == Decimal("2.00")
    assert item.weight == Decimal("1.00")


def test_full_sku_joins_product_code_and_sku_code():
    sku = Sku(code="001", product=Product(sku="ABC", name="Cotton Shirt"))

    assert sku.full_sku() == "ABC-001"


def test_full_sku_without_product_fails():
    with pytest.raises(AttributeError):
        Sku(code="001").full_sku()


def test_delete_is_refused_while_order_items_exist(db, sku_payload):
    sku = create_sku(db, sku_payload())
    db.add(OrderItem(order=Order(reference="R-1"), sku_id=sku.id, quantity=1, price=sku.price))
    db.commit()

    with pytest.raises(RestrictionError):
        delete_sku(db, sku)

    assert get_sku(db, sku.id) is not None


def test_delete_removes_notifications_and_stock_levels(db, sku_payload):
    sku = create_sku(db, sku_payload())
    item = _add_cart_item(db, sku, quantity=1)
    db.add_all(
        [
            Notification(notifiable_type="Sku", notifiable_id=sku.id, message="back in stock"),
            Notification(notifiable_type="Order", notifiable_id=sku.id, message="unrelated"),
            StockLevel(sku_id=sku.id, description="initial", adjustment=10, current_stock=10),
        ]
    )
    db.commit()
    assert len(sku.notifications) == 1

    delete_sku(db, sku)

    assert get_sku(db, sku.id) is None
    assert db.execute(select(StockLevel)).scalars().all() == []
    remaining = db.execute(select(Notification)).scalars().all()
    assert [n.notifiable_type for n in remaining] == ["Order"]
    db.refresh(item)
    assert item.sku_id is None


def test_carts_and_orders_are_reachable_from_sku(db, sku_payload):
    sku = create_sku(db, sku_payload())
    item = _add_cart_item(db, sku, quantity=2)
    order = Order(reference="R-9")
    db.add(OrderItem(order=order, sku_id=sku.id, quantity=1))
    db.commit()
    db.expire(sku)

    assert sku.carts == [item.cart]
    assert sku.orders == [order]
