from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, false, func, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.core.db import Base


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    single: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    skus: Mapped[List["Sku"]] = relationship(back_populates="product", order_by="Sku.id")


class AttributeType(Base):
    __tablename__ = "attribute_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Sku(Base):
    """
    A sellable product variation (size, colour, material...).

    The printed SKU is the parent product's code joined to this record's code,
    see ``full_sku``. Validation and cart weight propagation live in
    ``storefront.validators`` and ``storefront.repositories``.
    """

    __tablename__ = "skus"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(255), nullable=False)
    length: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    thickness: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    attribute_value: Mapped[Optional[str]] = mapped_column(String(255))
    attribute_type_id: Mapped[Optional[int]] = mapped_column(ForeignKey("attribute_types.id"), index=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False)
    stock_warning_level: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_value: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    product_id: Mapped[Optional[int]] = mapped_column(ForeignKey("products.id"), index=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    product: Mapped[Optional[Product]] = relationship(back_populates="skus")
    attribute_type: Mapped[Optional[AttributeType]] = relationship()

    cart_items: Mapped[List["CartItem"]] = relationship(back_populates="sku")
    carts: Mapped[List["Cart"]] = relationship(secondary="cart_items", viewonly=True)
    order_items: Mapped[List["OrderItem"]] = relationship(back_populates="sku")
    orders: Mapped[List["Order"]] = relationship(secondary="order_items", viewonly=True)
    notifications: Mapped[List["Notification"]] = relationship(
        primaryjoin="and_(foreign(Notification.notifiable_id) == Sku.id, Notification.notifiable_type == 'Sku')",
        viewonly=True,
    )
    stock_levels: Mapped[List["StockLevel"]] = relationship(back_populates="sku")

    def full_sku(self) -> str:
        # Raises AttributeError when the product is not set.
        return "-".join([self.product.sku, self.code])

    def __repr__(self) -> str:
        return f"<Sku {self.id} {self.code!r} product={self.product_id}>"


class Cart(Base):
    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    items: Mapped[List["CartItem"]] = relationship(back_populates="cart")


class CartItem(Base):
    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cart_id: Mapped[Optional[int]] = mapped_column(ForeignKey("carts.id"), index=True)
    sku_id: Mapped[Optional[int]] = mapped_column(ForeignKey("skus.id"), index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))

    cart: Mapped[Optional[Cart]] = relationship(back_populates="items")
    sku: Mapped[Optional[Sku]] = relationship(back_populates="cart_items")


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    reference: Mapped[Optional[str]] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    items: Mapped[List["OrderItem"]] = relationship(back_populates="order")


class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[Optional[int]] = mapped_column(ForeignKey("orders.id"), index=True)
    sku_id: Mapped[Optional[int]] = mapped_column(ForeignKey("skus.id"), index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))

    order: Mapped[Optional[Order]] = relationship(back_populates="items")
    sku: Mapped[Optional[Sku]] = relationship(back_populates="order_items")


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Polymorphic owner, e.g. ("Sku", 12)
    notifiable_type: Mapped[str] = mapped_column(String(64), nullable=False)
    notifiable_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    message: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class StockLevel(Base):
    __tablename__ = "stock_levels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku_id: Mapped[int] = mapped_column(ForeignKey("skus.id"), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(255))
    adjustment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_stock: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    sku: Mapped[Sku] = relationship(back_populates="stock_levels")


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    destinations: Mapped[List["Destination"]] = relationship(back_populates="country")
    shippings: Mapped[List["Shipping"]] = relationship(secondary="destinations", viewonly=True)


class Shipping(Base):
    __tablename__ = "shippings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))

    destinations: Mapped[List["Destination"]] = relationship(back_populates="shipping")


class Destination(Base):
    __tablename__ = "destinations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    country_id: Mapped[int] = mapped_column(ForeignKey("countries.id"), nullable=False, index=True)
    shipping_id: Mapped[int] = mapped_column(ForeignKey("shippings.id"), nullable=False, index=True)

    country: Mapped[Country] = relationship(back_populates="destinations")
    shipping: Mapped[Shipping] = relationship(back_populates="destinations")
