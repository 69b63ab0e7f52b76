"""
SQLAlchemy ORM models for the Storefront Admin API.

Tables:
    stores            — one row per tenant store, owned by a dashboard user
    billboards        — promotional banners (label + background image)
    categories        — product groupings, each shown under a billboard
    products          — sellable items; archived once sold
    orders            — checkout orders, marked paid by the Stripe webhook
    order_items       — one row per product in an order
    processed_webhook_events — Stripe event ids already applied (dedup)
"""
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, Float, Boolean, DateTime, Text, ForeignKey, Index,
)
from sqlalchemy.orm import relationship

from database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Store(Base):
    """A tenant store managed from the dashboard."""
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(200), nullable=False)
    user_id = Column(String(100), nullable=False, index=True)  # identity provider subject
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    billboards = relationship("Billboard", back_populates="store", lazy="select")
    categories = relationship("Category", back_populates="store", lazy="select")
    products = relationship("Product", back_populates="store", lazy="select")
    orders = relationship("Order", back_populates="store", lazy="select")


class Billboard(Base):
    """Promotional banner shown on the storefront."""
    __tablename__ = "billboards"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    label = Column(String(200), nullable=False)
    image_url = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="billboards")
    categories = relationship("Category", back_populates="billboard", lazy="select")


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    billboard_id = Column(String(36), ForeignKey("billboards.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="categories")
    billboard = relationship("Billboard", back_populates="categories")
    products = relationship("Product", back_populates="category", lazy="select")


class Product(Base):
    """
    A sellable item.

    is_archived hides the product from the storefront listing. The Stripe
    webhook sets it once an order containing the product is paid.
    """
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Float, nullable=False)  # major currency units (e.g. dollars)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="products")
    category = relationship("Category", back_populates="products")
    order_items = relationship("OrderItem", back_populates="product", lazy="select")

    __table_args__ = (
        # Storefront listing: filter by store, skip archived, featured first
        Index("ix_products_store_archived_featured", "store_id", "is_archived", "is_featured"),
    )


class Order(Base):
    """Checkout order. Address and phone are filled in by the webhook."""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    phone = Column(String(50), nullable=False, default="")
    address = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    store = relationship("Store", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", lazy="select")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")


class ProcessedWebhookEvent(Base):
    """
    Idempotency table for Stripe webhook deliveries.

    Written in the same transaction as the order/product updates, so an
    event id is present here if and only if its effects were committed.
    """
    __tablename__ = "processed_webhook_events"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(255), unique=True, nullable=False, index=True)
    event_type = Column(String(100), nullable=False)
    order_id = Column(String(36), nullable=True, index=True)
    processed_at = Column(DateTime, default=datetime.utcnow)
