from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Integer, DateTime, Numeric, ForeignKey, func

from .account import Base, new_id
from .enums import order_status


class Customer(Base):
    __tablename__ = 'customers'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)
    address: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(Text)
    country: Mapped[str] = mapped_column(Text, nullable=False, default='Libya', server_default='Libya')
    postal_code: Mapped[Optional[str]] = mapped_column(Text)
    shipping_code: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class Order(Base):
    __tablename__ = 'orders'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_number: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    customer_id: Mapped[str] = mapped_column(ForeignKey('customers.id'), nullable=False)
    status: Mapped[str] = mapped_column(order_status, nullable=False, default='pending', server_default='pending')
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    down_payment: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    remaining_balance: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    shipping_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    country: Mapped[str] = mapped_column(Text, nullable=False, default='China', server_default='China')
    profit: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    commission: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    notes: Mapped[Optional[str]] = mapped_column(Text)
    lyd_exchange_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4))
    lyd_purchase_exchange_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    items: Mapped[List['OrderItem']] = relationship(back_populates='order', cascade='all, delete-orphan')
    images: Mapped[List['OrderImage']] = relationship(cascade='all, delete-orphan')


class OrderItem(Base):
    __tablename__ = 'order_items'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default='1')
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    number_of_pieces: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default='1')
    notes: Mapped[Optional[str]] = mapped_column(Text)

    order: Mapped[Order] = relationship(back_populates='items')


class OrderImage(Base):
    __tablename__ = 'order_images'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_id: Mapped[str] = mapped_column(ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[Optional[str]] = mapped_column(Text)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
