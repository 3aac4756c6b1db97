"""Day-to-day operational records: rates, settings, messaging, delivery tasks, expenses."""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, DateTime, Numeric, ForeignKey, func, false

from .account import Base, new_id
from .enums import task_type, task_status, expense_category


class ShippingRate(Base):
    __tablename__ = 'shipping_rates'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    country: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, default='normal', server_default='normal')
    price_per_kg: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class CommissionRule(Base):
    __tablename__ = 'commission_rules'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    country: Mapped[str] = mapped_column(Text, nullable=False)
    min_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    max_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 4), nullable=False)
    fixed_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class Setting(Base):
    __tablename__ = 'settings'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    key: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class Message(Base):
    __tablename__ = 'messages'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    from_user_id: Mapped[str] = mapped_column(ForeignKey('users.id'), nullable=False)
    to_user_id: Mapped[str] = mapped_column(ForeignKey('users.id'), nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    parent_id: Mapped[Optional[str]] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class DeliveryTask(Base):
    __tablename__ = 'delivery_tasks'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    order_id: Mapped[Optional[str]] = mapped_column(ForeignKey('orders.id'))
    assigned_to: Mapped[Optional[str]] = mapped_column(ForeignKey('users.id'))
    task_type: Mapped[str] = mapped_column(task_type, nullable=False, default='delivery', server_default='delivery')
    status: Mapped[str] = mapped_column(task_status, nullable=False, default='pending', server_default='pending')
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(Text)
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    amount_to_collect: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    amount_collected: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0, server_default='0')
    customer_code: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class Expense(Base):
    __tablename__ = 'expenses'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    category: Mapped[str] = mapped_column(expense_category, nullable=False, default='other', server_default='other')
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_by: Mapped[Optional[str]] = mapped_column(String(36))
    safe_id: Mapped[Optional[str]] = mapped_column(ForeignKey('safes.id'))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
