from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Boolean, DateTime, Numeric, ForeignKey, func, true, false

from .account import Base, new_id
from .enums import transaction_type, receipt_type


class RevenueAccount(Base):
    __tablename__ = 'revenue_accounts'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey('revenue_accounts.id'))
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class Safe(Base):
    __tablename__ = 'safes'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey('safes.id'))
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    is_multi_currency: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    balance_usd: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0, server_default='0')
    balance_lyd: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0, server_default='0')
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class SafeTransaction(Base):
    __tablename__ = 'safe_transactions'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    safe_id: Mapped[str] = mapped_column(ForeignKey('safes.id'), nullable=False)
    type: Mapped[str] = mapped_column(transaction_type, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    exchange_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4))
    reference_type: Mapped[Optional[str]] = mapped_column(Text)
    reference_id: Mapped[Optional[str]] = mapped_column(String(36))
    description: Mapped[Optional[str]] = mapped_column(Text)
    performed_by: Mapped[Optional[str]] = mapped_column(String(36))
    balanced: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class OwnerAccount(Base):
    __tablename__ = 'owner_accounts'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    total_invested: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0, server_default='0')
    total_withdrawn: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0, server_default='0')
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class CapitalTransaction(Base):
    __tablename__ = 'capital_transactions'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_account_id: Mapped[str] = mapped_column(ForeignKey('owner_accounts.id'), nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    safe_id: Mapped[Optional[str]] = mapped_column(ForeignKey('safes.id'))
    description: Mapped[Optional[str]] = mapped_column(Text)
    performed_by: Mapped[Optional[str]] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class ExpenseCategory(Base):
    __tablename__ = 'expense_categories'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36))
    description: Mapped[Optional[str]] = mapped_column(Text)
    budget_limit: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 2))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class Reconciliation(Base):
    __tablename__ = 'reconciliations'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    safe_id: Mapped[str] = mapped_column(ForeignKey('safes.id'), nullable=False)
    expected_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    actual_balance: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    difference: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    notes: Mapped[Optional[str]] = mapped_column(Text)
    reconciled_by: Mapped[Optional[str]] = mapped_column(String(36))
    status: Mapped[str] = mapped_column(Text, nullable=False, default='pending', server_default='pending')
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())


class Receipt(Base):
    __tablename__ = 'receipts'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    receipt_number: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    type: Mapped[str] = mapped_column(receipt_type, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default='USD', server_default='USD')
    from_entity: Mapped[Optional[str]] = mapped_column(Text)
    to_entity: Mapped[Optional[str]] = mapped_column(Text)
    safe_id: Mapped[Optional[str]] = mapped_column(ForeignKey('safes.id'))
    reference_type: Mapped[Optional[str]] = mapped_column(Text)
    reference_id: Mapped[Optional[str]] = mapped_column(String(36))
    description: Mapped[Optional[str]] = mapped_column(Text)
    issued_by: Mapped[Optional[str]] = mapped_column(String(36))
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
