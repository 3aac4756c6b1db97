from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, Boolean, Integer, DateTime, Numeric, ForeignKey, Index, func, true

from .account import Base, new_id
from .enums import branch as branch_enum


class Product(Base):
    __tablename__ = 'products'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    sku: Mapped[Optional[str]] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), default=0, server_default='0')
    cost_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    category: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    stock: Mapped[List['BranchInventory']] = relationship(back_populates='product', cascade='all, delete-orphan')

    # Catalog lookups run against 100k+ rows
    __table_args__ = (
        Index('idx_products_name', 'name'),
        Index('idx_products_sku', 'sku'),
        Index('idx_products_category', 'category'),
        Index('idx_products_created_at', 'created_at'),
        Index('idx_products_is_active', 'is_active'),
    )


class BranchInventory(Base):
    __tablename__ = 'branch_inventory'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    product_id: Mapped[str] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    branch: Mapped[str] = mapped_column(branch_enum, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default='0')
    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=5, server_default='5')
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    product: Mapped[Product] = relationship(back_populates='stock')

    __table_args__ = (
        Index('idx_branch_inventory_product_id', 'product_id'),
        Index('idx_branch_inventory_branch', 'branch'),
    )
