"""ORM Models for the panel estimator — SQLAlchemy 2.0"""
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from panel_estimator.db import Base


# ── CATALOG ───────────────────────────────────────────────────────────────────
class Component(Base):
    __tablename__ = "components"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    component_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    brand: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    specifications: Mapped[Optional[str]] = mapped_column(Text)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    stock_unit: Mapped[str] = mapped_column(String(20), default="Pcs")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class PanelType(Base):
    __tablename__ = "panel_types"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    panel_code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    base_wiring_cost: Mapped[float] = mapped_column(Float, default=0.0)
    base_fabrication_cost: Mapped[float] = mapped_column(Float, default=0.0)
    base_labor_cost: Mapped[float] = mapped_column(Float, default=0.0)
    profit_margin: Mapped[float] = mapped_column(Float, default=20.0)
    rules: Mapped[list["BomRule"]] = relationship("BomRule", back_populates="panel_type", order_by="BomRule.id")


class BomRule(Base):
    __tablename__ = "bom_rules"
    __table_args__ = (UniqueConstraint("panel_type_id", "component_id", name="uq_bom_rule"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    panel_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("panel_types.id"), nullable=False)
    component_id: Mapped[int] = mapped_column(Integer, ForeignKey("components.id"), nullable=False)
    quantity_rule: Mapped[str] = mapped_column(String(30), default="fixed")  # fixed | per_feeder | per_motor | per_capacitor_bank
    default_quantity: Mapped[int] = mapped_column(Integer, default=1)
    is_mandatory: Mapped[bool] = mapped_column(Boolean, default=True)
    panel_type: Mapped["PanelType"] = relationship("PanelType", back_populates="rules")
    component: Mapped["Component"] = relationship("Component")


# ── QUOTATIONS ────────────────────────────────────────────────────────────────
class Quotation(Base):
    __tablename__ = "quotations"
    __mapper_args__ = {"eager_defaults": True}
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quotation_number: Mapped[str] = mapped_column(String(30), unique=True, nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_address: Mapped[Optional[str]] = mapped_column(Text)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50))
    customer_email: Mapped[Optional[str]] = mapped_column(String(255))
    gst_number: Mapped[Optional[str]] = mapped_column(String(30))
    panel_type: Mapped[str] = mapped_column(String(20), nullable=False)
    panel_size: Mapped[Optional[str]] = mapped_column(String(30))
    busbar_type: Mapped[Optional[str]] = mapped_column(String(20))
    brand_preference: Mapped[Optional[str]] = mapped_column(String(100))
    incoming_supply: Mapped[Optional[str]] = mapped_column(String(100))
    ip_rating: Mapped[Optional[str]] = mapped_column(String(10))
    number_of_feeders: Mapped[int] = mapped_column(Integer, default=0)
    motor_count: Mapped[int] = mapped_column(Integer, default=0)
    special_requirements: Mapped[Optional[str]] = mapped_column(Text)
    total_material_cost: Mapped[float] = mapped_column(Float, default=0.0)
    total_production_cost: Mapped[float] = mapped_column(Float, default=0.0)
    profit_margin: Mapped[float] = mapped_column(Float, default=20.0)
    gst_percentage: Mapped[float] = mapped_column(Float, default=18.0)
    final_amount: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String(20), default="draft")  # draft | sent | accepted | rejected
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    items: Mapped[list["QuotationItem"]] = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.id",
    )


class QuotationItem(Base):
    __tablename__ = "quotation_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quotation_id: Mapped[int] = mapped_column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False)
    component_code: Mapped[Optional[str]] = mapped_column(String(50))
    component_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50))
    brand: Mapped[Optional[str]] = mapped_column(String(100))
    specifications: Mapped[Optional[str]] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), default="Pcs")
    quotation: Mapped["Quotation"] = relationship("Quotation", back_populates="items")
