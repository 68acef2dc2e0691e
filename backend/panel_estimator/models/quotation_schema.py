"""Quotation request / response models."""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from panel_estimator.models.estimation_schema import (
    CostBreakdown,
    PanelConfiguration,
    _CamelModel,
)

QuotationStatus = Literal["draft", "sent", "accepted", "rejected"]


class CustomerDetails(_CamelModel):
    customer_name: str = Field(..., min_length=1)
    customer_address: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    gst_number: Optional[str] = None


class QuotationCreate(_CamelModel):
    """Customer details plus the panel to estimate; pricing is recomputed server-side."""
    customer: CustomerDetails
    configuration: PanelConfiguration
    incoming_supply: Optional[str] = None
    special_requirements: Optional[str] = None
    profit_margin: Optional[float] = Field(None, ge=0)
    tax_percentage: Optional[float] = Field(None, ge=0)


class QuotationStatusUpdate(_CamelModel):
    status: QuotationStatus


class QuotationItemOut(_CamelModel):
    component_code: Optional[str] = None
    name: str
    category: Optional[str] = None
    brand: Optional[str] = None
    specifications: Optional[str] = None
    quantity: int
    unit_price: float
    total_price: float
    unit: str = "Pcs"


class QuotationOut(_CamelModel):
    id: int
    quotation_number: str
    customer_name: str
    customer_address: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    gst_number: Optional[str] = None
    panel_type: str
    panel_size: Optional[str] = None
    busbar_type: Optional[str] = None
    brand_preference: Optional[str] = None
    incoming_supply: Optional[str] = None
    ip_rating: Optional[str] = None
    number_of_feeders: int = 0
    motor_count: int = 0
    special_requirements: Optional[str] = None
    status: QuotationStatus = "draft"
    created_at: Optional[datetime] = None
    cost_breakdown: CostBreakdown
    amount_in_words: str
    items: List[QuotationItemOut] = Field(default_factory=list)
