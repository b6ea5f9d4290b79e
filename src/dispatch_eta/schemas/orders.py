"""Order estimate, creation and driver timeline schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderEstimateRequest(BaseModel):
    start: str = Field(..., description="Pickup address, usually the store address.")
    destination: str = Field(..., description="Delivery address.")
    driver_id: Optional[str] = Field(default=None, description="Driver the order will be assigned to.")


class TimelineAnchorModel(BaseModel):
    driver_id: Optional[str] = None
    base_time: datetime
    was_adjusted_from_past: bool


class OrderEstimateResponse(BaseModel):
    distance: str
    time: str
    estimated: bool = False
    via: Optional[str] = None
    two_wheeler_warning: Optional[str] = None
    google_maps_link: Optional[str] = None
    duration_seconds: Optional[int] = None
    distance_meters: Optional[float] = None
    manual_entry_required: bool = False
    error: Optional[str] = None
    anchor: TimelineAnchorModel
    estimated_delivery_time: Optional[datetime] = None


class OrderCreateRequest(BaseModel):
    start: str
    destination: str
    customer_id: Optional[str] = None
    customer_name: str = ""
    driver_id: Optional[str] = None
    driver_name: str = ""
    driver_email: str = ""
    store_id: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, ge=0)
    payment_method: Optional[str] = None
    delivery_notes: str = ""
    manager_number: str = ""
    change_amount: Optional[float] = None
    distance: Optional[str] = Field(default=None, description="Manual distance, used only when routing fails.")
    time: Optional[str] = Field(default=None, description="Manual duration, used only when routing fails.")


class OrderCreateResponse(BaseModel):
    success: bool = True
    order: dict
    estimate: OrderEstimateResponse


class DeliveryOutcomeModel(BaseModel):
    order_id: str
    customer_name: Optional[str] = None
    status: str
    time_diff: str
    created_at: Optional[datetime] = None


class DriverPerformanceModel(BaseModel):
    driver_id: str
    driver_name: Optional[str] = None
    total_orders: int
    completed_orders: int
    cancelled_orders: int
    on_time_deliveries: int
    late_deliveries: int
    percent_on_time: int
    avg_delivery_minutes: int
    deliveries: List[DeliveryOutcomeModel] = Field(default_factory=list)


class DelayedOrderModel(BaseModel):
    order_id: str
    driver_id: Optional[str] = None
    driver_name: Optional[str] = None
    customer_name: Optional[str] = None
    status: Optional[str] = None
    time: Optional[str] = None
    created_at: Optional[datetime] = None
    expected_delivery_time: datetime
    minutes_overdue: int


class DelayedOrdersResponse(BaseModel):
    checked_at: datetime
    count: int
    orders: List[DelayedOrderModel]
