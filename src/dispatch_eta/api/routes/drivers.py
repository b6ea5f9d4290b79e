"""Driver timeline and performance endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...data.orders_repository import get_order_store
from ...exceptions import ConfigurationError, OrderStoreError
from ...schemas.orders import DeliveryOutcomeModel, DriverPerformanceModel, TimelineAnchorModel
from ...services.orders.performance import delivery_status_label, format_time_diff, summarize_driver
from ...services.orders.service import timeline_estimator

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("/{driver_id}/anchor", response_model=TimelineAnchorModel, status_code=status.HTTP_200_OK)
def anchor(driver_id: str) -> TimelineAnchorModel:
    """Base timestamp a new order assigned to this driver would be anchored to."""
    try:
        result = timeline_estimator(get_order_store()).anchor_for(driver_id)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except OrderStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return TimelineAnchorModel(
        driver_id=driver_id,
        base_time=result.base_time,
        was_adjusted_from_past=result.was_adjusted_from_past,
    )


@router.get("/{driver_id}/performance", response_model=DriverPerformanceModel, status_code=status.HTTP_200_OK)
def performance(driver_id: str) -> DriverPerformanceModel:
    try:
        orders = get_order_store().orders_for_driver(driver_id)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except OrderStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    summary = summarize_driver(driver_id, orders)
    return DriverPerformanceModel(
        driver_id=summary.driver_id,
        driver_name=summary.driver_name,
        total_orders=summary.total_orders,
        completed_orders=summary.completed_orders,
        cancelled_orders=summary.cancelled_orders,
        on_time_deliveries=summary.on_time_deliveries,
        late_deliveries=summary.late_deliveries,
        percent_on_time=summary.percent_on_time,
        avg_delivery_minutes=summary.avg_delivery_minutes,
        deliveries=[
            DeliveryOutcomeModel(
                order_id=order.order_id,
                customer_name=order.customer_name,
                status=delivery_status_label(order),
                time_diff=format_time_diff(order),
                created_at=order.created_at,
            )
            for order in orders
            if order.driver_id == driver_id
        ],
    )
