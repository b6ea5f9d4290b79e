"""Order estimate and creation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data.orders_repository import get_order_store
from ...exceptions import ConfigurationError, OrderStoreError
from ...schemas.orders import (
    DelayedOrderModel,
    DelayedOrdersResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderEstimateRequest,
    OrderEstimateResponse,
    TimelineAnchorModel,
)
from ...services.orders import service as orders_service
from ...services.orders.performance import find_delayed_orders
from ...services.outputs.route_formatter import TWO_WHEELER_WARNING
from ...services.timeline.eta import utc_now

router = APIRouter(prefix="/orders", tags=["orders"])

logger = logging.getLogger(__name__)


def to_estimate_response(estimate: orders_service.OrderEstimate, driver_id: str | None) -> OrderEstimateResponse:
    route_estimate = estimate.route_estimate
    route = route_estimate.route
    return OrderEstimateResponse(
        distance=route_estimate.distance,
        time=route_estimate.time,
        estimated=route.estimated if route else False,
        via=route.provider_label if route else None,
        two_wheeler_warning=TWO_WHEELER_WARNING if route else None,
        google_maps_link=route.map_link_url if route else None,
        duration_seconds=route.duration_seconds if route else None,
        distance_meters=route.distance_meters if route else None,
        manual_entry_required=route_estimate.manual_entry_required,
        error=route_estimate.error,
        anchor=TimelineAnchorModel(
            driver_id=driver_id,
            base_time=estimate.anchor.base_time,
            was_adjusted_from_past=estimate.anchor.was_adjusted_from_past,
        ),
        estimated_delivery_time=estimate.estimated_delivery_time,
    )


def _service_unavailable(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.post("/estimate", response_model=OrderEstimateResponse, status_code=status.HTTP_200_OK)
def estimate(payload: OrderEstimateRequest) -> OrderEstimateResponse:
    try:
        result = orders_service.estimate_order(payload.start, payload.destination, payload.driver_id)
    except ConfigurationError as exc:
        raise _service_unavailable(exc) from exc
    except OrderStoreError as exc:
        logger.error(f"Order store unavailable while estimating order: {exc}")
        raise _service_unavailable(exc) from exc
    return to_estimate_response(result, payload.driver_id)


@router.post("", response_model=OrderCreateResponse, status_code=status.HTTP_201_CREATED)
def create(payload: OrderCreateRequest) -> OrderCreateResponse:
    new_order = orders_service.NewOrder(**payload.model_dump())
    try:
        row, result = orders_service.create_order(new_order)
    except ConfigurationError as exc:
        raise _service_unavailable(exc) from exc
    except OrderStoreError as exc:
        logger.exception(f"Error creating order: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create order: {exc}",
        ) from exc
    return OrderCreateResponse(order=row, estimate=to_estimate_response(result, payload.driver_id))


@router.get("/delayed", response_model=DelayedOrdersResponse, status_code=status.HTTP_200_OK)
def delayed() -> DelayedOrdersResponse:
    now = utc_now()
    try:
        active = get_order_store().active_orders()
    except ConfigurationError as exc:
        raise _service_unavailable(exc) from exc
    except OrderStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    found = find_delayed_orders(active, now)
    return DelayedOrdersResponse(
        checked_at=now,
        count=len(found),
        orders=[
            DelayedOrderModel(
                order_id=item.order.order_id,
                driver_id=item.order.driver_id,
                driver_name=item.order.driver_name,
                customer_name=item.order.customer_name,
                status=item.order.status,
                time=item.order.time_text,
                created_at=item.order.created_at,
                expected_delivery_time=item.expected_delivery_time,
                minutes_overdue=item.minutes_overdue,
            )
            for item in found
        ],
    )
