"""Route calculation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from ...exceptions import ConfigurationError, RouteUnavailable
from ...schemas.routing import CalculateRoutesRequest, CalculateRoutesResponse, ErrorResponse
from ...services.routing import service as routing_service

router = APIRouter(tags=["routes"])

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/routes:calculate",
    response_model=CalculateRoutesResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    status_code=status.HTTP_200_OK,
)
@router.post("/calculate-routes", response_model=CalculateRoutesResponse, include_in_schema=False)
def calculate_routes(payload: CalculateRoutesRequest):
    try:
        result = routing_service.calculate_routes(payload.origins, payload.destinations)
    except ValueError as exc:
        logger.error(f"Invalid route request: {exc}")
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except RouteUnavailable as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except ConfigurationError as exc:
        logger.error(f"Route chain is not configured: {exc}")
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
    except Exception as exc:
        logger.exception(f"Error calculating route: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
    return CalculateRoutesResponse(**result)
