"""Order store backed by the Supabase ``orders`` table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Iterable, Optional, Protocol

from ..config import settings
from ..db.supabase import get_supabase_client
from ..exceptions import ConfigurationError, OrderStoreError
from ..models.domain import DriverOrderRef, OrderRecord

ACTIVE_STATUSES = ("confirmed", "accepted", "picked_up")

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    def latest_for_driver(self, driver_id: str) -> Optional[DriverOrderRef]:
        ...

    def orders_for_driver(self, driver_id: str) -> list[OrderRecord]:
        ...

    def active_orders(self) -> list[OrderRecord]:
        ...

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        ...


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 value into an aware UTC datetime. Unparseable input yields None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Ignoring unparseable timestamp {value!r}")
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def row_to_order(row: dict[str, Any]) -> OrderRecord:
    return OrderRecord(
        order_id=str(row.get("id", "")),
        driver_id=row.get("driverid"),
        status=row.get("status"),
        created_at=parse_timestamp(row.get("created_at")),
        completion_time=parse_timestamp(row.get("completiontime")),
        estimated_delivery_time=parse_timestamp(row.get("estimated_delivery_time")),
        time_text=row.get("time"),
        distance_text=row.get("distance"),
        customer_name=row.get("customername"),
        destination=row.get("destination"),
        driver_name=row.get("drivername"),
    )


def row_to_driver_ref(row: dict[str, Any]) -> DriverOrderRef | None:
    created_at = parse_timestamp(row.get("created_at"))
    if created_at is None:
        logger.warning(f"Order {row.get('id')} has no usable created_at; ignoring it for sequencing")
        return None
    return DriverOrderRef(
        completion_time=parse_timestamp(row.get("completiontime")),
        estimated_delivery_time=parse_timestamp(row.get("estimated_delivery_time")),
        created_at=created_at,
    )


class SupabaseOrderStore:
    """Reads and writes order rows through the Supabase client."""

    def __init__(self, client: Any | None = None, table: str | None = None) -> None:
        self.client = client or get_supabase_client()
        if self.client is None:
            raise ConfigurationError(
                "Order store is not configured. Set ETA_SUPABASE_URL and ETA_SUPABASE_KEY."
            )
        self.table = table or settings.orders_table

    def _rows(self, query: Any) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as exc:
            raise OrderStoreError(f"Order store query failed: {exc}") from exc
        return list(response.data or [])

    def latest_for_driver(self, driver_id: str) -> Optional[DriverOrderRef]:
        rows = self._rows(
            self.client.table(self.table)
            .select("id, completiontime, estimated_delivery_time, created_at")
            .eq("driverid", driver_id)
            .order("created_at", desc=True)
            .limit(1)
        )
        if not rows:
            return None
        return row_to_driver_ref(rows[0])

    def orders_for_driver(self, driver_id: str) -> list[OrderRecord]:
        rows = self._rows(
            self.client.table(self.table)
            .select("*")
            .eq("driverid", driver_id)
            .order("created_at", desc=True)
        )
        return _to_orders(rows)

    def active_orders(self) -> list[OrderRecord]:
        rows = self._rows(
            self.client.table(self.table).select("*").in_("status", list(ACTIVE_STATUSES))
        )
        return _to_orders(rows)

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        rows = self._rows(self.client.table(self.table).insert(record))
        if not rows:
            raise OrderStoreError("Order insert returned no row")
        logger.info(f"Inserted order {rows[0].get('id')} for driver {record.get('driverid')}")
        return rows[0]


def _to_orders(rows: Iterable[dict[str, Any]]) -> list[OrderRecord]:
    return [row_to_order(row) for row in rows]


@lru_cache()
def get_order_store() -> OrderStore:
    return SupabaseOrderStore()
