from datetime import datetime, timezone

import pytest

from dispatch_eta.config import RoutingConfig, Settings
from dispatch_eta.data import orders_repository
from dispatch_eta.data.orders_repository import SupabaseOrderStore, parse_timestamp, row_to_driver_ref, row_to_order
from dispatch_eta.exceptions import ConfigurationError, OrderStoreError


@pytest.mark.parametrize("api_key", ["", "   "])
def test_routing_config_requires_api_key(api_key):
    with pytest.raises(ConfigurationError):
        RoutingConfig(api_key=api_key)


def test_routing_config_rejects_non_positive_speed():
    with pytest.raises(ConfigurationError):
        RoutingConfig(api_key="k", average_speed_kmh=0)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ETA_GOOGLE_MAPS_API_KEY", "env-key")
    monkeypatch.setenv("ETA_PAST_GUARD_MINUTES", "15")
    monkeypatch.setenv("ETA_FRONTEND_ALLOWED_ORIGINS", '["https://a.example", "https://b.example"]')

    settings = Settings(_env_file=None)

    assert settings.routing_config().api_key == "env-key"
    assert settings.routing_config().speed_adjustment_factor == 0.95
    assert settings.timeline_config().past_guard_minutes == 15
    assert settings.timeline_config().sequencing_buffer_seconds == 10
    assert settings.frontend_allowed_origins == ("https://a.example", "https://b.example")


def test_settings_without_key_fails_on_routing_config(monkeypatch):
    monkeypatch.delenv("ETA_GOOGLE_MAPS_API_KEY", raising=False)

    with pytest.raises(ConfigurationError):
        Settings(_env_file=None).routing_config()


def test_order_store_requires_supabase(monkeypatch):
    monkeypatch.setattr(orders_repository, "get_supabase_client", lambda: None)

    with pytest.raises(ConfigurationError):
        SupabaseOrderStore()


def test_parse_timestamp():
    assert parse_timestamp("2026-10-18T12:00:00Z") == datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-18T17:30:00+05:30") == datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-18T12:00:00") == datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_row_mapping_uses_store_column_names():
    row = {
        "id": 42,
        "driverid": "driver-1",
        "status": "delivered",
        "created_at": "2026-10-18T11:00:00Z",
        "completiontime": "2026-10-18T11:25:00Z",
        "estimated_delivery_time": "2026-10-18T11:30:00Z",
        "time": "30 mins",
        "customername": "Asha",
        "drivername": "Ravi",
    }

    record = row_to_order(row)
    ref = row_to_driver_ref(row)

    assert record.order_id == "42"
    assert record.time_text == "30 mins"
    assert record.customer_name == "Asha"
    assert ref.completion_time == datetime(2026, 10, 18, 11, 25, tzinfo=timezone.utc)
    assert row_to_driver_ref({"id": 1, "created_at": None}) is None


class _Query:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    def __getattr__(self, name):
        def chained(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return chained

    def execute(self):
        if self.error:
            raise self.error
        return type("Response", (), {"data": self.rows})()


class _Client:
    def __init__(self, query):
        self.query = query

    def table(self, name):
        self.query.calls.append(("table", (name,), {}))
        return self.query


def test_latest_for_driver_queries_newest_first():
    query = _Query(rows=[{"id": 7, "created_at": "2026-10-18T11:00:00Z", "estimated_delivery_time": None}])
    store = SupabaseOrderStore(client=_Client(query), table="orders")

    ref = store.latest_for_driver("driver-1")

    assert ref.created_at == datetime(2026, 10, 18, 11, tzinfo=timezone.utc)
    assert ("eq", ("driverid", "driver-1"), {}) in query.calls
    assert ("order", ("created_at",), {"desc": True}) in query.calls
    assert ("limit", (1,), {}) in query.calls


def test_store_errors_are_wrapped():
    store = SupabaseOrderStore(client=_Client(_Query(error=RuntimeError("connection reset"))), table="orders")

    with pytest.raises(OrderStoreError):
        store.active_orders()
