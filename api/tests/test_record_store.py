from __future__ import annotations

import asyncio
import logging
import re

import pytest

from app.core.config import Settings
from app.core.telemetry import TraceContextFilter, build_span_exporter, parse_otlp_headers
from app.services.records import generate_record_id, load_record
from app.services.repository import (
    PostgresRecordStore,
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    escape_like_prefix,
)
from app.services.store import InMemoryRecordStore


def test_record_ids_embed_kind_and_timestamp() -> None:
    record_id = generate_record_id("company-email", now_ms=1700000000000)

    assert re.fullmatch(r"company-email:1700000000000:[0-9a-z]{9}", record_id)
    assert generate_record_id("job") != generate_record_id("job")


def test_memory_store_prefix_scan_is_isolated() -> None:
    store = InMemoryRecordStore()
    asyncio.run(store.set("job:2:b", {"id": "job:2:b"}))
    asyncio.run(store.set("job:1:a", {"id": "job:1:a"}))
    asyncio.run(store.set("jobless", {"id": "jobless"}))

    rows = asyncio.run(store.get_by_prefix("job:"))
    rows[0]["mutated"] = True

    assert [row["id"] for row in rows] == ["job:1:a", "job:2:b"]
    assert "mutated" not in store.records["job:1:a"]


def test_load_record_checks_kind_prefix() -> None:
    store = InMemoryRecordStore({"talent:1:a": {"id": "talent:1:a"}, "job:1:list": ["not", "a", "dict"]})

    assert asyncio.run(load_record(store, kind="talent", record_id="talent:1:a")) == {"id": "talent:1:a"}
    with pytest.raises(RepositoryNotFoundError):
        asyncio.run(load_record(store, kind="job", record_id="talent:1:a"))
    with pytest.raises(RepositoryNotFoundError):
        asyncio.run(load_record(store, kind="job", record_id="job:1:list"))


def test_like_prefix_is_escaped() -> None:
    assert escape_like_prefix("job:") == "job:%"
    assert escape_like_prefix("a_b%c\\") == "a\\_b\\%c\\\\%"


def test_postgres_store_validates_table_and_url() -> None:
    with pytest.raises(ValueError):
        PostgresRecordStore("postgresql://localhost/db", 1, 2, table="kv; drop")

    store = PostgresRecordStore(None, 1, 2)
    with pytest.raises(RepositoryUnavailableError):
        asyncio.run(store.get("admin:emails"))


def test_otlp_header_parsing() -> None:
    assert parse_otlp_headers(None) == {}
    assert parse_otlp_headers("api-key = abc, broken, =x,team=web3") == {"api-key": "abc", "team": "web3"}


def test_span_exporter_only_built_with_an_endpoint(monkeypatch) -> None:
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)

    assert build_span_exporter(Settings(otel_exporter_otlp_endpoint=None)) is None
    assert build_span_exporter(Settings(otel_exporter_otlp_endpoint="http://collector:4318/v1/traces")) is not None

    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318")
    assert build_span_exporter(Settings(otel_exporter_otlp_endpoint=None)) is not None


def test_log_records_carry_placeholder_ids_outside_a_span() -> None:
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)

    assert TraceContextFilter().filter(record) is True
    assert record.trace_id == "-"
    assert record.span_id == "-"
