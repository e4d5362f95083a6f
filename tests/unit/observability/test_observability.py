import json
import logging

import pytest
from prometheus_client import REGISTRY

from musiclib.observability import record_ai_request, record_stats_fallback
from musiclib.observability import logging as structured_logging
from musiclib.observability.logging import (
    OTLP_HANDLER_NAME,
    JsonFormatter,
    configure_structured_logging,
)


@pytest.mark.unit
def test_json_formatter_carries_extra_fields():
    record = logging.LogRecord("musiclib.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.operation = "analyze_mood"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["operation"] == "analyze_mood"
    assert payload["request_id"] is None


@pytest.mark.unit
def test_ai_and_stats_counters_increment():
    labels = {"operation": "describe_playlist", "outcome": "success"}
    before = REGISTRY.get_sample_value("musiclib_ai_requests_total", labels) or 0
    record_ai_request("describe_playlist", "success", 0.2)
    assert REGISTRY.get_sample_value("musiclib_ai_requests_total", labels) == before + 1

    before = REGISTRY.get_sample_value("musiclib_stats_fallback_total") or 0
    record_stats_fallback()
    assert REGISTRY.get_sample_value("musiclib_stats_fallback_total") == before + 1


@pytest.mark.unit
def test_access_log_line_per_request(client, caplog):
    with caplog.at_level(logging.INFO, logger="musiclib.access"):
        client.get('/health?source=1', headers={"X-Request-ID": "req-42"})

    records = [r for r in caplog.records if r.name == "musiclib.access"]
    assert records
    assert records[-1].getMessage() == "GET /health?source=1 200"
    assert records[-1].status == 200


@pytest.mark.unit
def test_otlp_handler_is_attached_once(app, monkeypatch):
    monkeypatch.setattr(structured_logging, "_otlp_log_handler", lambda _app: logging.NullHandler())
    root = logging.getLogger()

    try:
        configure_structured_logging(app)
        configure_structured_logging(app)

        exporters = [h for h in root.handlers if h.get_name() == OTLP_HANDLER_NAME]
        assert len(exporters) == 1
    finally:
        for handler in [h for h in root.handlers if h.get_name() == OTLP_HANDLER_NAME]:
            root.removeHandler(handler)
