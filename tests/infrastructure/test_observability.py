"""Structured Logging - JSON formatter output."""

import json
import logging

from cart_pricing.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "cart_pricing.test", logging.WARNING, __file__, 1, "price mismatch", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_includes_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "cart_pricing.test"
    assert payload["message"] == "price mismatch"
    assert "timestamp" in payload


def test_json_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(content_key="[]", item_count=3, unrelated="x"),
    ))
    assert payload["content_key"] == "[]"
    assert payload["item_count"] == 3
    assert "unrelated" not in payload
