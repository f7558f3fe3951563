"""
Tests for JSON and console log formatting.
"""

import json
import logging
import sys

from clientcore.logging import (
    ConsoleFormatter,
    JSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)


def make_record(msg="Downloading asset", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="platform_apps.service",
        level=level,
        pathname="service.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    def test_set_and_clear(self):
        set_log_context(app_id="app-1", asset="transition.mp4")
        context = get_log_context()
        assert context["app_id"] == "app-1"
        assert context["asset"] == "transition.mp4"
        assert context["operation"] == ""

        clear_log_context()
        assert all(value == "" for value in get_log_context().values())


class TestJSONFormatter:
    def test_base_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "platform_apps.service"
        assert entry["message"] == "Downloading asset"
        assert entry["ts"].endswith("Z")
        assert "file" not in entry

    def test_debug_includes_source_location(self):
        entry = json.loads(JSONFormatter().format(make_record(level=logging.DEBUG)))
        assert entry["file"] == "service.py:42"

    def test_extra_fields_and_numeric_coercion(self):
        record = make_record(
            app_id="app-1",
            checksum="9e107d9d372bb6826bd81d3542a419d6",
            bytes_downloaded="1024",
            http_status="oops",
            unrelated="ignored",
        )
        entry = json.loads(JSONFormatter().format(record))

        assert entry["app_id"] == "app-1"
        assert entry["checksum"] == "9e107d9d372bb6826bd81d3542a419d6"
        assert entry["bytes_downloaded"] == 1024
        assert "http_status" not in entry or entry["http_status"] is None
        assert "unrelated" not in entry

    def test_sensitive_query_params_are_redacted(self):
        record = make_record(
            download_url="https://cdn.example.com/a.mp4?sig=abc123&v=2&access_token=xyz"
        )
        entry = json.loads(JSONFormatter().format(record))

        assert "abc123" not in entry["download_url"]
        assert "xyz" not in entry["download_url"]
        assert "v=2" in entry["download_url"]

    def test_context_injected(self):
        set_log_context(app_id="app-9", operation="add_platform_app_asset")
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["app_id"] == "app-9"
        assert entry["operation"] == "add_platform_app_asset"
        assert "platform" not in entry

    def test_exception_details(self):
        try:
            raise OSError("disk full")
        except OSError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"]["type"] == "OSError"
        assert entry["exception"]["message"] == "disk full"


class TestConsoleFormatter:
    def test_tags_from_context_and_record(self):
        set_log_context(platform="twitch")
        formatter = ConsoleFormatter()
        formatter._use_colors = False

        output = formatter.format(make_record(app_id="app-1", asset="intro.mp4"))

        assert " - INFO - platform_apps.service - " in output
        assert output.endswith("[twitch] [app:app-1] [asset:intro.mp4] Downloading asset")

    def test_plain_message_without_tags(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        assert formatter.format(make_record()).endswith(" - Downloading asset")
