"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys

from notionmdx.observability import MetricsHook, NoopMetricsHook, StructuredFormatter, get_logger


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        result = json.loads(StructuredFormatter().format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        record = self._get_record("msg", extra_fields={"block_type": "paragraph", "blocks": 5})
        result = json.loads(StructuredFormatter().format(record))
        assert result["block_type"] == "paragraph"
        assert result["blocks"] == 5

    def test_exception_info_included(self):
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("error", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_non_serializable_values_stringified(self):
        record = self._get_record("msg", extra_fields={"obj": object()})
        result = json.loads(StructuredFormatter().format(record))
        assert result["obj"].startswith("<object")


class TestGetLogger:
    def test_returns_same_logger(self):
        assert get_logger("notionmdx.test.same") is get_logger("notionmdx.test.same")

    def test_no_duplicate_handlers(self):
        logger = get_logger("notionmdx.test.handlers")
        get_logger("notionmdx.test.handlers")
        assert len(logger.handlers) == 1

    def test_default_level_is_warning(self):
        assert get_logger("notionmdx.test.level").level == logging.WARNING

    def test_string_level(self):
        assert get_logger("notionmdx.test.strlevel", level="debug").level == logging.DEBUG

    def test_writes_json_to_stream(self):
        stream = io.StringIO()
        logger = get_logger("notionmdx.test.stream", level=logging.INFO, stream=stream)
        logger.info("Rendered", extra={"extra_fields": {"page_id": "p1"}})
        entry = json.loads(stream.getvalue().strip())
        assert entry["message"] == "Rendered"
        assert entry["page_id"] == "p1"
        assert logger.propagate is False


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_noop_accepts_all_calls(self):
        hook = NoopMetricsHook()
        hook.increment("a")
        hook.increment("a", 2, tags={"k": "v"})
        hook.timing("b", 1.5)
        hook.gauge("c", 3.0, tags=None)

    def test_incomplete_class_is_not_a_hook(self):
        class OnlyIncrement:
            def increment(self, name, value=1, tags=None):
                pass

        assert not isinstance(OnlyIncrement(), MetricsHook)
