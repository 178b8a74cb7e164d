"""
Тесты trace-хука и настройки логгера.
"""
import io
import logging

from proxyparse.logger import (
    LOGGER_NAME,
    TraceIdFilter,
    enable_trace,
    generate_trace_id,
    set_trace_id,
    setup_logger,
    trace,
    trace_enabled,
)
from proxyparse.request import parse_request


class TestTrace:

    def test_disabled_by_default_writes_nothing(self):
        sink = io.StringIO()
        setup_logger("debug", stream=sink)

        parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert trace_enabled() is False
        assert sink.getvalue() == ""

    def test_enabled_writes_to_caller_sink(self):
        sink = io.StringIO()
        setup_logger("info", stream=sink, trace=True)

        parse_request(b"GET http://example.com/ HTTP/1.1\r\nHost: example.com\r\n\r\n")

        output = sink.getvalue()
        assert "request_line" in output
        assert "host='example.com'" in output
        assert "header name='Host'" in output
        assert "| DEBUG |" in output

    def test_parse_failure_is_traced(self):
        sink = io.StringIO()
        setup_logger("debug", stream=sink, trace=True)

        try:
            parse_request(b"GET\r\n\r\n")
        except ValueError:
            pass

        assert "parse_failed error='MalformedRequestLine'" in sink.getvalue()

    def test_trace_respects_logger_level(self):
        sink = io.StringIO()
        setup_logger("warning", stream=sink)
        enable_trace(True)

        trace("event", key="value")

        assert sink.getvalue() == ""

    def test_event_without_fields(self, caplog):
        enable_trace(True)
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            trace("done")

        assert [record.getMessage() for record in caplog.records] == ["done"]

    def test_disabled_trace_is_not_called(self, monkeypatch):
        calls = []
        monkeypatch.setattr("proxyparse.parser.trace", lambda event, **fields: calls.append(event))

        parse_request(b"GET / HTTP/1.1\r\nHost: a\r\nAccept: b\r\n\r\n")
        assert calls == []

        enable_trace(True)
        parse_request(b"GET / HTTP/1.1\r\nHost: a\r\nAccept: b\r\n\r\n")
        assert calls == ["request_line", "header", "header"]


class TestTraceId:

    def test_generate_trace_id(self):
        trace_id = generate_trace_id()

        assert len(trace_id) == 8
        assert trace_id != generate_trace_id()

    def test_filter_adds_trace_id(self):
        set_trace_id("abc12345")
        record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, "msg", None, None)

        assert TraceIdFilter().filter(record) is True
        assert record.trace_id == "abc12345"

    def test_trace_id_in_output(self):
        sink = io.StringIO()
        logger = setup_logger("info", stream=sink)
        set_trace_id("deadbeef")

        logger.info("hello")

        assert "| INFO | [deadbeef] hello" in sink.getvalue()
