"""Tests for logging setup and the Loki handler."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from workvisor.log import LokiHandler, setup_logging
from workvisor.log.setup import MainFormatter


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def loki():
    handler = LokiHandler("http://loki:3100/", org_id="tenant", flush_interval=3600, batch_size=2)
    yield handler
    with patch("workvisor.log.handler.requests.post"):
        handler.close()


class TestSetupLogging:
    def test_installs_single_console_handler(self, restore_root_logger):
        setup_logging(logging.INFO)
        setup_logging(logging.INFO)

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, MainFormatter)
        assert handlers[0].level == logging.INFO

    def test_verbose_format_includes_thread_name(self, restore_root_logger):
        setup_logging(logging.DEBUG)

        assert "%(threadName)s" in restore_root_logger.handlers[0].formatter._fmt

    def test_loki_handler_added_when_enabled(self, restore_root_logger):
        with patch("workvisor.log.setup.config") as config, \
                patch("workvisor.log.setup.LokiHandler") as handler_cls:
            config.LOKI_ENABLED = True
            config.LOKI_URL = "http://loki:3100"
            handler_cls.return_value = logging.NullHandler()

            setup_logging(logging.INFO)

        assert len(restore_root_logger.handlers) == 2
        assert handler_cls.call_args.kwargs["url"] == "http://loki:3100"


class TestLokiHandler:
    def test_push_url(self, loki):
        assert loki.url == "http://loki:3100/loki/api/v1/push"

    def test_full_batch_is_pushed_with_tenant_header(self, loki):
        record = logging.LogRecord("workvisor.test", logging.INFO, __file__, 1, "hello %s", ("loki",), None)
        with patch("workvisor.log.handler.requests.post", return_value=MagicMock(status_code=204)) as post:
            loki.emit(record)
            post.assert_not_called()
            loki.emit(record)

        post.assert_called_once()
        payload = post.call_args.kwargs["json"]
        assert len(payload["streams"]) == 2
        assert payload["streams"][0]["stream"]["job"] == "workvisor"
        assert payload["streams"][0]["values"][0][1] == "hello loki"
        assert post.call_args.kwargs["headers"]["X-Scope-OrgID"] == "tenant"
        assert not loki.log_buffer

    def test_push_failure_is_reported_to_stderr(self, loki, capsys):
        record = logging.LogRecord("workvisor.test", logging.ERROR, __file__, 1, "boom", None, None)
        loki.emit(record)
        with patch("workvisor.log.handler.requests.post",
                   side_effect=requests.exceptions.ConnectionError("down")):
            loki.flush()

        assert "Failed to send 1 logs to Loki" in capsys.readouterr().err
