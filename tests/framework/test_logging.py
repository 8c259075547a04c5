"""
Tests for operant.framework.logging.

Covers LogContext push/restore, the context processor, log_step and
invocation context for nested operations.
"""

from __future__ import annotations

import logging
import threading
from unittest.mock import MagicMock, patch

import pytest

from operant.framework.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    is_configured,
    is_debug_enabled,
    log_step,
    new_invocation_id,
    push_context,
    set_context,
    timed_block,
)
from operant.framework.logging.context import add_context_processor


# ── LogContext ───────────────────────────────────────────────


class TestLogContext:
    def test_to_dict_drops_empty(self):
        assert LogContext().to_dict() == {}
        assert LogContext(operation="posts.create", depth=1).to_dict() == {"operation": "posts.create", "depth": 1}

    def test_merge_ignores_none(self):
        ctx = LogContext(operation="outer").merge(operation=None, contract="PostContract")
        assert ctx.operation == "outer"
        assert ctx.contract == "PostContract"

    def test_invocation_id(self):
        assert len(new_invocation_id()) == 12
        assert new_invocation_id() != new_invocation_id()


class TestContextFunctions:
    def test_set_bind_clear(self):
        set_context(operation="posts.create")
        bind_context(contract="PostContract")
        assert get_context().operation == "posts.create"
        assert get_context().contract == "PostContract"
        clear_context()
        assert get_context() == LogContext()

    def test_push_and_restore(self):
        set_context(operation="outer")
        token = push_context(operation="inner", depth=1)
        assert get_context().operation == "inner"
        token.restore()
        assert get_context().operation == "outer"
        assert get_context().depth == 0

    def test_threads_start_empty(self):
        set_context(operation="submitter")
        seen = []
        thread = threading.Thread(target=lambda: seen.append(get_context().operation))
        thread.start()
        thread.join()
        assert seen == [None]


class TestContextProcessor:
    def test_adds_context_fields(self):
        set_context(invocation_id="abc", operation="posts.create")
        event = add_context_processor(None, "info", {"event": "operation.invalid"})
        assert event == {"event": "operation.invalid", "invocation_id": "abc", "operation": "posts.create"}

    def test_explicit_keys_win(self):
        set_context(operation="posts.create")
        event = add_context_processor(None, "info", {"event": "x", "operation": "explicit"})
        assert event["operation"] == "explicit"


# ── Timing ───────────────────────────────────────────────────


class TestLogStep:
    def test_logs_start_and_end(self):
        mock_log = MagicMock()
        with patch("operant.framework.logging.timing.get_logger", return_value=mock_log):
            with log_step("contract.validate", contract="PostContract") as timer:
                timer.add_metric("valid", True)

        mock_log.debug.assert_called_once()
        assert mock_log.debug.call_args.args == ("contract.validate.start",)
        mock_log.info.assert_called_once()
        end_kwargs = mock_log.info.call_args.kwargs
        assert mock_log.info.call_args.args == ("contract.validate.end",)
        assert end_kwargs["contract"] == "PostContract"
        assert end_kwargs["valid"] is True
        assert "duration_ms" in end_kwargs

    def test_custom_end_level(self):
        mock_log = MagicMock()
        with patch("operant.framework.logging.timing.get_logger", return_value=mock_log):
            with log_step("contract.validate", log_start=False, level="debug"):
                pass
        mock_log.debug.assert_called_once()
        assert mock_log.debug.call_args.args == ("contract.validate.end",)
        mock_log.info.assert_not_called()

    def test_error_logged_and_reraised(self):
        mock_log = MagicMock()
        with patch("operant.framework.logging.timing.get_logger", return_value=mock_log):
            with pytest.raises(RuntimeError, match="boom"):
                with log_step("operation.execute"):
                    raise RuntimeError("boom")

        mock_log.error.assert_called_once()
        error_kwargs = mock_log.error.call_args.kwargs
        assert error_kwargs["error_type"] == "RuntimeError"
        assert error_kwargs["status"] == "error"
        mock_log.info.assert_not_called()

    def test_nested_spans(self):
        with log_step("outer") as outer:
            assert get_context().span_id == outer.span_id
            with log_step("inner") as inner:
                assert inner.parent_span_id == outer.span_id
        assert get_context().span_id is None

    def test_timed_block(self):
        with timed_block("decode") as timer:
            pass
        assert timer.ended_at is not None
        assert timer.duration_ms >= 0


# ── Configuration ────────────────────────────────────────────


class TestConfigureLogging:
    def test_configure_from_arguments(self):
        try:
            configure_logging(level="DEBUG", format="json", force=True)
            assert is_configured()
            assert is_debug_enabled()
        finally:
            configure_logging(level="INFO", format="console", force=True)
        assert not is_debug_enabled()

    def test_configure_from_settings(self, monkeypatch):
        from operant.core.settings import reset_settings

        monkeypatch.setenv("OPERANT_LOG_LEVEL", "WARNING")
        reset_settings()
        try:
            configure_logging(force=True)
            assert logging.getLogger().level == logging.WARNING
        finally:
            configure_logging(level="INFO", force=True)
