"""Tests for logging configuration and utilities."""

import json
import logging
import os
import time

from ggmcp.logging import (
    MAX_LOGGED_ARG_CHARS,
    NOISY_LOGGERS,
    ComponentFormatter,
    JSONLHandler,
    configure_logging,
    prune_old_logs,
    resolve_level,
    safe_log_args,
)


class TestSafeLogArgs:
    def test_passes_short_values_through(self):
        args = {"pathInProject": "src/main.ts", "count": 3}
        assert safe_log_args(args) == args

    def test_truncates_long_strings(self):
        text = "x" * (MAX_LOGGED_ARG_CHARS + 50)
        result = safe_log_args({"text": text})
        assert result["text"].startswith("x" * MAX_LOGGED_ARG_CHARS + "...")
        assert f"({len(text)} chars)" in result["text"]

    def test_masks_sensitive_keys(self):
        result = safe_log_args({"password": "hunter2", "apiToken": "abc", "Secret": "s"})
        assert result == {"password": "*****", "apiToken": "*****", "Secret": "*****"}

    def test_does_not_mutate_input(self):
        args = {"token": "abc"}
        safe_log_args(args)
        assert args == {"token": "abc"}


class TestResolveLevel:
    def test_default_is_info(self):
        assert resolve_level() == "INFO"

    def test_explicit_level(self):
        assert resolve_level("warning") == "WARNING"

    def test_debug_toggle_wins(self):
        assert resolve_level("ERROR", debug=True) == "DEBUG"

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("GGMCP_LOG_LEVEL", "error")
        assert resolve_level() == "ERROR"

    def test_unknown_level_falls_back_to_info(self):
        assert resolve_level("verbose") == "INFO"


class TestComponentFormatter:
    def test_extracts_component(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        record = logging.LogRecord(
            "ggmcp.rpc.handler", logging.INFO, "", 0, "rpc_request", None, None
        )
        assert formatter.format(record) == "rpc | rpc_request"

    def test_third_party_logger(self):
        formatter = ComponentFormatter("%(component)s")
        record = logging.LogRecord("uvicorn.error", logging.INFO, "", 0, "x", None, None)
        assert formatter.format(record) == "uvicorn"


class TestJSONLHandler:
    def test_writes_entry_with_extras(self, tmp_path):
        handler = JSONLHandler(tmp_path)
        logger = logging.getLogger("ggmcp.tools.executor.test")
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            logger.info("tool_executed", extra={"tool.name": "mock", "duration_ms": 5})
        finally:
            logger.removeHandler(handler)
            handler.close()

        files = list(tmp_path.glob("*.jsonl"))
        assert len(files) == 1
        entry = json.loads(files[0].read_text().strip())
        assert entry["message"] == "tool_executed"
        assert entry["component"] == "tools"
        assert entry["level"] == "INFO"
        assert entry["extra"] == {"tool.name": "mock", "duration_ms": 5}


class TestConfigureLogging:
    def test_sets_level_and_quiets_noisy_loggers(self, restore_root_logger):
        configure_logging(level="WARNING")
        assert restore_root_logger.level == logging.WARNING
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_uvicorn_shares_handlers(self, restore_root_logger):
        configure_logging(use_rich=True)
        uv_logger = logging.getLogger("uvicorn.error")
        assert uv_logger.handlers == restore_root_logger.handlers
        assert uv_logger.propagate is False

    def test_log_to_file(self, restore_root_logger, tmp_path):
        configure_logging(log_to_file=True, logs_dir=tmp_path / "logs")
        assert any(isinstance(h, JSONLHandler) for h in restore_root_logger.handlers)
        assert (tmp_path / "logs").is_dir()


class TestPruneOldLogs:
    """Tests for prune_old_logs function."""

    def test_deletes_old_files(self, tmp_path):
        old_log = tmp_path / "2024-01-01.jsonl"
        old_log.write_text('{"test": "old"}\n')
        old_time = time.time() - (10 * 24 * 60 * 60)
        os.utime(old_log, (old_time, old_time))

        recent_log = tmp_path / "2024-01-10.jsonl"
        recent_log.write_text('{"test": "recent"}\n')

        deleted = prune_old_logs(tmp_path, retention_days=7)

        assert deleted == 1
        assert not old_log.exists()
        assert recent_log.exists()

    def test_ignores_non_jsonl_files(self, tmp_path):
        old_txt = tmp_path / "old.txt"
        old_txt.write_text("old text")
        old_time = time.time() - (10 * 24 * 60 * 60)
        os.utime(old_txt, (old_time, old_time))

        assert prune_old_logs(tmp_path, retention_days=7) == 0
        assert old_txt.exists()

    def test_handles_nonexistent_directory(self, tmp_path):
        assert prune_old_logs(tmp_path / "missing") == 0
