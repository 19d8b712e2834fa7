"""Tests for logging settings — pure helpers, no global configuration."""

from __future__ import annotations

import io
import logging

import pytest
import structlog

from bytecode_enforcer.core.logging import build_renderer, resolve_log_settings


class _Tty(io.StringIO):
    def isatty(self) -> bool:
        return True


class TestResolveLogSettings:
    def test_defaults(self):
        settings = resolve_log_settings(environ={})
        assert settings.level == logging.INFO
        assert settings.format == "console"

    def test_verbose_lowers_default(self):
        assert resolve_log_settings(verbose=True, environ={}).level == logging.DEBUG

    def test_explicit_level_wins_over_verbose(self):
        env = {"BYTECODE_ENFORCER_LOG_LEVEL": "warning"}
        assert resolve_log_settings(verbose=True, environ=env).level == logging.WARNING

    def test_format_from_env(self):
        env = {"BYTECODE_ENFORCER_LOG_FORMAT": " JSON "}
        assert resolve_log_settings(environ=env).format == "json"

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="log level"):
            resolve_log_settings(environ={"BYTECODE_ENFORCER_LOG_LEVEL": "loud"})

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="log format"):
            resolve_log_settings(environ={"BYTECODE_ENFORCER_LOG_FORMAT": "xml"})


class TestBuildRenderer:
    def test_json(self):
        assert isinstance(build_renderer("json", io.StringIO()), structlog.processors.JSONRenderer)

    def test_plain(self):
        renderer = build_renderer("plain", io.StringIO())
        line = renderer(None, "info", {"event": "rule.passed", "level": "info", "count": 3})
        assert line.startswith("level='info' event='rule.passed'")
        assert "count=3" in line

    def test_console(self):
        assert isinstance(build_renderer("console", _Tty()), structlog.dev.ConsoleRenderer)
        assert isinstance(build_renderer("console", io.StringIO()), structlog.dev.ConsoleRenderer)
