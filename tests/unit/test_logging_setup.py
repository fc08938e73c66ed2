# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for structured logging setup."""

import json
import logging

import pytest
import structlog

from registrar.core.config import Settings
from registrar.utils.logging import bind_context, clear_context, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    clear_context()
    root.handlers = handlers
    root.setLevel(level)


def last_line(capsys) -> str:
    return capsys.readouterr().out.strip().splitlines()[-1]


class TestSetupLogging:
    def test_quiets_noisy_libraries(self) -> None:
        setup_logging(Settings(log_level="INFO"))

        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("registrar").level == logging.INFO

    def test_stdlib_records_carry_bound_context(self, capsys) -> None:
        setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))
        bind_context(request_id="req-1", student_id=42)

        logging.getLogger("registrar.tests").warning("Seat reservation lost: section=%s", 11)

        entry = json.loads(last_line(capsys))
        assert entry["event"] == "Seat reservation lost: section=11"
        assert entry["request_id"] == "req-1"
        assert entry["student_id"] == 42
        assert entry["level"] == "warning"
        assert entry["logger"] == "registrar.tests"
        assert "timestamp" in entry

    def test_exceptions_are_rendered(self, capsys) -> None:
        setup_logging(Settings(environment="staging", debug=False, log_level="INFO"))

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logging.getLogger("registrar.tests").exception("Registration commit failed")

        entry = json.loads(last_line(capsys))
        assert "RuntimeError: boom" in entry["exception"]

    def test_repeated_setup_keeps_one_handler(self) -> None:
        settings = Settings(environment="staging", debug=False, log_level="INFO")

        setup_logging(settings)
        setup_logging(settings)

        bridged = [
            h for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(bridged) == 1


class TestContext:
    def test_bind_and_clear(self) -> None:
        bind_context(request_id="abc", student_id=42)

        assert structlog.contextvars.get_contextvars() == {"request_id": "abc", "student_id": 42}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
