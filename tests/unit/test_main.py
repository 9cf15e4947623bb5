from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

from fastapi import FastAPI

from legacylens.main import run

if TYPE_CHECKING:
    import pytest


def test_run_serves_app(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("USE_MOCK_ANALYZER", "true")
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    package_logger = logging.getLogger("legacylens")
    handlers, level = list(package_logger.handlers), package_logger.level

    try:
        with patch("legacylens.main.uvicorn.run") as uvicorn_run:
            run()
    finally:
        for handler in list(package_logger.handlers):
            if handler not in handlers:
                package_logger.removeHandler(handler)
        package_logger.setLevel(level)

    uvicorn_run.assert_called_once()
    app = uvicorn_run.call_args.args[0]
    assert isinstance(app, FastAPI)
    assert uvicorn_run.call_args.kwargs == {"host": "0.0.0.0", "port": 9001, "log_level": "debug"}


def test_run_uses_structured_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("USE_MOCK_ANALYZER", "true")
    monkeypatch.setenv("STRUCTURED_LOGS", "true")
    configure = Mock()
    with (
        patch("legacylens.main.configure_logging", configure),
        patch("legacylens.main.uvicorn.run"),
    ):
        run()
    configure.assert_called_once()
    assert configure.call_args.kwargs == {"structured": True}
