r"""HTTP service exposing the analysis over FastAPI."""

from __future__ import annotations

__all__ = ["build_analyzer", "create_app"]

from legacylens.web.app import build_analyzer, create_app
