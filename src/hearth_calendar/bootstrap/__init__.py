"""Process start-up: logging for the CLI and the API server."""

from __future__ import annotations

from .logging import configure_logging

__all__ = ["configure_logging"]
