"""
Logging configuration.
JSON logs in production, human-readable in development. Logs always go to
stderr so the CLI can print JSON results on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from teammap_geo.config import get_settings


def setup_logging(level_name: Optional[str] = None) -> None:
    """Configure the root logger; `level_name` overrides LOG_LEVEL."""
    settings = get_settings()
    level_name = level_name or settings.log_level
    level = getattr(logging, level_name.upper(), logging.INFO)

    if settings.env == "production":
        try:
            import json_log_formatter

            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(json_log_formatter.VerboseJSONFormatter())

            root = logging.getLogger()
            root.setLevel(level)
            root.handlers = [handler]
        except ImportError:
            _setup_basic_logging(level)
    else:
        _setup_basic_logging(level)

    # Per-request access lines drown out resolution summaries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _setup_basic_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
