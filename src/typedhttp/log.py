# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for typedhttp."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("TYPEDHTTP_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None) -> None:
    """
    Configure root logging for an application embedding typedhttp.

    The library itself only emits through module loggers and never calls this.
    """
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


__all__ = ["setup_logging"]
