# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for typedhttp clients."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"typedhttp/{__version__}"
TRACE_ENV = "HTTP_TRACE"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ClientSettings:
    """Defaults applied to every freshly constructed Client."""

    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    max_redirects: int = 20
    verify_ssl: bool = True
    trace: bool = False

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("TYPEDHTTP_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_redirects = _int_env("TYPEDHTTP_HTTP_MAX_REDIRECTS", cls.max_redirects)
        if max_redirects < 0:
            max_redirects = cls.max_redirects
        return cls(
            timeout=timeout,
            user_agent=os.getenv("TYPEDHTTP_USER_AGENT", cls.user_agent),
            follow_redirects=_bool_env("TYPEDHTTP_HTTP_REDIRECTS", cls.follow_redirects),
            max_redirects=max_redirects,
            verify_ssl=_bool_env("TYPEDHTTP_HTTP_VERIFY_SSL", cls.verify_ssl),
            # Presence alone enables tracing, whatever the value.
            trace=TRACE_ENV in os.environ,
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
