# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from .authorization import AuthOptions
from .client_defaults import ClientOptions
from .composition import RequestOptions
from .debugging import DebugOptions
from .downloads import DownloadOptions
from .uploads import UploadOptions


class OptionBuilder(
    RequestOptions,
    AuthOptions,
    UploadOptions,
    DownloadOptions,
    DebugOptions,
    ClientOptions,
):
    """
    Chainable option set accepted by `new()` and every typed call.

        opts = header("X-Trace", "1").query("q", "search").timeout(5)

    Each call returns a new builder; the receiver is left unchanged, so a
    builder can be shared and extended freely.
    """

    __slots__ = ()


__all__ = ["OptionBuilder"]
