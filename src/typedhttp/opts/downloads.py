# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from .base import S, OptionSet, request_only


class DownloadOptions(OptionSet):
    __slots__ = ()

    def output_file(self: S, path: str) -> S:
        """Stream a successful response body to `path` instead of buffering it."""
        return self.add(request_only(lambda request: request.set_output_file(path)))
