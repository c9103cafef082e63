# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request/response dump options."""

from __future__ import annotations

from typing import TextIO

from .base import S, OptionSet, client_only, request_only


class DebugOptions(OptionSet):
    __slots__ = ()

    def dump(self: S) -> S:
        """Dump this request and its response to stdout."""
        return self.add(request_only(lambda request: request.enable_dump_to(None)))

    def dump_to(self: S, output: TextIO) -> S:
        return self.add(request_only(lambda request: request.enable_dump_to(output)))

    def dump_to_file(self: S, path: str) -> S:
        """Append the dump to the file at `path`."""
        return self.add(request_only(lambda request: request.enable_dump_to_file(path)))

    def dump_all(self: S, output: TextIO | None = None) -> S:
        """Dump every exchange made through the client."""
        return self.add(client_only(lambda client: client.enable_dump_all(output)))
