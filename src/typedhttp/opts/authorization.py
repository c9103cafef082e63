# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authorization header options."""

from __future__ import annotations

import base64

from .base import S, Option, OptionSet, request_only


def _authorization(value: str) -> Option:
    return request_only(lambda request: request.set_header("Authorization", value))


class AuthOptions(OptionSet):
    __slots__ = ()

    def auth(self: S, scheme: str, token: str) -> S:
        return self.add(_authorization(f"{scheme} {token}"))

    def bearer(self: S, token: str) -> S:
        return self.add(_authorization(f"Bearer {token}"))

    def basic(self: S, username: str, password: str) -> S:
        credentials = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        return self.add(_authorization(f"Basic {credentials}"))
