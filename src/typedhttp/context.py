# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-call cancellation and deadline context.

A CallContext carries an optional monotonic deadline and a cancellation flag.
Children inherit their parent's cancellation and the earlier of the two
deadlines. A ContextVar-backed ambient context lets callers scope a deadline
over a block of calls without threading it through every signature.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from .errors import DeadlineExceededError, RequestCancelledError


@dataclass(frozen=True)
class CallContext:
    deadline: float | None = None
    parent: CallContext | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self.parent is not None and self.parent.cancelled

    def cancel(self) -> None:
        self._cancelled.set()

    def effective_deadline(self) -> float | None:
        deadlines = []
        node: CallContext | None = self
        while node is not None:
            if node.deadline is not None:
                deadlines.append(node.deadline)
            node = node.parent
        return min(deadlines) if deadlines else None

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        deadline = self.effective_deadline()
        if deadline is None:
            return None
        return deadline - time.monotonic()

    def check(self) -> None:
        """Raise if the context is cancelled or its deadline has passed."""
        if self.cancelled:
            raise RequestCancelledError("context cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError("context deadline exceeded")


def background() -> CallContext:
    return CallContext()


def with_timeout(seconds: float, parent: CallContext | None = None) -> CallContext:
    """Return a child context whose deadline is `seconds` from now."""
    return CallContext(deadline=time.monotonic() + seconds, parent=parent)


def with_cancel(parent: CallContext | None = None) -> CallContext:
    return CallContext(parent=parent)


_current_call_context: ContextVar[CallContext | None] = ContextVar("typedhttp_call_context", default=None)


def get_call_context() -> CallContext | None:
    """Return the ambient call context, if one is installed."""
    return _current_call_context.get()


@contextmanager
def call_context(context: CallContext | None = None, *, timeout: float | None = None) -> Iterator[CallContext]:
    """
    Install an ambient CallContext for the duration of the block.

    With `timeout`, the installed context is a child of `context` (or of the
    current ambient context) expiring after that many seconds.
    """
    base = context if context is not None else get_call_context()
    if timeout is not None:
        installed = with_timeout(timeout, parent=base)
    else:
        installed = base if base is not None else background()
    token = _current_call_context.set(installed)
    try:
        yield installed
    finally:
        _current_call_context.reset(token)


__all__ = [
    "CallContext",
    "background",
    "call_context",
    "get_call_context",
    "with_cancel",
    "with_timeout",
]
