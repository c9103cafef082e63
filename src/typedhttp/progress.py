# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Upload progress instrumentation.

The transport reports cumulative progress while it reads the request body.
That stream of ticks can stop short of 100% (the final chunk may coincide
with the response arriving), so ProgressInstrumentor wraps the caller's
callback and, once the response completes, synthesizes exactly one terminal
tick when the transport never reported completion itself.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum

import httpx
from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TransferSpeedColumn,
)

from .context import CallContext

UPLOAD_CHUNK_SIZE = 32 * 1024


@dataclass(frozen=True)
class UploadInfo:
    """Cumulative upload progress; file_size is 0 when the total is unknown."""

    file_size: int
    uploaded_size: int


UploadCallback = Callable[[UploadInfo], None]


class ProgressState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZED = "finalized"


class ProgressInstrumentor:
    """Completion-guarantee wrapper around a caller's upload callback.

    Ticks may arrive from the thread driving the upload while finalize() runs
    on the thread that received the response; the shared state is only
    touched under the lock and the caller's callback always runs outside it.
    """

    def __init__(self, callback: UploadCallback) -> None:
        self._callback = callback
        self._lock = threading.Lock()
        self._last: UploadInfo | None = None
        self._completed = False
        self._finalized = False

    @property
    def state(self) -> ProgressState:
        with self._lock:
            if self._finalized:
                return ProgressState.FINALIZED
            if self._last is not None:
                return ProgressState.STREAMING
            return ProgressState.IDLE

    def tick(self, info: UploadInfo) -> None:
        with self._lock:
            if self._finalized:
                return
            self._last = info
            if info.file_size > 0 and info.uploaded_size >= info.file_size:
                self._completed = True
        self._callback(info)

    def finalize(self) -> None:
        """Deliver the synthetic terminal tick if the transport stopped short."""
        with self._lock:
            if self._finalized:
                return
            self._finalized = True
            last = self._last
            completed = self._completed
        if last is None or completed:
            return
        total = last.file_size or last.uploaded_size
        uploaded = total if total > 0 else last.uploaded_size
        self._callback(replace(last, file_size=total, uploaded_size=uploaded))


class ProgressByteStream(httpx.SyncByteStream):
    """Request body stream that reports how many bytes the transport has read."""

    def __init__(
        self,
        stream: Iterable[bytes],
        total: int,
        on_tick: UploadCallback,
        *,
        min_interval: float = 0.0,
        context: CallContext | None = None,
    ) -> None:
        self._stream = stream
        self._total = total
        self._on_tick = on_tick
        self._min_interval = min_interval
        self._context = context

    def __iter__(self) -> Iterator[bytes]:
        uploaded = 0
        last_emit: float | None = None
        for chunk in self._stream:
            for offset in range(0, len(chunk), UPLOAD_CHUNK_SIZE):
                if self._context is not None:
                    self._context.check()
                piece = chunk[offset : offset + UPLOAD_CHUNK_SIZE]
                yield piece
                uploaded += len(piece)
                now = time.monotonic()
                if last_emit is None or now - last_emit >= self._min_interval:
                    last_emit = now
                    self._on_tick(UploadInfo(file_size=self._total, uploaded_size=uploaded))

    def close(self) -> None:
        close = getattr(self._stream, "close", None)
        if callable(close):
            close()


class ProgressBar:
    """Terminal upload progress renderer usable as an UploadCallback."""

    def __init__(self, console: Console | None = None, description: str = "upload") -> None:
        self._lock = threading.Lock()
        self._description = description
        self._task: TaskID | None = None
        self._done = False
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=20),
            TaskProgressColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
        )

    @property
    def finished(self) -> bool:
        return self._done

    def __call__(self, info: UploadInfo) -> None:
        with self._lock:
            if self._done:
                return
            total = info.file_size if info.file_size > 0 else None
            if self._task is None:
                self.progress.start()
                self._task = self.progress.add_task(self._description, total=total)
            self.progress.update(self._task, total=total, completed=info.uploaded_size)
            if total is not None and info.uploaded_size >= total:
                self._done = True
                self.progress.stop()


__all__ = [
    "ProgressBar",
    "ProgressByteStream",
    "ProgressInstrumentor",
    "ProgressState",
    "UPLOAD_CHUNK_SIZE",
    "UploadCallback",
    "UploadInfo",
]
