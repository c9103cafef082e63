# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Multipart upload and upload progress options."""

from __future__ import annotations

import io
from collections.abc import Mapping
from typing import IO

from ..progress import ProgressBar, UploadCallback
from ..request import FileUpload, detect_reader_size
from .base import S, OptionSet, request_only


class UploadOptions(OptionSet):
    __slots__ = ()

    def file(self: S, param_name: str, file_path: str) -> S:
        return self.add(request_only(lambda request: request.set_file(param_name, file_path)))

    def files(self: S, files: Mapping[str, str]) -> S:
        files = dict(files)
        return self.add(request_only(lambda request: request.set_files(files)))

    def file_bytes(self: S, param_name: str, file_name: str, content: bytes) -> S:
        """Upload in-memory bytes as a file part."""
        size = len(content)
        return self.add(
            request_only(
                lambda request: request.set_file_upload(
                    FileUpload(
                        param_name=param_name,
                        file_name=file_name,
                        get_content=lambda: io.BytesIO(content),
                        file_size=size,
                        close_after=True,
                    )
                )
            )
        )

    def file_reader(self: S, param_name: str, file_name: str, reader: IO[bytes]) -> S:
        """
        Upload from an open reader.

        The size is detected once, when the option is applied, from a `size`
        attribute or method, `len()`, or by seeking to the end of a seekable
        reader. Unknown sizes report 0 as the upload total. The reader is
        not closed after the upload.
        """

        def apply(request):
            request.set_file_upload(
                FileUpload(
                    param_name=param_name,
                    file_name=file_name,
                    get_content=lambda: reader,
                    file_size=detect_reader_size(reader),
                )
            )

        return self.add(request_only(apply))

    def upload_callback(self: S, callback: UploadCallback | None) -> S:
        """Report cumulative upload progress, with a guaranteed final tick."""
        if callback is None:
            return self
        return self.add(request_only(lambda request: request.set_upload_callback(callback)))

    def upload_callback_with_interval(self: S, callback: UploadCallback | None, min_interval: float) -> S:
        if callback is None:
            return self
        return self.add(request_only(lambda request: request.set_upload_callback(callback, min_interval)))

    def upload_progress(self: S) -> S:
        """Render a terminal progress bar while uploading."""
        return self.add(request_only(lambda request: request.set_upload_callback(ProgressBar())))
