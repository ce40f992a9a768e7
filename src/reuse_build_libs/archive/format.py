# Copyright 2025 TIER IV, INC. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Supported archive formats and their encoders."""

from __future__ import annotations

import logging
import os
import tarfile
from enum import Enum
from pathlib import PurePath
from typing import IO, Callable, Dict, Tuple

import zstandard

from reuse_build_libs.errors import UnknownArchiveFormat

logger = logging.getLogger(__name__)


class ArchiveEncoder:
    """Interface of the container writer of one archive format."""

    tar: tarfile.TarFile

    def finish(self) -> IO[bytes]:
        """Finish the archive, and return the underlying writer."""
        raise NotImplementedError

    def abort(self) -> None:
        """Release the encoder after a failure, without finishing the archive."""
        raise NotImplementedError


class TarZstEncoder(ArchiveEncoder):
    """A GNU tar stream, compressed by zstd with frame checksum enabled.

    Symlinks are always dereferenced, the archive only contains regular files.
    """

    def __init__(self, writer: IO[bytes], compression_level: int) -> None:
        self._writer = writer
        cctx = zstandard.ZstdCompressor(
            level=compression_level,
            write_checksum=True,
            threads=os.cpu_count() or 1,
        )
        self._zstd_writer = cctx.stream_writer(writer, closefd=False)
        self.tar = tarfile.open(
            fileobj=self._zstd_writer,  # type: ignore
            mode="w|",
            format=tarfile.GNU_FORMAT,
            dereference=True,
        )

    def finish(self) -> IO[bytes]:
        self.tar.close()
        # NOTE: closing the zstd writer ends the frame and writes the checksum,
        #       the underlying writer is kept open.
        self._zstd_writer.close()
        self._writer.flush()
        return self._writer

    def abort(self) -> None:
        # NOTE: the archive is discarded, errors from closing are not actionable.
        for _closer in (self.tar.close, self._zstd_writer.close):
            try:
                _closer()
            except Exception as e:
                logger.debug(f"ignore error when aborting encoder: {e!r}")


class ArchiveFormat(Enum):
    TAR_ZST = "tar-zst"

    @classmethod
    def supported_formats(cls) -> Tuple[Tuple[str, ArchiveFormat], ...]:
        """The list of supported formats as (file extension, format) pairs."""
        return SUPPORTED_FORMATS

    @classmethod
    def autodetect(cls, archive_file: str | os.PathLike) -> ArchiveFormat:
        """Detect the archive format from the file name of <archive_file>.

        Raises:
            UnknownArchiveFormat if the file name matches none of the supported formats.
        """
        file_name = PurePath(archive_file).name
        for _suffix, _format in SUPPORTED_FORMATS:
            if file_name.endswith(_suffix):
                return _format
        raise UnknownArchiveFormat(file_name)

    def open_encoder(
        self, writer: IO[bytes], compression_level: int
    ) -> ArchiveEncoder:
        return _ENCODERS[self](writer, compression_level)


SUPPORTED_FORMATS: Tuple[Tuple[str, ArchiveFormat], ...] = (
    (".tar.zst", ArchiveFormat.TAR_ZST),
)

_ENCODERS: Dict[ArchiveFormat, Callable[[IO[bytes], int], ArchiveEncoder]] = {
    ArchiveFormat.TAR_ZST: TarZstEncoder,
}
