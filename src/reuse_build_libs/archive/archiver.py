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
"""Archive test binaries along with the build metadata.

The output archive is generated in the following order:
1. the binary list(manifest.json) and the build metadata(metadata.txt), which
    are generated from memory. Extractor relies on these two files being
    the first two entries, to report or to validate before extracting binaries.
2. test binaries.
3. non-test binaries.
4. files under the linked paths.

All entries generated from memory have the same fixed permission bit and the
    same mtime(the time when the archiver is created).
"""

from __future__ import annotations

import io
import logging
import os
import tarfile
import time
from datetime import timedelta
from pathlib import Path
from typing import IO, Callable, Optional

from reuse_build_libs.binary_list import BinaryList
from reuse_build_libs.common import AtomicFile, AtomicWriteError, OverwriteBehavior
from reuse_build_libs.common.io import (
    convert_rel_path_to_forward_slash,
    split_rel_path,
)
from reuse_build_libs.consts import (
    BINARIES_METADATA_FILE_NAME,
    BUILD_METADATA_FILE_NAME,
    DEFAULT_ZSTD_LEVEL,
    MANIFEST_ENTRY_PERMISSION,
    TARGET_DIR_ARCNAME,
)
from reuse_build_libs.errors import (
    CreateBinaryListError,
    InputFileReadError,
    OutputArchiveIoError,
    ReporterIoError,
)

from .events import Archived, ArchiveEvent, ArchiveStarted
from .format import ArchiveEncoder, ArchiveFormat
from .walk import iter_dir_files

logger = logging.getLogger(__name__)

PathMapperFunc = Callable[[Path], Path]
ArchiveEventCallback = Callable[[ArchiveEvent], None]


def _report(callback: ArchiveEventCallback, event: ArchiveEvent) -> None:
    try:
        callback(event)
    except Exception as e:
        raise ReporterIoError(f"failed to report {event}: {e!r}") from e


def archive_to_file(
    binary_list: BinaryList,
    build_metadata: str,
    path_mapper: PathMapperFunc,
    archive_format: ArchiveFormat,
    output_file: Path,
    callback: ArchiveEventCallback,
    *,
    zstd_level: int = DEFAULT_ZSTD_LEVEL,
) -> None:
    """Archive test binaries along with metadata to <output_file>.

    The <output_file> is written atomically, it is only created or replaced
        when the whole archive is generated successfully.

    Raises:
        ArchiveCreateError and its subclasses.
    """
    output_file = Path(output_file)
    atomic_f = AtomicFile(output_file, OverwriteBehavior.ALLOW_OVERWRITE)
    test_binary_count = len(binary_list.test_binaries)
    non_test_binary_count = binary_list.build_meta.non_test_binary_count
    linked_path_count = len(binary_list.build_meta.linked_paths)
    start_time = time.monotonic()

    def _write(_f: IO[bytes]) -> int:
        _report(
            callback,
            ArchiveStarted(
                test_binary_count=test_binary_count,
                non_test_binary_count=non_test_binary_count,
                linked_path_count=linked_path_count,
                output_file=output_file,
            ),
        )
        archiver = Archiver(
            binary_list,
            build_metadata,
            path_mapper,
            archive_format,
            _f,
            compression_level=zstd_level,
        )
        _, _file_count = archiver.archive()
        return _file_count

    try:
        file_count = atomic_f.write(_write)
    except AtomicWriteError as e:
        raise OutputArchiveIoError(f"failed to write {output_file}: {e!r}") from e

    _report(
        callback,
        Archived(
            file_count=file_count,
            output_file=output_file,
            elapsed=timedelta(seconds=time.monotonic() - start_time),
        ),
    )


class Archiver:
    """Write the binaries and metadata described by a binary list into <writer>.

    An Archiver instance can only be used once, the underlying writer will be
        returned by the `archive` method after the archive is finished.
    """

    def __init__(
        self,
        binary_list: BinaryList,
        build_metadata: str,
        path_mapper: PathMapperFunc,
        archive_format: ArchiveFormat,
        writer: IO[bytes],
        *,
        compression_level: int = DEFAULT_ZSTD_LEVEL,
    ) -> None:
        self._binary_list = binary_list
        self._build_metadata = build_metadata
        self._path_mapper = path_mapper

        logger.info(
            f"create archive with {archive_format=}, {compression_level=}, "
            f"threads={os.cpu_count()}"
        )
        try:
            self._encoder: ArchiveEncoder = archive_format.open_encoder(
                writer, compression_level
            )
        except Exception as e:
            raise OutputArchiveIoError(f"failed to setup encoder: {e!r}") from e

        self._unix_timestamp = int(time.time())
        self._file_count = 0

    def archive(self) -> tuple[IO[bytes], int]:
        """Write all the entries, finish the archive.

        If any step fails, the encoder is aborted and the archive is left unfinished.

        Returns:
            A tuple of the underlying writer and the number of archived entries.
        """
        try:
            self._append_all()
            try:
                writer = self._encoder.finish()
            except Exception as e:
                raise OutputArchiveIoError(f"failed to finish archive: {e!r}") from e
        except BaseException:
            self._encoder.abort()
            raise
        return writer, self._file_count

    def _append_all(self) -> None:
        # NOTE: add the binary list first so that while unarchiving, reports are instant.
        try:
            binaries_metadata = self._binary_list.to_json_pretty()
        except Exception as e:
            raise CreateBinaryListError(f"failed to serialize binary list: {e!r}") from e

        self._append_from_memory(BINARIES_METADATA_FILE_NAME, binaries_metadata)
        self._append_from_memory(BUILD_METADATA_FILE_NAME, self._build_metadata)

        build_meta = self._binary_list.build_meta
        target_dir = build_meta.target_directory
        target_dir_parent = target_dir.parent
        if target_dir_parent == target_dir:
            raise AssertionError(f"target dir {target_dir} cannot be the root")

        for binary in self._binary_list.test_binaries:
            try:
                _rel_path = binary.path.relative_to(target_dir_parent)
            except ValueError:
                raise AssertionError(
                    f"binary {binary.path} must be within target directory {target_dir}"
                ) from None
            self._append_path(
                binary.path, convert_rel_path_to_forward_slash(_rel_path)
            )

        for non_test_binary in build_meta.iter_non_test_binaries():
            _src_path = self._resolve_src_path(target_dir, non_test_binary.path)
            self._append_path(_src_path, self._target_arcname(non_test_binary.path))

        # linked paths are relative to the target directory, e.g., debug/build/foo/out.
        for linked_path in build_meta.linked_paths:
            _src_path = self._resolve_src_path(target_dir, linked_path)
            self._append_dir_all(_src_path, self._target_arcname(linked_path))

    # ------ helper methods ------ #

    def _resolve_src_path(self, target_dir: Path, rel_path: str) -> Path:
        return self._path_mapper(target_dir.joinpath(*split_rel_path(rel_path)))

    @staticmethod
    def _target_arcname(rel_path: str) -> str:
        return f"{TARGET_DIR_ARCNAME}/{convert_rel_path_to_forward_slash(rel_path)}"

    def _addfile(
        self, tarinfo: tarfile.TarInfo, fileobj: Optional[IO[bytes]] = None
    ) -> None:
        try:
            self._encoder.tar.addfile(tarinfo, fileobj)
        except InputFileReadError:
            raise
        except Exception as e:
            raise OutputArchiveIoError(f"failed to add {tarinfo.name}: {e!r}") from e

    def _append_from_memory(self, name: str, contents: str) -> None:
        _contents = contents.encode("utf-8")
        _tarinfo = tarfile.TarInfo(name)
        _tarinfo.size = len(_contents)
        _tarinfo.mtime = self._unix_timestamp
        _tarinfo.mode = MANIFEST_ENTRY_PERMISSION

        self._addfile(_tarinfo, io.BytesIO(_contents))
        self._file_count += 1

    def _append_dir_all(self, src_path: Path, rel_path: str) -> None:
        # NOTE: no need to append the directory entries, only files are needed.
        for _src, _dest in iter_dir_files(src_path, rel_path, follow_symlinks=True):
            self._append_path(_src, _dest)

    def _append_path(self, src: Path, dest: str) -> None:
        logger.debug(f"add {src} as {dest}")
        try:
            _tarinfo = self._encoder.tar.gettarinfo(src, arcname=dest)
        except OSError as e:
            raise InputFileReadError(src, is_dir=False, error=e) from e
        if _tarinfo is None:
            raise InputFileReadError(
                src,
                is_dir=None,
                error=OSError(f"{src} is not a regular file, directory or symlink"),
            )

        if not _tarinfo.isreg():
            self._addfile(_tarinfo)
        else:
            try:
                _src_f = open(src, "rb")
            except OSError as e:
                raise InputFileReadError(src, is_dir=False, error=e) from e
            with _src_f:
                self._addfile(_tarinfo, _SourceReader(src, _src_f, _tarinfo.size))  # type: ignore
        self._file_count += 1


class _SourceReader:
    """Read an input file for tarfile, reporting failures as InputFileReadError.

    tarfile raises the same OSError for failed reads from the input and failed
        writes to the output, this wrapper tells them apart. A file that shrinks
        after its size was recorded is also an input failure.
    """

    def __init__(self, path: Path, fileobj: IO[bytes], size: int) -> None:
        self._path = path
        self._fileobj = fileobj
        self._remaining = size

    def read(self, size: int = -1) -> bytes:
        try:
            data = self._fileobj.read(size)
        except OSError as e:
            raise InputFileReadError(self._path, is_dir=False, error=e) from e

        _expected = self._remaining if size < 0 else min(size, self._remaining)
        if len(data) < _expected:
            raise InputFileReadError(
                self._path,
                is_dir=False,
                error=OSError(
                    f"unexpected end of data, expect {_expected} bytes, got {len(data)}"
                ),
            )
        self._remaining -= len(data)
        return data
