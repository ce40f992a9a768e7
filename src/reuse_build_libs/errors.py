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
"""Errors raised when creating the reuse-build archive."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class UnknownArchiveFormat(ValueError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"unknown archive format for {file_name=}")
        self.file_name = file_name


class PathMapperConstructError(Exception): ...


class ArchiveCreateError(Exception):
    """Base exception for all failures during creating an archive."""


class CreateBinaryListError(ArchiveCreateError):
    """Failed to serialize the binary list to the archive manifest."""


class OutputArchiveIoError(ArchiveCreateError):
    """Failed to write, finish or publish the output archive."""


class InputFileReadError(ArchiveCreateError):
    """Failed to read an input file or directory.

    <is_dir> is True when reading a directory, False when reading a file, and
        None when the type of the input could not be determined.
    """

    def __init__(self, path: Path, is_dir: Optional[bool], error: Exception) -> None:
        if is_dir is None:
            _kind = "file type of"
        elif is_dir:
            _kind = "directory"
        else:
            _kind = "file"
        super().__init__(f"failed to read {_kind} {path}: {error!r}")
        self.path = path
        self.is_dir = is_dir
        self.error = error


class DirEntryReadError(ArchiveCreateError):
    """Failed to read an entry while listing a directory."""

    def __init__(self, path: Path, error: Exception) -> None:
        super().__init__(f"failed to read entry of directory {path}: {error!r}")
        self.path = path
        self.error = error


class ReporterIoError(ArchiveCreateError):
    """The archive event callback failed.

    The archive content might still be valid when this error is raised.
    """
