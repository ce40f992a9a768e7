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
"""All-or-nothing writing of an output file.

The content is written to a staging file located in the same directory as
    the destination, and only published to the destination path when the
    write operation finished successfully.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import IO, Callable, TypeVar

from ._common import tmp_fname
from .io import remove_file

logger = logging.getLogger(__name__)

T = TypeVar("T")

STAGING_FNAME_PREFIX = ".tmp"


class OverwriteBehavior(Enum):
    ALLOW_OVERWRITE = "allow_overwrite"
    DISALLOW_OVERWRITE = "disallow_overwrite"


class AtomicWriteError(Exception):
    """Failure of the staging or publishing step itself.

    Exceptions raised by the caller's write operation are NOT wrapped
        into this exception, they are propagated as is.
    """

    def __init__(self, msg: str, error: OSError) -> None:
        super().__init__(f"{msg}: {error!r}")
        self.error = error


class AtomicFile:
    """Write a file at <path> atomically.

    Example:
        >>> AtomicFile(dst).write(lambda f: f.write(b"content"))
    """

    def __init__(
        self,
        path: str | os.PathLike,
        overwrite: OverwriteBehavior = OverwriteBehavior.ALLOW_OVERWRITE,
    ) -> None:
        self._path = Path(path)
        self._overwrite = overwrite

    @property
    def path(self) -> Path:
        return self._path

    def _staging_path(self) -> Path:
        _parent = self._path.parent
        return _parent / tmp_fname(self._path.name, prefix=STAGING_FNAME_PREFIX)

    def _publish(self, staging: Path) -> None:
        if self._overwrite is OverwriteBehavior.ALLOW_OVERWRITE:
            os.replace(staging, self._path)
        else:
            # NOTE: os.link fails with FileExistsError if the destination exists.
            os.link(staging, self._path)

    def write(self, func: Callable[[IO[bytes]], T]) -> T:
        """Call <func> with the staging file opened, and publish it on success."""
        staging = self._staging_path()
        try:
            staging_f = open(staging, "xb")
        except OSError as e:
            raise AtomicWriteError(f"failed to create staging file {staging}", e) from e

        try:
            with staging_f:
                res = func(staging_f)
                try:
                    staging_f.flush()
                    os.fsync(staging_f.fileno())
                except OSError as e:
                    raise AtomicWriteError(
                        f"failed to flush staging file {staging}", e
                    ) from e

            try:
                self._publish(staging)
            except OSError as e:
                raise AtomicWriteError(
                    f"failed to publish {staging} to {self._path}", e
                ) from e
            logger.debug(f"published {self._path}")
            return res
        finally:
            remove_file(staging)
