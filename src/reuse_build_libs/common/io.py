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
"""Common shared helper functions for IO."""

from __future__ import annotations

import shutil
from pathlib import Path, PurePath


def remove_file(_fpath: Path, *, ignore_error: bool = True) -> None:
    """Use proper way to remove <_fpath>."""
    try:
        _fpath.unlink(missing_ok=True)
    except IsADirectoryError:
        return shutil.rmtree(_fpath, ignore_errors=ignore_error)
    except Exception:
        if not ignore_error:
            raise


def split_rel_path(rel_path: str | PurePath) -> tuple[str, ...]:
    """Split a relative path declared in a manifest by the host path convention.

    NOTE: on POSIX, `\\` is a valid character of a file name, not a separator.
    """
    return PurePath(rel_path).parts


def convert_rel_path_to_forward_slash(rel_path: str | PurePath) -> str:
    """Normalize <rel_path> to the forward-slash form used inside the archive.

    Only the separator of the host path convention is converted.
    """
    if not isinstance(rel_path, PurePath):
        rel_path = PurePath(rel_path)
    return rel_path.as_posix()
