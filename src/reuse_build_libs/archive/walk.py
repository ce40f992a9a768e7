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
"""Iterative traversal of a directory tree for archiving."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Tuple

from reuse_build_libs.errors import DirEntryReadError, InputFileReadError

# (path, is_dir, is_symlink)
_StackEntry = Tuple[Path, bool, bool]


def iter_dir_files(
    src_path: Path, rel_path: str, *, follow_symlinks: bool
) -> Iterator[tuple[Path, str]]:
    """Yield (src, dest) for every file under <src_path>.

    <dest> is the path of the file relative to <src_path>, prefixed with <rel_path>,
        in forward-slash form. Directories themselves are not yielded.

    The traversal uses an explicit stack instead of recursion, so the depth
        of the tree is not limited by the call stack. Children of a directory
        are visited in the name order, the output is reproducible.

    When <follow_symlinks> is True, symlinks to directory are traversed into,
        otherwise symlinks are yielded as leaves.
    """
    stack: List[_StackEntry] = [(src_path, True, False)]
    rel_path = rel_path.rstrip("/")

    while stack:
        src, is_dir, is_symlink = stack.pop()
        # NOTE: for symlink to directory, is_dir is False but src.is_dir() is True.
        if is_dir or (is_symlink and follow_symlinks and src.is_dir()):
            stack.extend(sorted(_list_dir(src), reverse=True))
            continue

        _dest = src.relative_to(src_path).as_posix()
        yield src, f"{rel_path}/{_dest}" if rel_path else _dest


def _list_dir(src: Path) -> List[_StackEntry]:
    try:
        _it = os.scandir(src)
    except OSError as e:
        raise InputFileReadError(src, is_dir=True, error=e) from e

    res: List[_StackEntry] = []
    with _it:
        while True:
            try:
                entry = next(_it)
            except StopIteration:
                break
            except OSError as e:
                raise DirEntryReadError(src, error=e) from e

            _entry_path = src / entry.name
            try:
                _is_dir = entry.is_dir(follow_symlinks=False)
                _is_symlink = entry.is_symlink()
            except OSError as e:
                raise InputFileReadError(_entry_path, is_dir=None, error=e) from e
            res.append((_entry_path, _is_dir, _is_symlink))
    return res
