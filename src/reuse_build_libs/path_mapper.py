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
"""Remap paths when the build tree has been relocated.

The binary list records the target directory where the build happened, when
    the target directory is copied or moved elsewhere, input paths resolved
    through the recorded target directory must be redirected to the new one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from reuse_build_libs.errors import PathMapperConstructError

logger = logging.getLogger(__name__)


class PathMapper:
    def __init__(
        self,
        orig_target_dir: Optional[Path] = None,
        new_target_dir: Optional[Path] = None,
    ) -> None:
        if (orig_target_dir is None) != (new_target_dir is None):
            raise PathMapperConstructError(
                "orig_target_dir and new_target_dir must be specified together"
            )
        if new_target_dir is not None and not new_target_dir.is_dir():
            raise PathMapperConstructError(
                f"new target dir {new_target_dir} is not a directory"
            )
        self._orig_target_dir = orig_target_dir
        self._new_target_dir = new_target_dir

    @classmethod
    def noop(cls) -> PathMapper:
        return cls()

    @property
    def new_target_dir(self) -> Optional[Path]:
        return self._new_target_dir

    def map_binary(self, path: Path) -> Path:
        """Redirect <path> under the original target dir to the new target dir.

        Paths outside of the original target dir are returned as is.
        """
        if self._orig_target_dir is None or self._new_target_dir is None:
            return path

        try:
            _rel_path = path.relative_to(self._orig_target_dir)
        except ValueError:
            return path
        _mapped = self._new_target_dir / _rel_path
        logger.debug(f"remap {path} to {_mapped}")
        return _mapped

    __call__ = map_binary
