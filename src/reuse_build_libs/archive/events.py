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
"""Events reported during creating an archive."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveStarted:
    """Reported before any entry is written."""

    test_binary_count: int
    non_test_binary_count: int
    linked_path_count: int
    output_file: Path


@dataclass(frozen=True)
class Archived:
    """Reported after the archive is published to <output_file>."""

    file_count: int
    output_file: Path
    elapsed: timedelta


ArchiveEvent = Union[ArchiveStarted, Archived]


def log_archive_event(event: ArchiveEvent) -> None:
    """An archive event callback that reports via logging."""
    if isinstance(event, ArchiveStarted):
        logger.info(
            f"archiving {event.test_binary_count} test binaries, "
            f"{event.non_test_binary_count} non-test binaries and "
            f"{event.linked_path_count} linked paths to {event.output_file}"
        )
    elif isinstance(event, Archived):
        logger.info(
            f"archived {event.file_count} files to {event.output_file} "
            f"in {event.elapsed.total_seconds():.2f}s"
        )
