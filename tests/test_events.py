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

import logging
from datetime import timedelta
from pathlib import Path

from reuse_build_libs.archive import Archived, ArchiveStarted, log_archive_event


def test_log_archive_event(caplog):
    caplog.set_level(logging.INFO, logger="reuse_build_libs")

    log_archive_event(
        ArchiveStarted(
            test_binary_count=2,
            non_test_binary_count=1,
            linked_path_count=3,
            output_file=Path("archive.tar.zst"),
        )
    )
    log_archive_event(
        Archived(
            file_count=9,
            output_file=Path("archive.tar.zst"),
            elapsed=timedelta(seconds=1.5),
        )
    )

    assert len(caplog.records) == 2
    assert "2 test binaries, 1 non-test binaries and 3 linked paths" in caplog.text
    assert "archived 9 files to archive.tar.zst in 1.50s" in caplog.text
