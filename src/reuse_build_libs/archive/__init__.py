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
"""Libraries for creating the reuse-build archive.

The archive is a tarball compressed as a whole, which has the following layout:

1. the first entry is the binary list, serialized as pretty-printed JSON.
2. the second entry is the raw build metadata.
3. test binaries, at path relative to the parent of the target directory.
4. non-test binaries, at `target/<relative path>`.
5. all files under each linked path, at `target/<linked path>/...`.

All entry names use forward-slash as separator, and only regular files are stored.
"""

from .archiver import Archiver, archive_to_file
from .events import Archived, ArchiveEvent, ArchiveStarted, log_archive_event
from .format import ArchiveFormat

__all__ = [
    "ArchiveEvent",
    "ArchiveFormat",
    "ArchiveStarted",
    "Archived",
    "Archiver",
    "archive_to_file",
    "log_archive_event",
]
