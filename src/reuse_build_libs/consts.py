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
"""Consts related to the reuse-build archive."""

# the first entry of the archive, the serialized binary list
BINARIES_METADATA_FILE_NAME = "manifest.json"
# the second entry of the archive, the raw build-system metadata
BUILD_METADATA_FILE_NAME = "metadata.txt"

# non-test binaries and linked paths are placed under this folder in the archive
TARGET_DIR_ARCNAME = "target"

# permission bits of the entries synthesized from memory, rw-rw-r--
MANIFEST_ENTRY_PERMISSION = 0o664

DEFAULT_ZSTD_LEVEL = 3
