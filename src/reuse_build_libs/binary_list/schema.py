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
"""The binary list, describing what a build produced and what to archive.

The binary list is generated by the build discovery, and is stored as
    the first entry of the archive, so that the extractor can inspect
    it before touching any binaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List

from pydantic import Field
from typing_extensions import Self

from reuse_build_libs.common import AliasEnabledModel

JSON_INDENT = 2


class TestBinary(AliasEnabledModel):
    """A test binary discovered by the build, with an absolute path."""

    __test__ = False  # not a pytest test class

    binary_id: str = Field(alias="binary-id")
    binary_name: str = Field(alias="binary-name")
    kind: str = "test"
    path: Path


class NonTestBinary(AliasEnabledModel):
    """A non-test build output needed at test-run time.

    <path> is relative to the target directory.
    """

    name: str
    kind: str = "bin"
    path: str


class BuildMeta(AliasEnabledModel):
    target_directory: Path = Field(alias="target-directory")
    base_output_directories: List[str] = Field(
        default_factory=list, alias="base-output-directories"
    )
    non_test_binaries: Dict[str, List[NonTestBinary]] = Field(
        default_factory=dict, alias="non-test-binaries"
    )
    linked_paths: List[str] = Field(default_factory=list, alias="linked-paths")

    def iter_non_test_binaries(self) -> Iterator[NonTestBinary]:
        """Flatten the non-test binaries, the grouping key is dropped."""
        for _binaries in self.non_test_binaries.values():
            yield from _binaries

    @property
    def non_test_binary_count(self) -> int:
        return sum(len(_binaries) for _binaries in self.non_test_binaries.values())


class BinaryList(AliasEnabledModel):
    test_binaries: List[TestBinary] = Field(
        default_factory=list, alias="test-binaries"
    )
    build_meta: BuildMeta = Field(alias="build-meta")

    @classmethod
    def from_json(cls, _input: str | bytes) -> Self:
        return cls.model_validate_json(_input)

    def to_json_pretty(self) -> str:
        return self.model_dump_json(by_alias=True, indent=JSON_INDENT)
