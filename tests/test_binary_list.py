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
"""Tests for the binary list schema."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from reuse_build_libs.binary_list import BinaryList, BuildMeta, NonTestBinary

BINARY_LIST_JSON = """
{
  "test-binaries": [
    {
      "binary-id": "foo::mytest",
      "binary-name": "mytest",
      "kind": "test",
      "path": "/workspace/build/debug/mytest"
    }
  ],
  "build-meta": {
    "target-directory": "/workspace/build",
    "base-output-directories": ["debug"],
    "non-test-binaries": {
      "foo": [{"name": "helper", "kind": "bin", "path": "debug/helper"}]
    },
    "linked-paths": ["debug/build/foo/out"]
  }
}
"""


class TestBinaryListParsing:
    def test_from_json(self):
        """Test parsing the binary list from JSON with kebab-case keys."""
        binary_list = BinaryList.from_json(BINARY_LIST_JSON)

        assert len(binary_list.test_binaries) == 1
        assert binary_list.test_binaries[0].binary_id == "foo::mytest"
        assert binary_list.test_binaries[0].path == Path(
            "/workspace/build/debug/mytest"
        )
        assert binary_list.build_meta.target_directory == Path("/workspace/build")
        assert binary_list.build_meta.linked_paths == ["debug/build/foo/out"]

    def test_missing_build_meta(self):
        """Test build-meta is required."""
        with pytest.raises(ValidationError):
            BinaryList.from_json('{"test-binaries": []}')

    def test_roundtrip_pretty_json(self):
        """Test the pretty-printed JSON is indented and can be parsed back."""
        binary_list = BinaryList.from_json(BINARY_LIST_JSON)

        exported = binary_list.to_json_pretty()

        assert exported.startswith('{\n  "test-binaries"')
        assert "build_meta" not in exported
        assert BinaryList.from_json(exported) == binary_list
        assert json.loads(exported) == json.loads(BINARY_LIST_JSON)


class TestBuildMeta:
    def test_iter_non_test_binaries_flatten(self):
        """Test the grouping of non-test binaries is flattened."""
        build_meta = BuildMeta(
            target_directory=Path("/workspace/build"),
            non_test_binaries={
                "foo": [
                    NonTestBinary(name="a", path="debug/a"),
                    NonTestBinary(name="b", path="debug/b"),
                ],
                "bar": [NonTestBinary(name="c", path="debug/c")],
                "empty": [],
            },
        )

        assert [_bin.name for _bin in build_meta.iter_non_test_binaries()] == [
            "a",
            "b",
            "c",
        ]
        assert build_meta.non_test_binary_count == 3

    def test_defaults(self):
        build_meta = BuildMeta(target_directory=Path("/workspace/build"))
        assert build_meta.non_test_binary_count == 0
        assert list(build_meta.iter_non_test_binaries()) == []
        assert build_meta.linked_paths == []
