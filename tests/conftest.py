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
"""Shared test fixtures for reuse-build-libs tests."""

from __future__ import annotations

import os
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Tuple

import pytest
import zstandard

from reuse_build_libs.binary_list import (
    BinaryList,
    BuildMeta,
    NonTestBinary,
    TestBinary,
)

ArchiveEntries = List[Tuple[tarfile.TarInfo, bytes]]


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@dataclass
class BuildTree:
    """A sample build tree.

    <root>/
        build/                      <- target directory
            debug/mytest            <- test binary
            debug/other-test        <- test binary
            debug/helper            <- non-test binary
            release/tool            <- non-test binary
            debug/build/foo/out/    <- linked path
                a.txt
                sub/b.txt
                link_to_file -> a.txt
                link_to_dir -> <root>/external
        external/
            c.txt
            d/e.txt
    """

    root: Path
    target_dir: Path
    linked_path: str = "debug/build/foo/out"

    @property
    def linked_dir(self) -> Path:
        return self.target_dir / self.linked_path

    def binary_list(self) -> BinaryList:
        return BinaryList(
            test_binaries=[
                TestBinary(
                    binary_id="foo::mytest",
                    binary_name="mytest",
                    path=self.target_dir / "debug" / "mytest",
                ),
                TestBinary(
                    binary_id="foo::other-test",
                    binary_name="other-test",
                    path=self.target_dir / "debug" / "other-test",
                ),
            ],
            build_meta=BuildMeta(
                target_directory=self.target_dir,
                base_output_directories=["debug"],
                non_test_binaries={
                    "foo": [NonTestBinary(name="helper", path="debug/helper")],
                    "bar": [NonTestBinary(name="tool", path="release/tool")],
                },
                linked_paths=[self.linked_path],
            ),
        )


@pytest.fixture
def build_tree(tmp_path: Path) -> BuildTree:
    root = tmp_path / "workspace"
    target_dir = root / "build"
    tree = BuildTree(root=root, target_dir=target_dir)

    (target_dir / "debug").mkdir(parents=True)
    (target_dir / "release").mkdir(parents=True)
    (target_dir / "debug" / "mytest").write_bytes(b"mytest binary")
    (target_dir / "debug" / "other-test").write_bytes(b"other test binary")
    (target_dir / "debug" / "helper").write_bytes(b"helper binary")
    (target_dir / "release" / "tool").write_bytes(b"tool binary")
    os.chmod(target_dir / "debug" / "mytest", 0o755)

    linked_dir = tree.linked_dir
    (linked_dir / "sub").mkdir(parents=True)
    (linked_dir / "a.txt").write_bytes(b"a")
    (linked_dir / "sub" / "b.txt").write_bytes(b"b")
    (linked_dir / "link_to_file").symlink_to("a.txt")

    external = root / "external"
    (external / "d").mkdir(parents=True)
    (external / "c.txt").write_bytes(b"c")
    (external / "d" / "e.txt").write_bytes(b"e")
    (linked_dir / "link_to_dir").symlink_to(external, target_is_directory=True)
    return tree


def _read_archive(archive: Path) -> ArchiveEntries:
    res: ArchiveEntries = []
    with open(archive, "rb") as f, zstandard.ZstdDecompressor().stream_reader(
        f
    ) as reader, tarfile.open(fileobj=reader, mode="r|") as tar:
        for member in tar:
            data = b""
            if member.isreg():
                _member_f = tar.extractfile(member)
                assert _member_f is not None
                data = _member_f.read()
            res.append((member, data))
    return res


@pytest.fixture
def read_archive() -> Callable[[Path], ArchiveEntries]:
    """Decompress and list all the entries of a .tar.zst archive."""
    return _read_archive
