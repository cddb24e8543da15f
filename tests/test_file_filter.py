"""Tests for tree-entry filtering and the file cap."""

import pytest

from readme_generator.domain.entities import FileCandidate
from readme_generator.services.file_filter import (
    is_excluded,
    is_priority_manifest,
    select_candidates,
    should_keep,
)


def _blob(path: str, size: int = 100) -> FileCandidate:
    return FileCandidate(path=path, type="blob", size=size)


class TestExclusions:

    @pytest.mark.parametrize(
        "path",
        [
            "assets/logo.png",
            "docs/Screenshot.JPG",
            "fonts/Inter.woff2",
            "yarn.lock",
            "frontend/package-lock.json",
            "Cargo.lock",
            "poetry.lock",
            ".DS_Store",
            "src/.ds_store",
            "dist/index.js",
            "packages/ui/dist/index.js",
            "build/output.txt",
            "node_modules/left-pad/index.js",
            "web/node_modules/react/package.json",
        ],
    )
    def test_excluded(self, path):
        assert is_excluded(path)

    @pytest.mark.parametrize(
        "path",
        ["src/main.py", "builder/main.go", "distribution.md", "docs/build-guide.md"],
    )
    def test_not_excluded(self, path):
        assert not is_excluded(path)

    def test_excluded_manifest_stays_excluded(self):
        node = _blob("node_modules/pkg/package.json", 50)
        assert not should_keep(node)


class TestPriorityManifests:

    @pytest.mark.parametrize(
        "path",
        ["package.json", "Cargo.toml", "backend/requirements.txt", "go.mod", "README.md", "docs/ReadMe.MD"],
    )
    def test_priority(self, path):
        assert is_priority_manifest(path)

    def test_large_manifest_kept(self):
        assert should_keep(_blob("package.json", 50_000))

    def test_large_regular_file_dropped(self):
        assert not should_keep(_blob("src/big.py", 25_000))

    def test_size_limit_is_exclusive(self):
        assert should_keep(_blob("src/a.py", 19_999))
        assert not should_keep(_blob("src/a.py", 20_000))

    def test_trees_dropped(self):
        assert not should_keep(FileCandidate(path="src", type="tree"))


class TestSelectCandidates:

    def test_caps_at_twenty_in_tree_order(self):
        nodes = [_blob(f"src/file_{i:02d}.py") for i in range(25)]

        selected = select_candidates(nodes)

        assert [n.path for n in selected] == [f"src/file_{i:02d}.py" for i in range(20)]

    def test_filtering_happens_before_cap(self):
        nodes = [_blob(f"img/{i}.png") for i in range(30)] + [_blob("src/app.py")]

        assert [n.path for n in select_candidates(nodes)] == ["src/app.py"]

    def test_mixed_sizes(self):
        nodes = [_blob("package.json", 50_000), _blob("src/huge.py", 25_000), _blob("src/ok.py", 10)]

        assert [n.path for n in select_candidates(nodes)] == ["package.json", "src/ok.py"]

    def test_custom_limits(self):
        nodes = [_blob(f"f{i}.txt", 500) for i in range(5)]

        assert len(select_candidates(nodes, max_files=3, max_size_bytes=1000)) == 3
        assert select_candidates(nodes, max_files=3, max_size_bytes=400) == []
