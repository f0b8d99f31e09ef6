"""Unit tests for PathSandbox.normalize."""

from __future__ import annotations

import pytest

from vaultdav.managers.sandbox import PathSandbox

SAMPLE_PATHS = [
    "",
    "/",
    "notes",
    "/notes",
    "notes/",
    "notes/a.md",
    "/obsidian",
    "/obsidian/",
    "/obsidian/notes/a.md",
    "/obsidianx/a.md",
    "//double//slashes//",
    "./notes/./a.md",
    "../../etc/passwd",
    "/obsidian/../etc",
    "notes/../../..",
    "name with spaces.md",
    "日记/今天.md",
]


@pytest.fixture
def sandbox() -> PathSandbox:
    return PathSandbox("/obsidian")


class TestNormalize:
    @pytest.mark.parametrize("path", SAMPLE_PATHS)
    def test_result_stays_under_base(self, sandbox: PathSandbox, path: str):
        result = sandbox.normalize(path)
        assert result == "/obsidian" or result.startswith("/obsidian/")

    @pytest.mark.parametrize("path", SAMPLE_PATHS)
    def test_idempotent(self, sandbox: PathSandbox, path: str):
        once = sandbox.normalize(path)
        assert sandbox.normalize(once) == once

    @pytest.mark.parametrize("path", ["", "/", None])
    def test_root_maps_to_base(self, sandbox: PathSandbox, path):
        assert sandbox.normalize(path) == "/obsidian"

    def test_relative_path_is_rooted_under_base(self, sandbox: PathSandbox):
        assert sandbox.normalize("notes") == "/obsidian/notes"
        assert sandbox.normalize("/notes") == "/obsidian/notes"

    def test_path_already_under_base_is_kept(self, sandbox: PathSandbox):
        assert sandbox.normalize("/obsidian/notes/a.md") == "/obsidian/notes/a.md"

    def test_sibling_with_shared_prefix_is_rerooted(self, sandbox: PathSandbox):
        assert sandbox.normalize("/obsidianx/a.md") == "/obsidian/obsidianx/a.md"

    def test_traversal_cannot_escape(self, sandbox: PathSandbox):
        assert sandbox.normalize("../../etc/passwd") == "/obsidian/etc/passwd"
        assert sandbox.normalize("/obsidian/../etc") == "/obsidian/etc"

    def test_trailing_slash_dropped(self, sandbox: PathSandbox):
        assert sandbox.normalize("notes/") == "/obsidian/notes"


class TestBasePath:
    def test_base_path_is_cleaned(self):
        assert PathSandbox("obsidian/").base_path == "/obsidian"

    def test_root_base_accepts_everything(self):
        sandbox = PathSandbox("/")
        assert sandbox.normalize("notes") == "/notes"
        assert sandbox.normalize("") == "/"
        assert sandbox.normalize("/a/b") == "/a/b"

    def test_relative(self, sandbox: PathSandbox):
        assert sandbox.relative("/obsidian") == ""
        assert sandbox.relative("notes/a.md") == "notes/a.md"

    def test_contains(self, sandbox: PathSandbox):
        assert sandbox.contains("/obsidian")
        assert sandbox.contains("/obsidian/x")
        assert not sandbox.contains("/obsidianx")
        assert not sandbox.contains("/")
