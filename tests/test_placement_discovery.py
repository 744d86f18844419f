"""Tests for placement labels and lock file discovery."""

import pytest

from locktree.discovery import (
    LOCK_FILE_NAMES,
    detect_lock_format,
    find_lock_file,
    find_workspace_root,
)
from locktree.errors import UnknownLockFormatError
from locktree.models import RootDependencies
from locktree.parsers import LOCK_NORMALIZERS, normalize_lockfile
from locktree.placement import describe_placements


class TestDescribePlacements:
    """One label per lock entry."""

    def test_hierarchy_known(self, npm_v2_lock_text):
        data = normalize_lockfile(npm_v2_lock_text, "npm-v2")
        roots = RootDependencies(ranges={"a": "^1.0.0"})

        placements = describe_placements(data, roots)

        assert placements == {
            "a": ["(root)"],
            "lodash": ["via: a", "(hoisted)"],
            "b": ["(hoisted)"],
        }

    def test_hierarchy_unknown_never_fabricates_paths(self):
        lock = 'a@^1.0.0:\n  version "1.0.0"\n\nms@^2.0.0:\n  version "2.1.3"\n'
        data = normalize_lockfile(lock, "yarn")

        placements = describe_placements(data, RootDependencies(ranges={"a": "^1.0.0"}))

        assert placements == {"a": ["(root)"], "ms": ["(transitive)"]}


class TestFindWorkspaceRoot:
    """Walking up to a workspace definition."""

    def test_pnpm_workspace_file(self, write_files, tmp_path):
        write_files({"pnpm-workspace.yaml": "packages:\n  - 'packages/*'\n", "packages/web/package.json": {}})
        assert find_workspace_root(tmp_path / "packages" / "web") == tmp_path.resolve()

    def test_package_json_workspaces(self, write_files, tmp_path):
        write_files({"package.json": {"workspaces": ["packages/*"]}, "packages/web/package.json": {}})
        assert find_workspace_root(tmp_path / "packages" / "web") == tmp_path.resolve()

    def test_plain_package_json_is_not_a_workspace(self, write_files, tmp_path):
        write_files({"project/package.json": {"name": "solo"}})
        root = find_workspace_root(tmp_path / "project")
        assert root is None or tmp_path.resolve() not in (root, *root.parents)


class TestFindLockFile:
    """Lock file preference order."""

    def test_preference_order(self, write_files, tmp_path):
        write_files({"yarn.lock": "", "pnpm-lock.yaml": "", "package-lock.json": "{}"})
        assert find_lock_file(tmp_path).name == "package-lock.json"

    def test_bun_before_pnpm(self, write_files, tmp_path):
        write_files({"yarn.lock": "", "pnpm-lock.yaml": "", "bun.lock": "{}"})
        assert find_lock_file(tmp_path).name == "bun.lock"

    def test_member_uses_workspace_root_lock(self, write_files, tmp_path):
        write_files(
            {
                "package.json": {"workspaces": ["packages/*"]},
                "yarn.lock": "",
                "packages/web/package.json": {"name": "web"},
                "packages/web/yarn.lock": "",
            }
        )
        assert find_lock_file(tmp_path / "packages" / "web") == (tmp_path / "yarn.lock").resolve()

    def test_shrinkwrap_preferred(self, write_files, tmp_path):
        write_files({"package-lock.json": "{}", "npm-shrinkwrap.json": "{}"})
        assert find_lock_file(tmp_path).name == "npm-shrinkwrap.json"

    def test_shrinkwrap_only(self, write_files, tmp_path):
        write_files({"npm-shrinkwrap.json": {"lockfileVersion": 1}})
        path = find_lock_file(tmp_path)
        assert path.name == "npm-shrinkwrap.json"
        assert detect_lock_format(path) == "npm-v1"

    def test_none_found(self, tmp_path):
        assert find_lock_file(tmp_path) is None


class TestDetectLockFormat:
    """Mapping file names to format tags."""

    def test_npm_versions(self, tmp_path):
        path = tmp_path / "package-lock.json"
        assert detect_lock_format(path, '{"lockfileVersion": 1}') == "npm-v1"
        assert detect_lock_format(path, '{"lockfileVersion": 3}') == "npm-v2"

    def test_reads_content_when_not_given(self, write_files, tmp_path):
        write_files({"package-lock.json": {"lockfileVersion": 1}})
        assert detect_lock_format(tmp_path / "package-lock.json") == "npm-v1"

    @pytest.mark.parametrize(
        "name, expected",
        [("yarn.lock", "yarn"), ("pnpm-lock.yaml", "pnpm"), ("bun.lock", "bun")],
    )
    def test_other_formats(self, tmp_path, name, expected):
        assert detect_lock_format(tmp_path / name, "") == expected

    def test_every_searched_name_has_a_normalizer(self, tmp_path):
        for name in LOCK_FILE_NAMES:
            tag = detect_lock_format(tmp_path / name, "{}")
            assert LOCK_NORMALIZERS[tag].supports(name)

    def test_unknown_file(self, tmp_path):
        with pytest.raises(UnknownLockFormatError):
            detect_lock_format(tmp_path / "bun.lockb", "")
