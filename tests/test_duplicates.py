"""Tests for duplicate detection and chain reconstruction."""

from locktree.duplicates import detect_duplicates, reconstruct_chain
from locktree.models import ChainHop, DependencyTreeNode, RootDependencies
from locktree.parsers import normalize_lockfile
from locktree.tree_builder import build_dependency_tree


def _tree(data, **ranges):
    return build_dependency_tree(data, RootDependencies(ranges=ranges))


def _diamond(make_data):
    return make_data(
        ("a", "1.0.0", {"c": "^1.0.0"}),
        ("b", "1.0.0", {"c": "^1.0.0"}),
        ("c", "1.0.0", {"d": "^1.0.0"}),
        ("d", "1.0.0", {}),
    )


class TestDetectDuplicates:
    """Grouping, version policy and ordering."""

    def test_version_conflict(self, npm_v2_lock_text):
        data = normalize_lockfile(npm_v2_lock_text, "npm-v2")
        tree = _tree(data, a="^1.0.0", b="^1.0.0", lodash="^4.17.0")

        summary = detect_duplicates(tree, version_conflicts_only=True)

        assert summary.total_packages == 4
        assert summary.duplicate_packages == 1
        assert summary.total_duplicate_instances == 3
        (group,) = summary.duplicates
        assert group.name == "lodash"
        assert group.versions == ("3.10.1", "4.17.21")
        assert group.has_version_conflict
        assert [node.path for node in group.instances] == [("a",), ("b",), ()]

    def test_same_version_two_paths(self, make_data):
        tree = _tree(_diamond(make_data), a="^1.0.0", b="^1.0.0")

        assert detect_duplicates(tree, version_conflicts_only=True).duplicates == []

        summary = detect_duplicates(tree)
        assert [group.name for group in summary.duplicates] == ["c", "d"]
        assert all(not group.has_version_conflict for group in summary.duplicates)
        assert summary.total_duplicate_instances == 4

    def test_single_instance_not_reported(self, make_data):
        tree = _tree(make_data(("a", "1.0.0", {})), a="^1.0.0")
        summary = detect_duplicates(tree)
        assert not summary.has_duplicates
        assert summary.total_packages == 1

    def test_sorted_by_instance_count(self, make_data):
        data = make_data(
            ("x", "1.0.0", {"y": "^1.0.0", "z": "^1.0.0"}),
            ("w", "1.0.0", {"y": "^1.0.0", "z": "^1.0.0"}),
            ("v", "1.0.0", {"z": "^1.0.0"}),
            ("y", "1.0.0", {}),
            ("z", "1.0.0", {}),
        )
        tree = _tree(data, x="^1.0.0", w="^1.0.0", v="^1.0.0")
        summary = detect_duplicates(tree)
        assert [(group.name, len(group.instances)) for group in summary.duplicates] == [
            ("z", 3),
            ("y", 2),
        ]

    def test_idempotent_and_tree_untouched(self, npm_v2_lock_text):
        data = normalize_lockfile(npm_v2_lock_text, "npm-v2")
        tree = _tree(data, a="^1.0.0", b="^1.0.0", lodash="^4.17.0")
        before = tree.to_dict()

        first = detect_duplicates(tree)
        second = detect_duplicates(tree)

        assert first.to_dict() == second.to_dict()
        assert tree.to_dict() == before

    def test_summary_to_dict(self, npm_v2_lock_text):
        data = normalize_lockfile(npm_v2_lock_text, "npm-v2")
        tree = _tree(data, a="^1.0.0", b="^1.0.0")

        result = detect_duplicates(tree).to_dict()

        assert result["totalPackages"] == 4
        assert result["duplicatePackages"] == 1
        instance = result["duplicates"][0]["instances"][0]
        assert instance["chain"] == [{"name": "a", "version": "1.0.0"}]
        assert instance["childrenCount"] == 0


class TestReconstructChain:
    """Versioned ancestor chains."""

    def test_chain_follows_exact_paths(self, make_data):
        tree = _tree(_diamond(make_data), a="^1.0.0", b="^1.0.0")
        summary = detect_duplicates(tree)
        d_group = next(group for group in summary.duplicates if group.name == "d")

        assert [tuple(map(str, chain)) for chain in d_group.chains] == [
            ("a@1.0.0", "c@1.0.0"),
            ("b@1.0.0", "c@1.0.0"),
        ]

    def test_unknown_ancestor(self):
        node = DependencyTreeNode(name="leaf", version="1.0.0", depth=2, path=("ghost",))
        assert reconstruct_chain(node, {}) == (ChainHop("ghost", "unknown"),)

    def test_falls_back_to_first_known_version(self):
        elsewhere = DependencyTreeNode(name="mid", version="2.0.0", depth=2, path=("other",))
        node = DependencyTreeNode(name="leaf", version="1.0.0", depth=3, path=("top", "mid"))
        by_name = {"mid": [elsewhere]}
        assert reconstruct_chain(node, by_name) == (
            ChainHop("top", "unknown"),
            ChainHop("mid", "2.0.0"),
        )
