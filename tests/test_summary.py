"""Tests for report aggregation and text rendering."""

from locktree.core import analyze_project
from locktree.models import ChainHop
from locktree.report import aggregate
from locktree.summary import format_chain, render_summary, render_tree


def _hops(count):
    return [ChainHop(f"p{i}", "1.0.0") for i in range(count)]


class TestFormatChain:
    """Chain display policy."""

    def test_short_chain_shown_in_full(self):
        assert format_chain(_hops(3)) == "p0@1.0.0 → p1@1.0.0 → p2@1.0.0"

    def test_eight_hops_not_elided(self):
        assert "more" not in format_chain(_hops(8))

    def test_long_chain_elided(self):
        rendered = format_chain(_hops(10))
        assert rendered == (
            "p0@1.0.0 → p1@1.0.0 → p2@1.0.0 → … (4 more) → p7@1.0.0 → p8@1.0.0 → p9@1.0.0"
        )

    def test_full_disables_elision(self):
        assert format_chain(_hops(10), full=True).count("→") == 9

    def test_root_marker(self):
        rendered = format_chain([ChainHop("a", "1.0.0"), ChainHop("b", "2.0.0")], {"a"})
        assert rendered == "a@1.0.0 (root) → b@2.0.0"


class TestReport:
    """JSON report and Markdown summary."""

    def test_aggregate(self, npm_project):
        report = aggregate(analyze_project(npm_project))

        assert report["version"] == "1"
        assert report["hasDuplicates"] is True
        assert report["lockFile"]["format"] == "npm-v2"
        assert report["project"]["name"] == "app"
        assert report["project"]["directDependencies"] == ["a", "b", "lodash"]
        assert report["totals"]["packages"] == 4
        assert report["totals"]["duplicateInstances"] == 3
        assert report["duplicates"][0]["name"] == "lodash"
        assert report["placements"]["lodash"] == ["(root)", "(root)"]
        assert "tree" not in report

    def test_aggregate_with_tree(self, npm_project):
        report = aggregate(analyze_project(npm_project), include_tree=True)
        assert report["tree"]["totals"] == {"nodes": 5, "packages": 4}

    def test_render_summary(self, npm_project):
        text = render_summary(aggregate(analyze_project(npm_project)))

        assert text.startswith("# locktree Summary\n")
        assert "| lodash | 3.10.1, 4.17.21 | 3 |" in text
        assert "- 3.10.1: a@1.0.0 (root) → lodash@3.10.1" in text
        assert "- 4.17.21: lodash@4.17.21 (root)" in text

    def test_render_summary_without_duplicates(self):
        report = {"totals": {"packages": 2}, "lockFile": {"path": "yarn.lock", "format": "yarn"}}
        text = render_summary(report)
        assert "| No duplicate packages | n/a | n/a |" in text
        assert "Packages: 2" in text

    def test_render_tree(self, npm_project):
        text = render_tree(analyze_project(npm_project).tree)
        assert text.splitlines() == [
            "app@1.0.0",
            "├── a@1.0.0",
            "│   └── lodash@3.10.1",
            "├── b@1.2.0",
            "│   └── lodash@4.17.21",
            "└── lodash@4.17.21 (dev)",
        ]
