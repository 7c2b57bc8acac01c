"""Tests for conventional-commit increment analysis."""

import pytest

from gitdevflow.domain import FlowPolicy, Increment, SemVer
from gitdevflow.services.increment_analyzer import IncrementAnalyzer, extract_type, extract_types


class TestExtractType:
    """Tests for commit type extraction."""

    @pytest.mark.parametrize("message,expected", [
        ("feat: add search", "feat"),
        ("feat(api): add endpoint", "feat"),
        ("Fix: typo", "fix"),
        ("CHORE(deps): bump", "chore"),
        ("initial import", "initial import"),
        ("docs: a: b", "docs"),
        ("", ""),
    ])
    def test_extract_type(self, message, expected):
        assert extract_type(message) == expected

    def test_extract_types(self):
        assert extract_types(["fix: a", "fix(x): b", "feat: c"]) == {"fix", "feat"}


class TestIncrementAnalyzer:
    """Tests for the bump decision."""

    @pytest.fixture
    def analyzer(self):
        return IncrementAnalyzer()

    def test_no_messages(self, analyzer):
        assert analyzer.increment_for([]) is Increment.NONE

    def test_unknown_type(self, analyzer):
        assert analyzer.increment_for(["init"]) is Increment.NONE

    @pytest.mark.parametrize("commit_type", ["fix", "docs", "style", "refactor", "perf", "test", "chore"])
    def test_patch_types(self, analyzer, commit_type):
        assert analyzer.increment_for([f"{commit_type}: something"]) is Increment.PATCH

    def test_minor(self, analyzer):
        assert analyzer.increment_for(["fix: a", "feat: b", "chore: c"]) is Increment.MINOR

    def test_breaking_change_on_first_line(self, analyzer):
        assert analyzer.increment_for(["BREAKING CHANGE: everything"]) is Increment.MAJOR

    def test_breaking_change_in_body(self, analyzer):
        message = "feat: new api\n\nBREAKING CHANGE: old api removed\n\nSigned-off-by: someone"
        assert analyzer.increment_for([message]) is Increment.MAJOR

    def test_breaking_change_without_colon(self, analyzer):
        assert analyzer.increment_for(["refactor: x\n\nBREAKING CHANGE"]) is Increment.MAJOR

    def test_breaking_change_must_start_a_line(self, analyzer):
        assert analyzer.increment_for(["fix: mention of BREAKING CHANGE in text"]) is Increment.PATCH

    def test_breaking_change_is_case_sensitive(self, analyzer):
        assert analyzer.increment_for(["chore: x\n\nbreaking change: y"]) is Increment.PATCH

    def test_priority_not_count(self, analyzer):
        messages = ["fix: a"] * 10 + ["feat: b"]
        assert analyzer.increment_for(messages) is Increment.MINOR

    def test_analyze_without_base(self, analyzer):
        decision = analyzer.analyze(["chore: tidy"])
        assert decision.base == SemVer(0, 0, 0)
        assert decision.version == SemVer(0, 0, 1)
        assert decision.level is Increment.PATCH

    def test_analyze_with_base(self, analyzer):
        decision = analyzer.analyze(["feat: x", "fix: y"], SemVer(1, 2, 3))
        assert str(decision.version) == "1.3.0"

    def test_analyze_none_keeps_base(self, analyzer):
        decision = analyzer.analyze(["init"], SemVer(0, 1, 2))
        assert decision.version == SemVer(0, 1, 2)

    def test_major_from_base(self, analyzer):
        decision = analyzer.analyze(["fix: x\n\nBREAKING CHANGE: y"], SemVer(0, 1, 2))
        assert decision.version == SemVer(1, 0, 0)

    def test_custom_policy(self):
        analyzer = IncrementAnalyzer(FlowPolicy(
            minor_types=frozenset({"feature"}),
            patch_types=frozenset({"bugfix"}),
            breaking_change_marker="MAJOR",
        ))
        assert analyzer.increment_for(["feat: x"]) is Increment.NONE
        assert analyzer.increment_for(["feature: x"]) is Increment.MINOR
        assert analyzer.increment_for(["bugfix: x"]) is Increment.PATCH
        assert analyzer.increment_for(["x\n\nMAJOR: y"]) is Increment.MAJOR
