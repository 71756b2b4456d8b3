"""Tests for shared types module."""

import pytest

from gluon_autobuild.errors import E_ILLEGAL_ARGS, InvalidBranchError
from gluon_autobuild.types import BranchClass, Phase, ReleaseInfo


class TestBranchClass:
    """Test BranchClass parsing."""

    @pytest.mark.parametrize("value", ["stable", "testing", "experimental"])
    def test_parse_valid(self, value: str) -> None:
        """Known branch names should parse."""
        assert BranchClass.parse(value).value == value

    @pytest.mark.parametrize("value", ["foo", "", "Stable", None])
    def test_parse_invalid(self, value: str | None) -> None:
        """Unknown or missing branch names should raise."""
        with pytest.raises(InvalidBranchError) as exc_info:
            BranchClass.parse(value)
        assert exc_info.value.exit_code == E_ILLEGAL_ARGS
        assert exc_info.value.value == value

    def test_is_experimental(self) -> None:
        """Only experimental should report is_experimental."""
        assert BranchClass.EXPERIMENTAL.is_experimental is True
        assert BranchClass.STABLE.is_experimental is False
        assert BranchClass.TESTING.is_experimental is False


class TestPhase:
    """Test Phase ordering and properties."""

    def test_declaration_order(self) -> None:
        """Phases should iterate in execution order."""
        assert [p.value for p in Phase] == [
            "dirclean",
            "update",
            "clean",
            "build",
            "sign",
            "deploy",
        ]

    def test_site_phases_exclude_dirclean(self) -> None:
        """Per-site phases should not include dirclean."""
        assert Phase.site_phases() == [
            Phase.UPDATE,
            Phase.CLEAN,
            Phase.BUILD,
            Phase.SIGN,
            Phase.DEPLOY,
        ]

    def test_forwards_branch(self) -> None:
        """Only sign and deploy need the branch class."""
        forwarding = {p for p in Phase if p.forwards_branch}
        assert forwarding == {Phase.SIGN, Phase.DEPLOY}

    def test_once_per_run(self) -> None:
        """Only dirclean runs once per run."""
        assert [p for p in Phase if p.once_per_run] == [Phase.DIRCLEAN]


class TestReleaseInfo:
    """Test ReleaseInfo naming."""

    def test_name(self) -> None:
        """Name should join base version, label and suffix."""
        info = ReleaseInfo(BranchClass.STABLE, "2020.1", "3")
        assert info.name == "2020.1+mwu3"
        assert str(info) == "2020.1+mwu3"

    def test_custom_label(self) -> None:
        """Label should be configurable."""
        info = ReleaseInfo(BranchClass.TESTING, "2020.1", "1", label="ffm")
        assert info.name == "2020.1+ffm1"
