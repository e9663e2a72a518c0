"""Tests for classifier module."""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from source_repos.classifier import classify
from source_repos.models import SourceRepo

DEFAULT = "https://github.com/CocoaPods/Specs.git"
TRUNK = "https://cdn.cocoapods.org/"
ACME = "https://github.com/acme/specs.git"
OTHER = "https://github.com/other/specs.git"


@pytest.fixture
def repos(make_repo: Any) -> list[SourceRepo]:
    """Catalog snapshot with two default-like and two private repos."""
    return [make_repo(DEFAULT), make_repo(ACME), make_repo(TRUNK), make_repo(OTHER)]


class TestClassify:
    """Tests for classify()."""

    def test_single_default_repo_no_declarations(self, make_repo: Any) -> None:
        """Test the implicit default repo is active when nothing is declared."""
        repo = make_repo("https://cdn/specs", is_cocoapods_specs_like=True)
        result = classify([], [repo])
        assert result.active == (repo,)
        assert result.inactive == ()

    def test_declared_repo_active(self, make_repo: Any) -> None:
        """Test [A(default), B] with ["B"] gives active=[B], inactive=[A]."""
        a = make_repo("A", is_cocoapods_specs_like=True)
        b = make_repo("B")
        result = classify(["B"], [a, b])
        assert result.active == (b,)
        assert result.inactive == (a,)

    def test_empty_declaration_uses_default_flag(self, repos: list[SourceRepo]) -> None:
        """Test exactly the default-like repos are active."""
        result = classify([], repos)
        assert result.active_addresses == [DEFAULT, TRUNK]
        assert result.inactive_addresses == [ACME, OTHER]

    def test_order_follows_catalog(self, repos: list[SourceRepo]) -> None:
        """Test output order is catalog order, not declaration order."""
        result = classify([OTHER, ACME], repos)
        assert result.active_addresses == [ACME, OTHER]

    def test_default_not_active_when_undeclared(self, repos: list[SourceRepo]) -> None:
        """Test an explicit declaration disables the implicit default."""
        result = classify([ACME], repos)
        assert DEFAULT in result.inactive_addresses
        assert TRUNK in result.inactive_addresses

    def test_unknown_declared_address_dropped(self, repos: list[SourceRepo]) -> None:
        """Test declared addresses missing from the catalog are not reported."""
        result = classify([ACME, "https://github.com/missing/specs.git"], repos)
        assert result.active_addresses == [ACME]
        assert len(result.active) + len(result.inactive) == len(repos)

    def test_duplicate_catalog_entries_deduplicated(self, make_repo: Any) -> None:
        """Test outputs are deduplicated by address."""
        result = classify([ACME], [make_repo(ACME), make_repo(OTHER), make_repo(ACME, "again")])
        assert result.active_addresses == [ACME]
        assert result.inactive_addresses == [OTHER]

    def test_empty_catalog(self) -> None:
        """Test classifying nothing yields nothing."""
        result = classify([ACME], [])
        assert result.active == ()
        assert result.inactive == ()

    def test_accepts_any_iterable(self, repos: list[SourceRepo]) -> None:
        """Test the catalog can be a generator."""
        result = classify((ACME,), (r for r in repos))
        assert result.active_addresses == [ACME]

    def test_does_not_mutate_inputs(self, repos: list[SourceRepo]) -> None:
        """Test classify is side-effect free."""
        declared = [ACME]
        before = [r.model_copy() for r in repos]
        classify(declared, repos)
        assert repos == before
        assert declared == [ACME]

    def test_partition_is_complete_and_disjoint(self, repos: list[SourceRepo]) -> None:
        """Test active and inactive cover the catalog without overlap."""
        candidates = [DEFAULT, ACME, TRUNK, OTHER, "https://github.com/missing/specs.git"]
        for size in range(len(candidates) + 1):
            for declared in itertools.combinations(candidates, size):
                result = classify(list(declared), repos)
                active = set(result.active_addresses)
                inactive = set(result.inactive_addresses)
                assert active | inactive == {r.address for r in repos}
                assert active & inactive == set()
