"""Partition a catalog into active and inactive repos for a manifest."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from source_repos.models import SourceRepo
from source_repos.types import Classification


def classify(
    declared_addresses: Sequence[str],
    catalog: Iterable[SourceRepo],
) -> Classification:
    """Classify catalog repos against a manifest's declared addresses.

    A manifest that declares no sources implicitly uses the default spec
    repo, so with an empty declaration the default-like repos are active.
    Otherwise a repo is active when its address is declared.

    Declared addresses that are not in the catalog are dropped. Output
    order follows the catalog, not the declaration.

    Args:
        declared_addresses: Addresses declared by the manifest.
        catalog: Catalog snapshot, in catalog order.

    Returns:
        Classification with disjoint active/inactive tuples covering the catalog.
    """
    declared = set(declared_addresses)
    seen: set[str] = set()
    active: list[SourceRepo] = []
    inactive: list[SourceRepo] = []

    for repo in catalog:
        if repo.address in seen:
            continue
        seen.add(repo.address)

        if declared:
            is_active = repo.address in declared
        else:
            is_active = repo.is_cocoapods_specs_like

        (active if is_active else inactive).append(repo)

    return Classification(active=tuple(active), inactive=tuple(inactive))
