"""Podfile reader for declared source addresses."""

from __future__ import annotations

import re
from pathlib import Path

# Matches `source 'url'`, `source "url"` and `source('url')`
SOURCE_PATTERN = re.compile(r"""^\s*source\s*\(?\s*(['"])(?P<address>.+?)\1""")


def parse_sources(content: str) -> list[str]:
    """Extract declared source addresses from Podfile content.

    Args:
        content: Podfile text.

    Returns:
        Addresses in declaration order, without duplicates.

    Example:
        >>> parse_sources("source 'https://cdn.cocoapods.org/'\\npod 'Alamofire'")
        ['https://cdn.cocoapods.org/']
    """
    addresses: list[str] = []
    for line in content.splitlines():
        if line.lstrip().startswith("#"):
            continue
        match = SOURCE_PATTERN.match(line)
        if match and match.group("address") not in addresses:
            addresses.append(match.group("address"))
    return addresses


class Podfile:
    """A project manifest on disk.

    Satisfies the ManifestReader protocol.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def declared_addresses(self) -> list[str]:
        """Read the source addresses declared in the Podfile.

        Returns:
            Addresses in declaration order; empty when none are declared.

        Raises:
            FileNotFoundError: If the Podfile doesn't exist.
            ValueError: If the Podfile is not UTF-8 text.
        """
        if not self.path.exists():
            raise FileNotFoundError(f"Podfile not found: {self.path}")
        try:
            content = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"Podfile is not UTF-8 text: {self.path}") from e
        return parse_sources(content)
