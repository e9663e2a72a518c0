"""Source repository model."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Addresses of the implicit CocoaPods spec repo (git master and trunk CDN)
DEFAULT_ADDRESS_PATTERNS = [
    r"github\.com[/:]CocoaPods/Specs(?:\.git)?/?$",
    r"^https?://cdn\.cocoapods\.org/?$",
]


def is_default_address(address: str, extra: list[str] | None = None) -> bool:
    """Check whether an address points at the implicit default spec repo.

    Args:
        address: Repository address (URL or path).
        extra: Additional addresses to treat as default.

    Returns:
        True if the address is the CocoaPods spec repo or listed in extra.
    """
    if extra and address in extra:
        return True
    return any(re.search(p, address, re.IGNORECASE) for p in DEFAULT_ADDRESS_PATTERNS)


def shorten_address(address: str) -> str:
    """Derive a compact display form of an address.

    Examples:
        https://github.com/CocoaPods/Specs.git -> github.com/CocoaPods/Specs
        git@github.com:org/specs.git -> github.com/org/specs
    """
    short = re.sub(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", "", address)
    short = re.sub(r"^[^@/]+@([^:/]+):", r"\1/", short)
    short = short.rstrip("/")
    if short.endswith(".git"):
        short = short[: -len(".git")]
    return short


class SourceRepo(BaseModel):
    """A remote specification index known to the catalog.

    ``address`` is the identity of a repo and cannot change once the
    model exists. Everything else is presentation or live status.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    address: str = Field(frozen=True, min_length=1)
    display_name: str = Field(default="", alias="displayName")
    display_address: str = Field(default="", alias="displayAddress")
    is_cocoapods_specs_like: bool = Field(default=False, alias="isCocoaPodsSpecsLike")
    is_updating: bool = Field(default=False, alias="isUpdating")
    path: Path | None = None

    @classmethod
    def from_address(
        cls,
        address: str,
        display_name: str | None = None,
        path: Path | None = None,
        extra_defaults: list[str] | None = None,
    ) -> SourceRepo:
        """Build a repo, deriving display fields and the default flag.

        Args:
            address: Canonical address.
            display_name: Name to show. Defaults to the last path segment.
            path: Local checkout, if known.
            extra_defaults: Additional addresses treated as default.

        Returns:
            New SourceRepo.
        """
        display_address = shorten_address(address)
        if display_name is None:
            display_name = display_address.rsplit("/", 1)[-1] or display_address
        return cls(
            address=address,
            display_name=display_name,
            display_address=display_address,
            is_cocoapods_specs_like=is_default_address(address, extra_defaults),
            path=path,
        )

    def same_display(self, other: SourceRepo) -> bool:
        """Check whether display fields and path match another repo."""
        return (
            self.display_name == other.display_name
            and self.display_address == other.display_address
            and self.is_cocoapods_specs_like == other.is_cocoapods_specs_like
            and self.path == other.path
        )
