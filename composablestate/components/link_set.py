"""Grow-only set of links to other contracts.

``LinkSet`` is the reference dependency-aware state: it is only valid
while none of the contracts it links to has been revoked, so verifying
it needs the linked contracts' states. It implements
``RelatedStateAware``; during validation it reads each link from the
related-state registry, and links the host has not supplied are
requested instead of being judged.

A linked contract's state counts as revoked when it is an object whose
``revoked`` field is true.

Example::

    links = LinkSet({"contract-a", "contract-b"})
    adapter = ContractAdapter(LinkSet)
    adapter.validate_state(b"", encoded_links, [])
    # RequestRelated(("contract-a", "contract-b"))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from composablestate.components.common import require_int, require_mapping, require_str
from composablestate.core.errors import DomainError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from composablestate.core.related import RelatedStates


def _links_from_list(data: Any, what: str) -> frozenset[str]:
    if not isinstance(data, list):
        raise TypeError(f"{what} must be a list, got {type(data).__name__}")
    return frozenset(require_str(link, f"{what} entry") for link in data)


def is_revoked(state: Any) -> bool:
    """True if a related contract state marks itself revoked."""
    return isinstance(state, dict) and state.get("revoked") is True


@dataclass(frozen=True)
class LinkSetParameters:
    """Contract parameters for ``LinkSet``.

    Attributes:
        max_links: Upper bound on the number of links (None for unbounded).
    """

    max_links: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "parameters")
        bound = data.get("max_links")
        if bound is not None:
            require_int(bound, "max_links", minimum=0)
        return cls(max_links=bound)

    def to_dict(self) -> dict:
        return {} if self.max_links is None else {"max_links": self.max_links}


@dataclass(frozen=True)
class LinkSetSummary:
    links: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "summary")
        return cls(_links_from_list(data.get("links", []), "links"))

    def to_dict(self) -> dict:
        return {"links": sorted(self.links)}


@dataclass(frozen=True)
class LinkSetDelta:
    links: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "delta")
        return cls(_links_from_list(data.get("links", []), "links"))

    def to_dict(self) -> dict:
        return {"links": sorted(self.links)}


class LinkSet:
    """Grow-only set of related-contract links.

    Args:
        links: Initial links (contract keys).
    """

    __slots__ = ("_links",)

    parameters_type = LinkSetParameters
    summary_type = LinkSetSummary
    delta_type = LinkSetDelta

    def __init__(self, links: Iterable[str] = ()):
        self._links: set[str] = set(links)

    @property
    def links(self) -> frozenset[str]:
        """Current links."""
        return frozenset(self._links)

    def add(self, link: str) -> None:
        self._links.add(link)

    def verify(self, parameters: LinkSetParameters) -> None:
        """Check the structural constraints that need no related state."""
        if parameters.max_links is not None and len(self._links) > parameters.max_links:
            raise DomainError(f"{len(self._links)} links exceed max_links {parameters.max_links}")

    def verify_related(self, parameters: LinkSetParameters, related: RelatedStates) -> None:
        """Check that no linked contract has been revoked.

        Every link is looked up, so a single call reports all unsupplied
        links at once.
        """
        self.verify(parameters)
        revoked = [link for link in sorted(self._links) if is_revoked(related.get(link))]
        if revoked:
            raise DomainError(f"linked contract(s) revoked: {', '.join(revoked)}")

    def summarize(self, parameters: LinkSetParameters) -> LinkSetSummary:
        return LinkSetSummary(frozenset(self._links))

    def delta(self, parameters: LinkSetParameters, summary: LinkSetSummary) -> LinkSetDelta:
        return LinkSetDelta(frozenset(self._links - summary.links))

    def apply_delta(self, parameters: LinkSetParameters, delta: LinkSetDelta) -> None:
        """Union the delta's links into this set.

        Raises:
            DomainError: If the union would exceed ``max_links``.
        """
        merged = self._links | delta.links
        if parameters.max_links is not None and len(merged) > parameters.max_links:
            raise DomainError(f"{len(merged)} links exceed max_links {parameters.max_links}")
        self._links = merged

    def to_dict(self) -> dict:
        return {"links": sorted(self._links)}

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "state")
        return cls(_links_from_list(data["links"], "links"))

    def __contains__(self, link: object) -> bool:
        return link in self._links

    def __len__(self) -> int:
        return len(self._links)

    def __repr__(self) -> str:
        return f"LinkSet(links={sorted(self._links)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkSet):
            return NotImplemented
        return self._links == other._links
