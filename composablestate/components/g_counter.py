"""Grow-only counter (G-Counter) contract state.

Each writer node keeps its own monotonically increasing count, and the
total value is the sum of all node counts. Peers exchange the per-node
count map as a summary; a delta carries only the entries where the
producer is ahead. Folding a delta takes the element-wise maximum, so
deltas can be applied in any order, any number of times.

Example::

    a = GCounter({"node-a": 5})
    b = GCounter({"node-b": 3})

    b.apply_delta(params, a.delta(params, b.summarize(params)))
    assert b.value == 8  # 5 + 3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Self

from composablestate.components.common import (
    optional_str_set,
    require_int,
    require_mapping,
    require_str,
)
from composablestate.core.errors import DomainError


def _counts_from_dict(data: Any, what: str) -> dict[str, int]:
    data = require_mapping(data, what)
    return {
        require_str(node_id, f"{what} node id"): require_int(count, f"{what}[{node_id}]", minimum=0)
        for node_id, count in data.items()
    }


@dataclass(frozen=True)
class GCounterParameters:
    """Contract parameters for ``GCounter``.

    Attributes:
        nodes: Node ids allowed to hold counts (None for any node).
    """

    nodes: frozenset[str] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "parameters")
        return cls(nodes=optional_str_set(data, "nodes"))

    def to_dict(self) -> dict:
        return {} if self.nodes is None else {"nodes": sorted(self.nodes)}

    def check_node(self, node_id: str) -> None:
        if self.nodes is not None and node_id not in self.nodes:
            raise DomainError(f"node {node_id!r} is not an allowed writer")


@dataclass(frozen=True)
class GCounterSummary:
    """Per-node counts as seen by a peer."""

    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "summary")
        return cls(_counts_from_dict(data.get("counts", {}), "counts"))

    def to_dict(self) -> dict:
        return {"counts": dict(self.counts)}


@dataclass(frozen=True)
class GCounterDelta:
    """Per-node counts the receiving peer is behind on."""

    counts: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "delta")
        return cls(_counts_from_dict(data.get("counts", {}), "counts"))

    def to_dict(self) -> dict:
        return {"counts": dict(self.counts)}


class GCounter:
    """Grow-only counter contract state.

    Merge uses element-wise max, which is commutative, associative, and
    idempotent, so the order in which peers exchange deltas never matters.

    Args:
        counts: Initial per-node counts.
    """

    __slots__ = ("_counts",)

    parameters_type = GCounterParameters
    summary_type = GCounterSummary
    delta_type = GCounterDelta

    def __init__(self, counts: dict[str, int] | None = None):
        self._counts: dict[str, int] = dict(counts or {})

    @property
    def value(self) -> int:
        """Total count across all nodes."""
        return sum(self._counts.values())

    @property
    def counts(self) -> dict[str, int]:
        """Copy of the per-node counts."""
        return dict(self._counts)

    def increment(self, node_id: str, n: int = 1) -> None:
        """Increment a node's count.

        Args:
            node_id: The writing node.
            n: Amount to increment (must be positive).

        Raises:
            ValueError: If n is not positive.
        """
        if n < 1:
            raise ValueError(f"Increment must be positive, got {n}")
        self._counts[node_id] = self._counts.get(node_id, 0) + n

    def node_value(self, node_id: str) -> int:
        """Get a specific node's count, or 0 if unknown."""
        return self._counts.get(node_id, 0)

    def verify(self, parameters: GCounterParameters) -> None:
        for node_id, count in self._counts.items():
            parameters.check_node(node_id)
            if count < 0:
                raise DomainError(f"count for {node_id!r} must be non-negative, got {count}")

    def summarize(self, parameters: GCounterParameters) -> GCounterSummary:
        return GCounterSummary(dict(self._counts))

    def delta(self, parameters: GCounterParameters, summary: GCounterSummary) -> GCounterDelta:
        ahead = {
            node_id: count
            for node_id, count in self._counts.items()
            if count > summary.counts.get(node_id, 0)
        }
        return GCounterDelta(ahead)

    def apply_delta(self, parameters: GCounterParameters, delta: GCounterDelta) -> None:
        """Merge a delta into this counter (element-wise max).

        Raises:
            DomainError: If the delta names a node the parameters do not allow.
        """
        for node_id in delta.counts:
            parameters.check_node(node_id)
        for node_id, count in delta.counts.items():
            self._counts[node_id] = max(self._counts.get(node_id, 0), count)

    def to_dict(self) -> dict:
        return {"counts": dict(self._counts)}

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "state")
        counts = require_mapping(data["counts"], "counts")
        # Negative counts decode; verify() rejects them.
        return cls(
            {require_str(k, "node id"): require_int(v, f"counts[{k}]") for k, v in counts.items()}
        )

    def __repr__(self) -> str:
        return f"GCounter(value={self.value}, nodes={len(self._counts)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GCounter):
            return NotImplemented
        return self._counts == other._counts
