"""Single-value grow-only counter contract state.

The simplest composable state: one integer that only grows. A summary
is the count itself; a delta is how much to add.

Example::

    a = Counter(5)
    b = Counter(3)

    d = a.delta({}, b.summarize({}))   # CounterDelta(add=2)
    b.apply_delta({}, d)
    assert b.count == 5
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Self

from composablestate.components.common import require_int, require_mapping
from composablestate.core.errors import DomainError


@dataclass(frozen=True)
class CounterParameters:
    """Contract parameters for ``Counter``.

    Attributes:
        max: Upper bound on the count (None for unbounded).
    """

    max: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "parameters")
        bound = data.get("max")
        if bound is not None:
            require_int(bound, "max", minimum=0)
        return cls(max=bound)

    def to_dict(self) -> dict:
        return {} if self.max is None else {"max": self.max}


@dataclass(frozen=True)
class CounterSummary:
    count: int

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "summary")
        return cls(require_int(data["count"], "count", minimum=0))

    def to_dict(self) -> dict:
        return {"count": self.count}


@dataclass(frozen=True)
class CounterDelta:
    add: int

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "delta")
        return cls(require_int(data["add"], "add", minimum=0))

    def to_dict(self) -> dict:
        return {"add": self.add}


class Counter:
    """Grow-only counter contract state.

    Args:
        count: Initial count (must be non-negative).
    """

    __slots__ = ("_count",)

    parameters_type = CounterParameters
    summary_type = CounterSummary
    delta_type = CounterDelta

    def __init__(self, count: int = 0):
        self._count = count

    @property
    def count(self) -> int:
        """Current count."""
        return self._count

    def verify(self, parameters: CounterParameters) -> None:
        if self._count < 0:
            raise DomainError(f"count must be non-negative, got {self._count}")
        if parameters.max is not None and self._count > parameters.max:
            raise DomainError(f"count {self._count} exceeds max {parameters.max}")

    def summarize(self, parameters: CounterParameters) -> CounterSummary:
        return CounterSummary(self._count)

    def delta(self, parameters: CounterParameters, summary: CounterSummary) -> CounterDelta:
        # A peer that is ahead gets an empty delta rather than a negative one.
        return CounterDelta(max(self._count - summary.count, 0))

    def apply_delta(self, parameters: CounterParameters, delta: CounterDelta) -> None:
        """Add ``delta.add`` to the count.

        Raises:
            DomainError: If the result would exceed ``parameters.max``.
        """
        total = self._count + delta.add
        if parameters.max is not None and total > parameters.max:
            raise DomainError(f"adding {delta.add} to {self._count} exceeds max {parameters.max}")
        self._count = total

    def to_dict(self) -> dict:
        return {"count": self._count}

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "state")
        return cls(require_int(data["count"], "count"))

    def __repr__(self) -> str:
        return f"Counter(count={self._count})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Counter):
            return NotImplemented
        return self._count == other._count
