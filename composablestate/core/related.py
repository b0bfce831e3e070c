"""Related-State Registry used while verifying a state.

A state may only be decidable once the states of other contracts are
known. During ``validate_state`` the adapter hands the state type a
``RelatedStates`` instance: the domain code reads whatever the host
supplied and records which identifiers it consulted. Afterwards the
adapter asks the registry which consulted identifiers are still
unresolved and, if any, turns the result into ``RequestRelated``.

The registry lives for exactly one operation call. The adapter closes it
when the call returns; a handle kept past that point raises on use.

Example::

    related = RelatedStates([("contract-x", None), ("contract-y", {"count": 3})])
    related.get("contract-y")      # {"count": 3}
    related.get("contract-x")      # None, recorded as queried
    related.mark_needed("contract-z")
    related.missing()              # ["contract-x", "contract-z"]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class RelatedStates:
    """Insertion-ordered mapping of related-contract keys to decoded states.

    An entry whose state is ``None`` is known to exist but has not been
    supplied yet.

    Args:
        entries: Initial ``(key, state_or_None)`` pairs, in host order.
    """

    __slots__ = ("_closed", "_queried", "_states")

    def __init__(self, entries: Iterable[tuple[Hashable, Any]] = ()):
        self._states: dict[Hashable, Any] = {}
        self._queried: set[Hashable] = set()
        self._closed = False
        for key, state in entries:
            # A later supplied state wins over an earlier placeholder.
            if state is not None or key not in self._states:
                self._states[key] = state

    @property
    def queried(self) -> frozenset:
        """Keys consulted through ``get`` or ``mark_needed``."""
        self._check_open()
        return frozenset(self._queried)

    @property
    def closed(self) -> bool:
        """True once the owning operation has returned."""
        return self._closed

    def get(self, key: Hashable) -> Any:
        """Return the supplied state for ``key``, or None if unresolved.

        The lookup counts as a query: an unknown key is registered as
        needed.

        Args:
            key: Related-contract identifier.
        """
        self.mark_needed(key)
        return self._states[key]

    def mark_needed(self, key: Hashable) -> None:
        """Record that ``key`` was consulted, inserting a placeholder if absent.

        Args:
            key: Related-contract identifier.
        """
        self._check_open()
        self._queried.add(key)
        if key not in self._states:
            self._states[key] = None

    def supply(self, key: Hashable, state: Any) -> None:
        """Provide the state for ``key``.

        Args:
            key: Related-contract identifier.
            state: Decoded state (must not be None).

        Raises:
            ValueError: If state is None.
        """
        self._check_open()
        if state is None:
            raise ValueError(f"Cannot supply None as the state of {key!r}")
        self._states[key] = state

    def states(self) -> Iterator[tuple[Hashable, Any]]:
        """Iterate over ``(key, state_or_None)`` in registry order."""
        self._check_open()
        return iter(list(self._states.items()))

    def missing(self) -> list[Hashable]:
        """Keys that were queried and are still unresolved, in registry order."""
        self._check_open()
        return [k for k, s in self._states.items() if s is None and k in self._queried]

    def close(self) -> None:
        """Invalidate this handle. Further access raises RuntimeError."""
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("RelatedStates used after its operation returned")

    def __contains__(self, key: object) -> bool:
        self._check_open()
        return key in self._states

    def __len__(self) -> int:
        self._check_open()
        return len(self._states)

    def __repr__(self) -> str:
        if self._closed:
            return "RelatedStates(closed)"
        resolved = sum(1 for s in self._states.values() if s is not None)
        return f"RelatedStates(entries={len(self._states)}, resolved={resolved})"
