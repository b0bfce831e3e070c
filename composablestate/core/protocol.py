"""Protocol definitions for composable contract state.

A composable state is a versioned piece of distributed state that peers
keep in sync by exchanging summaries and deltas instead of full copies.
Any implementation must satisfy:

- **Convergence**: applying ``delta(parameters, summary)`` to a state whose
  summary is ``summary`` yields a state with the producer's summary, so a
  second round produces nothing new.
- **Associativity**: folding ``d1`` then ``d2`` equals folding the single
  delta that takes the same starting state to the same end state.
- **Determinism**: ``summarize`` and ``delta`` are pure functions of the
  state, the parameters and (for ``delta``) the peer summary.

Verification is split in two capabilities. ``ComposableState.verify``
sees only the state and its parameters. A type whose validity depends on
other contracts additionally implements ``RelatedStateAware``; the adapter
then calls ``verify_related`` with the call-scoped ``RelatedStates``
registry instead. Summaries, deltas and delta application never see a
registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from composablestate.core.related import RelatedStates


@runtime_checkable
class ComposableState(Protocol):
    """Protocol for all contract state types.

    All state types must support:
    - ``verify(parameters)``: Raise ``DomainError`` if the state is invalid.
    - ``summarize(parameters)``: Compact digest a peer can diff against.
    - ``delta(parameters, summary)``: What a peer at ``summary`` is missing.
    - ``apply_delta(parameters, delta)``: Fold a delta in (in-place).
    - ``to_dict()`` / ``from_dict()``: Conversion to and from plain values.
    """

    def verify(self, parameters: Any) -> None:
        """Check this state against its parameters.

        Args:
            parameters: Decoded contract parameters.

        Raises:
            DomainError: If the state is invalid.
        """
        ...

    def summarize(self, parameters: Any) -> Any:
        """Return a compact, self-contained summary of this state.

        Args:
            parameters: Decoded contract parameters.
        """
        ...

    def delta(self, parameters: Any, summary: Any) -> Any:
        """Compute what a peer whose state summarizes to ``summary`` is missing.

        The result need not be minimal, only sufficient.

        Args:
            parameters: Decoded contract parameters.
            summary: The peer's summary.
        """
        ...

    def apply_delta(self, parameters: Any, delta: Any) -> None:
        """Fold a delta into this state (in-place).

        Args:
            parameters: Decoded contract parameters.
            delta: A delta produced by ``delta()`` on some peer.

        Raises:
            DomainError: If the delta is malformed or cannot be applied.
        """
        ...

    def to_dict(self) -> Any:
        """Convert this state to a plain value for encoding."""
        ...

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        """Build a state from a plain value.

        Args:
            data: Value produced by ``to_dict()``.

        Raises:
            KeyError, TypeError, ValueError: If the value is malformed.
        """
        ...


@runtime_checkable
class RelatedStateAware(Protocol):
    """Extension for state types whose validity depends on other contracts."""

    def verify_related(self, parameters: Any, related: RelatedStates) -> None:
        """Check this state, consulting related contract states.

        Reading an unsupplied key through ``related.get`` (or calling
        ``related.mark_needed``) registers it; the adapter then requests
        those states from the host instead of reporting a verdict.

        Args:
            parameters: Decoded contract parameters.
            related: Registry scoped to the current operation call.

        Raises:
            DomainError: If the state is invalid given what is known.
        """
        ...
