"""Value types exchanged between the host and the contract adapter.

Outcomes:

- **ValidateResult**: ``Valid``, ``Invalid`` or ``RequestRelated(keys)``.
- **UpdateModification**: the folded state (plus its summary), or a
  request for related states the batch could not be verified without.

Update batch entries are tagged by class: ``StateUpdate`` (full
replacement), ``DeltaUpdate`` and ``RelatedStateUpdate`` (a dependency's
state supplied alongside the batch). Payloads are opaque bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Hashable

if TYPE_CHECKING:
    from collections.abc import Iterable


class ValidationOutcome(Enum):
    """Verdict of ``validate_state``."""

    VALID = "valid"
    INVALID = "invalid"
    REQUEST_RELATED = "request_related"


@dataclass(frozen=True)
class ValidateResult:
    """Result of validating a state.

    Attributes:
        outcome: The verdict.
        related: Keys whose states are needed (only for REQUEST_RELATED).
        reason: Why the state was rejected (only for INVALID).
    """

    outcome: ValidationOutcome
    related: tuple[Hashable, ...] = ()
    reason: str | None = None

    @classmethod
    def valid(cls) -> ValidateResult:
        return cls(ValidationOutcome.VALID)

    @classmethod
    def invalid(cls, reason: str | None = None) -> ValidateResult:
        return cls(ValidationOutcome.INVALID, reason=reason)

    @classmethod
    def request_related(cls, keys: Iterable[Hashable]) -> ValidateResult:
        keys = tuple(keys)
        if not keys:
            raise ValueError("request_related needs at least one key")
        return cls(ValidationOutcome.REQUEST_RELATED, related=keys)

    @property
    def is_valid(self) -> bool:
        return self.outcome is ValidationOutcome.VALID

    @property
    def is_invalid(self) -> bool:
        return self.outcome is ValidationOutcome.INVALID

    @property
    def requests_related(self) -> bool:
        return self.outcome is ValidationOutcome.REQUEST_RELATED


@dataclass(frozen=True)
class StateUpdate:
    """Replace the current state outright (after verifying the new one)."""

    state: bytes


@dataclass(frozen=True)
class DeltaUpdate:
    """Fold a delta into the current state."""

    delta: bytes


@dataclass(frozen=True)
class RelatedStateUpdate:
    """Supply a related contract's state for verifying replacements."""

    key: Hashable
    state: bytes


UpdateData = StateUpdate | DeltaUpdate | RelatedStateUpdate


@dataclass(frozen=True)
class UpdateModification:
    """Result of folding an update batch.

    Exactly one of ``new_state`` and ``related`` is set.

    Attributes:
        new_state: Encoded state after the whole batch.
        summary: Encoded summary of ``new_state``, if requested.
        related: Keys needed before the batch can be applied.
    """

    new_state: bytes | None = None
    summary: bytes | None = None
    related: tuple[Hashable, ...] = ()

    @classmethod
    def valid(cls, new_state: bytes, summary: bytes | None = None) -> UpdateModification:
        return cls(new_state=new_state, summary=summary)

    @classmethod
    def requires(cls, keys: Iterable[Hashable]) -> UpdateModification:
        keys = tuple(keys)
        if not keys:
            raise ValueError("requires needs at least one key")
        return cls(related=keys)

    @property
    def requires_related(self) -> bool:
        return bool(self.related)
