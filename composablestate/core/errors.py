"""Error taxonomy for contract operations.

Every failure the adapter surfaces derives from ``ContractError``:

- **DecodeError**: an input payload could not be decoded. Carries the
  field that failed and the codec diagnostic.
- **EncodeError**: a domain value could not be encoded.
- **DomainError**: the state type rejected a state or a delta. Raised by
  domain code; during ``update_state`` the adapter re-raises it tagged
  with the batch position of the failing entry.
- **UnresolvedDependencies**: the host-side resolution driver gave up
  waiting for related states.

A rejected state during ``validate_state`` is not an error: it is the
``Invalid`` outcome.
"""

from __future__ import annotations

from typing import Any, Hashable


class ContractError(Exception):
    """Base class for all contract operation failures."""


class DecodeError(ContractError):
    """An input payload could not be decoded.

    Args:
        field: Which input failed (``"parameters"``, ``"state"``,
            ``"summary"``, ``"delta"`` or ``"related"``).
        message: Diagnostic from the codec or the domain constructor.
        index: 1-based position within an update batch, if any.
        key: Related-state identifier, if the failing input was a
            related state.
    """

    def __init__(
        self,
        field: str,
        message: str,
        index: int | None = None,
        key: Hashable | None = None,
    ):
        self.field = field
        self.message = message
        self.index = index
        self.key = key
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = self.field
        if self.index is not None:
            where = f"{where} (update #{self.index})"
        if self.key is not None:
            where = f"{where} for {self.key!r}"
        return f"failed to decode {where}: {self.message}"


class EncodeError(ContractError):
    """A domain value could not be encoded.

    Args:
        field: Which output failed (``"state"``, ``"summary"`` or ``"delta"``).
        message: Diagnostic from the codec.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"failed to encode {field}: {message}")


class DomainError(ContractError):
    """A state or delta was rejected by the domain type.

    Domain code raises this with just a message. ``update_state`` re-raises
    it with ``index`` and ``kind`` filled in.

    Args:
        message: Why the state or delta was rejected.
        index: 1-based position of the failing update entry.
        kind: ``"state"`` for a rejected replacement, ``"delta"`` for a
            rejected delta.
    """

    def __init__(self, message: str, index: int | None = None, kind: str | None = None):
        self.message = message
        self.index = index
        self.kind = kind
        if index is None:
            super().__init__(message)
        else:
            super().__init__(f"update #{index} ({kind}) rejected: {message}")


class UnresolvedDependencies(ContractError):
    """Related states could not be supplied within the resolution bound.

    Args:
        keys: Identifiers still unresolved.
        rounds: Fetch rounds attempted.
    """

    def __init__(self, keys: tuple[Any, ...], rounds: int):
        self.keys = tuple(keys)
        self.rounds = rounds
        super().__init__(
            f"{len(self.keys)} related state(s) unresolved after {rounds} round(s): "
            f"{', '.join(repr(k) for k in self.keys)}"
        )
