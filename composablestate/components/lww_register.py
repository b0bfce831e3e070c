"""Last-Writer-Wins Register (LWW-Register) contract state.

A register that resolves concurrent writes by keeping the value with
the highest ``Version``. Versions order by ``(counter, node_id)``, so
ties between writers are broken deterministically.

The summary is the version a peer holds. The delta is the whole
register when the producer is newer, otherwise empty.

Example::

    r = LWWRegister()
    r.set("hello", Version(1, "node-a"))
    assert r.value == "hello"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Self

from composablestate.components.common import (
    optional_str_set,
    require_int,
    require_mapping,
    require_str,
)
from composablestate.core.errors import DomainError


@dataclass(frozen=True, order=True)
class Version:
    """Totally ordered write version.

    Attributes:
        counter: Logical write counter.
        node_id: Writer that produced this version (tie-breaker).
    """

    counter: int
    node_id: str

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "version")
        return cls(
            counter=require_int(data["counter"], "counter", minimum=0),
            node_id=require_str(data["node_id"], "node_id"),
        )

    def to_dict(self) -> dict:
        return {"counter": self.counter, "node_id": self.node_id}


def _optional_version(data: Any) -> Version | None:
    return Version.from_dict(data) if data is not None else None


@dataclass(frozen=True)
class LWWRegisterParameters:
    """Contract parameters for ``LWWRegister``.

    Attributes:
        writers: Node ids allowed to write (None for any node).
    """

    writers: frozenset[str] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "parameters")
        return cls(writers=optional_str_set(data, "writers"))

    def to_dict(self) -> dict:
        return {} if self.writers is None else {"writers": sorted(self.writers)}


@dataclass(frozen=True)
class LWWRegisterSummary:
    version: Version | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "summary")
        return cls(_optional_version(data.get("version")))

    def to_dict(self) -> dict:
        return {"version": self.version.to_dict() if self.version else None}


@dataclass(frozen=True)
class LWWRegisterDelta:
    """The producer's value and version, or nothing if the peer is current."""

    value: Any = None
    version: Version | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "delta")
        return cls(value=data.get("value"), version=_optional_version(data.get("version")))

    def to_dict(self) -> dict:
        if self.version is None:
            return {}
        return {"value": self.value, "version": self.version.to_dict()}


class LWWRegister:
    """Last-Writer-Wins register contract state.

    Args:
        value: Initial value (default None).
        version: Initial version (default None = never written).
    """

    __slots__ = ("_value", "_version")

    parameters_type = LWWRegisterParameters
    summary_type = LWWRegisterSummary
    delta_type = LWWRegisterDelta

    def __init__(self, value: Any = None, version: Version | None = None):
        self._value = value
        self._version = version

    @property
    def value(self) -> Any:
        """Current value of the register."""
        return self._value

    @property
    def version(self) -> Version | None:
        """Version of the current value."""
        return self._version

    def set(self, value: Any, version: Version) -> None:
        """Set the value if ``version`` is newer than the current one."""
        if self._version is None or version > self._version:
            self._value = value
            self._version = version

    def verify(self, parameters: LWWRegisterParameters) -> None:
        if self._version is None:
            if self._value is not None:
                raise DomainError("unversioned register must be empty")
            return
        self._check_writer(parameters, self._version)

    def summarize(self, parameters: LWWRegisterParameters) -> LWWRegisterSummary:
        return LWWRegisterSummary(self._version)

    def delta(self, parameters: LWWRegisterParameters, summary: LWWRegisterSummary) -> LWWRegisterDelta:
        if self._version is None:
            return LWWRegisterDelta()
        if summary.version is not None and summary.version >= self._version:
            return LWWRegisterDelta()
        return LWWRegisterDelta(self._value, self._version)

    def apply_delta(self, parameters: LWWRegisterParameters, delta: LWWRegisterDelta) -> None:
        """Keep the delta's value if its version is newer.

        Raises:
            DomainError: If the delta was written by a disallowed writer.
        """
        if delta.version is None:
            return
        self._check_writer(parameters, delta.version)
        self.set(delta.value, delta.version)

    @staticmethod
    def _check_writer(parameters: LWWRegisterParameters, version: Version) -> None:
        if parameters.writers is not None and version.node_id not in parameters.writers:
            raise DomainError(f"writer {version.node_id!r} is not allowed")

    def to_dict(self) -> dict:
        return {
            "value": self._value,
            "version": self._version.to_dict() if self._version else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        data = require_mapping(data, "state")
        return cls(value=data.get("value"), version=_optional_version(data.get("version")))

    def __repr__(self) -> str:
        return f"LWWRegister(value={self._value!r}, version={self._version!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LWWRegister):
            return NotImplemented
        return self._value == other._value and self._version == other._version
