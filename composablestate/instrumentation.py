"""Operation recording for contract adapters.

An ``OperationLog`` can be handed to a ``ContractAdapter`` to keep one
``OperationRecord`` per call: which operation ran, how it ended and how
long it took. The log is owned by the host and only ever appended to;
operation results never depend on it.

Example::

    log = OperationLog()
    adapter = ContractAdapter(Counter, recorder=log)
    adapter.validate_state(b"{}", b'{"count":1}', [])

    log.count("validate_state", "valid")  # 1
    df = log.to_dataframe()               # one row per call
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class OperationRecord:
    """One adapter call.

    Attributes:
        operation: Operation name (e.g. ``"update_state"``).
        outcome: How the call ended: ``"valid"``, ``"invalid"``,
            ``"request_related"``, ``"ok"``, ``"decode_error"``,
            ``"encode_error"`` or ``"domain_error"``.
        duration_s: Wall-clock duration in seconds.
        detail: Free-form context (failing field, batch size, keys).
    """

    operation: str
    outcome: str
    duration_s: float
    detail: dict[str, Any] = field(default_factory=dict)


class OperationLog:
    """Append-only list of ``OperationRecord`` entries."""

    COLUMNS = ["operation", "outcome", "duration_s", "detail"]

    def __init__(self) -> None:
        self._records: list[OperationRecord] = []

    @property
    def records(self) -> list[OperationRecord]:
        """All records in call order."""
        return list(self._records)

    def record(self, record: OperationRecord) -> None:
        self._records.append(record)

    def count(self, operation: str, outcome: str | None = None) -> int:
        """Number of recorded calls of ``operation``, optionally by outcome."""
        return sum(
            1
            for r in self._records
            if r.operation == operation and (outcome is None or r.outcome == outcome)
        )

    def clear(self) -> None:
        """Remove all records."""
        self._records.clear()

    def to_dataframe(self) -> pd.DataFrame:
        """Export records as a DataFrame, one row per call."""
        if not self._records:
            return pd.DataFrame(columns=self.COLUMNS)
        return pd.DataFrame([asdict(r) for r in self._records], columns=self.COLUMNS)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"OperationLog(records={len(self._records)})"
