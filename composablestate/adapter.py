"""Contract adapter: the byte-level surface of a composable state type.

``ContractAdapter`` exposes the four host operations. Each one decodes
its payloads through the codec, runs the domain logic of the state type
and encodes the result:

- ``validate_state``: Valid, Invalid, or a request for related states.
- ``summarize_state``: compact summary for peers.
- ``get_state_delta``: what a peer at a given summary is missing.
- ``update_state``: fold a batch of deltas and replacements atomically.

Every input is decoded before any domain code runs. A decode failure
raises ``DecodeError`` naming the input and nothing else happens.

Example::

    from composablestate import ContractAdapter
    from composablestate.components import Counter

    adapter = ContractAdapter(Counter)
    adapter.validate_state(b"{}", b'{"count":1}', [])       # Valid
    adapter.get_state_delta(b"{}", b'{"count":5}', b'{"count":3}')
    # b'{"add":2}'
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from composablestate.core.codec import JsonCodec
from composablestate.core.errors import DecodeError, DomainError, EncodeError
from composablestate.core.protocol import RelatedStateAware
from composablestate.core.related import RelatedStates
from composablestate.core.results import (
    DeltaUpdate,
    RelatedStateUpdate,
    StateUpdate,
    UpdateModification,
    ValidateResult,
)
from composablestate.instrumentation import OperationRecord

if TYPE_CHECKING:
    from collections.abc import Generator, Hashable, Iterable

    from composablestate.core.codec import Codec
    from composablestate.core.protocol import ComposableState
    from composablestate.core.results import UpdateData
    from composablestate.instrumentation import OperationLog

    RelatedInput = Mapping[Hashable, bytes | None] | Iterable[tuple[Hashable, bytes | None]]

logger = logging.getLogger(__name__)


@dataclass
class _Call:
    outcome: str = "ok"
    detail: dict[str, Any] = field(default_factory=dict)


def _diagnostic(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing key {exc.args[0]!r}" if exc.args else "missing key"
    return str(exc) or type(exc).__name__


def _declared(state_type: type, attribute: str, explicit: type | None) -> type | None:
    if explicit is not None:
        return explicit
    return getattr(state_type, attribute, None)


class ContractAdapter:
    """Byte-level host interface for one composable state type.

    The adapter holds configuration only. Every call owns its decoded
    inputs and its related-state registry, so one adapter can serve any
    number of contract instances.

    Args:
        state_type: Class implementing ``ComposableState``.
        codec: Payload codec. Defaults to ``JsonCodec``.
        parameters_type: Optional class with ``from_dict`` for parameters.
            Defaults to ``state_type.parameters_type`` when declared;
            otherwise decoded plain values are passed through.
        summary_type: As ``parameters_type``, for summaries.
        delta_type: As ``parameters_type``, for deltas.
        allow_empty_parameters: Decode empty parameter bytes as ``{}``.
        summarize_updates: Include the new state's summary in
            ``update_state`` results.
        recorder: Optional ``OperationLog`` that receives one record per call.
    """

    def __init__(
        self,
        state_type: type[ComposableState],
        *,
        codec: Codec | None = None,
        parameters_type: type | None = None,
        summary_type: type | None = None,
        delta_type: type | None = None,
        allow_empty_parameters: bool = True,
        summarize_updates: bool = True,
        recorder: OperationLog | None = None,
    ):
        self._state_type = state_type
        self._codec = codec if codec is not None else JsonCodec()
        self._parameters_type = _declared(state_type, "parameters_type", parameters_type)
        self._summary_type = _declared(state_type, "summary_type", summary_type)
        self._delta_type = _declared(state_type, "delta_type", delta_type)
        self._allow_empty_parameters = allow_empty_parameters
        self._summarize_updates = summarize_updates
        self._recorder = recorder

    @property
    def state_type(self) -> type[ComposableState]:
        """The state class this adapter serves."""
        return self._state_type

    @property
    def codec(self) -> Codec:
        """The payload codec."""
        return self._codec

    # =========================================================================
    # Host operations
    # =========================================================================

    def validate_state(
        self,
        parameters: bytes,
        state: bytes,
        related: RelatedInput = (),
    ) -> ValidateResult:
        """Decide whether ``state`` is valid.

        Related states the verification consulted but the host did not
        supply turn the result into ``RequestRelated``, whatever the
        verification itself concluded. A rejected state is reported as
        ``Invalid``, not raised.

        Args:
            parameters: Encoded contract parameters.
            state: Encoded candidate state.
            related: ``(key, encoded_state_or_None)`` pairs or a mapping.

        Returns:
            The validation verdict.

        Raises:
            DecodeError: If any input cannot be decoded.
        """
        with self._call("validate_state") as call:
            params = self._decode_parameters(parameters)
            candidate = self._decode(state, "state", self._state_type)
            registry = RelatedStates(self._decode_related(related))

            failure: DomainError | None = None
            try:
                try:
                    self._verify(candidate, params, registry)
                except DomainError as exc:
                    failure = exc
                missing = registry.missing()
            finally:
                registry.close()

            if missing:
                result = ValidateResult.request_related(missing)
                call.detail["related"] = list(missing)
            elif failure is not None:
                result = ValidateResult.invalid(failure.message)
                call.detail["reason"] = failure.message
            else:
                result = ValidateResult.valid()

            call.outcome = result.outcome.value
            logger.debug("validate_state: %s", result.outcome.value)
            return result

    def summarize_state(self, parameters: bytes, state: bytes) -> bytes:
        """Return the encoded summary of ``state``.

        Raises:
            DecodeError: If any input cannot be decoded.
            EncodeError: If the summary cannot be encoded.
        """
        with self._call("summarize_state"):
            params = self._decode_parameters(parameters)
            current = self._decode(state, "state", self._state_type)
            return self._encode(current.summarize(params), "summary")

    def get_state_delta(self, parameters: bytes, state: bytes, summary: bytes) -> bytes:
        """Return the encoded delta a peer at ``summary`` needs to reach ``state``.

        Raises:
            DecodeError: If any input cannot be decoded.
            EncodeError: If the delta cannot be encoded.
        """
        with self._call("get_state_delta"):
            params = self._decode_parameters(parameters)
            current = self._decode(state, "state", self._state_type)
            peer_summary = self._decode(summary, "summary", self._summary_type)
            return self._encode(current.delta(params, peer_summary), "delta")

    def update_state(
        self,
        parameters: bytes,
        state: bytes,
        updates: Iterable[UpdateData],
    ) -> UpdateModification:
        """Fold a batch of updates into ``state``, all or nothing.

        ``RelatedStateUpdate`` entries are collected first, wherever they
        appear. The remaining entries fold left to right: a ``DeltaUpdate``
        goes through ``apply_delta``, a ``StateUpdate`` is verified and
        then replaces the state produced so far.

        Args:
            parameters: Encoded contract parameters.
            state: Encoded current state.
            updates: Ordered batch of update entries.

        Returns:
            The new state and its summary, or a request for related states
            a replacement could not be verified without.

        Raises:
            DecodeError: If any input or entry payload cannot be decoded, or
                an entry is not one of the ``UpdateData`` variants.
            DomainError: If an entry is rejected. ``index`` is the 1-based
                position of that entry; nothing from the batch is kept.
            EncodeError: If the result cannot be encoded.
        """
        with self._call("update_state") as call:
            params = self._decode_parameters(parameters)
            current = self._decode(state, "state", self._state_type)
            steps, related_entries = self._decode_updates(updates)
            call.detail["updates"] = len(steps) + len(related_entries)

            registry = RelatedStates(related_entries)
            try:
                for index, entry in steps:
                    if isinstance(entry, _Replacement):
                        failure: DomainError | None = None
                        try:
                            self._verify(entry.state, params, registry)
                        except DomainError as exc:
                            failure = exc
                        missing = registry.missing()
                        if missing:
                            call.outcome = "request_related"
                            call.detail["related"] = list(missing)
                            logger.debug(
                                "update_state: update #%d needs %d related state(s)",
                                index,
                                len(missing),
                            )
                            return UpdateModification.requires(missing)
                        if failure is not None:
                            raise self._rejected(failure, index, "state") from failure
                        current = entry.state
                    else:
                        try:
                            current.apply_delta(params, entry)
                        except DomainError as exc:
                            raise self._rejected(exc, index, "delta") from exc
            finally:
                registry.close()

            new_state = self._encode(current, "state")
            new_summary = None
            if self._summarize_updates:
                new_summary = self._encode(current.summarize(params), "summary")
            return UpdateModification.valid(new_state, new_summary)

    # =========================================================================
    # Decoding / encoding
    # =========================================================================

    def _decode(
        self,
        data: bytes,
        field_name: str,
        target: type | None,
        *,
        index: int | None = None,
        key: Hashable | None = None,
    ) -> Any:
        try:
            value = self._codec.decode(data)
            if target is not None:
                value = target.from_dict(value)
        except (ValueError, TypeError, KeyError) as exc:
            logger.debug(
                "Failed to decode %s: %s",
                field_name,
                _diagnostic(exc),
                extra={"field": field_name, "index": index},
            )
            raise DecodeError(field_name, _diagnostic(exc), index=index, key=key) from exc
        return value

    def _decode_parameters(self, data: bytes) -> Any:
        if self._allow_empty_parameters and not data:
            if self._parameters_type is None:
                return {}
            try:
                return self._parameters_type.from_dict({})
            except (ValueError, TypeError, KeyError) as exc:
                raise DecodeError("parameters", _diagnostic(exc)) from exc
        return self._decode(data, "parameters", self._parameters_type)

    def _decode_related(self, related: RelatedInput) -> list[tuple[Hashable, Any]]:
        pairs = related.items() if isinstance(related, Mapping) else related
        entries = []
        for key, payload in pairs:
            if payload is None:
                entries.append((key, None))
            else:
                entries.append((key, self._decode(payload, "related", None, key=key)))
        return entries

    def _decode_updates(
        self, updates: Iterable[UpdateData]
    ) -> tuple[list[tuple[int, Any]], list[tuple[Hashable, Any]]]:
        steps: list[tuple[int, Any]] = []
        related: list[tuple[Hashable, Any]] = []
        for index, update in enumerate(updates, start=1):
            if isinstance(update, DeltaUpdate):
                steps.append((index, self._decode(update.delta, "delta", self._delta_type, index=index)))
            elif isinstance(update, StateUpdate):
                candidate = self._decode(update.state, "state", self._state_type, index=index)
                steps.append((index, _Replacement(candidate)))
            elif isinstance(update, RelatedStateUpdate):
                related.append(
                    (update.key, self._decode(update.state, "related", None, index=index, key=update.key))
                )
            else:
                raise DecodeError(
                    "update", f"unsupported entry type {type(update).__name__}", index=index
                )
        return steps, related

    def _encode(self, value: Any, field_name: str) -> bytes:
        plain = value.to_dict() if hasattr(value, "to_dict") else value
        try:
            return self._codec.encode(plain)
        except (TypeError, ValueError) as exc:
            raise EncodeError(field_name, _diagnostic(exc)) from exc

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _verify(state: Any, params: Any, registry: RelatedStates) -> None:
        if isinstance(state, RelatedStateAware):
            state.verify_related(params, registry)
        else:
            state.verify(params)

    @staticmethod
    def _rejected(exc: DomainError, index: int, kind: str) -> DomainError:
        logger.info(
            "update_state: update #%d (%s) rejected: %s",
            index,
            kind,
            exc.message,
            extra={"operation": "update_state", "index": index},
        )
        return DomainError(exc.message, index=index, kind=kind)

    @contextmanager
    def _call(self, operation: str) -> Generator[_Call, None, None]:
        call = _Call()
        started = time.perf_counter()
        try:
            yield call
        except DecodeError as exc:
            call.outcome = "decode_error"
            call.detail["field"] = exc.field
            raise
        except EncodeError as exc:
            call.outcome = "encode_error"
            call.detail["field"] = exc.field
            raise
        except DomainError as exc:
            call.outcome = "domain_error"
            call.detail["index"] = exc.index
            raise
        except Exception:
            call.outcome = "error"
            raise
        finally:
            if self._recorder is not None:
                self._recorder.record(
                    OperationRecord(
                        operation=operation,
                        outcome=call.outcome,
                        duration_s=time.perf_counter() - started,
                        detail=call.detail,
                    )
                )

    def __repr__(self) -> str:
        return f"ContractAdapter(state_type={self._state_type.__name__}, codec={self._codec!r})"


@dataclass(frozen=True)
class _Replacement:
    """A decoded ``StateUpdate`` waiting its turn in the fold."""

    state: Any
