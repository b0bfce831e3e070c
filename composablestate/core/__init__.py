"""Core contract primitives: capability protocols, registry, codec, results, errors."""

from composablestate.core.codec import Codec, JsonCodec
from composablestate.core.errors import (
    ContractError,
    DecodeError,
    DomainError,
    EncodeError,
    UnresolvedDependencies,
)
from composablestate.core.protocol import ComposableState, RelatedStateAware
from composablestate.core.related import RelatedStates
from composablestate.core.results import (
    DeltaUpdate,
    RelatedStateUpdate,
    StateUpdate,
    UpdateData,
    UpdateModification,
    ValidateResult,
    ValidationOutcome,
)

__all__ = [
    "Codec",
    "ComposableState",
    "ContractError",
    "DecodeError",
    "DeltaUpdate",
    "DomainError",
    "EncodeError",
    "JsonCodec",
    "RelatedStateAware",
    "RelatedStateUpdate",
    "RelatedStates",
    "StateUpdate",
    "UnresolvedDependencies",
    "UpdateData",
    "UpdateModification",
    "ValidateResult",
    "ValidationOutcome",
]
