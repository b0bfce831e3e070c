"""composablestate: convergence protocol for composable contract state.

A contract's state is validated, summarized, diffed and updated through
four byte-level operations. State types plug in by implementing the
``ComposableState`` protocol (and ``RelatedStateAware`` when their
validity depends on other contracts); ``ContractAdapter`` handles
decoding, dependency requests and atomic update batches.

Usage::

    from composablestate import ContractAdapter, DeltaUpdate
    from composablestate.components import Counter

    adapter = ContractAdapter(Counter)
    adapter.validate_state(b"{}", b'{"count":1}', [])
    adapter.update_state(b"{}", b'{"count":3}', [DeltaUpdate(b'{"add":2}')])

The library is silent by default; see ``composablestate.logging_config``.
"""

import logging

from composablestate.adapter import ContractAdapter
from composablestate.core import (
    Codec,
    ComposableState,
    ContractError,
    DecodeError,
    DeltaUpdate,
    DomainError,
    EncodeError,
    JsonCodec,
    RelatedStateAware,
    RelatedStates,
    RelatedStateUpdate,
    StateUpdate,
    UnresolvedDependencies,
    UpdateData,
    UpdateModification,
    ValidateResult,
    ValidationOutcome,
)
from composablestate.instrumentation import OperationLog, OperationRecord
from composablestate.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from composablestate.resolution import DependencyResolver

__version__ = "0.1.0"

logging.getLogger("composablestate").addHandler(logging.NullHandler())

__all__ = [
    # Adapter
    "ContractAdapter",
    "DependencyResolver",
    # Capability
    "ComposableState",
    "RelatedStateAware",
    "RelatedStates",
    # Codec
    "Codec",
    "JsonCodec",
    # Results
    "ValidateResult",
    "ValidationOutcome",
    "UpdateData",
    "StateUpdate",
    "DeltaUpdate",
    "RelatedStateUpdate",
    "UpdateModification",
    # Errors
    "ContractError",
    "DecodeError",
    "EncodeError",
    "DomainError",
    "UnresolvedDependencies",
    # Instrumentation
    "OperationLog",
    "OperationRecord",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]
