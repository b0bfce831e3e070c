"""Reference composable state types.

Provided states:

- **Counter**: Single grow-only count (delta = amount to add)
- **GCounter**: Grow-only per-node counter (element-wise max merge)
- **LWWRegister**: Last-writer-wins register ordered by ``Version``
- **LinkSet**: Grow-only set of links whose validity depends on the
  linked contracts' states (``RelatedStateAware``)
"""

from composablestate.components.counter import (
    Counter,
    CounterDelta,
    CounterParameters,
    CounterSummary,
)
from composablestate.components.g_counter import (
    GCounter,
    GCounterDelta,
    GCounterParameters,
    GCounterSummary,
)
from composablestate.components.link_set import (
    LinkSet,
    LinkSetDelta,
    LinkSetParameters,
    LinkSetSummary,
)
from composablestate.components.lww_register import (
    LWWRegister,
    LWWRegisterDelta,
    LWWRegisterParameters,
    LWWRegisterSummary,
    Version,
)

__all__ = [
    "Counter",
    "CounterDelta",
    "CounterParameters",
    "CounterSummary",
    "GCounter",
    "GCounterDelta",
    "GCounterParameters",
    "GCounterSummary",
    "LWWRegister",
    "LWWRegisterDelta",
    "LWWRegisterParameters",
    "LWWRegisterSummary",
    "LinkSet",
    "LinkSetDelta",
    "LinkSetParameters",
    "LinkSetSummary",
    "Version",
]
