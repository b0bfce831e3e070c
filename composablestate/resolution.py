"""Host-side driver for the related-state resolution loop.

``validate_state`` never waits for dependencies: it answers
``RequestRelated(keys)`` and expects to be called again with those
states supplied. ``DependencyResolver`` runs that loop for hosts that
can fetch related states synchronously, with an explicit round bound.

Example::

    def fetch(keys):
        return {key: store.get(key) for key in keys}

    resolver = DependencyResolver(ContractAdapter(LinkSet), fetch, max_rounds=4)
    result = resolver.validate(b"", encoded_state)
    assert not result.requests_related
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from composablestate.core.errors import UnresolvedDependencies

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from composablestate.adapter import ContractAdapter
    from composablestate.core.results import ValidateResult

    FetchFn = Callable[[list[Hashable]], Mapping[Hashable, bytes | None]]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROUNDS = 8


class DependencyResolver:
    """Repeat ``validate_state`` until it stops requesting related states.

    Args:
        adapter: Adapter for the contract being validated.
        fetch: Called with the requested keys; returns encoded states.
            Keys it cannot resolve may be omitted or mapped to None.
        max_rounds: Maximum fetch rounds before giving up.
    """

    def __init__(
        self,
        adapter: ContractAdapter,
        fetch: FetchFn,
        *,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ):
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {max_rounds}")
        self._adapter = adapter
        self._fetch = fetch
        self._max_rounds = max_rounds

    @property
    def max_rounds(self) -> int:
        return self._max_rounds

    def validate(
        self,
        parameters: bytes,
        state: bytes,
        related: Mapping[Hashable, bytes | None] | Iterable[tuple[Hashable, bytes | None]] = (),
    ) -> ValidateResult:
        """Validate ``state``, fetching related states as they are requested.

        Args:
            parameters: Encoded contract parameters.
            state: Encoded state to validate.
            related: Related states already known to the host.

        Returns:
            A ``Valid`` or ``Invalid`` result.

        Raises:
            UnresolvedDependencies: If a round resolves nothing new or
                ``max_rounds`` is exhausted.
            DecodeError: If any payload cannot be decoded.
        """
        known: dict[Hashable, bytes | None] = dict(
            related.items() if isinstance(related, Mapping) else related
        )
        rounds = 0
        while True:
            result = self._adapter.validate_state(parameters, state, known)
            if not result.requests_related:
                logger.debug("Resolved after %d round(s): %s", rounds, result.outcome.value)
                return result

            if rounds >= self._max_rounds:
                raise UnresolvedDependencies(result.related, rounds)

            rounds += 1
            fetched = self._fetch(list(result.related))
            progress = False
            for key in result.related:
                payload = fetched.get(key)
                if payload is not None:
                    known[key] = payload
                    progress = True
                else:
                    known.setdefault(key, None)
            if not progress:
                logger.info("Fetch round %d resolved none of %d key(s)", rounds, len(result.related))
                raise UnresolvedDependencies(result.related, rounds)
