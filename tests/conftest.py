"""
Shared pytest fixtures for composablestate tests.
"""

import logging

import pytest

from composablestate import ContractAdapter, OperationLog
from composablestate.components import Counter, LinkSet


@pytest.fixture
def counter_adapter() -> ContractAdapter:
    return ContractAdapter(Counter)


@pytest.fixture
def link_adapter() -> ContractAdapter:
    return ContractAdapter(LinkSet)


@pytest.fixture
def operation_log() -> OperationLog:
    return OperationLog()


@pytest.fixture(autouse=True)
def reset_composablestate_logging():
    """Reset logging state before each test.

    Removes all handlers except a fresh NullHandler and resets the level so
    logging configuration from one test cannot affect another.
    """
    logger = logging.getLogger("composablestate")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()
