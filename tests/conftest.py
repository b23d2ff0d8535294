'''
Shared fixtures for the test suite.
'''

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:

    '''Restore default structlog configuration, context and root logging after each test.'''

    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    for handler in list(root_logger.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
