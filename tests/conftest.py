from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from dialectkit.core.dialect import Capability, DependencyKind, DialectDescriptor
from dialectkit.registry import DriverRegistry
from dialectkit.utils.logging import ROOT_LOGGER_NAME, set_correlation_id

here = Path(__file__).parent
root_path = here.parent


@pytest.fixture
def registry() -> DriverRegistry:
    return DriverRegistry()


@pytest.fixture
def ansi_dialect() -> DialectDescriptor:
    """Dialect supporting every operation, dropping indexes and the primary key before a column."""
    return DialectDescriptor(
        name="ansi",
        capabilities=frozenset(Capability),
        drop_column_dependencies=(DependencyKind.INDEXES, DependencyKind.PRIMARY_KEY),
    )


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
    set_correlation_id(None)
