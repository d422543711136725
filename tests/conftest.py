import os

import pulp
import pytest

from multiway.utils.logging import LogLevel, MultiwayLogger


@pytest.fixture
def cbc_solver():
    """Quiet CBC instance bundled with PuLP."""
    return pulp.PULP_CBC_CMD(msg=0)


@pytest.fixture
def example_sizes():
    """Sizes with a perfect 3-way split (every group sums to 3)."""
    return [1, 1, 1, 3, 2, 1]


@pytest.fixture
def species_counts():
    """Individuals per species, 100 in total."""
    return [12, 19, 8, 17, 15, 11, 18]


@pytest.fixture(autouse=True)
def _reset_log_level(monkeypatch):
    monkeypatch.delenv("MULTIWAY_EFFECTIVE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("MULTIWAY_SOLVER", raising=False)
    MultiwayLogger.set_level(LogLevel.NORMAL)
    yield
    # setup_logging exports the effective level, which monkeypatch does not track
    os.environ.pop("MULTIWAY_EFFECTIVE_LOG_LEVEL", None)
    MultiwayLogger.set_level(LogLevel.NORMAL)
