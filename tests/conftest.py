"""Pytest fixtures for gigsim tests."""

from datetime import datetime, timedelta

import pytest

from gigsim.config import SCENARIO_PRESETS, ParameterVector
from gigsim.engine import EquilibriumEngine, EquilibriumSnapshot
from gigsim.history import SnapshotHistory


@pytest.fixture
def engine() -> EquilibriumEngine:
    return EquilibriumEngine()


@pytest.fixture
def baseline_params() -> ParameterVector:
    """r=0.2, e=2.5, eta=0.85, tau=30, lambda=0 with default policy levers."""
    return ParameterVector()


@pytest.fixture
def baseline_snapshot(engine, baseline_params) -> EquilibriumSnapshot:
    return engine.evaluate(baseline_params)


@pytest.fixture
def scenario_history(engine) -> SnapshotHistory:
    """One evaluation per preset, one minute apart."""
    history = SnapshotHistory()
    start = datetime(2026, 1, 1, 9, 0, 0)
    for i, params in enumerate(SCENARIO_PRESETS.values()):
        history.append(params, engine.evaluate(params), start + timedelta(minutes=i))
    return history
