# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Pytest configuration and fixtures for RainMaker tests."""
from __future__ import annotations

import random

import pytest

from rainmaker.simulator import (
    ResponseEngine,
    SprinklerSimulatorState,
    TimingConfig,
    reset_shared_state,
)


# ============================================================================
# State and Engine Fixtures
# ============================================================================

@pytest.fixture
def state() -> SprinklerSimulatorState:
    """A freshly initialized device state."""
    return SprinklerSimulatorState(rng=random.Random(1234))


@pytest.fixture
def engine() -> ResponseEngine:
    """A response engine with deterministic randomness."""
    return ResponseEngine(rng=random.Random(42))


@pytest.fixture
def timing_config() -> TimingConfig:
    """Create a fast timing config for tests."""
    return TimingConfig(open_delay=0.01, message_delay=0.02, response_delay=0.02)


@pytest.fixture(autouse=True)
def fresh_shared_state():
    """Keep the process-wide state from leaking between tests."""
    reset_shared_state()
    yield
    reset_shared_state()


# ============================================================================
# Utility Fixtures
# ============================================================================

@pytest.fixture
def callback_tracker() -> dict[str, list]:
    """Track callback invocations."""
    return {
        "calls": [],
        "args": [],
    }


@pytest.fixture
def make_callback(callback_tracker):
    """Factory to create tracked callbacks."""
    def factory(name: str = "callback"):
        def callback(*args, **kwargs):
            callback_tracker["calls"].append(name)
            callback_tracker["args"].append((args, kwargs))
        return callback
    return factory
