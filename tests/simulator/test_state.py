# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for simulator state module (state.py)."""
from __future__ import annotations

import random

from rainmaker.const import (
    WIFI_MODE_AP_STA,
    WIFI_MODE_STA,
    ZONE_ID_MAX,
    ZONE_ID_MIN,
    ZONE_STATUS_DISABLED,
    ZONE_STATUS_IDLE,
)
from rainmaker.simulator import (
    Program,
    ProgramSchedule,
    ProgramZone,
    SprinklerSimulatorState,
    TimingConfig,
    Zone,
)


# ============================================================================
# TimingConfig Tests
# ============================================================================

class TestTimingConfig:
    """Tests for TimingConfig dataclass."""

    def test_default_values(self):
        """Default delays should mimic a real round trip."""
        config = TimingConfig()
        assert config.open_delay == 0.1
        assert config.message_delay == 0.2
        assert config.response_delay == 1.0

    def test_custom_values(self):
        config = TimingConfig(open_delay=0, message_delay=0.5)
        assert config.open_delay == 0
        assert config.message_delay == 0.5
        assert config.response_delay == 1.0


# ============================================================================
# Zone / Program Tests
# ============================================================================

class TestZone:
    """Tests for Zone dataclass."""

    def test_to_dict(self):
        zone = Zone(7, "Hedge", 3, True, 100.0, ZONE_STATUS_IDLE)
        assert zone.to_dict() == {
            "id": 7,
            "name": "Hedge",
            "output": 3,
            "enabled": True,
            "lastRun": 100.0,
            "status": "idle",
        }

    def test_to_dict_without_status(self):
        """A zone with no status should not report one."""
        zone = Zone(7, "Hedge", 3)
        assert "status" not in zone.to_dict()


class TestProgram:
    """Tests for Program dataclass."""

    def test_to_dict(self):
        program = Program(
            id=3,
            name="Evening",
            schedule=ProgramSchedule(days={5, 1, 3}, start_time="18:00"),
            zones=[ProgramZone(1, 30, 1), ProgramZone(2, 60, 2)],
        )
        result = program.to_dict()
        assert result["schedule"] == {"days": [1, 3, 5], "startTime": "18:00"}
        assert result["zones"] == [
            {"id": 1, "duration": 30, "order": 1},
            {"id": 2, "duration": 60, "order": 2},
        ]
        assert result["enabled"] is True
        assert result["status"] == "scheduled"


# ============================================================================
# SprinklerSimulatorState Tests
# ============================================================================

class TestSprinklerSimulatorState:
    """Tests for SprinklerSimulatorState."""

    def test_default_settings(self, state):
        assert state.get_settings() == {
            "ota": {"requiresPassword": True},
            "wifi": {"connected": False, "setup": False},
        }

    def test_default_collections(self, state):
        assert [zone.id for zone in state.zones] == [1, 2, 3, 4]
        assert [program.id for program in state.programs] == [1, 2]

    def test_default_zone_status_follows_enabled(self, state):
        for zone in state.zones:
            if not zone.enabled:
                assert zone.status == ZONE_STATUS_DISABLED
            else:
                assert zone.status != ZONE_STATUS_DISABLED

    def test_states_are_independent(self):
        """Separate states should not share collections."""
        first = SprinklerSimulatorState()
        second = SprinklerSimulatorState()
        first.set_zone_enabled(1, False)
        first.set_wifi(True)
        assert second.find_zone(1).enabled is True
        assert second.wifi_connected is False

    def test_wifi_status_follows_settings(self, state):
        assert state.get_wifi_status()["mode"] == WIFI_MODE_AP_STA
        state.set_wifi(True)
        status = state.get_wifi_status()
        assert status["mode"] == WIFI_MODE_STA
        assert status["sta"]["connected"] is True

    def test_set_wifi_sets_connected_and_setup(self, state):
        state.set_wifi(True)
        assert state.wifi_connected is True
        assert state.wifi_setup is True
        state.set_wifi(False)
        assert state.wifi_connected is False
        assert state.wifi_setup is False

    def test_wifi_status_is_a_copy(self, state):
        """Mutating a returned status must not change later snapshots."""
        state.get_wifi_status()["sta"]["connected"] = True
        assert state.get_wifi_status()["sta"]["connected"] is False

    def test_system_info_is_a_copy(self, state):
        state.get_system_info()["hardware"]["chip_model"] = "changed"
        assert state.get_system_info()["hardware"]["chip_model"] == "ESP32"


class TestUpsertZone:
    """Tests for SprinklerSimulatorState.upsert_zone."""

    def test_update_existing(self, state):
        zone = state.upsert_zone(2, "Vegetables", 12)
        assert zone.id == 2
        assert len(state.zones) == 4
        updated = state.find_zone(2)
        assert updated.name == "Vegetables"
        assert updated.output == 12
        assert updated.enabled is True

    def test_create_new(self, state):
        existing = {zone.id for zone in state.zones}
        zone = state.upsert_zone(None, "Herbs", 5)
        assert len(state.zones) == 5
        assert state.zones[-1] is zone
        assert zone.id not in existing
        assert ZONE_ID_MIN <= zone.id < ZONE_ID_MAX
        assert zone.status is None

    def test_unknown_id_creates_new(self, state):
        zone = state.upsert_zone(555, "Herbs", 5)
        assert len(state.zones) == 5
        assert zone.id != 555

    def test_generated_ids_are_unique(self, state):
        for i in range(50):
            state.upsert_zone(None, f"Zone {i}", i)
        ids = [zone.id for zone in state.zones]
        assert len(ids) == len(set(ids))

    def test_ids_continue_past_exhausted_range(self):
        state = SprinklerSimulatorState(zones=[], rng=random.Random(0))
        for i in range(ZONE_ID_MAX - ZONE_ID_MIN):
            state.upsert_zone(None, f"Zone {i}", i)
        zone = state.upsert_zone(None, "Overflow", 0)
        assert zone.id == ZONE_ID_MAX


class TestEnablement:
    """Tests for zone and program enable/disable."""

    def test_disable_zone(self, state):
        assert state.set_zone_enabled(1, False) is True
        zone = state.find_zone(1)
        assert zone.enabled is False
        assert zone.status == ZONE_STATUS_DISABLED

    def test_enable_zone(self, state):
        assert state.set_zone_enabled(4, True) is True
        zone = state.find_zone(4)
        assert zone.enabled is True
        assert zone.status == ZONE_STATUS_IDLE

    def test_unknown_zone(self, state):
        before = state.get_zone_list()
        assert state.set_zone_enabled(99, False) is False
        assert state.get_zone_list() == before

    def test_program_status_untouched(self, state):
        program = state.find_program(2)
        status = program.status
        assert state.set_program_enabled(2, False) is True
        assert program.enabled is False
        assert program.status == status

    def test_unknown_program(self, state):
        assert state.set_program_enabled(99, False) is False

    def test_boolean_id_matches_nothing(self, state):
        before = state.get_zone_list()
        assert state.find_zone(True) is None
        assert state.find_program(True) is None
        assert state.set_zone_enabled(True, False) is False
        assert state.set_program_enabled(True, False) is False
        assert state.get_zone_list() == before
