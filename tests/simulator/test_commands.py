# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for simulator commands (commands/)."""
from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from rainmaker.simulator import SprinklerSimulator
from rainmaker.simulator.commands import ArgSpec, CommandHandler, parse_arg


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def simulator(state, timing_config):
    """A simulator that is never started; commands only touch its state."""
    return SprinklerSimulator(port=0, state=state, timing=timing_config)


@pytest.fixture
def stop_callback():
    return MagicMock()


@pytest.fixture
def command_handler(simulator, stop_callback):
    """Create a command handler for the simulator."""
    return CommandHandler(simulator=simulator, stop_callback=stop_callback)


@pytest.fixture
def restore_root_level():
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    root_logger.setLevel(level)


# ============================================================================
# Argument Parsing Tests
# ============================================================================

class TestParseArg:
    """Tests for parse_arg."""

    @pytest.mark.parametrize("value, expected", [
        ("on", True), ("ON", True), ("yes", True), ("1", True),
        ("off", False), ("no", False), ("0", False),
    ])
    def test_bool_toggle(self, value, expected):
        assert parse_arg(value, ArgSpec("state", "bool_toggle")) == (expected, None)

    def test_bool_toggle_invalid(self):
        value, error = parse_arg("maybe", ArgSpec("state", "bool_toggle"))
        assert value is None
        assert "on/off" in error

    def test_int(self):
        assert parse_arg("12", ArgSpec("id", "int")) == (12, None)

    def test_int_invalid(self):
        value, error = parse_arg("twelve", ArgSpec("id", "int"))
        assert value is None
        assert "not a valid integer" in error

    def test_int_below_minimum(self):
        value, error = parse_arg("-1", ArgSpec("id", "int", min_value=0))
        assert value is None
        assert "below minimum" in error

    def test_usage(self):
        assert ArgSpec("state", "bool_toggle").generate_usage() == "<on|off>"
        assert ArgSpec("id", "int", required=False).generate_usage() == "[id]"


# ============================================================================
# Dispatch Tests
# ============================================================================

class TestExecute:
    """Tests for CommandHandler.execute."""

    @pytest.mark.asyncio
    async def test_empty_command(self, command_handler):
        result = await command_handler.execute("   ")
        assert result.success is False

    @pytest.mark.asyncio
    async def test_unknown_command(self, command_handler):
        result = await command_handler.execute("flood")
        assert result.success is False
        assert "Unknown command: flood" in result.message

    @pytest.mark.asyncio
    async def test_missing_argument(self, command_handler):
        result = await command_handler.execute("zone 1")
        assert result.success is False
        assert "Missing required argument: state" in result.message
        assert "Usage: zone <id> <on|off>" in result.message

    @pytest.mark.asyncio
    async def test_too_many_arguments(self, command_handler):
        result = await command_handler.execute("wifi on now")
        assert result.success is False
        assert "Too many arguments" in result.message

    @pytest.mark.asyncio
    async def test_case_insensitive(self, command_handler):
        result = await command_handler.execute("STATUS")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_help(self, command_handler):
        result = await command_handler.execute("help")
        assert result.success is True
        for name in ("status", "wifi", "zones", "programs", "zone", "program", "debug", "shutdown"):
            assert f"  {name}" in result.message

    def test_command_names_include_aliases(self, command_handler):
        names = command_handler.get_command_names()
        assert "quit" in names
        assert "zones" in names


# ============================================================================
# Device Command Tests
# ============================================================================

class TestDeviceCommands:
    """Tests for device state commands."""

    @pytest.mark.asyncio
    async def test_status(self, command_handler):
        result = await command_handler.execute("status")
        assert result.success is True
        assert "wifi: AP+STA (disconnected)" in result.message
        assert "zones: 4" in result.message
        assert "programs: 2" in result.message
        assert "clients: 0" in result.message

    @pytest.mark.asyncio
    async def test_wifi_show(self, command_handler):
        result = await command_handler.execute("wifi")
        assert result.message == "Wifi: off"

    @pytest.mark.asyncio
    async def test_wifi_on(self, command_handler, state):
        result = await command_handler.execute("wifi on")
        assert result.success is True
        assert state.wifi_connected is True
        assert state.wifi_setup is True

    @pytest.mark.asyncio
    async def test_zones(self, command_handler):
        result = await command_handler.execute("zones")
        assert "1: Front Lawn Demo (output 999, enabled, idle)" in result.message
        assert "4: Side Yard Demo (output 996, disabled, disabled)" in result.message

    @pytest.mark.asyncio
    async def test_programs(self, command_handler):
        result = await command_handler.execute("p")
        assert "2: Weekend Deep Water (enabled, days 5,6 at 05:30, running)" in result.message

    @pytest.mark.asyncio
    async def test_zone_toggle(self, command_handler, state):
        result = await command_handler.execute("zone 2 off")
        assert result.success is True
        zone = state.find_zone(2)
        assert zone.enabled is False
        assert zone.status == "disabled"

    @pytest.mark.asyncio
    async def test_zone_unknown(self, command_handler):
        result = await command_handler.execute("zone 50 off")
        assert result.success is False
        assert "Zone 50 not found" in result.message

    @pytest.mark.asyncio
    async def test_program_toggle(self, command_handler, state):
        result = await command_handler.execute("program 1 off")
        assert result.success is True
        assert state.find_program(1).enabled is False

    @pytest.mark.asyncio
    async def test_program_bad_id(self, command_handler):
        result = await command_handler.execute("program one off")
        assert result.success is False
        assert "not a valid integer" in result.message


# ============================================================================
# Control Command Tests
# ============================================================================

class TestControlCommands:
    """Tests for control commands."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cmd", ["shutdown", "stop", "exit", "quit", "q"])
    async def test_shutdown(self, command_handler, stop_callback, cmd):
        result = await command_handler.execute(cmd)
        assert result.success is True
        stop_callback.assert_called_once()

    @pytest.mark.asyncio
    async def test_debug_toggle(self, command_handler, restore_root_level):
        result = await command_handler.execute("debug on")
        assert result.message == "Debug logging enabled"
        assert logging.getLogger().level == logging.DEBUG

        result = await command_handler.execute("debug")
        assert result.message == "Debug logging: on"

        result = await command_handler.execute("debug off")
        assert logging.getLogger().level == logging.INFO
