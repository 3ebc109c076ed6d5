# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Device state commands."""

from typing import TYPE_CHECKING, Optional

from .base import ArgSpec, CommandResult, command

if TYPE_CHECKING:
    from ..server import SprinklerSimulator


def _on_off(value: bool) -> str:
    return "on" if value else "off"


class DeviceCommandsMixin:
    """Mixin providing commands that inspect and change device state."""

    simulator: "SprinklerSimulator"

    @command("status", ["s"], "Show simulator status", category="device")
    def status(self) -> CommandResult:
        state = self.simulator.state
        wifi = state.get_wifi_status()
        lines = [
            "Status:",
            f"  wifi: {wifi['mode']} ({'connected' if state.wifi_connected else 'disconnected'})",
            f"  zones: {len(state.zones)}",
            f"  programs: {len(state.programs)}",
            f"  clients: {len(self.simulator.connections)}",
        ]
        return CommandResult(True, "\n".join(lines))

    @command(
        "wifi",
        ["w"],
        "Show or set the wifi connection",
        category="device",
        args=[
            ArgSpec(
                "state",
                "bool_toggle",
                required=False,
                description="on/off to connect or disconnect, omit to show",
            )
        ],
    )
    def wifi(self, state: Optional[bool] = None) -> CommandResult:
        sim_state = self.simulator.state
        if state is None:
            return CommandResult(True, f"Wifi: {_on_off(sim_state.wifi_connected)}")
        sim_state.set_wifi(state)
        return CommandResult(True, f"Wifi {'connected' if state else 'disconnected'}")

    @command("zones", ["z"], "List zones", category="device")
    def zones(self) -> CommandResult:
        lines = ["Zones:"]
        for zone in self.simulator.state.zones:
            lines.append(
                f"  {zone.id}: {zone.name} (output {zone.output}, "
                f"{'enabled' if zone.enabled else 'disabled'}, {zone.status or '-'})"
            )
        return CommandResult(True, "\n".join(lines))

    @command("programs", ["p"], "List programs", category="device")
    def programs(self) -> CommandResult:
        lines = ["Programs:"]
        for program in self.simulator.state.programs:
            days = ",".join(str(d) for d in sorted(program.schedule.days))
            lines.append(
                f"  {program.id}: {program.name} ({'enabled' if program.enabled else 'disabled'}, "
                f"days {days} at {program.schedule.start_time}, {program.status})"
            )
        return CommandResult(True, "\n".join(lines))

    @command(
        "zone",
        [],
        "Enable or disable a zone",
        category="device",
        args=[
            ArgSpec("id", "int", description="Zone id"),
            ArgSpec("state", "bool_toggle", description="on/off"),
        ],
    )
    def zone(self, zone_id: int, enabled: bool) -> CommandResult:
        if not self.simulator.state.set_zone_enabled(zone_id, enabled):
            return CommandResult(False, f"Zone {zone_id} not found")
        return CommandResult(True, f"Zone {zone_id} {'enabled' if enabled else 'disabled'}")

    @command(
        "program",
        [],
        "Enable or disable a program",
        category="device",
        args=[
            ArgSpec("id", "int", description="Program id"),
            ArgSpec("state", "bool_toggle", description="on/off"),
        ],
    )
    def program(self, program_id: int, enabled: bool) -> CommandResult:
        if not self.simulator.state.set_program_enabled(program_id, enabled):
            return CommandResult(False, f"Program {program_id} not found")
        return CommandResult(
            True, f"Program {program_id} {'enabled' if enabled else 'disabled'}"
        )
