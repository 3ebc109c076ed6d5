# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""State dataclasses for the RainMaker sprinkler simulator.

This module contains the simulated device state: settings, wifi, zones,
programs and the static system information snapshot. The state object is
mutated only by the response engine (and the operator console, which goes
through the same mutators).
"""

import copy
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Optional

from ..const import (
    WIFI_MODE_AP_STA,
    WIFI_MODE_STA,
    ZONE_ID_MAX,
    ZONE_ID_MIN,
    ZONE_STATUS_DISABLED,
    ZONE_STATUS_IDLE,
    ZONE_STATUS_RUNNING,
    PROGRAM_STATUS_RUNNING,
    PROGRAM_STATUS_SCHEDULED,
)

logger = logging.getLogger(__name__)


@dataclass
class TimingConfig:
    """Artificial latency for the simulated connection (all times in seconds)."""

    # Time for a mock connection to go from CONNECTING to OPEN
    open_delay: float = 0.1

    # Delay before an in-process connection delivers its responses
    message_delay: float = 0.2

    # Delay before the socket listener writes its responses back
    response_delay: float = 1.0


WIFI_DISCONNECTED = {
    "mode": WIFI_MODE_AP_STA,
    "mac": "12:34:56:78:90:ab",
    "sta": {"connected": False, "configured_ssid": ""},
    "ap": {
        "ssid": "RainMaker",
        "channel": 10,
        "auth_mode": "WPA_WPA2_PSK",
        "ip": "192.168.4.1",
        "mac": "ab:cd:ef:12:34:56",
        "connected_stations": 1,
        "max_connections": 2,
    },
}

WIFI_CONNECTED = {
    "mode": WIFI_MODE_STA,
    "mac": "12:34:56:78:90:ab",
    "sta": {
        "connected": True,
        "ssid": "Wi Believe I Can Fi",
        "rssi": -48,
        "channel": 8,
        "auth_mode": "WPA2_PSK",
        "ip": "192.168.1.10",
        "gateway": "192.168.1.1",
        "netmask": "255.255.255.0",
    },
}

SYSTEM_INFO = {
    "device": {
        "status": "Online and operational",
        "reset_reason": "Power-on reset",
        "uptime": "5 minutes, 42seconds",
        "time": "2025-01-01 00:00 PM",
    },
    "system": {"idf_version": "5.4.0", "freertos_tasks": 12},
    "hardware": {
        "chip_model": "ESP32",
        "chip_revision": 301,
        "cpu_cores": 2,
        "flash_size": "4.0 MB",
    },
    "memory": {
        "heap_total": "269.8 KB",
        "heap_free": "163.2 KB",
        "heap_used": "106.6 KB",
        "heap_usage": "39%",
        "heap_largest_free_block": "108.0 KB",
        "heap_min_free_ever": "145.4 KB",
        "internal_total": "302.0 KB",
        "internal_free": "194.6 KB",
        "internal_usage": "35%",
    },
    "psram": {"psram_total": "0 bytes", "psram_free": "0 bytes", "psram_usage": "0%"},
    "spiffs": {
        "status": "Mounted and operational",
        "partition_size": "960.0 KB",
        "partition_label": "storage",
        "partition_address": "0x310000",
        "total_space": "875.3 KB",
        "used_space": "171.3 KB",
        "free_space": "704.0 KB",
        "usage": "19%",
        "files_count": 4,
        "total_size": "168.8 KB",
    },
}


@dataclass
class Zone:
    """A controllable output (sprinkler valve).

    ``status`` stays ``None`` for freshly created zones until their
    enablement is first changed.
    """

    id: int
    name: str
    output: int
    enabled: bool = True
    last_run: float = 0
    status: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to protocol dict format."""
        result = {
            "id": self.id,
            "name": self.name,
            "output": self.output,
            "enabled": self.enabled,
            "lastRun": self.last_run,
        }
        if self.status is not None:
            result["status"] = self.status
        return result


@dataclass
class ProgramSchedule:
    """When a program runs.

    Days use 0=Sunday ... 6=Saturday.
    """

    days: set = field(default_factory=set)
    start_time: str = "06:00"

    def to_dict(self) -> dict:
        return {"days": sorted(self.days), "startTime": self.start_time}


@dataclass
class ProgramZone:
    """One zone activation inside a program."""

    id: int
    duration: int
    order: int

    def to_dict(self) -> dict:
        return {"id": self.id, "duration": self.duration, "order": self.order}


@dataclass
class Program:
    """A scheduled sequence of zone activations."""

    id: int
    name: str
    enabled: bool = True
    schedule: ProgramSchedule = field(default_factory=ProgramSchedule)
    zones: list = field(default_factory=list)
    last_run: float = 0
    next_run: float = 0
    status: str = PROGRAM_STATUS_SCHEDULED

    def to_dict(self) -> dict:
        """Convert to protocol dict format."""
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "schedule": self.schedule.to_dict(),
            "zones": [zone.to_dict() for zone in self.zones],
            "lastRun": self.last_run,
            "nextRun": self.next_run,
            "status": self.status,
        }


def default_zones() -> list[Zone]:
    """Demo zones shown on a freshly started controller."""
    now = time.time()
    return [
        Zone(1, "Front Lawn Demo", 999, True, now - 50, ZONE_STATUS_IDLE),
        Zone(2, "Back Garden Demo", 998, True, now - 20, ZONE_STATUS_RUNNING),
        Zone(3, "Flower Beds Demo", 997, True, now, ZONE_STATUS_IDLE),
        Zone(4, "Side Yard Demo", 996, False, 0, ZONE_STATUS_DISABLED),
    ]


def default_programs() -> list[Program]:
    """Demo programs shown on a freshly started controller."""
    now = time.time()
    return [
        Program(
            id=1,
            name="Morning Routine  Demo",
            schedule=ProgramSchedule(days={0, 2, 3}, start_time="06:00"),
            zones=[
                ProgramZone(1, 999, 1),
                ProgramZone(2, 999, 2),
                ProgramZone(3, 999, 3),
            ],
            last_run=now - 5,
            next_run=now + 5,
            status=PROGRAM_STATUS_SCHEDULED,
        ),
        Program(
            id=2,
            name="Weekend Deep Water",
            schedule=ProgramSchedule(days={5, 6}, start_time="05:30"),
            zones=[
                ProgramZone(1, 999, 1),
                ProgramZone(2, 999, 2),
                ProgramZone(4, 999, 3),
            ],
            last_run=now - 8,
            next_run=now + 8,
            status=PROGRAM_STATUS_RUNNING,
        ),
    ]


@dataclass
class SprinklerSimulatorState:
    """State of the simulated sprinkler controller."""

    # Settings
    ota_requires_password: bool = True
    wifi_connected: bool = False
    wifi_setup: bool = False

    # Collections (insertion ordered)
    zones: list = field(default_factory=default_zones)
    programs: list = field(default_factory=default_programs)

    # Static hardware/memory/storage counters
    system_info: dict = field(default_factory=lambda: copy.deepcopy(SYSTEM_INFO))

    # Source of randomness for generated ids
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def get_settings(self) -> dict:
        """Get full settings dict."""
        return {
            "ota": {"requiresPassword": self.ota_requires_password},
            "wifi": {"connected": self.wifi_connected, "setup": self.wifi_setup},
        }

    def get_wifi_status(self) -> dict:
        """Get the wifi status variant matching the current settings."""
        status = WIFI_CONNECTED if self.wifi_connected else WIFI_DISCONNECTED
        return copy.deepcopy(status)

    def get_system_info(self) -> dict:
        return copy.deepcopy(self.system_info)

    def get_zone_list(self) -> list:
        """Get list of all zones."""
        return [zone.to_dict() for zone in self.zones]

    def get_program_list(self) -> list:
        """Get list of all programs."""
        return [program.to_dict() for program in self.programs]

    def find_zone(self, zone_id) -> Optional[Zone]:
        # JSON true/false are not ids, even though True == 1
        if isinstance(zone_id, bool):
            return None
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        return None

    def find_program(self, program_id) -> Optional[Program]:
        if isinstance(program_id, bool):
            return None
        for program in self.programs:
            if program.id == program_id:
                return program
        return None

    # =========================================================================
    # Mutators
    # =========================================================================

    def set_wifi(self, connected: bool):
        """Connect or disconnect the station; setup follows connected."""
        self.wifi_connected = connected
        self.wifi_setup = connected
        logger.debug(f"Wifi {'connected' if connected else 'disconnected'}")

    def upsert_zone(self, zone_id: Optional[int], name: str, output: int) -> Zone:
        """Update an existing zone in place, or append a new one.

        A new zone is appended when ``zone_id`` is None or does not match any
        existing zone. New zones get a fresh id and no status.
        """
        zone = self.find_zone(zone_id) if zone_id is not None else None
        if zone:
            zone.name = name
            zone.output = output
            logger.debug(f"Updated zone {zone.id}: {name} (output {output})")
            return zone

        zone = Zone(id=self._generate_zone_id(), name=name, output=output)
        self.zones.append(zone)
        logger.debug(f"Created zone {zone.id}: {name} (output {output})")
        return zone

    def set_zone_enabled(self, zone_id: int, enabled: bool) -> bool:
        """Enable or disable a zone.

        Returns:
            True if the zone exists, False otherwise (nothing changes).
        """
        zone = self.find_zone(zone_id)
        if not zone:
            logger.debug(f"Zone {zone_id} not found")
            return False
        zone.enabled = enabled
        zone.status = ZONE_STATUS_IDLE if enabled else ZONE_STATUS_DISABLED
        return True

    def set_program_enabled(self, program_id: int, enabled: bool) -> bool:
        """Enable or disable a program. Status is left untouched.

        Returns:
            True if the program exists, False otherwise (nothing changes).
        """
        program = self.find_program(program_id)
        if not program:
            logger.debug(f"Program {program_id} not found")
            return False
        program.enabled = enabled
        return True

    def _generate_zone_id(self) -> int:
        used = {zone.id for zone in self.zones}
        free = [i for i in range(ZONE_ID_MIN, ZONE_ID_MAX) if i not in used]
        if free:
            return self.rng.choice(free)
        return max(used) + 1
