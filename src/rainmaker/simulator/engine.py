# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Response engine for the RainMaker sprinkler simulator.

Maps a decoded request and the current simulator state to the ordered list
of response messages the real controller would send back.
"""

import json
import logging
import random
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from ..const import (
    ERROR_CANT_DELETE_PROGRAMS,
    ERROR_CANT_DELETE_ZONES,
    ERROR_CANT_MODIFY_PROGRAMS,
    ERROR_CANT_RUN_PROGRAMS,
    ERROR_PASSWORD_INCORRECT,
    FIELD_CURRENT_TIME,
    FIELD_FORMATTED_TIME,
    FIELD_IS_ENABLED,
    FIELD_MESSAGE,
    FIELD_NAME,
    FIELD_NETWORKS,
    FIELD_OUTPUT,
    FIELD_PASSWORD,
    FIELD_PROGRAM_ID,
    FIELD_PROGRAMS,
    FIELD_SETTINGS,
    FIELD_STATUS,
    FIELD_SUCCESS,
    FIELD_TYPE,
    FIELD_ZONE_ID,
    FIELD_ZONES,
    MSG_CREATE_OR_UPDATE_PROGRAM,
    MSG_CREATE_OR_UPDATE_ZONE,
    MSG_DELETE_PROGRAM,
    MSG_DELETE_ZONE,
    MSG_ENABLE,
    MSG_ERROR,
    MSG_GET_PROGRAMS,
    MSG_GET_SETTINGS,
    MSG_GET_SYSTEM_INFO,
    MSG_GET_ZONES,
    MSG_PING,
    MSG_PONG,
    MSG_PROGRAM_LIST,
    MSG_SETTINGS,
    MSG_SYSTEM_INFO,
    MSG_TEST_MANUAL,
    MSG_TIME_UPDATE,
    MSG_TIME_UPDATE_RESPONSE,
    MSG_WIFI_CONNECT,
    MSG_WIFI_DISCONNECT,
    MSG_WIFI_LIST,
    MSG_WIFI_SCAN,
    MSG_WIFI_STATUS,
    MSG_ZONE_LIST,
    WIFI_PASSWORD,
    WIFI_SCAN_MAX_NETWORKS,
    WIFI_SCAN_MIN_NETWORKS,
    WIFI_SCAN_NAMES,
    WIFI_SCAN_RSSI_MAX,
    WIFI_SCAN_RSSI_MIN,
    WIFI_SCAN_SECURE_COUNT,
)
from .state import SprinklerSimulatorState

logger = logging.getLogger(__name__)


class RequestType(str, Enum):
    """Every request the controller understands."""

    PING = MSG_PING
    TIME_UPDATE = MSG_TIME_UPDATE
    WIFI_SCAN = MSG_WIFI_SCAN
    WIFI_STATUS = MSG_WIFI_STATUS
    WIFI_CONNECT = MSG_WIFI_CONNECT
    WIFI_DISCONNECT = MSG_WIFI_DISCONNECT
    GET_SYSTEM_INFO = MSG_GET_SYSTEM_INFO
    CREATE_OR_UPDATE_ZONE = MSG_CREATE_OR_UPDATE_ZONE
    DELETE_ZONE = MSG_DELETE_ZONE
    GET_ZONES = MSG_GET_ZONES
    GET_PROGRAMS = MSG_GET_PROGRAMS
    CREATE_OR_UPDATE_PROGRAM = MSG_CREATE_OR_UPDATE_PROGRAM
    DELETE_PROGRAM = MSG_DELETE_PROGRAM
    TEST_MANUAL = MSG_TEST_MANUAL
    ENABLE = MSG_ENABLE
    GET_SETTINGS = MSG_GET_SETTINGS

    @classmethod
    def parse(cls, value) -> Optional["RequestType"]:
        """Return the request type for a ``type`` field, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


Handler = Callable[[SprinklerSimulatorState, dict], list]


def decode_request(data):
    """Decode one inbound frame, or return None if it is not valid JSON.

    Nesting too deep for the decoder counts as malformed, same as a syntax
    error.
    """
    try:
        return json.loads(data)
    except (TypeError, ValueError, RecursionError) as e:
        logger.debug(f"Dropping malformed payload: {type(e).__name__}")
        return None


def error_response(message: str) -> dict:
    return {FIELD_TYPE: MSG_ERROR, FIELD_MESSAGE: message}


def _rejection(message: str) -> Handler:
    def handler(state: SprinklerSimulatorState, request: dict) -> list:
        return [error_response(message)]

    return handler


class ResponseEngine:
    """Dispatches requests against a simulator state.

    The engine holds no device state itself; the state to read and mutate is
    passed to every ``handle`` call, so independent states can be served by
    one engine.

    Example:
        engine = ResponseEngine()
        state = SprinklerSimulatorState()
        engine.handle(state, {"type": "ping"})  # [{"type": "pong"}]
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._handlers: dict[RequestType, Handler] = {
            RequestType.PING: self._ping,
            RequestType.TIME_UPDATE: self._time_update,
            RequestType.WIFI_SCAN: self._wifi_scan,
            RequestType.WIFI_STATUS: self._wifi_status,
            RequestType.WIFI_CONNECT: self._wifi_connect,
            RequestType.WIFI_DISCONNECT: self._wifi_disconnect,
            RequestType.GET_SYSTEM_INFO: self._get_system_info,
            RequestType.CREATE_OR_UPDATE_ZONE: self._create_or_update_zone,
            RequestType.DELETE_ZONE: _rejection(ERROR_CANT_DELETE_ZONES),
            RequestType.GET_ZONES: self._get_zones,
            RequestType.GET_PROGRAMS: self._get_programs,
            RequestType.CREATE_OR_UPDATE_PROGRAM: _rejection(ERROR_CANT_MODIFY_PROGRAMS),
            RequestType.DELETE_PROGRAM: _rejection(ERROR_CANT_DELETE_PROGRAMS),
            RequestType.TEST_MANUAL: _rejection(ERROR_CANT_RUN_PROGRAMS),
            RequestType.ENABLE: self._enable,
            RequestType.GET_SETTINGS: self._get_settings,
        }
        missing = set(RequestType) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for request types: {sorted(missing)}")

    def handle(self, state: SprinklerSimulatorState, request: dict) -> list[dict]:
        """Compute the responses for a decoded request.

        Returns:
            Responses in delivery order. Empty when the request type is
            unknown (or the request is not an object at all).
        """
        if not isinstance(request, dict):
            logger.debug(f"Ignoring non-object request: {request!r}")
            return []

        request_type = RequestType.parse(request.get(FIELD_TYPE))
        if request_type is None:
            logger.debug(f"Ignoring unknown request type: {request.get(FIELD_TYPE)!r}")
            return []

        responses = self._handlers[request_type](state, request)
        logger.debug(
            f"{request_type.value} -> {', '.join(r[FIELD_TYPE] for r in responses)}"
        )
        return responses

    # =========================================================================
    # Handlers
    # =========================================================================

    def _ping(self, state, request):
        return [{FIELD_TYPE: MSG_PONG}]

    def _time_update(self, state, request):
        now = datetime.now(timezone.utc)
        formatted = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return [
            {
                FIELD_TYPE: MSG_TIME_UPDATE_RESPONSE,
                FIELD_SUCCESS: True,
                FIELD_CURRENT_TIME: int(now.timestamp()),
                FIELD_FORMATTED_TIME: formatted,
            }
        ]

    def _wifi_scan(self, state, request):
        return [{FIELD_TYPE: MSG_WIFI_LIST, FIELD_NETWORKS: self.scan_networks()}]

    def scan_networks(self) -> list[dict]:
        """Generate a random list of nearby networks.

        The first few entries are secured, the rest are open.
        """
        count = self.rng.randint(WIFI_SCAN_MIN_NETWORKS, WIFI_SCAN_MAX_NETWORKS)
        return [
            {
                "ssid": WIFI_SCAN_NAMES[i % len(WIFI_SCAN_NAMES)],
                "rssi": self.rng.randint(WIFI_SCAN_RSSI_MIN, WIFI_SCAN_RSSI_MAX),
                "secure": i < WIFI_SCAN_SECURE_COUNT,
            }
            for i in range(count)
        ]

    def _wifi_status(self, state, request):
        return [{FIELD_TYPE: MSG_WIFI_STATUS, FIELD_STATUS: state.get_wifi_status()}]

    def _wifi_connect(self, state, request):
        if request.get(FIELD_PASSWORD) != WIFI_PASSWORD:
            return [error_response(ERROR_PASSWORD_INCORRECT)]
        state.set_wifi(True)
        return self._wifi_status(state, request) + self._get_settings(state, request)

    def _wifi_disconnect(self, state, request):
        state.set_wifi(False)
        return self._wifi_status(state, request) + self._get_settings(state, request)

    def _get_system_info(self, state, request):
        # The controller reports system info under "settings"
        return [{FIELD_TYPE: MSG_SYSTEM_INFO, FIELD_SETTINGS: state.get_system_info()}]

    def _create_or_update_zone(self, state, request):
        state.upsert_zone(
            request.get(FIELD_ZONE_ID),
            request.get(FIELD_NAME),
            request.get(FIELD_OUTPUT),
        )
        return self._get_zones(state, request)

    def _get_zones(self, state, request):
        return [{FIELD_TYPE: MSG_ZONE_LIST, FIELD_ZONES: state.get_zone_list()}]

    def _get_programs(self, state, request):
        return [{FIELD_TYPE: MSG_PROGRAM_LIST, FIELD_PROGRAMS: state.get_program_list()}]

    def _enable(self, state, request):
        enabled = bool(request.get(FIELD_IS_ENABLED))
        zone_id = request.get(FIELD_ZONE_ID)
        if zone_id is not None:
            state.set_zone_enabled(zone_id, enabled)
            return self._get_zones(state, request)
        state.set_program_enabled(request.get(FIELD_PROGRAM_ID), enabled)
        return self._get_programs(state, request)

    def _get_settings(self, state, request):
        return [{FIELD_TYPE: MSG_SETTINGS, **state.get_settings()}]
