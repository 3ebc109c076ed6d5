# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""RainMaker sprinkler controller simulator submodule.

This module provides a simulated sprinkler controller that speaks the same
WebSocket protocol as the real device. Useful for frontend development
without real hardware.

The simulator can:
- Answer every request the controller protocol defines
- Keep wifi, zone and program state across requests
- Reject the operations the demo does not support with error messages
- Delay connection opening and responses like a real round trip
- Run in process (MockWebSocket) or as a WebSocket server
- Be controlled interactively from an operator console

Example usage:
    # Run as a server
    python -m rainmaker.simulator

    # Or use in process
    from rainmaker.simulator import MockWebSocket
    ws = MockWebSocket("ws://rainmaker.local/ws")
"""

from .state import (
    SprinklerSimulatorState,
    Zone,
    Program,
    ProgramSchedule,
    ProgramZone,
    TimingConfig,
)
from .engine import RequestType, ResponseEngine
from .transport import (
    CloseEvent,
    Event,
    EventTarget,
    InvalidStateError,
    MessageEvent,
    MockWebSocket,
    ReadyState,
    get_shared_state,
    reset_shared_state,
    websocket_factory,
)
from .server import SprinklerSimulator
from .cli import run_simulator, main
from .commands import CommandHandler, CommandResult

__all__ = [
    # Main classes
    "SprinklerSimulator",
    "MockWebSocket",
    "ResponseEngine",
    "SprinklerSimulatorState",
    # State helpers
    "Zone",
    "Program",
    "ProgramSchedule",
    "ProgramZone",
    "TimingConfig",
    # Protocol
    "RequestType",
    # Transport
    "CloseEvent",
    "Event",
    "EventTarget",
    "InvalidStateError",
    "MessageEvent",
    "ReadyState",
    "get_shared_state",
    "reset_shared_state",
    "websocket_factory",
    # CLI
    "run_simulator",
    "main",
    # Commands
    "CommandHandler",
    "CommandResult",
]
