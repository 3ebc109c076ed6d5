# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""In-process mock of the controller's WebSocket connection.

MockWebSocket behaves like a browser-style WebSocket connected to a real
controller: it starts out CONNECTING, opens after a short delay, and answers
every ``send()`` with the controller's responses after a per-message delay.
Events are delivered both to listeners registered with
``add_event_listener`` and to the ``onopen``/``onmessage``/``onclose``/
``onerror`` callback attributes.

Example:
    ws = MockWebSocket("ws://rainmaker.local/ws")
    ws.onmessage = lambda event: print(event.data)
    ws.add_event_listener("open", lambda event: ws.send('{"type": "ping"}'))
"""

import asyncio
import functools
import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

from .engine import ResponseEngine, decode_request
from .state import SprinklerSimulatorState, TimingConfig

logger = logging.getLogger(__name__)

EventListener = Callable[["Event"], Any]


class ReadyState(IntEnum):
    """Connection lifecycle states.

    Values match the browser WebSocket constants; ERROR has no browser
    counterpart and is never entered.
    """

    CONNECTING = 0
    OPEN = 1
    CLOSED = 3
    ERROR = 4


class InvalidStateError(Exception):
    """Raised when send() is called before the connection is open."""


@dataclass
class Event:
    type: str
    target: Any = None


@dataclass
class MessageEvent(Event):
    data: str = ""


@dataclass
class CloseEvent(Event):
    code: int = 1000
    reason: str = ""
    was_clean: bool = True


class EventTarget:
    """Event dispatch with both listener lists and ``on<type>`` attributes.

    Every event goes through ``dispatch_event``, which feeds the registered
    listeners first and then the matching ``on<type>`` callback, if set.
    """

    def __init__(self):
        self._listeners: dict[str, list[EventListener]] = {}

    def add_event_listener(self, event_type: str, listener: EventListener):
        """Register a listener. Registering the same listener twice is a no-op."""
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: EventListener):
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Event):
        for listener in list(self._listeners.get(event.type, [])):
            self._invoke(listener, event)

        callback = getattr(self, f"on{event.type}", None)
        if callback is not None:
            self._invoke(callback, event)

    def _invoke(self, listener: EventListener, event: Event):
        # A failing listener must not stop delivery to the others
        try:
            listener(event)
        except Exception:
            logger.exception(f"Error in '{event.type}' event listener")


_shared_state: Optional[SprinklerSimulatorState] = None


def get_shared_state() -> SprinklerSimulatorState:
    """Get the process-wide state used by connections created without one."""
    global _shared_state
    if _shared_state is None:
        _shared_state = SprinklerSimulatorState()
    return _shared_state


def reset_shared_state():
    """Discard the process-wide state; the next connection starts fresh."""
    global _shared_state
    _shared_state = None


class MockWebSocket(EventTarget):
    """Drop-in replacement for a WebSocket connection to the controller.

    Must be created while an asyncio event loop is running; opening and
    message delivery are scheduled on that loop.

    ``close()`` cancels any responses that have not been delivered yet, so
    no message event ever follows the close event.
    """

    CONNECTING = ReadyState.CONNECTING
    OPEN = ReadyState.OPEN
    CLOSED = ReadyState.CLOSED

    def __init__(
        self,
        url: str,
        state: Optional[SprinklerSimulatorState] = None,
        engine: Optional[ResponseEngine] = None,
        timing: Optional[TimingConfig] = None,
    ):
        super().__init__()
        self.url = url
        self.state = state or get_shared_state()
        self.engine = engine or ResponseEngine()
        self.timing = timing or TimingConfig()
        self.ready_state = ReadyState.CONNECTING

        self.onopen: Optional[EventListener] = None
        self.onmessage: Optional[EventListener] = None
        self.onclose: Optional[EventListener] = None
        self.onerror: Optional[EventListener] = None

        self._loop = asyncio.get_running_loop()
        self._deliveries: set[asyncio.Task] = set()
        self._open_handle: Optional[asyncio.TimerHandle] = self._loop.call_later(
            self.timing.open_delay, self._open
        )

    def _open(self):
        self._open_handle = None
        if self.ready_state != ReadyState.CONNECTING:
            return
        self.ready_state = ReadyState.OPEN
        logger.debug(f"Mock connection to {self.url} open")
        self.dispatch_event(Event("open", self))

    def send(self, data):
        """Send a serialized request to the simulated controller.

        Payloads that are not valid JSON are dropped without a response.

        Raises:
            InvalidStateError: If the connection is still CONNECTING.
        """
        if self.ready_state == ReadyState.CONNECTING:
            raise InvalidStateError("Cannot send while the connection is CONNECTING")
        if self.ready_state != ReadyState.OPEN:
            logger.debug(f"Discarding send on {self.ready_state.name} connection")
            return

        request = decode_request(data)
        if request is None:
            return

        responses = self.engine.handle(self.state, request)
        if not responses:
            return

        task = self._loop.create_task(self._deliver(responses))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, responses: list[dict]):
        # One task per send keeps its responses in engine order
        await asyncio.sleep(self.timing.message_delay)
        for response in responses:
            if self.ready_state != ReadyState.OPEN:
                return
            self.dispatch_event(MessageEvent("message", self, json.dumps(response)))

    def close(self, code: int = 1000, reason: str = ""):
        """Close the connection and fire the close event."""
        if self.ready_state == ReadyState.CLOSED:
            return

        if self._open_handle is not None:
            self._open_handle.cancel()
            self._open_handle = None
        for task in list(self._deliveries):
            task.cancel()
        self._deliveries.clear()

        self.ready_state = ReadyState.CLOSED
        logger.debug(f"Mock connection to {self.url} closed")
        self.dispatch_event(CloseEvent("close", self, code=code, reason=reason))

    @property
    def pending_deliveries(self) -> int:
        """Number of sends whose responses have not been delivered yet."""
        return len(self._deliveries)


def websocket_factory(
    state: Optional[SprinklerSimulatorState] = None,
    engine: Optional[ResponseEngine] = None,
    timing: Optional[TimingConfig] = None,
) -> Callable[[str], MockWebSocket]:
    """Build a ``WebSocket(url)`` constructor bound to a given state.

    Useful to swap out the real connection class, e.g. with
    ``unittest.mock.patch("app.WebSocket", websocket_factory(state))``.
    """
    return functools.partial(MockWebSocket, state=state, engine=engine, timing=timing)
