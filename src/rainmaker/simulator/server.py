# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""RainMaker sprinkler simulator server.

This module contains the SprinklerSimulator class that provides a WebSocket
server speaking the controller protocol, for frontends running out of
process.
"""

import asyncio
import json
import logging
from typing import Callable, Optional

from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from ..const import DEFAULT_PORT
from .engine import ResponseEngine, decode_request
from .state import SprinklerSimulatorState, TimingConfig

logger = logging.getLogger(__name__)


class SprinklerSimulator:
    """RainMaker sprinkler controller simulator server.

    Listens for WebSocket connections and answers every request with the
    controller's responses after ``timing.response_delay`` seconds. All
    connections share one state, so a zone created by one client shows up
    for the others.

    Example:
        simulator = SprinklerSimulator(port=8080)
        await simulator.start()
        ...
        await simulator.stop()
    """

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = DEFAULT_PORT,
        state: Optional[SprinklerSimulatorState] = None,
        engine: Optional[ResponseEngine] = None,
        timing: Optional[TimingConfig] = None,
        on_connect: Optional[Callable[[], None]] = None,
        on_disconnect: Optional[Callable[[], None]] = None,
    ):
        self.host = host
        self.port = port
        self.state = state or SprinklerSimulatorState()
        self.engine = engine or ResponseEngine()
        self.timing = timing or TimingConfig()
        self.server: Optional[Server] = None
        self.connections: set[ServerConnection] = set()
        self._on_connect = on_connect
        self._on_disconnect = on_disconnect

    async def start(self):
        """Start the simulator server."""
        self.server = await serve(self._handle_connection, self.host, self.port)
        if self.port == 0:
            self.port = self.server.sockets[0].getsockname()[1]
        logger.info(f"Sprinkler simulator listening on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the simulator server and close all client connections."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("Sprinkler simulator stopped")

    def handle_message(self, message) -> list[dict]:
        """Decode one inbound frame and compute its responses.

        Frames that are not valid JSON produce no responses.
        """
        request = decode_request(message)
        if request is None:
            return []
        logger.debug(f"Received: {request}")
        return self.engine.handle(self.state, request)

    async def _handle_connection(self, connection: ServerConnection):
        addr = connection.remote_address
        logger.info(f"Client connected from {addr}")
        self.connections.add(connection)
        if self._on_connect:
            self._on_connect()

        pending: set[asyncio.Task] = set()
        try:
            async for message in connection:
                responses = self.handle_message(message)
                if not responses:
                    continue
                task = asyncio.create_task(self._respond(connection, responses))
                pending.add(task)
                task.add_done_callback(pending.discard)
        except ConnectionClosed as e:
            logger.debug(f"Connection from {addr} closed: {e}")
        finally:
            for task in pending:
                task.cancel()
            self.connections.discard(connection)
            logger.info(f"Client disconnected from {addr}")
            if self._on_disconnect:
                self._on_disconnect()

    async def _respond(self, connection: ServerConnection, responses: list[dict]):
        await asyncio.sleep(self.timing.response_delay)
        try:
            for response in responses:
                logger.debug(f"Sending: {response}")
                await connection.send(json.dumps(response))
        except ConnectionClosed:
            logger.debug("Client went away before responses were sent")
