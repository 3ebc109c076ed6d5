# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""CLI for the RainMaker sprinkler simulator.

This module provides the command-line entry point: it runs the WebSocket
simulator and, when attached to a terminal, an interactive operator console.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from ..const import DEFAULT_PORT
from .commands import CommandHandler
from .server import SprinklerSimulator
from .state import TimingConfig

logger = logging.getLogger(__name__)

HISTORY_FILE = Path.home() / ".rainmaker_simulator_history"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


async def _interactive_loop(
    cmd_handler: CommandHandler,
    stop_event: asyncio.Event,
    prompt: str,
    history_file: Optional[str],
):
    """Read commands from the terminal until EOF or shutdown."""
    history = FileHistory(history_file) if history_file else InMemoryHistory()
    session = PromptSession(
        history=history,
        completer=WordCompleter(cmd_handler.get_command_names(), ignore_case=True),
    )
    try:
        while not stop_event.is_set():
            try:
                line = await session.prompt_async(prompt)
            except KeyboardInterrupt:
                continue
            except EOFError:
                break
            if not line.strip():
                continue
            result = await cmd_handler.execute(line)
            if result.message:
                print(f">>> {result.message}")
    finally:
        stop_event.set()


async def run_simulator(
    host: str = "0.0.0.0",
    port: int = DEFAULT_PORT,
    response_delay: Optional[float] = None,
    daemon: bool = False,
    run_for: Optional[float] = None,
    history_file: Optional[str] = None,
):
    """Run the sprinkler simulator.

    Args:
        host: Address to bind the server
        port: Port to listen on
        response_delay: Seconds before responses are sent (default from TimingConfig)
        daemon: If True, run without interactive input
        run_for: Maximum run time in seconds
        history_file: Console history file, or None to keep history in memory
    """
    timing = TimingConfig()
    if response_delay is not None:
        timing.response_delay = response_delay

    simulator = SprinklerSimulator(host=host, port=port, timing=timing)
    await simulator.start()

    stop_event = asyncio.Event()
    cmd_handler = CommandHandler(simulator=simulator, stop_callback=stop_event.set)

    print(f"Mock WebSocket server running on ws://{host}:{simulator.port}")

    interactive = not daemon and sys.stdin is not None and sys.stdin.isatty()
    if not daemon and not interactive:
        logger.warning("stdin is not a terminal, running in daemon mode")

    tasks: list[asyncio.Task] = []
    stdout_ctx = None

    if interactive:
        print("=" * 65)
        print(cmd_handler.get_help())
        print("=" * 65)
        stdout_ctx = patch_stdout()
        stdout_ctx.__enter__()
        tasks.append(
            asyncio.create_task(
                _interactive_loop(cmd_handler, stop_event, f"{host}:{simulator.port}> ", history_file)
            )
        )

    if run_for:
        async def timeout_shutdown():
            await asyncio.sleep(run_for)
            logger.info(f"Run time ({run_for}s) elapsed, shutting down")
            stop_event.set()

        tasks.append(asyncio.create_task(timeout_shutdown()))

    try:
        await stop_event.wait()
    finally:
        for task in tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if stdout_ctx:
            stdout_ctx.__exit__(None, None, None)
        await simulator.stop()


def main():
    """CLI entry point for the simulator."""
    parser = argparse.ArgumentParser(
        description="RainMaker Simulator - Fake sprinkler controller for frontend development"
    )
    parser.add_argument(
        "--host", "-H",
        default="0.0.0.0",
        help="Address to bind (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to listen on (default: {DEFAULT_PORT})"
    )
    parser.add_argument(
        "--delay",
        type=float,
        metavar="SECONDS",
        help=f"Delay before responses are sent (default: {TimingConfig.response_delay})"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--daemon", "-D",
        action="store_true",
        help="Run without the interactive console"
    )
    parser.add_argument(
        "--run-for", "-r",
        type=float,
        metavar="SECONDS",
        help="Maximum run time in seconds"
    )
    parser.add_argument(
        "--history",
        metavar="FILE",
        default=str(HISTORY_FILE),
        help=f"History file path, or 'none' to disable (default: {HISTORY_FILE})"
    )

    args = parser.parse_args()

    if args.delay is not None and args.delay < 0:
        parser.error("--delay must not be negative")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
    )

    history_file = None if args.history.lower() == "none" else args.history

    try:
        asyncio.run(run_simulator(
            host=args.host,
            port=args.port,
            response_delay=args.delay,
            daemon=args.daemon,
            run_for=args.run_for,
            history_file=history_file,
        ))
    except KeyboardInterrupt:
        print("\nSimulator stopped.")


if __name__ == "__main__":
    main()
