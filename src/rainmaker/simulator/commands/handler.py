# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command handler that combines all command mixins."""

import asyncio
import logging
from typing import TYPE_CHECKING, Callable, Optional

from .base import ArgSpec, CommandInfo, CommandResult, get_command_registry, parse_arg
from .control import ControlCommandsMixin
from .device import DeviceCommandsMixin

if TYPE_CHECKING:
    from ..server import SprinklerSimulator

logger = logging.getLogger(__name__)

# Help output order
_CATEGORIES = ("device", "control")


class CommandHandler(DeviceCommandsMixin, ControlCommandsMixin):
    """Handles operator commands for the simulator.

    Commands can be invoked:
    - Via execute() with a command string
    - Directly as methods (e.g., handler.wifi(True), handler.zone(1, False))
    """

    def __init__(
        self,
        simulator: "SprinklerSimulator",
        stop_callback: Callable[[], None],
    ):
        """Initialize the command handler.

        Args:
            simulator: The sprinkler simulator instance
            stop_callback: Function to call to stop the simulator
        """
        self.simulator = simulator
        self.stop_callback = stop_callback

    def get_command_names(self) -> list[str]:
        """All command names and aliases, for tab completion."""
        return sorted(get_command_registry())

    def get_help(self) -> str:
        """Build the help text, grouped by category."""
        seen: set[str] = set()
        by_category: dict[str, list[CommandInfo]] = {}
        for info in get_command_registry().values():
            if info.name in seen:
                continue
            seen.add(info.name)
            by_category.setdefault(info.category, []).append(info)

        lines = ["Commands:"]
        for category in _CATEGORIES:
            for info in by_category.get(category, []):
                names = ", ".join([info.name] + info.aliases)
                usage = f" {info.usage}" if info.usage else ""
                lines.append(f"  {names}{usage} - {info.description}")
        return "\n".join(lines)

    async def execute(self, command_str: str) -> CommandResult:
        """Execute a command string and return the result.

        Args:
            command_str: The command string to execute (e.g., "zone 1 off")

        Returns:
            CommandResult with success status and message
        """
        _command_registry = get_command_registry()

        if not command_str or not command_str.strip():
            return CommandResult(False, "Empty command")

        parts = command_str.split()
        cmd = parts[0].lower()

        if cmd not in _command_registry:
            return CommandResult(
                False, f"Unknown command: {cmd}. Type 'help' for commands."
            )

        info = _command_registry[cmd]
        handler = getattr(self, info.handler.__name__)

        parsed_args, error = self._parse_args(parts[1:], info.args, info.name)
        if error:
            return error

        try:
            result = handler(*parsed_args)
            if asyncio.iscoroutine(result):
                result = await result
        except Exception as e:
            logger.debug(f"Command '{command_str}' failed", exc_info=True)
            return CommandResult(False, f"Error: {e}")

        return result

    def _parse_args(
        self,
        parts: list[str],
        arg_specs: list[ArgSpec],
        cmd_name: str,
    ) -> tuple[list, Optional[CommandResult]]:
        """Parse argument parts according to ArgSpec definitions.

        Returns:
            (parsed_args, error) - error is None on success
        """
        parsed = []
        usage = " ".join(spec.generate_usage() for spec in arg_specs)

        if len(parts) > len(arg_specs):
            return [], CommandResult(
                False, f"Too many arguments\nUsage: {cmd_name} {usage}".rstrip()
            )

        for i, spec in enumerate(arg_specs):
            if i < len(parts):
                value, error = parse_arg(parts[i], spec)
                if error:
                    return [], CommandResult(False, f"{error}\nUsage: {cmd_name} {usage}")
                parsed.append(value)
            elif spec.required:
                return [], CommandResult(
                    False,
                    f"Missing required argument: {spec.name}\nUsage: {cmd_name} {usage}",
                )
            else:
                parsed.append(spec.default)

        return parsed, None
