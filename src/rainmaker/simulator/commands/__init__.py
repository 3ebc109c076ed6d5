# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Operator commands for the sprinkler simulator.

The command handler is split into category-specific mixins:
- DeviceCommandsMixin: Device state (status, wifi, zones, programs)
- ControlCommandsMixin: Simulator control (shutdown, debug, help)
"""

from .base import (
    ArgSpec,
    CommandInfo,
    CommandResult,
    command,
    get_command_registry,
    parse_arg,
)
from .handler import CommandHandler

__all__ = [
    "ArgSpec",
    "CommandHandler",
    "CommandInfo",
    "CommandResult",
    "command",
    "get_command_registry",
    "parse_arg",
]
