# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Base infrastructure for command handling.

This module provides the core types, decorator, and parsing utilities
used by all command handlers.
"""

import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass
class CommandResult:
    """Result of executing a command."""

    success: bool
    message: str
    data: Optional[dict] = None


@dataclass
class ArgSpec:
    """Specification for a command argument.

    Attributes:
        name: Argument name for error messages and usage
        arg_type: Type of argument (string, int, bool_toggle)
        required: Whether the argument is required
        default: Default value when not provided
        description: Help text describing this argument
        min_value: Minimum value for int arguments
    """

    name: str
    arg_type: str  # "string", "int", "bool_toggle"
    required: bool = True
    default: Any = None
    description: str = ""
    min_value: Optional[int] = None

    def generate_usage(self) -> str:
        """Generate usage string for this argument."""
        inner = "on|off" if self.arg_type == "bool_toggle" else self.name
        if self.required:
            return f"<{inner}>"
        return f"[{inner}]"


# Standard bool toggle values
_BOOL_TRUE = ("on", "true", "1", "yes")
_BOOL_FALSE = ("off", "false", "0", "no")


def parse_arg(value: str, spec: ArgSpec) -> tuple[Any, Optional[str]]:
    """Parse and validate an argument value.

    Returns:
        (parsed_value, error_message) - error_message is None on success
    """
    if spec.arg_type == "int":
        try:
            parsed = int(value)
        except ValueError:
            return None, f"'{value}' is not a valid integer"
        if spec.min_value is not None and parsed < spec.min_value:
            return None, f"'{value}' is below minimum ({spec.min_value})"
        return parsed, None

    elif spec.arg_type == "bool_toggle":
        v = value.lower()
        if v in _BOOL_TRUE:
            return True, None
        elif v in _BOOL_FALSE:
            return False, None
        return None, f"'{value}' is not valid. Use on/off"

    return value, None


@dataclass
class CommandInfo:
    """Metadata about a command."""

    name: str
    aliases: list[str] = field(default_factory=list)
    description: str = ""
    usage: Optional[str] = None
    category: str = "misc"
    handler: Optional[Callable] = None
    args: list[ArgSpec] = field(default_factory=list)

    def generate_usage(self) -> str:
        return " ".join(arg.generate_usage() for arg in self.args)


# Registry of commands (populated by decorator)
_command_registry: dict[str, CommandInfo] = {}


def get_command_registry() -> dict[str, CommandInfo]:
    """Get the global command registry."""
    return _command_registry


def command(
    name: str,
    aliases: Optional[list[str]] = None,
    description: str = "",
    usage: Optional[str] = None,
    category: str = "misc",
    args: Optional[list[ArgSpec]] = None,
):
    """Decorator to register a method as a command.

    Args:
        name: Primary command name
        aliases: Alternative names/shortcuts for the command
        description: Help text for the command
        usage: Usage string - auto-generated from args if not provided
        category: Category for grouping in help output
        args: List of ArgSpec for argument parsing
    """

    def decorator(func: Callable) -> Callable:
        info = CommandInfo(
            name=name,
            aliases=aliases or [],
            description=description,
            usage=usage,
            category=category,
            handler=func,
            args=args or [],
        )
        if info.usage is None:
            info.usage = info.generate_usage() or None

        # Register under primary name and all aliases
        _command_registry[name] = info
        for alias in info.aliases:
            _command_registry[alias] = info

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        wrapper._command_info = info
        return wrapper

    return decorator
