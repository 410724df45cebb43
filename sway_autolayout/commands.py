"""
Layout command models.

Each LayoutCommand renders to one literal Sway command string. The engine
only ever sends the four shapes defined here plus the user's exit command.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Horizontal gap that centres the single main window of a workspace
MAIN_COLUMN_GAP = 752
# Width the main column is held at once secondary windows exist
MAIN_COLUMN_WIDTH = 1920
MAIN_MARK_PREFIX = "main_"


class CommandType(str, Enum):
    """Type of layout command."""

    GAPS_HORIZONTAL = "gaps_horizontal"
    GAPS_RIGHT = "gaps_right"
    RESIZE_MARKED = "resize_marked"
    ADD_MARK = "add_mark"


def main_mark(container_id: int) -> str:
    """Mark that designates the main column of a workspace scope."""
    return f"{MAIN_MARK_PREFIX}{container_id}"


class LayoutCommand(BaseModel):
    """Single Sway IPC command issued by the layout engine.

    Example:
        >>> LayoutCommand(command_type=CommandType.ADD_MARK, params={"container_id": 1}).to_sway_command()
        'mark --add main_1'
    """

    command_type: CommandType = Field(..., description="Type of command")
    params: dict[str, Any] = Field(default_factory=dict, description="Command parameters")

    model_config = {"frozen": True}

    def to_sway_command(self) -> str:
        """Generate the Sway IPC command string.

        Raises:
            ValueError: If a required parameter is missing for the command type
        """
        match self.command_type:
            case CommandType.GAPS_HORIZONTAL:
                return f"gaps horizontal current set {MAIN_COLUMN_GAP}"

            case CommandType.GAPS_RIGHT:
                return "gaps right current set 0"

            case CommandType.RESIZE_MARKED:
                if "workspace_id" not in self.params:
                    raise ValueError("RESIZE_MARKED requires 'workspace_id' parameter")
                mark = main_mark(self.params["workspace_id"])
                return f'[con_mark="{mark}"] resize set {MAIN_COLUMN_WIDTH}px'

            case CommandType.ADD_MARK:
                if "container_id" not in self.params:
                    raise ValueError("ADD_MARK requires 'container_id' parameter")
                return f"mark --add {main_mark(self.params['container_id'])}"

            case _:
                raise ValueError(f"Unknown command type: {self.command_type}")


def set_main_column_gap() -> LayoutCommand:
    return LayoutCommand(command_type=CommandType.GAPS_HORIZONTAL)


def clear_right_gap() -> LayoutCommand:
    return LayoutCommand(command_type=CommandType.GAPS_RIGHT)


def resize_main_column(workspace_id: int) -> LayoutCommand:
    return LayoutCommand(
        command_type=CommandType.RESIZE_MARKED,
        params={"workspace_id": workspace_id},
    )


def mark_main_column(container_id: int) -> LayoutCommand:
    return LayoutCommand(
        command_type=CommandType.ADD_MARK,
        params={"container_id": container_id},
    )
