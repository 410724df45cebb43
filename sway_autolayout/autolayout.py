"""Master/stack autolayout decision engine.

Runs on every window new/close event. The first tiled window of a workspace
becomes the main column: it is centred with a wide horizontal gap and marked
``main_<id>``. Every later window docks beside it, and the marked main column
is resized back to a fixed width to undo Sway's automatic re-flow.

Floating windows and stacked/tabbed containers are left alone.
"""

import logging
from typing import List

from .commands import (
    LayoutCommand,
    clear_right_gap,
    mark_main_column,
    resize_main_column,
    set_main_column_gap,
)
from .connection import ControlChannel
from .errors import NoFocusedNodeError, NoParentError
from .models import TreeNode

logger = logging.getLogger(__name__)


def is_first_in_scope(parent: TreeNode) -> bool:
    """True when the parent is a workspace holding a single tiled child."""
    return parent.is_workspace and len(parent.nodes) <= 1


async def _issue(channel: ControlChannel, command: LayoutCommand, issued: List[str]) -> None:
    text = command.to_sway_command()
    await channel.run_command(text)
    issued.append(text)


async def autolayout(channel: ControlChannel) -> List[str]:
    """Inspect a fresh tree snapshot and apply the master/stack policy.

    Commands are sent one at a time. A transport failure aborts the rest;
    a command Sway rejects is logged and the next one is still sent.

    Args:
        channel: Control channel used for both queries and commands

    Returns:
        The command strings that were issued (empty when nothing applies)

    Raises:
        NoFocusedNodeError: If the tree has no focused node
        NoParentError: If the focused node has no tiled parent
        NoFocusedWorkspaceError: If the workspace listing has no focused entry
        RequestError: If a query or command cannot be sent
    """
    tree = await channel.get_tree()
    issued: List[str] = []

    focused = tree.focused_node()
    if focused is None:
        raise NoFocusedNodeError()

    if focused.is_floating or focused.exceeds_full_size:
        logger.debug(f"Skipping container {focused.id}: floating or not regularly tiled")
        return issued

    parent = tree.parent_of_focused()
    if parent is None:
        raise NoParentError()

    if parent.layout.is_stacked_or_tabbed:
        logger.debug(f"Skipping container {parent.id}: {parent.layout.value} layout")
        return issued

    if not is_first_in_scope(parent):
        await _issue(channel, clear_right_gap(), issued)

        workspace = await channel.focused_workspace()
        await _issue(channel, resize_main_column(workspace.id), issued)

        logger.info(f"Docked container {focused.id} beside main column of workspace {workspace.id}")
        return issued

    await _issue(channel, set_main_column_gap(), issued)
    await _issue(channel, mark_main_column(parent.id), issued)

    logger.info(f"Marked container {parent.id} as main column")
    return issued
