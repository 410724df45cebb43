"""
Pydantic models for Sway tree snapshots and workspace listings.

Snapshots are built once per layout decision from the i3ipc reply objects and
are immutable afterwards. Nothing here is cached across events.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    """Container type as reported in the Sway tree."""

    ROOT = "root"
    OUTPUT = "output"
    WORKSPACE = "workspace"
    CON = "con"
    FLOATING_CON = "floating_con"
    DOCKAREA = "dockarea"

    @classmethod
    def _missing_(cls, value: object) -> "NodeType":
        return cls.CON


class NodeLayout(str, Enum):
    """Container layout mode."""

    SPLITH = "splith"
    SPLITV = "splitv"
    STACKED = "stacked"
    TABBED = "tabbed"
    OUTPUT = "output"
    DOCKAREA = "dockarea"
    NONE = "none"

    @classmethod
    def _missing_(cls, value: object) -> "NodeLayout":
        return cls.NONE

    @property
    def is_split(self) -> bool:
        return self in (NodeLayout.SPLITH, NodeLayout.SPLITV)

    @property
    def is_stacked_or_tabbed(self) -> bool:
        return self in (NodeLayout.STACKED, NodeLayout.TABBED)


class TreeNode(BaseModel):
    """One container of a point-in-time Sway tree snapshot.

    Attributes:
        id: Sway container id (con_id)
        node_type: Container type (workspace, con, floating_con, ...)
        layout: Layout mode of the container's children
        focused: Whether this exact container holds input focus
        percent: Share of the parent container; Sway reports values above 1.0
            for containers that are not tiled in a regular split
        focus: Focus stack of the children, as container ids, most recent first
        nodes: Tiled children in tree order
        floating_nodes: Floating children in tree order
    """

    id: int = Field(..., description="Sway container id")
    node_type: NodeType = Field(NodeType.CON, description="Container type")
    layout: NodeLayout = Field(NodeLayout.NONE, description="Layout mode")
    focused: bool = Field(False, description="Holds input focus")
    percent: Optional[float] = Field(None, description="Share of parent size")
    focus: tuple[int, ...] = Field(default_factory=tuple, description="Child focus stack")
    nodes: tuple[TreeNode, ...] = Field(default_factory=tuple, description="Tiled children")
    floating_nodes: tuple[TreeNode, ...] = Field(default_factory=tuple, description="Floating children")

    model_config = {"frozen": True}

    @classmethod
    def from_con(cls, con: Any) -> "TreeNode":
        """Build a snapshot from an i3ipc ``Con`` and all of its descendants.

        Args:
            con: i3ipc Con object, usually the root returned by get_tree()

        Returns:
            Immutable TreeNode mirroring the container hierarchy
        """
        return cls(
            id=con.id,
            node_type=NodeType(con.type),
            layout=NodeLayout(con.layout),
            focused=bool(con.focused),
            percent=con.percent,
            focus=tuple(getattr(con, "focus", None) or ()),
            nodes=tuple(cls.from_con(child) for child in con.nodes),
            floating_nodes=tuple(cls.from_con(child) for child in con.floating_nodes),
        )

    @property
    def is_workspace(self) -> bool:
        return self.node_type == NodeType.WORKSPACE

    @property
    def is_floating(self) -> bool:
        return self.node_type == NodeType.FLOATING_CON

    @property
    def exceeds_full_size(self) -> bool:
        """True when Sway reports more than 100% of the parent for this container."""
        return self.percent is not None and self.percent > 1.0

    def _children_in_focus_order(self) -> Iterator[TreeNode]:
        children = self.nodes + self.floating_nodes
        by_id = {child.id: child for child in children}

        for child_id in self.focus:
            if child_id in by_id:
                yield by_id.pop(child_id)

        # Children missing from the focus stack keep tree order
        for child in children:
            if child.id in by_id:
                yield child

    def find_focused(self, predicate: Callable[[TreeNode], bool]) -> Optional[TreeNode]:
        """Depth-first search following the focus stack first.

        Args:
            predicate: Test applied to each visited node

        Returns:
            First node satisfying the predicate, or None
        """
        if predicate(self):
            return self

        for child in self._children_in_focus_order():
            found = child.find_focused(predicate)
            if found is not None:
                return found

        return None

    def focused_node(self) -> Optional[TreeNode]:
        """Return the node holding input focus."""
        return self.find_focused(lambda node: node.focused)

    def parent_of_focused(self) -> Optional[TreeNode]:
        """Return the node whose tiled children include the focused node."""
        return self.find_focused(lambda node: any(child.focused for child in node.nodes))


class WorkspaceInfo(BaseModel):
    """Workspace entry from the GET_WORKSPACES listing."""

    id: int = Field(..., description="Sway container id of the workspace")
    num: int = Field(-1, description="Workspace number (-1 for named workspaces)")
    name: str = Field(..., description="Workspace name")
    focused: bool = Field(False, description="Whether the workspace has focus")
    visible: bool = Field(False, description="Whether the workspace is visible")
    output: Optional[str] = Field(None, description="Output the workspace lives on")

    model_config = {"frozen": True}

    @classmethod
    def from_reply(cls, reply: Any) -> "WorkspaceInfo":
        """Build from an i3ipc ``WorkspaceReply``.

        Sway adds the container id to the raw reply; i3ipc only exposes it
        through ``ipc_data``.
        """
        return cls(
            id=reply.ipc_data["id"],
            num=reply.num,
            name=reply.name,
            focused=bool(reply.focused),
            visible=bool(reply.visible),
            output=reply.output,
        )


TreeNode.model_rebuild()
