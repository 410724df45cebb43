"""Sway IPC control channel.

Thin adapter over ``i3ipc.aio.Connection`` that turns replies into immutable
snapshots, failed command replies into exceptions, and the callback-based
event subscription into an ordered async iterator.

Each ControlChannel owns one i3ipc connection. The command path and the
subscription path use separate channels, so one never waits on the other.
"""

import asyncio
import logging
from enum import Enum
from functools import partial
from typing import Iterable, List, Optional

from i3ipc import Event
from i3ipc.aio import Connection
from i3ipc.replies import CommandReply
from pydantic import BaseModel, Field

from .errors import (
    ChannelConnectError,
    EventStreamError,
    NoFocusedWorkspaceError,
    RequestError,
)
from .models import TreeNode, WorkspaceInfo

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Sway event classes the daemon subscribes to."""

    WINDOW = "window"
    WORKSPACE = "workspace"


class ControlEvent(BaseModel):
    """A lifecycle event as delivered by the subscription."""

    kind: EventKind = Field(..., description="Event class")
    change: str = Field("", description="Change detail, e.g. new, close, init")

    model_config = {"frozen": True}


class EventStream:
    """Async iterator over subscribed events in delivery order.

    Ends when the compositor closes the socket. Any other failure of the
    i3ipc main loop is raised as EventStreamError.
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn
        self._queue: "asyncio.Queue[ControlEvent]" = asyncio.Queue()
        self._main_task: Optional[asyncio.Task] = None

    def _enqueue(self, kind: EventKind, conn: Connection, event) -> None:
        # i3ipc schedules handlers in arrival order; put_nowait keeps that order
        self._queue.put_nowait(ControlEvent(kind=kind, change=getattr(event, "change", "") or ""))

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> ControlEvent:
        if self._main_task is None:
            self._main_task = asyncio.ensure_future(self._conn.main())

        if not self._queue.empty():
            return self._queue.get_nowait()

        if not self._main_task.done():
            getter = asyncio.ensure_future(self._queue.get())
            try:
                await asyncio.wait(
                    {getter, self._main_task}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not getter.done():
                    getter.cancel()

            if getter.done() and not getter.cancelled():
                return getter.result()

        # Events queued before the socket closed are still delivered
        if not self._queue.empty():
            return self._queue.get_nowait()

        self._raise_for_main_loop()

    def _raise_for_main_loop(self) -> None:
        task = self._main_task
        if task.cancelled():
            raise StopAsyncIteration

        error = task.exception()
        if error is None or isinstance(error, EOFError):
            logger.info("Sway event stream closed")
            raise StopAsyncIteration

        raise EventStreamError(str(error)) from error

    def close(self) -> None:
        """Stop the i3ipc main loop; iteration ends once the queue drains."""
        self._conn.main_quit()
        if self._main_task is not None and not self._main_task.done():
            self._main_task.cancel()


class ControlChannel:
    """Request/response and subscription access to one Sway IPC connection."""

    def __init__(self, conn: Connection) -> None:
        """Wrap an already connected i3ipc connection.

        Args:
            conn: Connected i3ipc.aio.Connection
        """
        self.conn = conn
        self._stream: Optional[EventStream] = None

    async def get_tree(self) -> TreeNode:
        """Fetch a fresh tree snapshot."""
        try:
            root = await self.conn.get_tree()
        except (OSError, EOFError) as e:
            raise RequestError("get_tree", str(e)) from e
        return TreeNode.from_con(root)

    async def get_workspaces(self) -> List[WorkspaceInfo]:
        """Fetch the workspace listing."""
        try:
            replies = await self.conn.get_workspaces()
        except (OSError, EOFError) as e:
            raise RequestError("get_workspaces", str(e)) from e
        return [WorkspaceInfo.from_reply(reply) for reply in replies]

    async def focused_workspace(self) -> WorkspaceInfo:
        """Return the focused workspace from the listing.

        Raises:
            NoFocusedWorkspaceError: If no workspace reports focus
        """
        for workspace in await self.get_workspaces():
            if workspace.focused:
                return workspace
        raise NoFocusedWorkspaceError()

    async def run_command(self, text: str) -> List[CommandReply]:
        """Run a Sway command string.

        The string may hold several comma or semicolon separated commands;
        Sway answers with one reply per command. Unsuccessful replies (such as
        "No matching node." for a criteria that matches nothing) are logged
        and returned, not raised.

        Raises:
            RequestError: If the request could not be sent or answered
        """
        logger.debug(f"Running command: {text!r}")
        try:
            replies = await self.conn.command(text)
        except (OSError, EOFError) as e:
            raise RequestError("command", str(e)) from e

        for reply in replies:
            if not reply.success:
                logger.warning(f"Sway rejected command {text!r}: {reply.error or 'unknown error'}")

        return replies

    async def subscribe(self, kinds: Iterable[EventKind]) -> EventStream:
        """Subscribe to event classes and return the ordered event stream."""
        kinds = list(kinds)
        stream = EventStream(self.conn)

        for kind in kinds:
            self.conn.on(Event(kind.value), partial(stream._enqueue, kind))

        try:
            await self.conn.subscribe([Event(kind.value) for kind in kinds])
        except (OSError, EOFError) as e:
            raise RequestError("subscribe", str(e)) from e

        logger.info(f"Subscribed to Sway events: {', '.join(kind.value for kind in kinds)}")
        self._stream = stream
        return stream

    def close(self) -> None:
        """Stop event delivery on this channel."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None


async def connect(socket_path: Optional[str] = None) -> ControlChannel:
    """Open a new control channel.

    Args:
        socket_path: Sway IPC socket; None lets i3ipc use SWAYSOCK/I3SOCK

    Raises:
        ChannelConnectError: If the socket cannot be reached
    """
    try:
        conn = await Connection(socket_path=socket_path).connect()
    except Exception as e:
        raise ChannelConnectError(str(e), socket_path) from e

    logger.debug(f"Connected to Sway IPC at {conn.socket_path}")
    return ControlChannel(conn)
