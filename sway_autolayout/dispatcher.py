"""Event dispatch loop.

Consumes the Sway event stream one event at a time. The next event is not
read until every command for the current one has completed or failed.
"""

import logging
from typing import AsyncIterator

from .autolayout import autolayout
from .commands import set_main_column_gap
from .connection import ControlChannel, ControlEvent, EventKind
from .errors import UnexpectedEventError

logger = logging.getLogger(__name__)

SUBSCRIBED_EVENTS = (EventKind.WINDOW, EventKind.WORKSPACE)

# i3ipc reports window removal as "close"
LAYOUT_WINDOW_CHANGES = frozenset({"new", "close"})


class EventDispatcher:
    """Routes window and workspace events to layout actions."""

    def __init__(self, channel: ControlChannel, events: AsyncIterator[ControlEvent]) -> None:
        """
        Args:
            channel: Channel used for tree queries and commands
            events: Event stream from a separate subscription channel
        """
        self.channel = channel
        self.events = events
        self.events_processed = 0

    async def handle_event(self, event: ControlEvent) -> None:
        """Apply the layout policy for a single event.

        Raises:
            UnexpectedEventError: For event kinds that were never subscribed
        """
        if event.kind == EventKind.WINDOW:
            if event.change in LAYOUT_WINDOW_CHANGES:
                issued = await autolayout(self.channel)
                self.events_processed += 1
                logger.debug(f"window::{event.change} -> {issued}")

        elif event.kind == EventKind.WORKSPACE:
            if event.change == "init":
                await self.channel.run_command(set_main_column_gap().to_sway_command())
                self.events_processed += 1
                logger.debug("workspace::init -> main column gap set")

        else:
            raise UnexpectedEventError(str(event.kind))

    async def run(self) -> None:
        """Process events until the stream ends. Errors propagate."""
        logger.info("Starting event dispatch loop")

        async for event in self.events:
            await self.handle_event(event)

        logger.info(f"Event stream ended after {self.events_processed} layout events")
