"""Main daemon entry point.

Wires the event dispatch loop and the termination signal handler onto one
asyncio loop and coordinates shutdown when the event stream ends.
"""

import asyncio
import logging
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

try:
    from systemd import journal
    SYSTEMD_AVAILABLE = True
except ImportError:
    SYSTEMD_AVAILABLE = False

from .cli import parse_args
from .config import DaemonConfig
from .connection import ControlChannel, connect
from .dispatcher import SUBSCRIBED_EVENTS, EventDispatcher
from .errors import AutolayoutError
from .signals import ChannelFactory, TerminationSignalHandler

logger = logging.getLogger(__name__)


class AutolayoutDaemon:
    """Main daemon class."""

    def __init__(self, config: DaemonConfig, connect: ChannelFactory = connect) -> None:
        """
        Args:
            config: Startup configuration
            connect: Channel factory; every caller gets its own connection
        """
        self.config = config
        self._connect = connect
        self.signal_handler = TerminationSignalHandler(config, connect=connect)
        self.command_channel: Optional[ControlChannel] = None
        self.event_channel: Optional[ControlChannel] = None
        self.dispatcher: Optional[EventDispatcher] = None

    async def run(self) -> int:
        """Run until the event stream ends.

        Returns:
            0 when the stream closed cleanly; errors propagate
        """
        self.signal_handler.install()
        signal_task = asyncio.create_task(self.signal_handler.run(), name="termination-signals")

        try:
            self.command_channel = await self._connect(self.config.socket_path)
            self.event_channel = await self._connect(self.config.socket_path)

            events = await self.event_channel.subscribe(SUBSCRIBED_EVENTS)
            self.dispatcher = EventDispatcher(self.command_channel, events)
            await self.dispatcher.run()
        finally:
            await self.shutdown(signal_task)

        return 0

    async def shutdown(self, signal_task: asyncio.Task) -> None:
        """Stop signal delivery and wait for the signal task to settle."""
        logger.info("Shutting down daemon...")

        self.signal_handler.close()
        if not signal_task.done():
            await signal_task
        elif not signal_task.cancelled():
            # Collect the SystemExit left by sys.exit() in the signal task
            signal_task.exception()

        if self.event_channel is not None:
            self.event_channel.close()

        logger.info("Daemon shutdown complete")


def setup_logging(log_level: str = "INFO") -> None:
    """Setup logging to the systemd journal or stderr."""
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if SYSTEMD_AVAILABLE and os.environ.get("JOURNAL_STREAM"):
        handler = journal.JournalHandler(SYSLOG_IDENTIFIER="sway-autolayout")
    else:
        handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        "%(levelname)s [%(name)s] %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.debug(f"Logging configured: level={log_level}")


async def main_async(config: DaemonConfig) -> int:
    """Async main function.

    Returns:
        Exit code (0 = event stream closed)
    """
    daemon = AutolayoutDaemon(config, connect=connect)
    return await daemon.run()


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = DaemonConfig.from_args(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(config.log_level)
    logger.info(f"Sway autolayout daemon starting (PID {os.getpid()})")

    try:
        exit_code = asyncio.run(main_async(config))
        sys.exit(exit_code)

    except AutolayoutError as e:
        logger.error(f"Fatal error: {e.message}")
        if e.context:
            logger.debug(f"Error context: {e.context}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
