"""Termination signal handling.

On the first SIGHUP, SIGINT, SIGQUIT or SIGTERM the configured exit command
is sent over a freshly opened channel and the process exits. The dispatch
loop's channel is never touched from here.
"""

import asyncio
import logging
import signal
import sys
from typing import Awaitable, Callable, Iterable, Optional

from .config import DaemonConfig
from .connection import ControlChannel, connect

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)

ChannelFactory = Callable[[Optional[str]], Awaitable[ControlChannel]]


class TerminationSignalHandler:
    """Runs the exit command once when the daemon is asked to terminate."""

    def __init__(
        self,
        config: DaemonConfig,
        connect: ChannelFactory = connect,
        signals: Iterable[signal.Signals] = HANDLED_SIGNALS,
    ) -> None:
        """
        Args:
            config: Startup configuration; the exit command is copied out once
            connect: Factory used to open the exit command's own channel
            signals: Signals that trigger the exit command
        """
        self.exit_command = config.on_exit
        self.socket_path = config.socket_path
        self.signals = tuple(signals)
        self._connect = connect
        self._deliveries: "asyncio.Queue[Optional[int]]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Register the signal handlers on the running event loop."""
        self._loop = loop or asyncio.get_running_loop()
        for sig in self.signals:
            self._loop.add_signal_handler(sig, self._deliver, sig)
        logger.debug(f"Handling signals: {', '.join(sig.name for sig in self.signals)}")

    def _deliver(self, signum: int) -> None:
        self._deliveries.put_nowait(signum)

    def close(self) -> None:
        """Stop signal delivery and let run() return without acting."""
        if self._loop is not None:
            for sig in self.signals:
                self._loop.remove_signal_handler(sig)
            self._loop = None
        self._deliveries.put_nowait(None)

    async def run(self) -> None:
        """Wait for the first signal, send the exit command and exit.

        Returns only when close() was called first. Otherwise ends the process
        with status 0, or 1 if the exit command could not be sent.
        """
        signum = await self._deliveries.get()
        if signum is None:
            logger.debug("Signal handler closed before any signal arrived")
            return

        logger.info(f"Received {signal.Signals(signum).name}, running exit command {self.exit_command!r}")

        try:
            channel = await self._connect(self.socket_path)
            await channel.run_command(self.exit_command)
        except Exception as e:
            logger.error(f"Failed to run exit command: {e}")
            sys.exit(1)

        logger.info("Exit command sent, exiting")
        sys.exit(0)
