"""
Gateway interface for outbound commands.

The engine never talks to the exchange directly. It hands commands to a
Gateway, which owns transport, framing and sequencing. Sends are
fire-and-forget: acknowledgements come back later as ordinary events on
the engine's inbound queue.
"""

import logging
import queue
from abc import ABC, abstractmethod

from .types import (
    Command,
    InsertOrder,
    CancelOrder,
    HedgeOrder,
)

logger = logging.getLogger(__name__)


class Gateway(ABC):
    """
    Outbound command sink.

    Implementations must not block the engine thread.
    """

    @abstractmethod
    def send_insert(self, command: InsertOrder) -> None:
        """Insert an order on the tradable instrument."""

    @abstractmethod
    def send_cancel(self, command: CancelOrder) -> None:
        """Cancel a previously inserted order."""

    @abstractmethod
    def send_hedge(self, command: HedgeOrder) -> None:
        """Send an aggressive hedge order on the reference instrument."""


class QueueGateway(Gateway):
    """
    Gateway that publishes commands to an outbound queue.

    A transport worker (outside the decision core) drains the queue and
    writes to the exchange connection.

    Usage:
        outbound = queue.Queue()
        gateway = QueueGateway(outbound)
        engine = EngineActor(gateway=gateway, ...)

        # Transport thread
        cmd = outbound.get()
        connection.write(encode_command(cmd))
    """

    def __init__(self, outbound: queue.Queue | None = None, max_queue_size: int = 1000):
        self._outbound: queue.Queue = outbound if outbound is not None else queue.Queue(maxsize=max_queue_size)
        self._dropped = 0

    @property
    def outbound(self) -> queue.Queue:
        return self._outbound

    @property
    def dropped(self) -> int:
        """Commands dropped because the outbound queue was full."""
        return self._dropped

    def send_insert(self, command: InsertOrder) -> None:
        self._put(command)

    def send_cancel(self, command: CancelOrder) -> None:
        self._put(command)

    def send_hedge(self, command: HedgeOrder) -> None:
        self._put(command)

    def drain(self) -> list[Command]:
        """Take every queued command (for tests and diagnostics)."""
        commands = []
        while True:
            try:
                commands.append(self._outbound.get_nowait())
            except queue.Empty:
                return commands

    def _put(self, command: Command) -> None:
        try:
            self._outbound.put_nowait(command)
        except queue.Full:
            self._dropped += 1
            logger.error(f"Outbound queue full, dropped {command}")
