"""
Blocking request/response correlation over a FramedConnection.

Printers answer on the same stream with no request ids, so a reply is
recognized by shape: the caller supplies a parser and a predicate over the
messages accumulated so far. Timeouts are a normal outcome and return the
partial result; only interruption is raised.
"""

import logging
import threading
import time
from typing import Callable, List, Optional, Union

from py2printers.core.errors import InterruptedOperationError
from py2printers.core.framed_connection import FramedConnection
from py2printers.core.messages import Message
from py2printers.core.raw_frame import RawFrame

logger = logging.getLogger(__name__)

Parser = Callable[[RawFrame], List[Message]]
DonePredicate = Callable[[List[Message]], bool]


def any_message(messages: List[Message]) -> bool:
    return bool(messages)


class CommandCorrelator:
    """
    Sends a command and re-reads until a reply is recognized.

    The wait loop runs on the calling thread. Between read attempts it
    sleeps on ``cancel_event`` so another thread can interrupt a long
    print by calling ``interrupt()``.

    Example:
        >>> correlator = CommandCorrelator(connection)
        >>> replies = correlator.send_and_wait(
        ...     "\\x02\\x12PH\\x03", timeout=1.0,
        ...     parse=parser.parse, done=has_reply)
        >>> if not replies:
        ...     print("no reply within 1s")
    """

    def __init__(
        self,
        connection: FramedConnection,
        cancel_event: Optional[threading.Event] = None,
        poll_interval: float = 0.05
    ):
        """
        Initialize the correlator.

        Args:
            connection: Connection to send on and read from
            cancel_event: Event that interrupts waits when set
            poll_interval: Delay between read attempts in seconds
        """
        self.connection = connection
        self.cancel_event = cancel_event or threading.Event()
        self.poll_interval = poll_interval

    def send_and_wait(
        self,
        command: Union[str, bytes],
        timeout: float,
        parse: Parser,
        done: DonePredicate = any_message
    ) -> List[Message]:
        """
        Send ``command`` once and collect replies until ``done`` or timeout.

        ``done`` is evaluated after every chunk, so the call returns as soon
        as the reply is complete.

        Args:
            command: Command to send
            timeout: Wall-clock budget in seconds
            parse: Decoder turning one chunk into zero or more messages
            done: Predicate over all messages accumulated so far

        Returns:
            Accumulated messages. May be empty or partial on timeout.

        Raises:
            ConnectionError: If the connection fails
            InterruptedOperationError: If the wait was interrupted
        """
        self.check_interrupted('send_and_wait')
        deadline = time.monotonic() + timeout
        self.connection.send(command)

        accumulated: List[Message] = []
        while True:
            for chunk in self.connection.read_chunks():
                accumulated.extend(parse(chunk))
                if done(accumulated):
                    return accumulated

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug(
                    f"No complete reply within {timeout:.2f}s "
                    f"({len(accumulated)} messages collected)"
                )
                return accumulated
            self.sleep(min(self.poll_interval, remaining))

    def read_available(self, parse: Parser) -> List[Message]:
        """Parse whatever the connection has buffered right now."""
        messages: List[Message] = []
        for chunk in self.connection.read_chunks():
            messages.extend(parse(chunk))
        return messages

    def sleep(self, seconds: float) -> None:
        """
        Sleep, waking early if interrupted.

        Raises:
            InterruptedOperationError: If interrupt() was called
        """
        if seconds > 0 and self.cancel_event.wait(seconds):
            self._raise_interrupted('sleep')
        self.check_interrupted('sleep')

    def interrupt(self) -> None:
        """Interrupt the current or next wait."""
        self.cancel_event.set()

    def reset(self) -> None:
        """Clear a previous interrupt so the correlator can be reused."""
        self.cancel_event.clear()

    @property
    def interrupted(self) -> bool:
        return self.cancel_event.is_set()

    def check_interrupted(self, operation: str) -> None:
        if self.cancel_event.is_set():
            self._raise_interrupted(operation)

    def _raise_interrupted(self, operation: str) -> None:
        raise InterruptedOperationError(
            f"Interrupted while waiting on {self.connection.host}:{self.connection.port}",
            operation=operation
        )
