"""
Generic printer driver and the vendor protocol strategy it is composed with.

``PrinterDriver`` owns the connection, the correlator, the ignored-SKU set
and the state of the current print call. Everything vendor specific
(command strings, reply parsing, what "idle" means) comes from a
``VendorProtocol`` instance.

A print call moves through these states:

    IDLE -> CONNECTING -> CANCELLING -> TRANSMITTING -> POLLING
         -> COMPLETED | CANCELLED | FAILED

Whatever the exit path, the driver attempts a best-effort cancel and
closes the connection before returning or raising.
"""

import logging
import re
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Set

from py2printers.core.correlator import CommandCorrelator, Parser
from py2printers.core.error_formatting import log_error
from py2printers.core.errors import (
    CommandError,
    ErrorCodes,
    InterruptedOperationError,
    PrinterError,
    UnsupportedOperationError,
)
from py2printers.core.framed_connection import FramedConnection
from py2printers.core.messages import (
    Message,
    Nak,
    StatusMessage,
    TagMessage,
    Unrecognized,
    has_reply,
    is_acknowledged,
)
from py2printers.core.raw_frame import RawFrame
from py2printers.models.job import PrintJobState, PrintOutcome, SessionState
from py2printers.models.settings import DriverSettings

_BARE_LF = re.compile(r'(?<!\r)\n')

EpcCallback = Callable[[str, Optional[str]], None]
StatusCallback = Callable[[StatusMessage], None]


def normalize_line_endings(content: str) -> str:
    """Replace bare LF with CRLF, leaving existing CRLF alone."""
    return _BARE_LF.sub('\r\n', content)


class VendorProtocol(ABC):
    """
    Vendor specific part of a printer driver.

    Attributes:
        name: Short vendor name used in logger names
        cancel_command: Command that cancels jobs and clears the buffer,
            None if the printer has no such command
        pause_command: Command that pauses printing, None if unsupported
        resume_command: Command that resumes printing, None if unsupported
        acknowledges_commands: True if control commands are answered
            with ACK/NAK
        requires_cancel_ack: True if printing must not start unless the
            pre-transmission cancel was acknowledged
    """

    name = 'printer'
    cancel_command: Optional[str] = None
    pause_command: Optional[str] = None
    resume_command: Optional[str] = None
    acknowledges_commands = False
    requires_cancel_ack = False

    @abstractmethod
    def create_parser(self) -> Parser:
        """Return a decoder for this vendor. May be stateful per driver."""

    @abstractmethod
    def query(
        self,
        correlator: CommandCorrelator,
        parse: Parser,
        settings: DriverSettings
    ) -> List[Message]:
        """Run one polling round and return the messages it produced."""

    def preamble_commands(self) -> List[str]:
        """Commands sent after the cancel and before the label payload."""
        return []

    def normalize(self, content: str) -> str:
        return normalize_line_endings(content)

    def is_idle(self, status: StatusMessage) -> bool:
        """True if ``status`` says the printer has nothing left to do."""
        return False

    def remaining(self, status: StatusMessage, job: PrintJobState) -> Optional[int]:
        """Labels still to print according to ``status``, None if unknown."""
        return None

    def is_conclusive(self, status: StatusMessage) -> bool:
        """
        False if ``status`` carries no usable reading and the printer should
        simply be asked again. Such readings leave the stability counter as is.
        """
        return True

    def is_activity(self, message: Message, previous: Optional[StatusMessage]) -> bool:
        """
        True if ``message`` restarts the no-activity window.

        Args:
            message: Message received in the current polling round
            previous: Last distinct status seen before this message
        """
        return True


class PrinterDriver:
    """
    Drives one printer over one connection.

    Example:
        >>> driver = PrinterDriver(SatoProtocol(), "192.168.0.50", 9100)
        >>> driver.add_epc_observer(lambda epc, tid: print(epc))
        >>> epcs = driver.print(label, sku="SKU-1", expected_tag_count=10)
    """

    def __init__(
        self,
        protocol: VendorProtocol,
        host: str,
        port: int,
        settings: Optional[DriverSettings] = None,
        ignored_skus: Optional[Set[str]] = None,
        connection: Optional[FramedConnection] = None,
        cancel_event: Optional[threading.Event] = None
    ):
        """
        Initialize the driver.

        Args:
            protocol: Vendor protocol strategy
            host: Printer host
            port: Printer raw TCP port
            settings: Timing settings (defaults if omitted)
            ignored_skus: Set of SKUs to skip, shared by reference
            connection: Pre-built connection (tests inject fakes here)
            cancel_event: Event that interrupts blocking waits when set
        """
        self.protocol = protocol
        self.host = host
        self.port = port
        self.settings = settings or DriverSettings()
        self.connection = connection or FramedConnection(
            host, port,
            charset=self.settings.charset,
            connect_timeout=self.settings.connect_timeout,
            read_timeout=self.settings.read_timeout,
        )
        self.correlator = CommandCorrelator(
            self.connection, cancel_event, self.settings.poll_interval
        )
        self.ignored_skus = ignored_skus if ignored_skus is not None else set()
        self._skus_lock = threading.Lock()
        self._parse = protocol.create_parser()
        self._in_print = False

        self.sku: Optional[str] = None
        self.job = PrintJobState()
        self._epc_observers: List[EpcCallback] = []
        self._status_observers: List[StatusCallback] = []
        self.logger = logging.getLogger(self.label)

    @property
    def label(self) -> str:
        return f"{self.protocol.name}@{self.host}:{self.port}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.label})"

    # ========== Connection ==========

    def connect(self) -> None:
        self.connection.connect()

    def reconnect(self) -> None:
        self.connection.reconnect()

    def close(self) -> None:
        self.connection.close()

    def initialize(self) -> None:
        """Reset per-job state and clear a previous interrupt."""
        self.logger.debug("Initializing printer")
        self.job = PrintJobState()
        self._parse = self.protocol.create_parser()
        self.correlator.reset()

    def interrupt(self) -> None:
        """Interrupt a print call blocked in another thread."""
        self.correlator.interrupt()

    # ========== Printing ==========

    def print(self, content: str, sku: Optional[str] = None,
              expected_tag_count: int = 0) -> Set[str]:
        """
        Print a label and collect the EPCs written while it prints.

        Returns when the printer has reported idle with nothing remaining
        for ``stability_threshold`` consecutive readings, or when the printer
        has shown no new activity for ``idle_timeout`` seconds. Partial results
        are returned in the timeout case.

        Args:
            content: Label payload in the printer's language
            sku: SKU the label belongs to
            expected_tag_count: Number of tags the payload should write

        Returns:
            Unique EPCs written during this call (empty if the SKU is ignored)

        Raises:
            CommandError: If the printer did not acknowledge the
                pre-transmission cancel
            ConnectionError: If the connection fails
            InterruptedOperationError: If interrupt() was called
        """
        if content is None:
            raise ValueError("content cannot be None")

        job = PrintJobState(sku=sku, expected_tags=expected_tag_count or 0)
        self.job = job
        self.sku = sku
        # drop any partial reply left over from an earlier call
        self._parse = self.protocol.create_parser()

        if self.is_ignored_sku(sku):
            self.logger.warning(f"Skipping ignored SKU '{sku}'")
            job.state = SessionState.COMPLETED
            job.outcome = PrintOutcome.SKIPPED
            return set()

        self._in_print = True
        try:
            job.state = SessionState.CONNECTING
            self.connection.reconnect()

            job.state = SessionState.CANCELLING
            self._cancel_previous_job()

            job.state = SessionState.TRANSMITTING
            for command in self.protocol.preamble_commands():
                self.connection.send(command)

            normalized = self.protocol.normalize(content)
            self.logger.info(f"SKU: '{sku}', expected tags: {job.expected_tags}")
            self.logger.info(f"Label:\n{normalized}")
            job.printing = True
            self.connection.send(normalized)
            self.correlator.sleep(self.settings.settle_delay)

            job.state = SessionState.POLLING
            self._poll(job)
        except InterruptedOperationError:
            job.state = SessionState.CANCELLED
            job.outcome = PrintOutcome.CANCELLED
            raise
        except PrinterError:
            job.state = SessionState.FAILED
            job.outcome = PrintOutcome.ERROR
            raise
        finally:
            job.printing = False
            self._in_print = False
            self._finish_job()

        self.logger.info(
            f"Print finished ({job.outcome.value}): {len(job.epcs)} EPCs in {job.iterations} iterations"
        )
        return set(job.epcs)

    def _cancel_previous_job(self) -> None:
        command = self.protocol.cancel_command
        if command is None:
            return
        if self.protocol.requires_cancel_ack:
            if not self._send_control(command, self.settings.cancel_timeout):
                raise CommandError(
                    "Failed to cancel previous printing job.",
                    command=RawFrame.of(command, self.settings.charset).to_hex(),
                    error_code=ErrorCodes.COMMAND_NOT_ACKNOWLEDGED,
                    suggestions=["Check the printer for errors and try again"]
                )
        else:
            self.connection.send(command)

    def _poll(self, job: PrintJobState) -> None:
        last_activity = time.monotonic()
        while True:
            if not job.printing:
                self.logger.info("Printing cancelled")
                job.state = SessionState.CANCELLED
                job.outcome = PrintOutcome.CANCELLED
                return

            idle_for = time.monotonic() - last_activity
            if idle_for >= self.settings.idle_timeout:
                self.logger.warning(f"No printer activity for {idle_for:.1f}s, stopping")
                job.state = SessionState.COMPLETED
                job.outcome = PrintOutcome.TIMED_OUT
                return

            if job.iterations >= self.settings.max_iterations:
                self.logger.error("Breaking from print loop after max iterations")
                job.state = SessionState.COMPLETED
                job.outcome = PrintOutcome.ITERATION_LIMIT
                return

            self.logger.debug(f"Poll iteration {job.iterations} ({idle_for * 1000:.0f} ms idle)")
            job.iterations += 1
            previous = job.last_status
            messages = self.protocol.query(self.correlator, self._parse, self.settings)
            if any(self.protocol.is_activity(m, previous) for m in messages):
                last_activity = time.monotonic()

            if self._handle_messages(job, messages):
                self.logger.info("Printing completed")
                job.state = SessionState.COMPLETED
                job.outcome = PrintOutcome.FINISHED
                return

            self.correlator.sleep(self.settings.poll_interval)

    def _handle_messages(self, job: PrintJobState, messages: List[Message]) -> bool:
        """Apply one polling round to the job. Returns True once complete."""
        for message in messages:
            if isinstance(message, StatusMessage):
                job.remaining = self.protocol.remaining(message, job)
                if message != job.last_status:
                    job.last_status = message
                    self.on_status_changed(message)

                if not self.protocol.is_conclusive(message):
                    self.logger.debug("Inconclusive reading, asking again")
                elif self.protocol.is_idle(message) and job.remaining == 0:
                    job.stable_count += 1
                    self.logger.debug(f"Idle with nothing remaining, count: {job.stable_count}")
                    if job.stable_count >= self.settings.stability_threshold:
                        return True
                else:
                    job.stable_count = 0
            elif isinstance(message, TagMessage):
                if message.epc and job.add_epc(message.epc):
                    self.on_receive_epc(message.epc, message.tid)
            elif isinstance(message, Nak):
                self.logger.warning("Printer rejected status query")
            elif isinstance(message, Unrecognized):
                self.logger.debug(f"Unrecognized reply: {message.text!r}")
        return False

    def _finish_job(self) -> None:
        """Best-effort cancel and close. Errors are logged, never raised."""
        command = self.protocol.cancel_command
        if command is not None:
            try:
                if self.correlator.interrupted:
                    self.connection.send(command)
                elif not self._cancel_command():
                    self.logger.warning("Printer did not acknowledge final cancel")
            except PrinterError as e:
                log_error(self.logger, e, "Error cancelling printing job")

        try:
            self.connection.close()
        except PrinterError as e:
            log_error(self.logger, e, "Error closing printer connection")

    # ========== Control ==========

    def cancel(self) -> bool:
        """
        Cancel the current job and clear the printer buffer.

        Returns:
            True if the printer acknowledged (always True for printers
            that do not acknowledge control commands)

        Raises:
            UnsupportedOperationError: If the printer has no cancel command
        """
        self._require(self.protocol.cancel_command, 'cancel')
        self.job.printing = False
        self._ensure_connected()
        try:
            cancelled = self._cancel_command()
        finally:
            self._close_if_idle()
        if cancelled:
            self.logger.info("Printing cancelled")
        else:
            self.logger.warning("Failed to cancel printing")
        return cancelled

    def cancel_sku(self) -> bool:
        """
        Cancel the current job and ignore its SKU from now on.

        Large jobs are split into several print calls for the same SKU;
        once cancelled, the remaining calls return immediately.

        Returns:
            True if the cancel was acknowledged
        """
        cancelled = self.cancel()
        if cancelled and self.sku is not None and self.ignore_sku(self.sku):
            self.logger.info(f"SKU '{self.sku}' cancelled and ignored")
        return cancelled

    def pause(self) -> bool:
        """Pause printing. Returns True if acknowledged."""
        command = self._require(self.protocol.pause_command, 'pause')
        self._ensure_connected()
        try:
            paused = self._send_control(command, self.settings.control_timeout)
        finally:
            self._close_if_idle()
        if paused:
            self.job.paused = True
            self.logger.info("Printing paused")
        else:
            self.logger.warning("Failed to pause printing")
        return paused

    def resume(self) -> bool:
        """Resume printing. Returns True if acknowledged."""
        command = self._require(self.protocol.resume_command, 'resume')
        self._ensure_connected()
        try:
            resumed = self._send_control(command, self.settings.control_timeout)
        finally:
            self._close_if_idle()
        if resumed:
            self.job.paused = False
            self.logger.info("Printing resumed")
        else:
            self.logger.warning("Failed to resume printing")
        return resumed

    def send_command(self, command: str, timeout: Optional[float] = None,
                     done: Callable[[List[Message]], bool] = has_reply) -> List[Message]:
        """Send an arbitrary command and collect the parsed replies."""
        timeout = self.settings.command_timeout if timeout is None else timeout
        self._ensure_connected()
        return self.correlator.send_and_wait(command, timeout, self._parse, done)

    def _cancel_command(self) -> bool:
        return self._send_control(self.protocol.cancel_command, self.settings.cancel_timeout)

    def _send_control(self, command: str, timeout: float) -> bool:
        if not self.protocol.acknowledges_commands:
            self.connection.send(command)
            return True
        replies = self.correlator.send_and_wait(command, timeout, self._parse, has_reply)
        return is_acknowledged(replies)

    def _require(self, command: Optional[str], operation: str) -> str:
        if command is None:
            raise UnsupportedOperationError(
                f"{operation} is not supported by {self.protocol.name} printers",
                vendor=self.protocol.name
            )
        return command

    def _ensure_connected(self) -> None:
        if not self.connection.is_connected():
            self.connection.connect()

    def _close_if_idle(self) -> None:
        if not self._in_print:
            self.connection.close()

    # ========== Ignored SKUs ==========

    def ignore_sku(self, sku: str) -> bool:
        """Add ``sku`` to the ignore set. Returns False if already present."""
        with self._skus_lock:
            if sku in self.ignored_skus:
                return False
            self.ignored_skus.add(sku)
            return True

    def is_ignored_sku(self, sku: Optional[str]) -> bool:
        if sku is None:
            return False
        with self._skus_lock:
            return sku in self.ignored_skus

    def clear_ignored_skus(self) -> None:
        with self._skus_lock:
            self.ignored_skus.clear()

    # ========== Callbacks ==========

    def add_epc_observer(self, callback: EpcCallback) -> None:
        """Register ``callback(epc, tid)``, called once per new EPC."""
        if callback not in self._epc_observers:
            self._epc_observers.append(callback)

    def remove_epc_observer(self, callback: EpcCallback) -> None:
        if callback in self._epc_observers:
            self._epc_observers.remove(callback)

    def add_status_observer(self, callback: StatusCallback) -> None:
        """Register ``callback(status)``, called when the status changes."""
        if callback not in self._status_observers:
            self._status_observers.append(callback)

    def remove_status_observer(self, callback: StatusCallback) -> None:
        if callback in self._status_observers:
            self._status_observers.remove(callback)

    def on_receive_epc(self, epc: str, tid: Optional[str]) -> None:
        self.logger.debug(f"Received EPC: '{epc}', TID: '{tid}'")
        for observer in self._epc_observers:
            observer(epc, tid)

    def on_status_changed(self, status: StatusMessage) -> None:
        self.logger.debug(f"Printer status changed to: {status}")
        for observer in self._status_observers:
            observer(status)
