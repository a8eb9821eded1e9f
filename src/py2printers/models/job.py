"""
Print job state.

Classes:
    SessionState: Where a print call is in its lifecycle
    PrintOutcome: How a print call ended
    PrintJobState: Mutable state of one print call
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set

from py2printers.core.messages import StatusMessage


class SessionState(Enum):
    """
    Lifecycle of a print call.

    States:
        IDLE: No print in progress
        CONNECTING: Opening the socket
        CANCELLING: Clearing any previous job before transmission
        TRANSMITTING: Sending the label payload
        POLLING: Querying status and collecting EPCs
        COMPLETED: Polling ended normally (stable idle, no-activity
            timeout, iteration limit) or the SKU was skipped
        CANCELLED: Stopped by cancel() or interrupt
        FAILED: Ended by an error
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    CANCELLING = "cancelling"
    TRANSMITTING = "transmitting"
    POLLING = "polling"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


class PrintOutcome(Enum):
    """Result category of a finished print call."""

    FINISHED = "finished"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    ITERATION_LIMIT = "iteration_limit"
    ERROR = "error"


@dataclass
class PrintJobState:
    """
    State of one print call.

    Attributes:
        sku: SKU being printed
        expected_tags: Number of tags the label is expected to write
        epcs: Unique EPCs collected so far
        printing: True between transmission and the end of polling
        paused: True after a successful pause()
        last_status: Most recent status that differed from the one before
        remaining: Remaining count known after the last status change
        stable_count: Consecutive idle readings with nothing remaining
        iterations: Poll loop iterations so far
        state: Current lifecycle state
        outcome: How the call ended, once it has
    """

    sku: Optional[str] = None
    expected_tags: int = 0
    epcs: Set[str] = field(default_factory=set)
    printing: bool = False
    paused: bool = False
    last_status: Optional[StatusMessage] = None
    remaining: Optional[int] = None
    stable_count: int = 0
    iterations: int = 0
    state: SessionState = SessionState.IDLE
    outcome: Optional[PrintOutcome] = None

    def add_epc(self, epc: str) -> bool:
        """Add an EPC. Returns True only the first time it is seen."""
        if epc in self.epcs:
            return False
        self.epcs.add(epc)
        return True
