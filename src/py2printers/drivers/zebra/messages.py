"""
Typed Zebra RFID log replies.

``~HL`` returns the RFID log as a block of lines between ``<start>`` and
``<end>``. Each line becomes an ``RFIDLogEntry``; the block as a whole is
reported as an ``RFIDLogBlock``, which the driver treats as the status
snapshot for that polling round.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from py2printers.core.messages import StatusMessage, TagMessage
from py2printers.core.raw_frame import RawFrame
from py2printers.drivers.zebra.enums import RFIDOperation

START_MARKER = '<start>'
END_MARKER = '<end>'
VOID_MARKER = ',3400|'


@dataclass(frozen=True)
class RFIDStatus:
    """
    Status code of a log line.

    Older firmware writes ``OK``; newer firmware writes an 8 digit hex
    error code where all zeros means success.
    """
    code: str

    @property
    def ok(self) -> bool:
        code = self.code.strip().upper()
        if code == 'OK':
            return True
        try:
            return int(code, 16) == 0
        except ValueError:
            return False

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class RFIDLogEntry(TagMessage):
    """
    One line of the RFID log.

    Attributes:
        operation: Operation kind
        status: Result of the operation
        position: Program position (6-field shape only)
        antenna: Antenna element (6-field shape only)
        power: Read/write power (6-field shape only)
        data: Payload, present only on successful writes (the EPC)
        line: Original text of the line
    """
    operation: RFIDOperation = RFIDOperation.UNRECOGNIZED
    status: Optional[RFIDStatus] = None
    position: Optional[str] = None
    antenna: Optional[str] = None
    power: Optional[str] = None
    data: Optional[str] = None
    line: str = ''
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)

    @property
    def epc(self) -> Optional[str]:
        if self.operation is RFIDOperation.WRITE:
            return self.data
        return None

    @property
    def tid(self) -> Optional[str]:
        return None

    @property
    def is_write(self) -> bool:
        return self.operation is RFIDOperation.WRITE


@dataclass(frozen=True)
class RFIDLogBlock(StatusMessage):
    """
    A complete ``<start>``..``<end>`` reply.

    Attributes:
        entries: Parsed lines, void lines excluded
        voided: Number of lines reporting a voided label
    """
    entries: Tuple[RFIDLogEntry, ...] = ()
    voided: int = 0
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)

    @property
    def empty(self) -> bool:
        """Only the two markers: the printer had nothing to report yet."""
        return not self.entries and not self.voided

    @property
    def has_write(self) -> bool:
        return any(entry.is_write for entry in self.entries)

    @property
    def conclusive(self) -> bool:
        """Blocks carry usable results only once a write line is present."""
        return self.has_write

    def encode(self) -> str:
        lines = [START_MARKER] + [entry.line for entry in self.entries] + [END_MARKER]
        return '\r\n'.join(lines) + '\r\n'
