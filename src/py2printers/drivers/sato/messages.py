"""
Typed SATO replies.

``PrinterStatus`` answers DC2 PG, ``TagRecord`` answers DC2 PK. Both can
render themselves back to the framed on-wire form, which the mock printer
uses to reply.
"""

from dataclasses import dataclass, field
from typing import Optional

from py2printers.core.control_codes import frame
from py2printers.core.messages import StatusMessage, TagMessage
from py2printers.core.raw_frame import RawFrame
from py2printers.drivers.sato.enums import (
    BatteryStatus,
    ErrorNumber,
    MediaStatus,
    PrinterState,
    ReceiveBufferStatus,
    RibbonStatus,
)

UNKNOWN_REMAINING = -1


@dataclass(frozen=True)
class PrinterStatus(StatusMessage):
    """
    Decoded DC2 PG reply, e.g. ``32,PS0,RS0,RE0,PE0,EN00,BT0,Q000000``.

    Attributes:
        ps: Printer state
        rs: Receive buffer status
        re: Ribbon status
        pe: Media status
        en: Error number
        bt: Battery status
        remaining: Remaining print count (Q), UNKNOWN_REMAINING if absent
        byte_count: Leading byte-count field as reported
    """
    ps: PrinterState = PrinterState.UNRECOGNIZED
    rs: ReceiveBufferStatus = ReceiveBufferStatus.UNRECOGNIZED
    re: RibbonStatus = RibbonStatus.UNRECOGNIZED
    pe: MediaStatus = MediaStatus.UNRECOGNIZED
    en: ErrorNumber = ErrorNumber.UNRECOGNIZED
    bt: BatteryStatus = BatteryStatus.UNRECOGNIZED
    remaining: int = UNKNOWN_REMAINING
    byte_count: int = field(default=0, compare=False)
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)

    @property
    def is_standby(self) -> bool:
        return self.ps is PrinterState.STANDBY

    def body(self) -> str:
        """Fields after the byte count, in wire order."""
        tokens = []
        for prefix, width, member in (
            ('PS', 1, self.ps), ('RS', 1, self.rs), ('RE', 1, self.re),
            ('PE', 1, self.pe), ('EN', 2, self.en), ('BT', 1, self.bt),
        ):
            if member.recognized:
                tokens.append(f"{prefix}{member.number:0{width}d}")
        if self.remaining >= 0:
            tokens.append(f"Q{self.remaining:06d}")
        return ','.join(tokens)

    def encode(self) -> str:
        """Render the framed reply (byte count is the body length)."""
        body = self.body()
        return frame(f"{len(body):02d},{body}")


@dataclass(frozen=True)
class TagRecord(TagMessage):
    """
    Decoded DC2 PK reply, e.g. ``53,1,N,EP:<epc>,ID:<tid>``.

    Attributes:
        byte_count: Leading byte-count field (0 if malformed)
        write_result: '1' on write success, '0' on failure
        error_symbol: N (none), E (EPC), T (TID), M (MCS) or A (all)
        epc: EPC hex string, if reported
        tid: TID hex string, if reported
    """
    byte_count: int = 0
    write_result: str = ''
    error_symbol: str = ''
    epc: Optional[str] = None
    tid: Optional[str] = None
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)

    WRITE_SUCCESS = '1'
    NO_ERROR = 'N'

    @property
    def write_succeeded(self) -> bool:
        return self.write_result == self.WRITE_SUCCESS

    def encode(self) -> str:
        """Render the framed reply, terminated with CRLF as printers send it."""
        tokens = []
        if self.epc:
            tokens.append(f"EP:{self.epc}")
        if self.tid:
            tokens.append(f"ID:{self.tid}")
        body = f"{self.write_result},{self.error_symbol},{','.join(tokens)}\r\n"
        return frame(f"{len(body):02d},{body}")
