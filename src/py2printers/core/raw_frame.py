"""
Immutable unit of bytes read from a printer socket.
"""

import time
from dataclasses import dataclass, field

from py2printers.core.control_codes import STX, ETX


@dataclass(frozen=True)
class RawFrame:
    """
    One chunk of bytes as it came off the wire.

    A frame is either an STX..ETX span produced by
    ``FramedConnection.read_framed`` or whatever a single socket read
    returned (``FramedConnection.read_chunks``), which may be a bare
    control sequence such as ACK or DC2 + two letters.

    Attributes:
        data: The raw bytes
        charset: Character set negotiated for the connection
        timestamp: Capture time (epoch seconds)
    """
    data: bytes
    charset: str = 'utf-8'
    timestamp: float = field(default_factory=time.time, compare=False)

    @classmethod
    def of(cls, text: str, charset: str = 'utf-8') -> "RawFrame":
        """Build a frame from text, mainly for tests and mock printers."""
        return cls(text.encode(charset), charset)

    @property
    def is_framed(self) -> bool:
        """True if the bytes start with STX and end with ETX."""
        return (len(self.data) > 2
                and self.data[0] == STX
                and self.data[-1] == ETX)

    @property
    def payload(self) -> bytes:
        """Bytes between STX and ETX, or all bytes when not framed."""
        if self.is_framed:
            return self.data[1:-1]
        return self.data

    def to_text(self) -> str:
        return self.data.decode(self.charset, errors='replace')

    def to_hex(self) -> str:
        """Render as <0x02><0x50>... for logs."""
        return ''.join(f"<0x{b:02X}>" for b in self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.to_text()
