"""
Message shapes shared by all vendor parsers.

Each vendor decodes frames into a closed set of variants: protocol
acknowledgements, status snapshots, tag records, and an explicit
``Unrecognized`` for anything that did not match a known shape.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Type, TypeVar

from py2printers.core.control_codes import ACK, NAK
from py2printers.core.raw_frame import RawFrame

M = TypeVar('M', bound='Message')


class Message:
    """Base class of every decoded printer reply."""

    raw: Optional[RawFrame]


class StatusMessage(Message):
    """A snapshot of the print engine state."""


class TagMessage(Message):
    """A report about one RFID tag. Subclasses provide ``epc`` and ``tid``."""

    epc: Optional[str]
    tid: Optional[str]

    @property
    def written(self) -> bool:
        """True if the report carries an EPC that was written to a tag."""
        return bool(self.epc)


@dataclass(frozen=True)
class Ack(Message):
    """Positive acknowledgement (or an echoed control command)."""
    byte: int = ACK
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Nak(Message):
    """Negative acknowledgement."""
    byte: int = NAK
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Unrecognized(Message):
    """A frame that matched no known shape. Kept for diagnostics."""
    text: str
    reason: str = ''
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)


def messages_of(messages: Iterable[Message], kind: Type[M]) -> List[M]:
    """Filter messages by variant."""
    return [m for m in messages if isinstance(m, kind)]


def first_of(messages: Iterable[Message], kind: Type[M]) -> Optional[M]:
    for m in messages:
        if isinstance(m, kind):
            return m
    return None


def has_reply(messages: Iterable[Message]) -> bool:
    """True once an Ack or Nak has been received."""
    return any(isinstance(m, (Ack, Nak)) for m in messages)


def is_acknowledged(messages: Iterable[Message]) -> bool:
    """
    True if the first acknowledgement in ``messages`` is an Ack.

    Returns False when nothing was acknowledged or the printer sent NAK.
    """
    for m in messages:
        if isinstance(m, Ack):
            return True
        if isinstance(m, Nak):
            return False
    return False
