"""
Avery-Dennison wire protocol.

The printer streams one STX/ETX framed EPC per encoded tag after a label
is sent. There is no status query and no cancel, pause or resume, so a
print ends only when the stream has been quiet for ``idle_timeout``.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from py2printers.core.correlator import CommandCorrelator, Parser
from py2printers.core.messages import Message, TagMessage
from py2printers.core.raw_frame import RawFrame
from py2printers.drivers.base import VendorProtocol
from py2printers.models.settings import DriverSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EpcReport(TagMessage):
    """One EPC pushed by the printer."""
    epc: Optional[str] = None
    tid: Optional[str] = None
    raw: Optional[RawFrame] = field(default=None, compare=False, repr=False)


def parse(frame: RawFrame) -> List[Message]:
    """Each non-blank framed payload is an EPC."""
    if not frame.is_framed:
        return []
    epc = frame.payload.decode(frame.charset, errors='replace').strip()
    if not epc:
        return []
    return [EpcReport(epc=epc, raw=frame)]


class AveryDennisonProtocol(VendorProtocol):
    """Passive EPC stream; completion by inactivity only."""

    name = 'avery-dennison'

    def create_parser(self) -> Parser:
        return parse

    def query(self, correlator: CommandCorrelator, parse: Parser,
              settings: DriverSettings) -> List[Message]:
        messages: List[Message] = []
        for frame in correlator.connection.read_framed():
            logger.debug(f"Read frame: {frame.to_hex()}")
            messages.extend(parse(frame))
        return messages
