"""
Decoder for the Zebra RFID log (``~HL``) reply.

The reply is plain text and may span several socket reads, so the parser
keeps the unfinished tail between chunks and only emits once ``<end>`` is
seen. Each driver owns one parser instance.
"""

import logging
import re
from typing import List, Optional

from py2printers.core.errors import ProtocolError
from py2printers.core.messages import Message, Unrecognized
from py2printers.core.raw_frame import RawFrame
from py2printers.drivers.zebra.enums import RFIDOperation
from py2printers.drivers.zebra.messages import (
    END_MARKER,
    START_MARKER,
    VOID_MARKER,
    RFIDLogBlock,
    RFIDLogEntry,
    RFIDStatus,
)

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r'\r?\n')


def parse_line(line: str, raw: Optional[RawFrame] = None) -> RFIDLogEntry:
    """
    Parse one log line.

    Two shapes are accepted::

        op,status,data                          (legacy firmware)
        op,position,antenna,power,status,data   (current firmware)

    Data is kept only for writes, and in the 6-field shape only when the
    status is OK.

    Raises:
        ProtocolError: If the line has neither shape
    """
    fields = [f.strip() for f in line.split(',')]
    operation = RFIDOperation.get(fields[0])

    if operation is RFIDOperation.UNRECOGNIZED:
        raise ProtocolError(f"Unknown RFID operation '{fields[0]}'", raw=line)

    if operation is RFIDOperation.RFID_SETTINGS:
        return RFIDLogEntry(operation=operation, line=line, raw=raw)

    if len(fields) == 3:
        data = fields[2] if operation is RFIDOperation.WRITE else None
        return RFIDLogEntry(
            operation=operation,
            status=RFIDStatus(fields[1]),
            data=data or None,
            line=line,
            raw=raw,
        )

    if len(fields) >= 6:
        status = RFIDStatus(fields[4])
        data = fields[5] if operation is RFIDOperation.WRITE and status.ok else None
        return RFIDLogEntry(
            operation=operation,
            position=fields[1],
            antenna=fields[2],
            power=fields[3],
            status=status,
            data=data or None,
            line=line,
            raw=raw,
        )

    raise ProtocolError(f"Unexpected RFID log line with {len(fields)} fields", raw=line)


class ZebraLogParser:
    """
    Stateful ``~HL`` reply decoder.

    Emits, per complete block: the entries followed by the block when the
    block contains a write, otherwise the block alone (inconclusive or
    empty, the caller should ask again).
    """

    def __init__(self, charset: str = 'utf-8'):
        self.charset = charset
        self._tail = ''
        self._block: Optional[List[str]] = None
        self._voided = 0

    def parse(self, frame: RawFrame) -> List[Message]:
        text = self._tail + frame.data.decode(self.charset, errors='replace')
        lines = _LINE_BREAK.split(text)
        self._tail = lines.pop()
        if self._tail.strip() in (START_MARKER, END_MARKER):
            lines.append(self._tail)
            self._tail = ''

        out: List[Message] = []
        for line in lines:
            out.extend(self._feed(line.strip(), frame))
        return out

    def _feed(self, line: str, frame: RawFrame) -> List[Message]:
        if line == START_MARKER:
            if self._block is not None:
                logger.debug("RFID log block restarted before <end>")
            self._block = []
            self._voided = 0
            return []

        if line == END_MARKER:
            if self._block is None:
                logger.debug("Ignoring <end> without <start>")
                return []
            lines, voided = self._block, self._voided
            self._block = None
            self._voided = 0
            return self._build_block(lines, voided, frame)

        if self._block is None:
            if line:
                logger.debug(f"Ignoring text outside RFID log block: {line!r}")
            return []

        if not line:
            return []
        if VOID_MARKER in line:
            self._voided += 1
        else:
            self._block.append(line)
        return []

    def _build_block(self, lines: List[str], voided: int, frame: RawFrame) -> List[Message]:
        entries: List[RFIDLogEntry] = []
        unrecognized: List[Message] = []
        for line in lines:
            try:
                entries.append(parse_line(line, frame))
            except ProtocolError as e:
                logger.debug(f"Unrecognized RFID log line: {e.message}")
                unrecognized.append(Unrecognized(line, e.message, raw=frame))

        block = RFIDLogBlock(entries=tuple(entries), voided=voided, raw=frame)
        if block.empty:
            logger.debug("Empty RFID log block")
        if not block.conclusive:
            return unrecognized + [block]
        return unrecognized + list(entries) + [block]
