"""
Decoder for SATO replies.

Frames do not say what they are, so a framed payload is classified by
shape, trying these predicates in order and taking the first match:

1. Echoed control command: payload starts with DC1, DC2 or DLE -> Ack
2. Tag shape: at least 4 comma fields and the last one carries an
   EP:/ID:/EPC:/TID: token -> TagRecord
3. Status shape: a field keyed PS, RS, RE, PE, EN, BT or Q -> PrinterStatus
4. At least 4 comma fields -> TagRecord (no EPC/TID)
5. Anything else -> Unrecognized

Bytes outside STX..ETX are read one at a time: ACK and NAK become
Ack/Nak, a DC1/DC2/DLE command sequence echoed back becomes Ack, and
anything else is dropped.
"""

import logging
import re
from typing import Dict, List, Optional

from py2printers.core.control_codes import ACK, COMMAND_PREFIXES, ETX, NAK, STX
from py2printers.core.errors import ProtocolError
from py2printers.core.messages import Ack, Message, Nak, Unrecognized
from py2printers.core.raw_frame import RawFrame
from py2printers.drivers.sato.enums import (
    BatteryStatus,
    ErrorNumber,
    MediaStatus,
    PrinterState,
    ReceiveBufferStatus,
    RibbonStatus,
)
from py2printers.drivers.sato.messages import PrinterStatus, TagRecord, UNKNOWN_REMAINING

logger = logging.getLogger(__name__)

STATUS_KEYS = frozenset(('PS', 'RS', 'RE', 'PE', 'EN', 'BT', 'Q'))
TAG_TOKENS = ('EP:', 'ID:', 'EPC:', 'TID:')

_KEY_VALUE = re.compile(r'^([A-Za-z]+)(.*)$')


def parse(frame: RawFrame) -> List[Message]:
    """
    Decode one chunk read from a SATO printer.

    Never raises on bad input: an undecodable span becomes Unrecognized
    and a span without ETX is dropped.

    Args:
        frame: Raw chunk (framed or not)

    Returns:
        Messages in the order they appear in the chunk
    """
    out: List[Message] = []
    data = frame.data
    idx = 0
    dropped = 0
    while idx < len(data):
        b = data[idx]
        if b == STX:
            end = data.find(bytes([ETX]), idx + 1)
            if end < 0:
                logger.debug(f"Unterminated frame dropped: {RawFrame(data[idx:]).to_hex()}")
                break
            span = RawFrame(data[idx:end + 1], frame.charset, frame.timestamp)
            message = decode_payload(data[idx + 1:end], span)
            if message is not None:
                out.append(message)
            idx = end + 1
        elif b == ACK:
            out.append(Ack(raw=frame))
            idx += 1
        elif b == NAK:
            out.append(Nak(raw=frame))
            idx += 1
        elif b in COMMAND_PREFIXES:
            idx = _skip_command(data, idx)
            out.append(Ack(raw=frame))
        else:
            dropped += 1
            idx += 1
    if dropped:
        logger.debug(f"Ignored {dropped} unframed bytes")
    return out


def decode_payload(payload: bytes, span: Optional[RawFrame] = None) -> Optional[Message]:
    """
    Classify the bytes between STX and ETX.

    Returns:
        A message, or None for an empty payload
    """
    text = payload.decode('ascii', errors='replace')
    if text.endswith('\r\n'):
        text = text[:-2]
    elif text.endswith('\n'):
        text = text[:-1]
    if not text:
        return None

    try:
        return _classify(text, span)
    except ProtocolError as e:
        logger.debug(f"Unrecognized SATO frame: {e.message}")
        return Unrecognized(text, e.message, raw=span)


def _classify(text: str, span: Optional[RawFrame]) -> Message:
    if ord(text[0]) in COMMAND_PREFIXES:
        return Ack(raw=span)

    parts = text.split(',', 3)
    if len(parts) >= 4 and _has_tag_tokens(parts[3]):
        return _build_tag_record(parts, span)

    if _has_status_keys(text):
        return _build_printer_status(text, span)

    if len(parts) >= 4:
        return _build_tag_record(parts, span)

    raise ProtocolError("Payload matches no known SATO reply shape", raw=text)


def _skip_command(data: bytes, idx: int) -> int:
    """Advance past a control prefix and the letters that follow it."""
    idx += 1
    while idx < len(data) and chr(data[idx]).isalpha():
        idx += 1
    return idx


def _has_tag_tokens(field: str) -> bool:
    upper = field.upper()
    return any(token in upper for token in TAG_TOKENS)


def _has_status_keys(text: str) -> bool:
    for token in text.split(','):
        match = _KEY_VALUE.match(token.strip())
        if match and match.group(1).upper() in STATUS_KEYS:
            return True
    return False


def _parse_int(value: str, default: int = 0) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _build_tag_record(parts: List[str], span: Optional[RawFrame]) -> TagRecord:
    epc = None
    tid = None
    for token in parts[3].split(','):
        token = token.strip()
        key, sep, value = token.partition(':')
        if not sep:
            continue
        key = key.strip().upper()
        if key in ('EP', 'EPC'):
            epc = value.strip() or None
        elif key in ('ID', 'TID'):
            tid = value.strip() or None

    return TagRecord(
        byte_count=_parse_int(parts[0]),
        write_result=parts[1].strip(),
        error_symbol=parts[2].strip(),
        epc=epc,
        tid=tid,
        raw=span,
    )


def _build_printer_status(text: str, span: Optional[RawFrame]) -> PrinterStatus:
    tokens = text.split(',')
    fields: Dict[str, str] = {}
    for token in tokens:
        match = _KEY_VALUE.match(token.strip())
        if match:
            fields[match.group(1).upper()] = match.group(2)

    q = fields.get('Q', '')
    remaining = int(q) if q.isdigit() else UNKNOWN_REMAINING

    return PrinterStatus(
        ps=PrinterState.get(fields.get('PS')),
        rs=ReceiveBufferStatus.get(fields.get('RS')),
        re=RibbonStatus.get(fields.get('RE')),
        pe=MediaStatus.get(fields.get('PE')),
        en=ErrorNumber.get(fields.get('EN')),
        bt=BatteryStatus.get(fields.get('BT')),
        remaining=remaining,
        byte_count=_parse_int(tokens[0]),
        raw=span,
    )
