"""
Control bytes shared by the printer wire protocols.

SATO style devices wrap every command and reply in STX/ETX and prefix short
command codes with DC1, DC2 or DLE. Zebra style devices use plain text but
still answer some queries with these bytes.
"""

STX = 0x02
ETX = 0x03
ACK = 0x06
LF = 0x0A
CR = 0x0D
DLE = 0x10
DC1 = 0x11
DC2 = 0x12
NAK = 0x15
ESC = 0x1B

COMMAND_PREFIXES = frozenset((DLE, DC1, DC2))

CONTROL_NAMES = {
    STX: 'STX',
    ETX: 'ETX',
    ACK: 'ACK',
    LF: 'LF',
    CR: 'CR',
    DLE: 'DLE',
    DC1: 'DC1',
    DC2: 'DC2',
    NAK: 'NAK',
    ESC: 'ESC',
}


def frame(payload: str) -> str:
    """Wrap a payload in STX/ETX."""
    return f"{chr(STX)}{payload}{chr(ETX)}"


def control(prefix: int, letters: str) -> str:
    """
    Build a short control command such as DC2 + 'PG'.

    Args:
        prefix: One of DLE, DC1 or DC2
        letters: Command letters following the prefix

    Returns:
        The unframed command string
    """
    if prefix not in COMMAND_PREFIXES:
        raise ValueError(f"Not a command prefix: 0x{prefix:02X}")
    return f"{chr(prefix)}{letters}"


def describe(data: bytes) -> str:
    """Render bytes with control characters spelled out, e.g. <STX>PG<ETX>."""
    parts = []
    for b in data:
        if b in CONTROL_NAMES:
            parts.append(f"<{CONTROL_NAMES[b]}>")
        elif 0x20 <= b < 0x7F:
            parts.append(chr(b))
        else:
            parts.append(f"<0x{b:02X}>")
    return ''.join(parts)
