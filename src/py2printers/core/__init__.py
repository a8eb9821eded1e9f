"""
Core layer for printer communication.

This package contains the connection, framing and request/response
correlation shared by every printer vendor.
"""

from .control_codes import STX, ETX, ACK, NAK, DLE, DC1, DC2, frame, control, describe
from .raw_frame import RawFrame
from .framed_connection import FramedConnection, split_frames
from .messages import (
    Message,
    StatusMessage,
    TagMessage,
    Ack,
    Nak,
    Unrecognized,
    messages_of,
    first_of,
    has_reply,
    is_acknowledged
)
from .correlator import CommandCorrelator, any_message

__all__ = [
    'STX', 'ETX', 'ACK', 'NAK', 'DLE', 'DC1', 'DC2',
    'frame',
    'control',
    'describe',
    'RawFrame',
    'FramedConnection',
    'split_frames',
    # Decoded replies
    'Message',
    'StatusMessage',
    'TagMessage',
    'Ack',
    'Nak',
    'Unrecognized',
    'messages_of',
    'first_of',
    'has_reply',
    'is_acknowledged',
    'CommandCorrelator',
    'any_message'
]
