"""
Zebra (ZPL) wire protocol.

Commands are plain text and control commands are never acknowledged, so
cancel, pause and resume are fire-and-forget. Progress is read from the
RFID log requested with ``~HL``.
"""

from typing import List, Optional

from py2printers.core.correlator import CommandCorrelator, Parser
from py2printers.core.messages import Message, StatusMessage
from py2printers.drivers.base import VendorProtocol
from py2printers.drivers.zebra.messages import RFIDLogBlock
from py2printers.drivers.zebra.parser import ZebraLogParser
from py2printers.models.job import PrintJobState
from py2printers.models.settings import DriverSettings

CANCEL_ALL = '~JA'
PAUSE = '~PP'
RESUME = '~PS'
REQUEST_LOG = '~HL'
CLEAR_LOG = '^XA^HL^XZ'


def block_received(messages: List[Message]) -> bool:
    return any(isinstance(m, RFIDLogBlock) for m in messages)


class ZebraProtocol(VendorProtocol):
    """
    Command set and completion rules for Zebra printers.

    Zebra printers report no remaining-label counter, so the remaining
    count is the expected tag count minus the EPCs collected so far.
    The log is answered on every request, so only a conclusive block that
    differs from the previous one counts as activity. Empty and
    inconclusive blocks mean "ask again" and never count as idle.
    """

    name = 'zebra'
    cancel_command = CANCEL_ALL
    pause_command = PAUSE
    resume_command = RESUME
    acknowledges_commands = False
    requires_cancel_ack = False

    def __init__(self, charset: str = 'utf-8'):
        self.charset = charset

    def create_parser(self) -> Parser:
        return ZebraLogParser(self.charset).parse

    def preamble_commands(self) -> List[str]:
        # resume in case the printer was left paused, then clear the log
        return [RESUME, CLEAR_LOG]

    def query(self, correlator: CommandCorrelator, parse: Parser,
              settings: DriverSettings) -> List[Message]:
        return correlator.send_and_wait(
            REQUEST_LOG, settings.command_timeout, parse, block_received
        )

    def is_conclusive(self, status: StatusMessage) -> bool:
        return isinstance(status, RFIDLogBlock) and status.conclusive

    def is_idle(self, status: StatusMessage) -> bool:
        return self.is_conclusive(status)

    def is_activity(self, message: Message, previous: Optional[StatusMessage]) -> bool:
        return self.is_conclusive(message) and message != previous

    def remaining(self, status: StatusMessage, job: PrintJobState) -> Optional[int]:
        return max(job.expected_tags - len(job.epcs), 0)
