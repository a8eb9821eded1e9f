"""
SATO (SBPL) wire protocol.

Commands are framed with STX/ETX. Control commands are answered with a
single ACK or NAK byte; status (DC2 PG) and tag (DC2 PK) queries are
answered with framed CSV.
"""

from typing import List, Optional

from py2printers.core.control_codes import DC1, DC2, DLE, control, frame
from py2printers.core.correlator import CommandCorrelator, Parser
from py2printers.core.messages import Message, Nak, StatusMessage
from py2printers.drivers.base import VendorProtocol
from py2printers.drivers.sato import parser
from py2printers.drivers.sato.messages import PrinterStatus
from py2printers.models.job import PrintJobState
from py2printers.models.settings import DriverSettings

STATUS_QUERY = frame(control(DC2, 'PG'))
TAG_QUERY = frame(control(DC2, 'PK'))
STATUS_AND_TAG_QUERY = frame(control(DC2, 'PG') + control(DC2, 'PK'))
CANCEL = frame(control(DC2, 'PH'))
PAUSE = frame(control(DLE, 'H'))
RESUME = frame(control(DC1, 'H'))
RESET = frame(control(DC2, 'DC'))
POWER_OFF = frame(control(DC2, 'DD'))


def status_received(messages: List[Message]) -> bool:
    """Done predicate for status queries: a status or a NAK arrived."""
    return any(isinstance(m, (PrinterStatus, Nak)) for m in messages)


class SatoProtocol(VendorProtocol):
    """Command set and completion rules for SATO printers."""

    name = 'sato'
    cancel_command = CANCEL
    pause_command = PAUSE
    resume_command = RESUME
    acknowledges_commands = True
    requires_cancel_ack = True

    def create_parser(self) -> Parser:
        return parser.parse

    def query(self, correlator: CommandCorrelator, parse: Parser,
              settings: DriverSettings) -> List[Message]:
        return correlator.send_and_wait(
            STATUS_AND_TAG_QUERY, settings.command_timeout, parse, status_received
        )

    def is_idle(self, status: StatusMessage) -> bool:
        return isinstance(status, PrinterStatus) and status.is_standby

    def remaining(self, status: StatusMessage, job: PrintJobState) -> Optional[int]:
        if isinstance(status, PrinterStatus) and status.remaining >= 0:
            return status.remaining
        return None
