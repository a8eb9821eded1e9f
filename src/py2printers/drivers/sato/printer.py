"""
SATO printer driver.
"""

from typing import Optional

from py2printers.core.messages import first_of, has_reply, is_acknowledged
from py2printers.drivers.base import PrinterDriver
from py2printers.drivers.sato import protocol
from py2printers.drivers.sato.messages import PrinterStatus, TagRecord
from py2printers.drivers.sato.protocol import SatoProtocol


class SatoPrinter(PrinterDriver):
    """
    Driver for SATO RFID printers, plus the SATO-only queries.

    Example:
        >>> printer = SatoPrinter("192.168.0.60", 1024)
        >>> printer.connect()
        >>> status = printer.query_printer_status()
        >>> status.ps, status.remaining
    """

    def __init__(self, host: str, port: int, **kwargs):
        super().__init__(SatoProtocol(), host, port, **kwargs)

    def query_printer_status(self) -> Optional[PrinterStatus]:
        """DC2 PG. Returns None on NAK or timeout."""
        replies = self.send_command(protocol.STATUS_QUERY, done=protocol.status_received)
        return first_of(replies, PrinterStatus)

    def query_tag(self) -> Optional[TagRecord]:
        """DC2 PK. Returns the last tag write result, None if there is none."""
        replies = self.send_command(
            protocol.TAG_QUERY,
            done=lambda messages: first_of(messages, TagRecord) is not None or has_reply(messages)
        )
        return first_of(replies, TagRecord)

    def reset(self) -> bool:
        """DC2 DC. Printers answer NAK while printing."""
        return is_acknowledged(self.send_command(protocol.RESET, self.settings.control_timeout))

    def power_off(self) -> bool:
        """DC2 DD."""
        return is_acknowledged(self.send_command(protocol.POWER_OFF, self.settings.control_timeout))
