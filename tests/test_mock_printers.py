"""
End-to-end tests of the SATO and Zebra drivers against the mock printers
over real loopback sockets.
"""

import time
import unittest

from py2printers.drivers.sato import SatoPrinter
from py2printers.drivers.sato.enums import PrinterState
from py2printers.drivers.zebra import ZebraPrinter
from py2printers.models.job import PrintOutcome
from py2printers.models.settings import DriverSettings
from tests.mock_printers import MockSatoPrinter, MockZebraPrinter

SATO_LABEL = (
    "\x02\x1bA\x1bIP0e:h,epc:E0123456789ABCDEF0123456;"
    "\x1bIP0e:h,epc:E0123456789ABCDEF0123457;\x1bQ2\x1bZ\x03"
)
ZEBRA_LABEL = (
    "^XA\n"
    "^RFW,H^FD3005FB63AC1F3681EC880468^FS\n"
    "^RFW,H^FD3005FB63AC1F3681EC880469^FS\n"
    "^XZ\n"
)


def settings(**overrides):
    values = dict(settle_delay=0.05, poll_interval=0.01, read_timeout=0.05,
                  command_timeout=0.5, cancel_timeout=0.5, control_timeout=0.5,
                  idle_timeout=3.0, stability_threshold=3)
    values.update(overrides)
    return DriverSettings(**values)


class TestSatoAgainstMock(unittest.TestCase):

    def setUp(self):
        self.mock = MockSatoPrinter().start()
        self.addCleanup(self.mock.stop)
        self.printer = SatoPrinter('127.0.0.1', self.mock.port, settings=settings())
        self.addCleanup(self.printer.close)

    def test_print_returns_written_epcs(self):
        received = []
        self.printer.add_epc_observer(lambda epc, tid: received.append(epc))

        epcs = self.printer.print(SATO_LABEL, sku="SKU-1", expected_tag_count=2)

        self.assertEqual(epcs, {"E0123456789ABCDEF0123456", "E0123456789ABCDEF0123457"})
        self.assertEqual(received, ["E0123456789ABCDEF0123456", "E0123456789ABCDEF0123457"])
        self.assertEqual(self.printer.job.outcome, PrintOutcome.FINISHED)
        self.assertEqual(len(self.mock.labels), 1)
        self.assertEqual(self.printer.connection.status(), 'CLOSED')

    def test_pause_twice_is_rejected(self):
        self.assertTrue(self.printer.pause())
        self.assertFalse(self.printer.pause())
        self.assertTrue(self.printer.resume())
        self.assertFalse(self.printer.resume())

    def test_cancel(self):
        self.assertTrue(self.printer.cancel())

    def test_status_query(self):
        self.printer.connect()
        status = self.printer.query_printer_status()

        self.assertIs(status.ps, PrinterState.STANDBY)
        self.assertEqual(status.remaining, 0)
        self.assertIsNone(self.printer.query_tag())

    def test_reset_and_power_off(self):
        self.printer.connect()
        self.assertTrue(self.printer.reset())
        self.assertTrue(self.printer.power_off())


class TestZebraAgainstMock(unittest.TestCase):

    def setUp(self):
        self.mock = MockZebraPrinter().start()
        self.addCleanup(self.mock.stop)
        self.printer = ZebraPrinter('127.0.0.1', self.mock.port, settings=settings())
        self.addCleanup(self.printer.close)

    def test_print_returns_written_epcs(self):
        epcs = self.printer.print(ZEBRA_LABEL, sku="SKU-1", expected_tag_count=2)

        self.assertEqual(epcs, {"3005FB63AC1F3681EC880468", "3005FB63AC1F3681EC880469"})
        self.assertEqual(self.printer.job.outcome, PrintOutcome.FINISHED)

    def test_short_job_ends_after_idle_timeout(self):
        printer = ZebraPrinter('127.0.0.1', self.mock.port, settings=settings(idle_timeout=0.5))
        self.addCleanup(printer.close)
        label = "^XA\n^RFW,H^FD3005FB63AC1F3681EC880468^FS\n^XZ\n"

        start = time.monotonic()
        epcs = printer.print(label, sku="SKU-1", expected_tag_count=2)

        self.assertEqual(epcs, {"3005FB63AC1F3681EC880468"})
        self.assertEqual(printer.job.outcome, PrintOutcome.TIMED_OUT)
        self.assertLess(time.monotonic() - start, 5.0)

    def test_label_without_tags_is_not_finished_by_empty_log(self):
        printer = ZebraPrinter('127.0.0.1', self.mock.port, settings=settings(idle_timeout=0.5))
        self.addCleanup(printer.close)

        epcs = printer.print("^XA\n^FO50,50^FDHello^FS\n^XZ\n", sku="SKU-1")

        self.assertEqual(epcs, set())
        self.assertEqual(printer.job.outcome, PrintOutcome.TIMED_OUT)
        self.assertEqual(printer.job.stable_count, 0)

    def test_pause_and_resume(self):
        self.assertTrue(self.printer.pause())
        self.assertTrue(self.printer.resume())


if __name__ == '__main__':
    unittest.main()
