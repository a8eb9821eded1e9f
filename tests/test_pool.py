"""
Unit tests for the printer factory and PrinterPool.
"""

import unittest
from unittest.mock import Mock

from py2printers.core.errors import (
    ConfigurationError,
    ConnectionError,
    UnsupportedVendorError,
)
from py2printers.drivers.avery_dennison import AveryDennisonPrinter
from py2printers.drivers.base import PrinterDriver
from py2printers.drivers.pool import PrinterPool, VendorType, create_printer
from py2printers.drivers.sato import SatoPrinter
from py2printers.drivers.zebra import ZebraPrinter
from py2printers.models.settings import DriverSettings


class TestVendorType(unittest.TestCase):

    def test_parse_names(self):
        self.assertIs(VendorType.parse("sato"), VendorType.SATO)
        self.assertIs(VendorType.parse("ZEBRA"), VendorType.ZEBRA)
        self.assertIs(VendorType.parse("avery-dennison"), VendorType.AVERY_DENNISON)
        self.assertIs(VendorType.parse(" Avery_Dennison "), VendorType.AVERY_DENNISON)
        self.assertIs(VendorType.parse(VendorType.SATO), VendorType.SATO)

    def test_parse_unknown(self):
        for value in ("EPSON", "", None, 3):
            with self.assertRaises(UnsupportedVendorError):
                VendorType.parse(value)


class TestCreatePrinter(unittest.TestCase):

    def test_driver_classes(self):
        self.assertIsInstance(create_printer("SATO", "10.0.0.1", 1024), SatoPrinter)
        self.assertIsInstance(create_printer("zebra", "10.0.0.2", 9100), ZebraPrinter)
        self.assertIsInstance(create_printer(VendorType.AVERY_DENNISON, "10.0.0.3", 9100),
                              AveryDennisonPrinter)

    def test_unknown_vendor(self):
        with self.assertRaises(ConfigurationError) as cm:
            create_printer("EPSON", "10.0.0.1", 9100)
        self.assertEqual(cm.exception.message, "Unsupported printer type: EPSON")

    def test_settings_and_ignore_set_are_passed(self):
        settings = DriverSettings(idle_timeout=3.0)
        skus = {"SKU-1"}
        printer = create_printer("SATO", "10.0.0.1", 1024, settings=settings, ignored_skus=skus)

        self.assertIs(printer.settings, settings)
        self.assertIs(printer.ignored_skus, skus)
        self.assertEqual(printer.connection.connect_timeout, settings.connect_timeout)
        self.assertEqual(printer.connection.status(), 'NOT FOUND')

    def test_zebra_charset_from_settings(self):
        printer = create_printer("ZEBRA", "10.0.0.2", 9100,
                                 settings=DriverSettings(charset='latin-1'))
        self.assertEqual(printer.protocol.charset, 'latin-1')
        self.assertEqual(printer.connection.charset, 'latin-1')


class TestPrinterPool(unittest.TestCase):

    def setUp(self):
        self.pool = PrinterPool()

    def driver(self):
        return Mock(spec=PrinterDriver, label="mock@10.0.0.1:9100")

    def test_put_get_exists(self):
        printer = self.driver()
        self.assertIsNone(self.pool.put("10.0.0.1", 9100, printer))

        self.assertIs(self.pool.get("10.0.0.1", 9100), printer)
        self.assertTrue(self.pool.exists("10.0.0.1", 9100))
        self.assertFalse(self.pool.exists("10.0.0.1", 9101))
        self.assertIsNone(self.pool.get("10.0.0.2", 9100))
        self.assertEqual(len(self.pool), 1)

    def test_put_returns_replaced_driver(self):
        first, second = self.driver(), self.driver()
        self.pool.put("10.0.0.1", 9100, first)
        self.assertIs(self.pool.put("10.0.0.1", 9100, second), first)
        self.assertIs(self.pool.get("10.0.0.1", 9100), second)

    def test_remove_closes_driver(self):
        printer = self.driver()
        self.pool.put("10.0.0.1", 9100, printer)

        self.assertIs(self.pool.remove("10.0.0.1", 9100), printer)
        printer.close.assert_called_once()
        self.assertFalse(self.pool.exists("10.0.0.1", 9100))
        self.assertIsNone(self.pool.remove("10.0.0.1", 9100))

    def test_close_failure_is_logged(self):
        printer = self.driver()
        printer.close.side_effect = ConnectionError("close failed")
        self.pool.put("10.0.0.1", 9100, printer)

        with self.assertLogs('py2printers.drivers.pool', level='ERROR'):
            self.pool.remove("10.0.0.1", 9100)

    def test_clear_closes_everything(self):
        printers = [self.driver() for _ in range(3)]
        for port, printer in enumerate(printers, start=9100):
            self.pool.put("10.0.0.1", port, printer)

        self.pool.clear()

        self.assertEqual(len(self.pool), 0)
        for printer in printers:
            printer.close.assert_called_once()

    def test_snapshot_is_a_copy(self):
        self.pool.put("10.0.0.1", 9100, self.driver())
        snapshot = self.pool.snapshot()
        snapshot.clear()
        self.assertEqual(len(self.pool), 1)

    def test_get_or_create(self):
        printer = self.pool.get_or_create("SATO", "10.0.0.1", 1024)
        self.assertIsInstance(printer, SatoPrinter)
        self.assertIs(self.pool.get_or_create("SATO", "10.0.0.1", 1024), printer)

    def test_factory_uses_vendor_settings(self):
        zebra_settings = DriverSettings(settle_delay=0.5)
        pool = PrinterPool({VendorType.ZEBRA: zebra_settings})

        self.assertIs(pool.factory("zebra", "10.0.0.2", 9100).settings, zebra_settings)
        self.assertEqual(pool.factory("sato", "10.0.0.1", 1024).settings, DriverSettings())
        self.assertFalse(pool.exists("10.0.0.2", 9100))


if __name__ == '__main__':
    unittest.main()
