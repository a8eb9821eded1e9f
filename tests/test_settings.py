"""
Tests for DriverSettings, the job models and the YAML settings loader.
"""

import unittest
import tempfile
from pathlib import Path

import yaml

from py2printers.config import DEFAULT_CONFIG_PATH, build_settings, load_settings
from py2printers.core.errors import ConfigurationError, ErrorCodes, UnsupportedVendorError
from py2printers.drivers.pool import VendorType
from py2printers.models.job import PrintJobState, SessionState
from py2printers.models.settings import DriverSettings


class TestDriverSettings(unittest.TestCase):

    def test_defaults(self):
        settings = DriverSettings()
        self.assertEqual(settings.stability_threshold, 8)
        self.assertEqual(settings.idle_timeout, 15.5)
        self.assertEqual(settings.max_iterations, 1_000_000)
        self.assertEqual(settings.validate(), (True, []))

    def test_validation_errors(self):
        settings = DriverSettings(
            charset='no-such-charset',
            read_timeout=0,
            settle_delay=-1,
            stability_threshold=0,
        )
        valid, errors = settings.validate()

        self.assertFalse(valid)
        self.assertEqual(len(errors), 4)
        self.assertTrue(any('charset' in e for e in errors))
        self.assertTrue(any('read_timeout' in e for e in errors))

    def test_merged_returns_copy(self):
        base = DriverSettings()
        merged = base.merged({'idle_timeout': 3.0})
        self.assertEqual(merged.idle_timeout, 3.0)
        self.assertEqual(base.idle_timeout, 15.5)

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            DriverSettings().idle_timeout = 1.0


class TestJobModels(unittest.TestCase):

    def test_add_epc_reports_new_only(self):
        job = PrintJobState()
        self.assertTrue(job.add_epc("E1"))
        self.assertFalse(job.add_epc("E1"))
        self.assertEqual(job.epcs, {"E1"})

    def test_terminal_states(self):
        self.assertTrue(SessionState.COMPLETED.is_terminal)
        self.assertTrue(SessionState.FAILED.is_terminal)
        self.assertFalse(SessionState.POLLING.is_terminal)
        self.assertEqual(PrintJobState().state, SessionState.IDLE)


class TestLoadSettings(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, text):
        path = Path(self.tmp.name) / 'printers.yaml'
        path.write_text(text)
        return path

    def test_shipped_file(self):
        self.assertTrue(DEFAULT_CONFIG_PATH.exists())
        self.assertEqual(load_settings(), DriverSettings())
        self.assertEqual(load_settings("zebra").settle_delay, 0.5)
        self.assertEqual(load_settings(VendorType.AVERY_DENNISON).idle_timeout, 15.0)
        self.assertEqual(load_settings("SATO").stability_threshold, 8)

    def test_vendor_overrides_defaults(self):
        path = self.write(
            "defaults:\n"
            "  idle_timeout: 10\n"
            "  stability_threshold: 4\n"
            "vendors:\n"
            "  sato:\n"
            "    stability_threshold: 2\n"
        )
        sato = load_settings("sato", path)
        zebra = load_settings("zebra", path)

        self.assertEqual(sato.idle_timeout, 10)
        self.assertEqual(sato.stability_threshold, 2)
        self.assertEqual(zebra.stability_threshold, 4)

    def test_missing_file_falls_back_to_shipped(self):
        missing = Path(self.tmp.name) / 'missing.yaml'
        self.assertEqual(load_settings("zebra", missing).settle_delay, 0.5)

    def test_empty_file(self):
        self.assertEqual(load_settings("sato", self.write("")), DriverSettings())

    def test_unknown_key(self):
        path = self.write("defaults:\n  idle_timout: 10\n")
        with self.assertRaises(ConfigurationError) as cm:
            load_settings("sato", path)
        self.assertEqual(cm.exception.error_code, ErrorCodes.CONFIG_INVALID)
        self.assertIn("idle_timout", cm.exception.message)

    def test_invalid_value(self):
        path = self.write("vendors:\n  zebra:\n    poll_interval: -1\n")
        with self.assertRaises(ConfigurationError):
            load_settings("zebra", path)

    def test_wrong_type(self):
        path = self.write("defaults:\n  charset: 12\n")
        with self.assertRaises(ConfigurationError):
            load_settings(None, path)

    def test_invalid_yaml(self):
        path = self.write("defaults: [unclosed\n")
        with self.assertRaises(ConfigurationError) as cm:
            load_settings("sato", path)

        error = cm.exception
        self.assertEqual(error.error_code, ErrorCodes.CONFIG_INVALID)
        self.assertIsInstance(error.cause, yaml.YAMLError)
        self.assertEqual(error.context['path'], str(path))
        self.assertEqual(error.context['category'], 'CONFIGURATION')

    def test_unreadable_file(self):
        with self.assertRaises(ConfigurationError) as cm:
            load_settings("sato", self.tmp.name)

        self.assertEqual(cm.exception.error_code, ErrorCodes.CONFIG_NOT_FOUND)
        self.assertIsInstance(cm.exception.cause, OSError)

    def test_section_must_be_mapping(self):
        path = self.write("defaults:\n  - idle_timeout\n")
        with self.assertRaises(ConfigurationError):
            load_settings("sato", path)

    def test_unknown_vendor(self):
        with self.assertRaises(UnsupportedVendorError):
            load_settings("EPSON")

    def test_build_settings(self):
        self.assertEqual(build_settings({'idle_timeout': 1.5}).idle_timeout, 1.5)


if __name__ == '__main__':
    unittest.main()
