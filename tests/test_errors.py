"""
Tests for the error hierarchy and formatting utilities.
"""

import unittest
import json
import logging
import socket

from py2printers.core.errors import (
    PrinterError,
    ConnectionError,
    CommandError,
    ProtocolError,
    InterruptedOperationError,
    ConfigurationError,
    UnsupportedVendorError,
    UnsupportedOperationError,
    ErrorCodes,
    wrap_external_error
)
from py2printers.core.error_formatting import ErrorFormatter, format_error, log_error


class TestPrinterError(unittest.TestCase):
    """Test the base PrinterError class."""

    def test_basic_error_creation(self):
        error = PrinterError(
            message="Test error",
            error_code=1001,
            context={'location': 'test'},
            suggestions=["Try again", "Check settings"]
        )

        self.assertEqual(error.message, "Test error")
        self.assertEqual(error.error_code, 1001)
        self.assertEqual(error.context['location'], 'test')
        self.assertEqual(len(error.suggestions), 2)
        self.assertIsNotNone(error.timestamp)
        self.assertEqual(str(error), "Test error")

    def test_default_code(self):
        self.assertEqual(PrinterError("x").error_code, 9000)

    def test_error_with_cause(self):
        original = ValueError("Original error")
        error = PrinterError(message="Wrapped error", cause=original)

        self.assertIs(error.cause, original)
        self.assertEqual(error.context['original_error'], "Original error")
        self.assertEqual(error.context['original_type'], "ValueError")

    def test_to_dict(self):
        error = PrinterError("Test", error_code=2001, suggestions=["Fix it"])
        data = error.to_dict()

        self.assertEqual(data['error_type'], 'PrinterError')
        self.assertEqual(data['code'], 2001)
        self.assertEqual(data['suggestions'], ["Fix it"])
        self.assertIsNone(data['cause'])

    def test_format_user_message_lists_suggestions(self):
        error = PrinterError("Failed", suggestions=["First", "Second"])
        msg = error.format_user_message()

        self.assertIn("Failed", msg)
        self.assertIn("1. First", msg)
        self.assertIn("2. Second", msg)

    def test_format_log_message_includes_code_and_context(self):
        error = PrinterError("Failed", error_code=2006, context={'command': '<0x02>'})
        msg = error.format_log_message()

        self.assertIn("[2006] PrinterError: Failed", msg)
        self.assertIn("<0x02>", msg)


class TestErrorSubclasses(unittest.TestCase):
    """Test that subclasses stamp their context."""

    def test_connection_error_context(self):
        error = ConnectionError("Refused", operation='connect', host='10.0.0.5', port=9100)

        self.assertIsInstance(error, PrinterError)
        self.assertEqual(error.error_code, 1001)
        self.assertEqual(error.context['category'], 'CONNECTION')
        self.assertEqual(error.context['operation'], 'connect')
        self.assertEqual(error.context['host'], '10.0.0.5')
        self.assertEqual(error.context['port'], 9100)

    def test_connection_error_shadows_builtin(self):
        # The printer ConnectionError is not the builtin one
        self.assertFalse(issubclass(ConnectionError, OSError))

    def test_command_error(self):
        error = CommandError("Not acknowledged", command="<0x02><0x12>",
                             error_code=ErrorCodes.COMMAND_NOT_ACKNOWLEDGED)
        self.assertEqual(error.error_code, 2006)
        self.assertEqual(error.context['command'], "<0x02><0x12>")

    def test_protocol_error_keeps_raw(self):
        error = ProtocolError("Bad frame", raw="??")
        self.assertEqual(error.error_code, 2003)
        self.assertEqual(error.context['raw'], "??")

    def test_interrupted_error(self):
        error = InterruptedOperationError("Interrupted", operation='sleep')
        self.assertEqual(error.error_code, ErrorCodes.OPERATION_INTERRUPTED)
        self.assertEqual(error.context['category'], 'WORKFLOW')

    def test_unsupported_vendor_error(self):
        error = UnsupportedVendorError("EPSON")

        self.assertIsInstance(error, ConfigurationError)
        self.assertEqual(error.message, "Unsupported printer type: EPSON")
        self.assertEqual(error.error_code, ErrorCodes.UNSUPPORTED_VENDOR)
        self.assertEqual(error.context['vendor'], "EPSON")
        self.assertEqual(error.context['setting'], "vendor")
        self.assertTrue(error.suggestions)

    def test_unsupported_operation_error(self):
        error = UnsupportedOperationError("pause is not supported", vendor='avery-dennison')
        self.assertEqual(error.error_code, 9002)
        self.assertEqual(error.context['vendor'], 'avery-dennison')

    def test_caller_context_is_extended(self):
        error = ConfigurationError("Bad", setting_name='idle_timeout', context={'file': 'x.yaml'})
        self.assertEqual(error.context['file'], 'x.yaml')
        self.assertEqual(error.context['setting'], 'idle_timeout')

    def test_wrap_external_error(self):
        original = OSError("Broken pipe")
        error = wrap_external_error(original, "Send failed", ConnectionError, host='10.0.0.5')

        self.assertIsInstance(error, ConnectionError)
        self.assertIs(error.cause, original)
        self.assertEqual(error.context['host'], '10.0.0.5')
        self.assertEqual(error.context['original_type'], 'OSError')
        self.assertEqual(error.error_code, ErrorCodes.CONNECTION_REFUSED)

    def test_wrap_external_error_with_code(self):
        error = wrap_external_error(ValueError("bad"), "Bad settings", ConfigurationError,
                                    error_code=ErrorCodes.CONFIG_INVALID, path='x.yaml')

        self.assertEqual(error.error_code, ErrorCodes.CONFIG_INVALID)
        self.assertEqual(error.context['path'], 'x.yaml')
        self.assertEqual(error.context['category'], 'CONFIGURATION')

    def test_default_codes(self):
        self.assertEqual(CommandError("x").error_code, ErrorCodes.COMMAND_NOT_ACKNOWLEDGED)
        self.assertEqual(ConfigurationError("x").error_code, ErrorCodes.CONFIG_NOT_FOUND)
        self.assertEqual(ConnectionError("x").error_code, ErrorCodes.CONNECTION_REFUSED)


class TestErrorFormatter(unittest.TestCase):
    """Test error formatting."""

    def setUp(self):
        self.formatter = ErrorFormatter()

    def test_format_for_user(self):
        error = CommandError("Failed to cancel previous printing job.",
                             suggestions=["Check the printer"])
        msg = self.formatter.format_for_user(error)

        self.assertIn("Failed to cancel", msg)
        self.assertIn("Check the printer", msg)

    def test_format_for_user_standard_exception(self):
        msg = self.formatter.format_for_user(ValueError("bad"))
        self.assertEqual(msg, "An error occurred: bad")

    def test_colors(self):
        formatter = ErrorFormatter(use_colors=True)
        msg = formatter.format_for_user(PrinterError("Boom"))

        self.assertTrue(msg.startswith('\033[91m'))
        self.assertTrue(msg.endswith('\033[0m'))
        self.assertEqual(self.formatter.colorize("plain", 'RED'), "plain")

    def test_format_for_json(self):
        data = json.loads(self.formatter.format_for_json(CommandError("Command failed")))

        self.assertEqual(data['error_type'], 'CommandError')
        self.assertEqual(data['message'], 'Command failed')
        self.assertIn('timestamp', data)

    def test_format_for_json_standard_exception(self):
        data = json.loads(self.formatter.format_for_json(KeyError("k")))
        self.assertEqual(data['error_type'], 'KeyError')

    def test_severity(self):
        self.assertEqual(self.formatter.get_severity(ConnectionError("x")), 'critical')
        self.assertEqual(self.formatter.get_severity(CommandError("x")), 'error')
        self.assertEqual(self.formatter.get_severity(ConfigurationError("x")), 'warning')
        self.assertEqual(self.formatter.get_severity(ValueError("x")), 'error')


class TestConvenienceFunctions(unittest.TestCase):
    """Test module-level convenience functions."""

    def test_format_error(self):
        error = CommandError("Test error")

        self.assertIsInstance(format_error(error, 'user'), str)
        self.assertIn("[2001]", format_error(error, 'log'))
        json.loads(format_error(error, 'json'))

        with self.assertRaises(ValueError):
            format_error(error, 'gui')

    def test_log_error_printer_error(self):
        logger = logging.getLogger('test.log_error')
        error = ConnectionError("Lost", host='10.0.0.5', port=9100)

        with self.assertLogs(logger, level='DEBUG') as cm:
            log_error(logger, error, "Error closing printer connection")

        self.assertEqual(cm.records[0].levelno, logging.ERROR)
        self.assertEqual(cm.records[0].getMessage(), "Error closing printer connection: Lost")
        self.assertTrue(any("[1001]" in r.getMessage() for r in cm.records[1:]))

    def test_log_error_standard_exception(self):
        logger = logging.getLogger('test.log_error')
        with self.assertLogs(logger, level='WARNING') as cm:
            log_error(logger, OSError("gone"), level=logging.WARNING)

        self.assertEqual(cm.records[0].getMessage(), "OSError: gone")


class TestRealWorldScenarios(unittest.TestCase):
    """Test realistic error handling scenarios."""

    def test_connection_timeout_scenario(self):
        original_error = socket.timeout("timed out")
        error = ConnectionError(
            "Timed out connecting to 192.168.0.60:1024",
            operation='connect',
            host='192.168.0.60',
            port=1024,
            error_code=ErrorCodes.CONNECTION_TIMEOUT,
            cause=original_error,
            suggestions=["Check that the printer is powered on and reachable"]
        )

        formatter = ErrorFormatter()
        user_msg = formatter.format_for_user(error)
        self.assertIn("Timed out connecting", user_msg)
        self.assertIn("powered on", user_msg)

        log_msg = formatter.format_for_log(error)
        self.assertIn(str(ErrorCodes.CONNECTION_TIMEOUT), log_msg)
        self.assertIn("192.168.0.60", log_msg)


if __name__ == '__main__':
    unittest.main()
