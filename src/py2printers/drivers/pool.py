"""
Printer factory and registry.

``create_printer`` builds a driver for a vendor name. ``PrinterPool`` is an
explicit registry keyed by ``(host, port)`` that callers create and pass
around; there is no module-level instance.
"""

import logging
import threading
from enum import Enum
from typing import Dict, Optional, Set, Tuple, Union

from py2printers.core.error_formatting import log_error
from py2printers.core.errors import PrinterError, UnsupportedVendorError
from py2printers.drivers.avery_dennison import AveryDennisonPrinter
from py2printers.drivers.base import PrinterDriver
from py2printers.drivers.sato import SatoPrinter
from py2printers.drivers.zebra import ZebraPrinter
from py2printers.models.settings import DriverSettings

logger = logging.getLogger(__name__)

Address = Tuple[str, int]


class VendorType(Enum):
    """Supported printer vendors."""

    SATO = "SATO"
    ZEBRA = "ZEBRA"
    AVERY_DENNISON = "AVERY_DENNISON"

    @classmethod
    def parse(cls, value: Union[str, "VendorType"]) -> "VendorType":
        """
        Accept a member or a name such as 'sato', 'ZEBRA', 'avery-dennison'.

        Raises:
            UnsupportedVendorError: For anything else
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace('-', '_')
            try:
                return cls(key)
            except ValueError:
                pass
        raise UnsupportedVendorError(value)


_DRIVERS = {
    VendorType.SATO: SatoPrinter,
    VendorType.ZEBRA: ZebraPrinter,
    VendorType.AVERY_DENNISON: AveryDennisonPrinter,
}


def create_printer(
    vendor: Union[str, VendorType],
    host: str,
    port: int,
    settings: Optional[DriverSettings] = None,
    ignored_skus: Optional[Set[str]] = None
) -> PrinterDriver:
    """
    Build a driver for ``vendor``.

    Args:
        vendor: Vendor name or VendorType
        host: Printer host
        port: Printer port
        settings: Driver settings (defaults if omitted)
        ignored_skus: Ignore set to share with the driver

    Returns:
        A new, unconnected driver

    Raises:
        UnsupportedVendorError: If the vendor is unknown
    """
    vendor_type = VendorType.parse(vendor)
    driver_class = _DRIVERS[vendor_type]
    logger.debug(f"Creating {driver_class.__name__} for {host}:{port}")
    return driver_class(host, port, settings=settings, ignored_skus=ignored_skus)


class PrinterPool:
    """
    Registry of drivers keyed by ``(host, port)``.

    Entries for different addresses are independent. Removing an entry
    closes its driver; close failures are logged, not raised.

    Example:
        >>> pool = PrinterPool()
        >>> printer = pool.factory("SATO", "192.168.0.60", 1024)
        >>> pool.put("192.168.0.60", 1024, printer)
        >>> pool.get("192.168.0.60", 1024) is printer
        True
    """

    def __init__(self, settings: Optional[Dict[VendorType, DriverSettings]] = None):
        """
        Args:
            settings: Optional per-vendor settings used by factory()
        """
        self._printers: Dict[Address, PrinterDriver] = {}
        self._lock = threading.Lock()
        self._settings = settings or {}

    def factory(self, vendor: Union[str, VendorType], host: str, port: int) -> PrinterDriver:
        """Create (but do not register) a driver for ``vendor``."""
        vendor_type = VendorType.parse(vendor)
        return create_printer(vendor_type, host, port, settings=self._settings.get(vendor_type))

    def get(self, host: str, port: int) -> Optional[PrinterDriver]:
        with self._lock:
            return self._printers.get((host, port))

    def exists(self, host: str, port: int) -> bool:
        with self._lock:
            return (host, port) in self._printers

    def put(self, host: str, port: int, printer: PrinterDriver) -> Optional[PrinterDriver]:
        """Register ``printer``. Returns the driver it replaced, if any."""
        with self._lock:
            previous = self._printers.get((host, port))
            self._printers[(host, port)] = printer
            return previous

    def get_or_create(self, vendor: Union[str, VendorType], host: str, port: int) -> PrinterDriver:
        with self._lock:
            printer = self._printers.get((host, port))
            if printer is None:
                printer = self.factory(vendor, host, port)
                self._printers[(host, port)] = printer
            return printer

    def remove(self, host: str, port: int) -> Optional[PrinterDriver]:
        """Unregister and close the driver at ``(host, port)``."""
        with self._lock:
            printer = self._printers.pop((host, port), None)
        if printer is not None:
            self._close(printer)
        return printer

    def clear(self) -> None:
        """Close and unregister every driver."""
        with self._lock:
            printers = list(self._printers.values())
            self._printers.clear()
        for printer in printers:
            self._close(printer)

    def snapshot(self) -> Dict[Address, PrinterDriver]:
        """Read-only copy of the registry."""
        with self._lock:
            return dict(self._printers)

    def __len__(self) -> int:
        with self._lock:
            return len(self._printers)

    @staticmethod
    def _close(printer: PrinterDriver) -> None:
        try:
            printer.close()
        except PrinterError as e:
            log_error(logger, e, f"Error while closing printer {printer.label}")
