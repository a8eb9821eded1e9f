"""
Settings file loader.

Settings live in a YAML file with a ``defaults`` mapping and per-vendor
overrides under ``vendors``::

    defaults:
      idle_timeout: 15.5
    vendors:
      zebra:
        settle_delay: 0.5

Without an explicit path the file shipped in ``py2printers/configs`` is used.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from py2printers.core.errors import ConfigurationError, ErrorCodes, wrap_external_error
from py2printers.drivers.pool import VendorType
from py2printers.models.settings import DriverSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "printers.yaml"


def load_settings(
    vendor: Union[str, VendorType, None] = None,
    path: Union[str, Path, None] = None
) -> DriverSettings:
    """
    Load driver settings for a vendor.

    Args:
        vendor: Vendor name or VendorType. None returns the defaults only.
        path: Settings file. Falls back to the shipped file if omitted or
            missing.

    Returns:
        Validated DriverSettings

    Raises:
        ConfigurationError: If the file cannot be parsed, has unknown keys
            or holds invalid values
        UnsupportedVendorError: If the vendor is unknown
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.warning(f"Settings file {config_path} not found, using {DEFAULT_CONFIG_PATH}")
        config_path = DEFAULT_CONFIG_PATH

    config = _read_yaml(config_path)

    overrides: Dict[str, Any] = {}
    overrides.update(_section(config, 'defaults', config_path))

    if vendor is not None:
        vendor_key = VendorType.parse(vendor).name.lower()
        vendors = _section(config, 'vendors', config_path)
        vendor_section = vendors.get(vendor_key) or {}
        if not isinstance(vendor_section, dict):
            raise ConfigurationError(
                f"Section 'vendors.{vendor_key}' in {config_path} must be a mapping",
                setting_name=f"vendors.{vendor_key}",
                error_code=ErrorCodes.CONFIG_INVALID
            )
        overrides.update(vendor_section)

    settings = build_settings(overrides, source=str(config_path))
    logger.debug(f"Loaded settings for {vendor or 'defaults'} from {config_path}: {settings}")
    return settings


def build_settings(values: Dict[str, Any], source: str = '<dict>') -> DriverSettings:
    """
    Create DriverSettings from a plain mapping.

    Raises:
        ConfigurationError: On unknown keys or values that fail validation
    """
    known = set(DriverSettings.field_names())
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s) in {source}: {', '.join(unknown)}",
            setting_name=unknown[0],
            error_code=ErrorCodes.CONFIG_INVALID,
            suggestions=[f"Valid settings: {', '.join(sorted(known))}"]
        )

    settings = DriverSettings().merged(values)
    valid, errors = settings.validate()
    if not valid:
        raise ConfigurationError(
            f"Invalid settings in {source}: {'; '.join(errors)}",
            error_code=ErrorCodes.CONFIG_INVALID,
            context={'errors': errors}
        )
    return settings


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise wrap_external_error(
            e, f"Cannot read settings file {config_path}", ConfigurationError,
            error_code=ErrorCodes.CONFIG_NOT_FOUND, path=str(config_path)
        ) from e
    except yaml.YAMLError as e:
        raise wrap_external_error(
            e, f"Settings file {config_path} is not valid YAML", ConfigurationError,
            error_code=ErrorCodes.CONFIG_INVALID, path=str(config_path)
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Settings file {config_path} must contain a mapping",
            error_code=ErrorCodes.CONFIG_INVALID
        )
    return config


def _section(config: Dict[str, Any], name: str, config_path: Path) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Section '{name}' in {config_path} must be a mapping",
            setting_name=name,
            error_code=ErrorCodes.CONFIG_INVALID
        )
    return section
