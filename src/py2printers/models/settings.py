"""
Driver timing and behaviour settings.

Classes:
    DriverSettings: Immutable per-printer settings with validation
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class DriverSettings:
    """
    Immutable settings for one printer driver.

    All durations are in seconds.

    Attributes:
        charset: Character set used to encode commands and labels
        connect_timeout: TCP connect timeout
        read_timeout: Per-read socket timeout (bounds every blocking read)
        command_timeout: Wait budget for status/tag queries
        control_timeout: Wait budget for pause/resume acknowledgements
        cancel_timeout: Wait budget for the cancel acknowledgement
        settle_delay: Pause after transmitting a label before polling
        poll_interval: Delay between read attempts while waiting
        idle_timeout: Print loop ends after this long with no new messages
        stability_threshold: Consecutive idle readings required to finish
        max_iterations: Hard ceiling on print loop iterations

    Example:
        >>> settings = DriverSettings(stability_threshold=4)
        >>> valid, errors = settings.validate()
    """

    charset: str = 'utf-8'
    connect_timeout: float = 5.0
    read_timeout: float = 0.25
    command_timeout: float = 1.0
    control_timeout: float = 0.5
    cancel_timeout: float = 1.0
    settle_delay: float = 0.3
    poll_interval: float = 0.05
    idle_timeout: float = 15.5
    stability_threshold: int = 8
    max_iterations: int = 1_000_000

    _POSITIVE = ('connect_timeout', 'read_timeout', 'command_timeout',
                 'control_timeout', 'cancel_timeout', 'idle_timeout')
    _NON_NEGATIVE = ('settle_delay', 'poll_interval')

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate the settings.

        Returns:
            Tuple of (is_valid, list_of_error_messages)
        """
        errors = []

        try:
            'x'.encode(self.charset)
        except (LookupError, TypeError):
            errors.append(f"Unknown charset: {self.charset}")

        for name in self._POSITIVE:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"{name} must be positive: {value}")

        for name in self._NON_NEGATIVE:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                errors.append(f"{name} must not be negative: {value}")

        if not isinstance(self.stability_threshold, int) or self.stability_threshold < 1:
            errors.append(f"stability_threshold must be at least 1: {self.stability_threshold}")

        if not isinstance(self.max_iterations, int) or self.max_iterations < 1:
            errors.append(f"max_iterations must be at least 1: {self.max_iterations}")

        return (len(errors) == 0, errors)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def merged(self, overrides: Dict[str, Any]) -> "DriverSettings":
        """Return a copy with ``overrides`` applied."""
        return replace(self, **overrides)
