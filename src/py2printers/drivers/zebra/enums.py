"""
Zebra RFID log enumerations.
"""

from enum import Enum


class RFIDOperation(Enum):
    """Operation letter in the first field of an RFID log line."""

    UNRECOGNIZED = ('?', 'Unrecognized operation')
    PERMA_LOCK = ('B', 'Permalock')
    LOG_FILE_RESET = ('E', 'Log file reset')
    LOCK = ('L', 'Lock')
    LOCK_UNLOCK_MEMORY_BANK = ('M', 'Lock/Unlock')
    RFID_SETTINGS = ('S', 'RFID settings')
    READ = ('R', 'Read')
    WRITE = ('W', 'Write')

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description

    @classmethod
    def get(cls, code: str) -> "RFIDOperation":
        code = (code or '').strip().upper()
        for member in cls:
            if member.code == code:
                return member
        return cls.UNRECOGNIZED

    def __str__(self) -> str:
        return f"{self.code}: {self.description}"
