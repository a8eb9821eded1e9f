"""
SATO status field enumerations.

Each member carries its numeric code, the on-wire token (e.g. ``PS0``) and
a description. Unknown or malformed codes resolve to ``UNRECOGNIZED``
instead of failing the parse.
"""

from enum import Enum
from typing import Optional, Union


class SatoCode(Enum):
    """Base for SATO status codes."""

    def __init__(self, number: int, token: str, description: str):
        self.number = number
        self.token = token
        self.description = description

    @classmethod
    def get(cls, value: Union[int, str, None]):
        """
        Look up a member by its numeric code.

        Args:
            value: Integer code, or the digits that followed the field prefix

        Returns:
            The matching member, or UNRECOGNIZED
        """
        number = _to_int(value)
        if number is not None:
            for member in cls:
                if member.number == number:
                    return member
        return cls.UNRECOGNIZED

    @property
    def recognized(self) -> bool:
        return self.number >= 0

    def __str__(self) -> str:
        return f"{self.token} ({self.description})"


def _to_int(value: Union[int, str, None]) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class PrinterState(SatoCode):
    """PS field: print engine state."""
    UNRECOGNIZED = (-1, "PS?", "Unrecognized printer state")
    STANDBY = (0, "PS0", "Standby")
    WAITING = (1, "PS1", "Waiting for dispensing")
    ANALYZING = (2, "PS2", "Analyzing")
    PRINTING = (3, "PS3", "Printing")
    OFFLINE = (4, "PS4", "Offline")
    ERROR = (5, "PS5", "Error")


class ReceiveBufferStatus(SatoCode):
    """RS field."""
    UNRECOGNIZED = (-1, "RS?", "Unrecognized buffer status")
    BUFFER_AVAILABLE = (0, "RS0", "Buffer available")
    BUFFER_NEAR_FULL = (1, "RS1", "Buffer near full")
    BUFFER_FULL = (2, "RS2", "Buffer full")


class RibbonStatus(SatoCode):
    """RE field."""
    UNRECOGNIZED = (-1, "RE?", "Unrecognized ribbon status")
    RIBBON_PRESENT = (0, "RE0", "Ribbon present")
    RIBBON_NEAR_END = (1, "RE1", "Ribbon near end")
    NO_RIBBON = (2, "RE2", "No ribbon")
    DIRECT_THERMAL_MODEL = (3, "RE3", "Direct thermal model")


class MediaStatus(SatoCode):
    """PE field."""
    UNRECOGNIZED = (-1, "PE?", "Unrecognized media status")
    MEDIA_PRESENT = (0, "PE0", "Media present (including during startup)")
    NO_MEDIA = (2, "PE2", "No media")


class BatteryStatus(SatoCode):
    """BT field."""
    UNRECOGNIZED = (-1, "BT?", "Unrecognized battery status")
    NORMAL = (0, "BT0", "Normal")
    BATTERY_NEAR_END = (1, "BT1", "Battery near end")
    BATTERY_ERROR = (2, "BT2", "Battery error")


class ErrorNumber(SatoCode):
    """EN field: numbered error code, two digits on the wire."""
    UNRECOGNIZED = (-1, "EN??", "Unrecognized error number")
    ONLINE = (0, "EN00", "Online")
    OFFLINE = (1, "EN01", "Offline")
    MACHINE_ERROR = (2, "EN02", "Machine error")
    MEMORY_ERROR = (3, "EN03", "Memory error")
    PROGRAM_ERROR = (4, "EN04", "Program error")
    SETTING_INFO_FLASH_ERROR = (5, "EN05", "Setting information error (FLASH-ROM error)")
    SETTING_INFO_EEPROM_ERROR = (6, "EN06", "Setting information error (EE-PROM error)")
    DOWNLOAD_ERROR = (7, "EN07", "Download error")
    PARITY_ERROR = (8, "EN08", "Parity error")
    OVER_RUN = (9, "EN09", "Over run")
    FRAMING_ERROR = (10, "EN10", "Framing error")
    LAN_TIMEOUT_ERROR = (11, "EN11", "LAN timeout error")
    BUFFER_OVER = (12, "EN12", "Buffer over")
    HEAD_OPEN = (13, "EN13", "Head open")
    PAPER_END = (14, "EN14", "Paper end")
    RIBBON_END = (15, "EN15", "Ribbon end")
    MEDIA_ERROR = (16, "EN16", "Media error")
    SENSOR_ERROR = (17, "EN17", "Sensor error")
    PRINTHEAD_ERROR = (18, "EN18", "Printhead error")
    COVER_OPEN_ERROR = (19, "EN19", "Cover open error")
    MEMORY_CARD_TYPE_ERROR = (20, "EN20", "Memory/Card type error")
    MEMORY_CARD_READ_WRITE_ERROR = (21, "EN21", "Memory/Card read/write error")
    MEMORY_CARD_FULL_ERROR = (22, "EN22", "Memory/Card full error")
    MEMORY_CARD_NO_BATTERY_ERROR = (23, "EN23", "Memory/Card no battery error")
    RIBBON_SAVER_ERROR = (24, "EN24", "Ribbon saver error")
    CUTTER_ERROR = (25, "EN25", "Cutter error")
    CUTTER_SENSOR_ERROR = (26, "EN26", "Cutter sensor error")
    STACKER_FULL_ERROR = (27, "EN27", "Stacker full error")
    COMMAND_ERROR = (28, "EN28", "Command error")
    SENSOR_ERROR_AT_POWER_ON = (29, "EN29", "Sensor error at Power-On")
    RFID_TAG_ERROR = (30, "EN30", "RFID tag error")
    INTERFACE_CARD_ERROR = (31, "EN31", "Interface card error")
    REWINDER_ERROR = (32, "EN32", "Rewinder error")
    OTHER_ERROR = (33, "EN33", "Other error")
    RFID_CONTROL_ERROR = (34, "EN34", "RFID control error")
    HEAD_DENSITY_ERROR = (35, "EN35", "Head density error")
    KANJI_DATA_ERROR = (36, "EN36", "Kanji data error")
    CALENDAR_ERROR = (37, "EN37", "Calendar error")
    ITEM_NO_ERROR = (38, "EN38", "Item No error")
    BCC_ERROR = (39, "EN39", "BCC error")
    CUTTER_COVER_OPEN_ERROR = (40, "EN40", "Cutter cover open error")
    RIBBON_REWIND_NON_LOCK_ERROR = (41, "EN41", "Ribbon rewind non-lock error")
    COMMUNICATION_TIMEOUT_ERROR = (42, "EN42", "Communication timeout error")
    LID_LATCH_OPEN_ERROR = (43, "EN43", "Lid latch open error")
    NO_MEDIA_ERROR_AT_POWER_ON = (44, "EN44", "No media error at Power-On")
    SD_CARD_ACCESS_ERROR = (45, "EN45", "SD card access error")
    SD_CARD_FULL_ERROR = (46, "EN46", "SD card full error")
    HEAD_LIFT_ERROR = (47, "EN47", "Head lift error")
    HEAD_OVERHEAT_ERROR = (48, "EN48", "Head overheat error")
    SNTP_TIME_CORRECTION_ERROR = (49, "EN49", "SNTP time correction error")
    CRC_ERROR = (50, "EN50", "CRC error")
    CUTTER_MOTOR_ERROR = (51, "EN51", "Cutter motor error")
    WLAN_MODULE_ERROR = (52, "EN52", "WLAN module error")
    SCANNER_READING_ERROR = (53, "EN53", "Scanner reading error")
    SCANNER_CHECKING_ERROR = (54, "EN54", "Scanner checking error")
    SCANNER_CONNECTION_ERROR = (55, "EN55", "Scanner connection error")
    BLUETOOTH_MODULE_ERROR = (56, "EN56", "Bluetooth module error")
    EAP_AUTHENTICATION_FAILED = (57, "EN57", "EAP authentication error (EAP failed)")
    EAP_AUTHENTICATION_TIMEOUT = (58, "EN58", "EAP authentication error (Time out)")
    BATTERY_ERROR = (59, "EN59", "Battery error")
    LOW_BATTERY = (60, "EN60", "Low battery error")
    LOW_BATTERY_CHARGING = (61, "EN61", "Low battery error (Charging)")
    BATTERY_NOT_INSTALLED = (62, "EN62", "Battery not installed error")
    BATTERY_TEMPERATURE_ERROR = (63, "EN63", "Battery temperature error")
    BATTERY_DETERIORATION_ERROR = (64, "EN64", "Battery deterioration error")
    MOTOR_TEMPERATURE_ERROR = (65, "EN65", "Motor temperature error")
    INSIDE_CHASSIS_TEMPERATURE_ERROR = (66, "EN66", "Inside chassis temperature error")
    JAM_ERROR = (67, "EN67", "Jam error")
    SIPL_FIELD_FULL_ERROR = (68, "EN68", "SIPL field full error")
    POWER_OFF_WHEN_CHARGING_ERROR = (69, "EN69", "Power off error when charging")
    WLAN_MODULE_ERROR_DUPLICATE = (70, "EN70", "WLAN module error (duplicate entry in table)")
    OPTION_MISMATCH_ERROR = (71, "EN71", "Option mismatch error")
    BATTERY_DETERIORATION_NOTICE = (72, "EN72", "Battery deterioration error (Notice)")
    BATTERY_DETERIORATION_WARNING = (73, "EN73", "Battery deterioration error (Warning)")
    POWER_OFF_ERROR = (74, "EN74", "Power off error")
    NONRFID_WARNING_ERROR = (75, "EN75", "NonRFID warning error")
    BARCODE_READER_CONNECTION_ERROR = (76, "EN76", "Barcode reader connection error")
    BARCODE_READING_ERROR = (77, "EN77", "Barcode reading error")
    BARCODE_VERIFICATION_ERROR = (78, "EN78", "Barcode verification error")
    BARCODE_READING_VERIFICATION_POSITION_ERROR = (
        79, "EN79", "Barcode reading error (verification start position abnormality)")

    @property
    def is_error(self) -> bool:
        """False for the two informational codes (online/offline)."""
        return self not in (ErrorNumber.ONLINE, ErrorNumber.OFFLINE)
