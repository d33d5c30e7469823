from enum import Enum


class Severity(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class AlertType(str, Enum):
    TEMP_HIGH = "temp_high"
    TEMP_LOW = "temp_low"
    BATTERY_LOW = "battery_low"
    FIRMWARE_OUTDATED = "firmware_outdated"


class OriginalGravitySource(str, Enum):
    PROFILE_SESSION = "profile_session"
    MANUAL = "manual"
    FIRST_READING = "first_reading"
