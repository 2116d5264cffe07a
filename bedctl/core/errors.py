"""Domain-specific errors for bedctl."""


class BedctlError(Exception):
    """Base error for bedctl."""


class SettingsValidationError(BedctlError):
    """Raised when a settings file does not conform to schema or semantics."""


class SettingsLoadError(BedctlError):
    """Raised when reading settings sources fails."""


class DeviceError(BedctlError):
    """Base device error."""


class DeviceConnectionError(DeviceError):
    """Raised when the device cannot be reached or a snapshot fetch fails."""


class CommandError(DeviceError):
    """Raised when the device rejects or fails to run a command."""


class AlarmDataError(BedctlError):
    """Raised when the persisted alarm blob is missing, corrupt, or lacks a side record."""


class ActuatorError(BedctlError):
    """Raised when the bed base rejects a movement command."""
