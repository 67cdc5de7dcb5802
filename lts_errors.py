'''
    Thorlabs LTS Driver Exceptions
    pylts | Oct 2026
    Version 1
'''


class LTSError(Exception):
    """Base class for all LTS driver errors."""


class BackendLoadError(LTSError):
    """The Kinesis assemblies could not be loaded."""


class AlreadyConnectedError(LTSError):
    def __init__(self, serial_number=None):
        self.serial_number = serial_number
        super().__init__(f"device {serial_number} is already connected."
                         if serial_number else "device is already connected.")


class NotConnectedError(LTSError):
    def __init__(self, message="device not connected."):
        super().__init__(message)


class UnsupportedDeviceError(LTSError):
    def __init__(self, serial_number):
        self.serial_number = serial_number
        super().__init__(f"stage {serial_number} is not a LTS")


class InitializationError(LTSError):
    def __init__(self, serial_number, reason=None):
        self.serial_number = serial_number
        msg = f"unable to initialise device {serial_number}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class DisconnectionError(LTSError):
    def __init__(self, serial_number):
        self.serial_number = serial_number
        super().__init__(f"unable to disconnect device {serial_number}")


class MoveError(LTSError):
    def __init__(self, position, serial_number, message=None):
        self.position = position
        self.serial_number = serial_number
        super().__init__(message or f"unable to move LTS {serial_number} to {position}")


class HomeError(MoveError):
    def __init__(self, serial_number):
        super().__init__(None, serial_number, f"unable to home LTS {serial_number}")


class SequenceError(LTSError, ValueError):
    """Raised for a sequence that is not a list of numeric move tuples."""


class SpeedLimitWarning(UserWarning):
    """Velocity or acceleration outside the stage specification."""
