'''
    Motion Backend Interface
    pylts | Oct 2026
    Version 1
    The calls ThorlabsLTSDriver makes into a vendor motion SDK. The Kinesis
    implementation lives in kinesis_comms; tests supply a fake.
'''
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass
class VelocityParams:
    """Velocity parameters in real units (mm/s, mm/s2)."""
    min_velocity: float
    max_velocity: float
    acceleration: float


@dataclass
class DeviceInfo:
    """Controller identification as reported by the SDK."""
    name: str
    description: str


class MotorConfiguration(ABC):
    """Motor/stage configuration loaded for a connected device."""

    @property
    @abstractmethod
    def device_settings_name(self) -> str:
        """Stage name, e.g. 'LTS150'."""

    @abstractmethod
    def update_current_configuration(self) -> None:
        """Push the configuration into the real-to-device unit converter."""


class StageDevice(ABC):
    """
    One stage as exposed by the SDK. Timeouts and intervals are in
    seconds, positions in mm.
    """

    @abstractmethod
    def connect(self, serial_number: str) -> None: ...

    @abstractmethod
    def disconnect(self) -> None: ...

    @abstractmethod
    def is_connected(self) -> bool: ...

    @property
    @abstractmethod
    def device_id(self) -> str: ...

    @abstractmethod
    def is_settings_initialized(self) -> bool: ...

    @abstractmethod
    def wait_for_settings_initialized(self, timeout: float) -> None: ...

    @abstractmethod
    def load_motor_configuration(self, serial_number: str) -> MotorConfiguration: ...

    @abstractmethod
    def apply_device_settings(self) -> None:
        """Write the device's current motor settings back to the controller."""

    @abstractmethod
    def get_device_info(self) -> DeviceInfo: ...

    @abstractmethod
    def start_polling(self, interval: float) -> None: ...

    @abstractmethod
    def stop_polling(self) -> None: ...

    @abstractmethod
    def enable_device(self) -> None: ...

    @abstractmethod
    def disable_device(self) -> None: ...

    @abstractmethod
    def home(self, timeout: float) -> None:
        """Blocking home, returns when homed or after timeout."""

    @abstractmethod
    def move_to(self, position: float, timeout: float) -> None:
        """Blocking absolute move, returns when done or after timeout."""

    @abstractmethod
    def get_velocity_params(self) -> VelocityParams: ...

    @abstractmethod
    def set_velocity_params(self, params: VelocityParams) -> None: ...

    @property
    @abstractmethod
    def position(self) -> float: ...


class MotionBackend(ABC):
    """Device manager side of the SDK."""

    @abstractmethod
    def load(self) -> None:
        """Load SDK resources. Must be safe to call more than once."""

    @abstractmethod
    def build_device_list(self) -> None: ...

    @abstractmethod
    def get_device_list(self) -> List[str]: ...

    @abstractmethod
    def create_long_travel_stage(self, serial_number: str) -> StageDevice: ...
