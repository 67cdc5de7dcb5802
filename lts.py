'''
    Thorlabs LTS Long Travel Stage Driver
    pylts | Oct 2026
    Version 2
    Drives an LTS150/LTS300 through the Kinesis SDK (or any MotionBackend).

    Example:
        lts = ThorlabsLTSDriver()
        serials = lts.list_devices()   # serial numbers of connected devices
        lts.connect(serials[0])        # connect the first device
        lts.home()                     # home (required before moving)
        lts.move_to(10)                # move to 10 mm
        lts.move_to(30, 40)            # move to 30 mm at 40 mm/s
        lts.disconnect()
'''
import logging
import math
import numbers
import warnings
from typing import List, Optional, Sequence

from kinesis_comms import KinesisBackend
from lts_config import LTSConfig
from lts_errors import (AlreadyConnectedError, DisconnectionError, HomeError,
                        InitializationError, MoveError, NotConnectedError,
                        SequenceError, SpeedLimitWarning,
                        UnsupportedDeviceError)
from motion_backend import (DeviceInfo, MotionBackend, MotorConfiguration,
                            StageDevice)

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_finite_number(value) -> bool:
    return _is_number(value) and math.isfinite(value)


class ThorlabsLTSDriver:
    """
    Driver for a single Thorlabs long travel stage.

    Status fields (position, velocities, names) are cached and only change
    when refresh_status() runs, which every command does on completion.
    """

    def __init__(self, backend: Optional[MotionBackend] = None,
                 config: Optional[LTSConfig] = None):
        """
        Args:
            backend: Motion SDK to drive. Defaults to the Kinesis .NET SDK,
                     loaded on first use.
            config: Driver settings. Defaults to LTSConfig().
        """
        self.config = config if config is not None else LTSConfig()
        if backend is None:
            backend = KinesisBackend(self.config.kinesis_path)
        self.backend = backend

        self._is_connected = False
        self._serial_number: Optional[str] = None
        self._controller_name: Optional[str] = None
        self._controller_description: Optional[str] = None
        self._stage_name: Optional[str] = None
        self._position = 0.0
        self._acceleration = 0.0
        self._max_velocity = 0.0
        self._min_velocity = 0.0

        self._device: Optional[StageDevice] = None
        self._motor_config: Optional[MotorConfiguration] = None
        self._device_info: Optional[DeviceInfo] = None

    # ── Cached status ────────────────────────────────────────────

    @property
    def is_connected(self) -> bool:
        return self._is_connected

    @property
    def serial_number(self) -> Optional[str]:
        return self._serial_number

    @property
    def controller_name(self) -> Optional[str]:
        return self._controller_name

    @property
    def controller_description(self) -> Optional[str]:
        return self._controller_description

    @property
    def stage_name(self) -> Optional[str]:
        return self._stage_name

    @property
    def position(self) -> float:
        """Position in mm at the last refresh."""
        return self._position

    @property
    def acceleration(self) -> float:
        return self._acceleration

    @property
    def max_velocity(self) -> float:
        return self._max_velocity

    @property
    def min_velocity(self) -> float:
        return self._min_velocity

    # ── Connection management ────────────────────────────────────

    def list_devices(self) -> List[str]:
        '''
            list_devices() - rebuilds the SDK device list and returns the
            serial numbers of all connected devices.
        '''
        self.backend.load()
        self.backend.build_device_list()
        return list(self.backend.get_device_list())

    def connect(self, serial_number: str) -> None:
        """
        Connect, configure and enable the stage, then start polling.

        Args:
            serial_number: Device serial number, e.g. '45123456'. Use
                           list_devices() to find connected stages.

        Raises:
            AlreadyConnectedError: A device is already connected
            UnsupportedDeviceError: The serial number is not an LTS
            InitializationError: Settings never initialised or the SDK raised
        """
        serial_number = str(serial_number)
        if self._is_connected or self._device is not None:
            raise AlreadyConnectedError(self._serial_number)
        if not self.config.is_supported_serial(serial_number):
            raise UnsupportedDeviceError(serial_number)

        # The SDK only finds devices that were in the last device list
        self.list_devices()

        device = None
        try:
            device = self.backend.create_long_travel_stage(serial_number)
            device.connect(serial_number)

            if not device.is_settings_initialized():
                device.wait_for_settings_initialized(self.config.settings_timeout)
            if not device.is_settings_initialized():
                raise InitializationError(
                    serial_number,
                    f"settings not initialised after {self.config.settings_timeout:g} s")

            motor_config = device.load_motor_configuration(serial_number)
            motor_config.update_current_configuration()
            device.apply_device_settings()
            device_info = device.get_device_info()
            device.start_polling(self.config.polling_interval)

            # Freshly initialised stages are often not enabled
            device.disable_device()
            device.enable_device()
        except InitializationError:
            self._abort_connect(device)
            raise
        except Exception as e:
            self._abort_connect(device)
            raise InitializationError(serial_number, str(e)) from e

        self._device = device
        self._motor_config = motor_config
        self._device_info = device_info
        self._is_connected = True
        self.refresh_status()
        logger.info("Connected to LTS %s (%s)", self._serial_number, self._stage_name)

    def _abort_connect(self, device: Optional[StageDevice]) -> None:
        '''Tear down a half-opened device so no partial state survives.'''
        self._release()
        if device is None:
            return
        for step in (device.stop_polling, device.disconnect):
            try:
                step()
            except Exception as e:
                logger.warning("Cleanup after failed connect: %s() raised %s",
                               step.__name__, e)

    def _release(self) -> None:
        self._is_connected = False
        self._device = None
        self._motor_config = None
        self._device_info = None

    def disconnect(self) -> None:
        '''
            disconnect() - stops polling and disconnects the stage.
            Raises NotConnectedError if there is nothing to disconnect and
            DisconnectionError if the SDK fails during teardown. Either way
            the handle ends up disconnected.
        '''
        device = self._device
        if device is None:
            raise NotConnectedError()

        if not device.is_connected():
            self._drop_device(device)
            raise NotConnectedError()

        errors = []
        for step in (device.stop_polling, device.disconnect):
            try:
                step()
            except Exception as e:
                logger.error("Disconnecting LTS %s: %s() raised %s",
                             self._serial_number, step.__name__, e)
                errors.append(e)
        self._release()
        if errors:
            raise DisconnectionError(self._serial_number) from errors[0]
        logger.info("Disconnected LTS %s", self._serial_number)

    def _drop_device(self, device: StageDevice) -> None:
        '''Release a device that disconnected on its own.'''
        self._release()
        try:
            device.stop_polling()
        except Exception as e:
            logger.warning("Stopping polling on dropped LTS %s raised %s",
                           self._serial_number, e)

    def _require_device(self) -> StageDevice:
        if self._device is None or not self._is_connected:
            raise NotConnectedError()
        return self._device

    # ── Motion ───────────────────────────────────────────────────

    def home(self) -> None:
        '''
            home() - blocking home. Must be done before any movement with
            the stage. Waits at most config.move_timeout seconds.
        '''
        device = self._require_device()
        logger.info("homing LTS %s", self._serial_number)
        try:
            device.home(self.config.move_timeout)
            self.refresh_status()
        except Exception as e:
            raise HomeError(self._serial_number) from e
        logger.info("LTS homed")

    def move_to(self, position: Optional[float] = None,
                velocity: Optional[float] = None,
                acceleration: Optional[float] = None) -> float:
        """
        Move to an absolute position, optionally setting velocity and
        acceleration first.

        Args:
            position: Target in mm. If None, nothing moves and the cached
                      position is reported.
            velocity: Max velocity in mm/s
            acceleration: Acceleration in mm/s2

        Returns:
            Cached position in mm after the move.

        Raises:
            MoveError: The SDK raised during the move
        """
        if position is None:
            logger.info("current position of LTS is %s mm", self._position)
            return self._position

        if velocity is not None or acceleration is not None:
            self.set_velocity(velocity, acceleration)

        device = self._require_device()
        logger.info("move LTS to %s mm", position)
        try:
            device.move_to(position, self.config.move_timeout)
            self.refresh_status()
        except Exception as e:
            raise MoveError(position, self._serial_number) from e
        logger.info("LTS moved to %s mm", position)
        return self._position

    def set_velocity(self, velocity: Optional[float] = None,
                     acceleration: Optional[float] = None) -> None:
        """
        Set max velocity and/or acceleration.

        With no arguments both are reset to the configured defaults. Values
        above the stage specification emit a SpeedLimitWarning and are
        clamped to the limit unless config.clamp_limits is False.

        Args:
            velocity: Max velocity in mm/s, None keeps the current value
            acceleration: Acceleration in mm/s2, None keeps the current value
        """
        device = self._require_device()
        params = device.get_velocity_params()

        if velocity is None and acceleration is None:
            params.max_velocity = self.config.default_velocity
            params.acceleration = self.config.default_acceleration
        else:
            if velocity is not None:
                params.max_velocity = self._check_limit(
                    velocity, self.config.velocity_limit, 'velocity', 'mm/s')
            if acceleration is not None:
                params.acceleration = self._check_limit(
                    acceleration, self.config.acceleration_limit,
                    'acceleration', 'mm/s^2')

        logger.debug("Setting velocity params %s", params)
        device.set_velocity_params(params)
        self.refresh_status()

    def _check_limit(self, value, limit, name, unit):
        if not _is_number(value):
            raise TypeError(f"{name} must be a number, not {type(value).__name__}")
        if not math.isfinite(value):
            raise ValueError(f"{name} must be finite, got {value}")
        if value > limit:
            warnings.warn(f"{name} >{limit:g} {unit} outside specification",
                          SpeedLimitWarning, stacklevel=3)
            if self.config.clamp_limits:
                return limit
        return value

    def run_sequence(self, sequence: Sequence) -> None:
        """
        Run a list of moves in order.

        Each element is a position, or a list/tuple of
        (position[, velocity[, acceleration]]). The whole sequence is
        checked before the first move.

        Example:
            lts.run_sequence([50, (70, 5), (150, 30, 40)])

        Raises:
            SequenceError: The sequence is malformed
        """
        steps = self._parse_sequence(sequence)
        for step in steps:
            self.move_to(*step)
            self.refresh_status()

    @staticmethod
    def _parse_sequence(sequence) -> List[tuple]:
        if not isinstance(sequence, (list, tuple)):
            raise SequenceError(
                f"expected list or tuple for sequence and not {type(sequence).__name__}")

        steps = []
        for i, step in enumerate(sequence):
            if _is_finite_number(step):
                steps.append((step,))
            elif (isinstance(step, (list, tuple)) and 1 <= len(step) <= 3
                  and all(_is_finite_number(v) for v in step)):
                steps.append(tuple(step))
            else:
                raise SequenceError(
                    f"sequence element {i} must be a position or "
                    f"(position, velocity[, acceleration]), got {step!r}")
        return steps

    # ── Status ───────────────────────────────────────────────────

    def refresh_status(self) -> None:
        '''
            refresh_status() - re-reads every cached field from the device.
            Without a device only the connected flag is cleared. A device
            that has dropped out is released and the last readings are kept.
        '''
        device = self._device
        if device is None:
            self._is_connected = False
            return

        if not device.is_connected():
            logger.warning("LTS %s is no longer connected", self._serial_number)
            self._drop_device(device)
            return

        self._is_connected = True
        self._serial_number = device.device_id
        if self._device_info is not None:
            self._controller_name = self._device_info.name
            self._controller_description = self._device_info.description
        if self._motor_config is not None:
            self._stage_name = self._motor_config.device_settings_name

        params = device.get_velocity_params()
        self._acceleration = float(params.acceleration)
        self._max_velocity = float(params.max_velocity)
        self._min_velocity = float(params.min_velocity)
        self._position = float(device.position)

    # ── Teardown ─────────────────────────────────────────────────

    def destroy(self) -> None:
        '''destroy() - disconnects if still connected. Safe to call twice.'''
        if self._device is None:
            return
        try:
            self.disconnect()
        except NotConnectedError:
            # device dropped out on its own, references are already released
            logger.debug("LTS %s was no longer connected", self._serial_number)
        logger.info("lts destroyed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.destroy()
        return False

    def __del__(self):
        if getattr(self, '_device', None) is None:
            return
        try:
            self.destroy()
        except Exception:
            logger.exception("Error disconnecting LTS %s on garbage collection",
                             self._serial_number)

    def __repr__(self):
        state = 'connected' if self._is_connected else 'disconnected'
        return (f"<{type(self).__name__} {self._serial_number or '-'} "
                f"{state} position={self._position} mm>")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)

    with ThorlabsLTSDriver() as lts:
        serials = lts.list_devices()
        print(f"Connected devices: {serials}")
        if not serials:
            raise SystemExit("No Kinesis devices found.")

        lts.connect(serials[0])
        print(f"{lts.controller_name} ({lts.controller_description}), "
              f"stage {lts.stage_name}")
        lts.home()
        lts.move_to(10)
        lts.move_to(30, 40)
        lts.run_sequence([50, (70, 5), (150, 30, 40)])
        print(f"Final position: {lts.position} mm")
