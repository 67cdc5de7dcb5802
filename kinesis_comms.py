'''
    Thorlabs Kinesis Communication Layer
    pylts | Oct 2026
    Version 1
    Loads the Kinesis .NET assemblies through pythonnet and adapts the
    LongTravelStage object to the StageDevice interface.

    Kinesis must be installed:
    https://www.thorlabs.com/software_pages/ViewSoftwarePage.cfm?Code=Motion_Control
'''
import logging
import os

from lts_config import KINESIS_PATH
from lts_errors import BackendLoadError
from motion_backend import (DeviceInfo, MotionBackend, MotorConfiguration,
                            StageDevice, VelocityParams)

logger = logging.getLogger(__name__)


def _to_ms(seconds):
    return int(round(seconds * 1000))


class KinesisMotorConfiguration(MotorConfiguration):

    def __init__(self, net_config):
        self._net = net_config

    @property
    def device_settings_name(self):
        return str(self._net.DeviceSettingsName)

    def update_current_configuration(self):
        self._net.UpdateCurrentConfiguration()


class KinesisStageDevice(StageDevice):
    '''
        KinesisStageDevice - wraps a .NET LongTravelStage. Converts seconds
        to the milliseconds Kinesis expects and floats to System.Decimal.
    '''

    def __init__(self, net_device, decimal_type):
        self._net = net_device
        self._decimal = decimal_type

    def _to_double(self, value):
        return float(self._decimal.ToDouble(value))

    # ── Connection management ────────────────────────────────────

    def connect(self, serial_number):
        self._net.Connect(serial_number)

    def disconnect(self):
        self._net.Disconnect()

    def is_connected(self):
        return bool(self._net.IsConnected)

    @property
    def device_id(self):
        return str(self._net.DeviceID)

    def is_settings_initialized(self):
        return bool(self._net.IsSettingsInitialized())

    def wait_for_settings_initialized(self, timeout):
        self._net.WaitForSettingsInitialized(_to_ms(timeout))

    def load_motor_configuration(self, serial_number):
        return KinesisMotorConfiguration(
            self._net.LoadMotorConfiguration(serial_number))

    def apply_device_settings(self):
        settings = self._net.MotorDeviceSettings
        self._net.SetSettings(settings, True, False)

    def get_device_info(self):
        info = self._net.GetDeviceInfo()
        return DeviceInfo(name=str(info.Name), description=str(info.Description))

    # ── Polling / enable ─────────────────────────────────────────

    def start_polling(self, interval):
        self._net.StartPolling(_to_ms(interval))

    def stop_polling(self):
        self._net.StopPolling()

    def enable_device(self):
        self._net.EnableDevice()

    def disable_device(self):
        self._net.DisableDevice()

    # ── Motion ───────────────────────────────────────────────────

    def home(self, timeout):
        self._net.Home(_to_ms(timeout))

    def move_to(self, position, timeout):
        self._net.MoveTo(self._decimal(float(position)), _to_ms(timeout))

    def get_velocity_params(self):
        params = self._net.GetVelocityParams()
        return VelocityParams(
            min_velocity=self._to_double(params.MinVelocity),
            max_velocity=self._to_double(params.MaxVelocity),
            acceleration=self._to_double(params.Acceleration),
        )

    def set_velocity_params(self, params):
        # Modify the device's own parameter object so fields we do not
        # expose keep their values
        net_params = self._net.GetVelocityParams()
        net_params.MaxVelocity = self._decimal(float(params.max_velocity))
        net_params.Acceleration = self._decimal(float(params.acceleration))
        self._net.SetVelocityParams(net_params)

    @property
    def position(self):
        return self._to_double(self._net.Position)


class KinesisBackend(MotionBackend):
    '''
        KinesisBackend - device manager for the Kinesis .NET SDK. The
        assemblies are only loaded on the first call to load().
    '''
    DEVICE_MANAGER_DLL = 'Thorlabs.MotionControl.DeviceManagerCLI.dll'
    GENERIC_MOTOR_DLL = 'Thorlabs.MotionControl.GenericMotorCLI.dll'
    INTEGRATED_STEPPER_DLL = 'Thorlabs.MotionControl.IntegratedStepperMotorsCLI.dll'

    def __init__(self, kinesis_path=KINESIS_PATH):
        self.kinesis_path = kinesis_path
        self._loaded = False
        self._device_manager = None
        self._long_travel_stage = None
        self._decimal = None

    @property
    def is_loaded(self):
        return self._loaded

    def load(self):
        if self._loaded:
            return
        try:
            import clr
            for dll in (self.DEVICE_MANAGER_DLL, self.GENERIC_MOTOR_DLL,
                        self.INTEGRATED_STEPPER_DLL):
                clr.AddReference(os.path.join(self.kinesis_path, dll))

            from Thorlabs.MotionControl.DeviceManagerCLI import DeviceManagerCLI
            from Thorlabs.MotionControl.IntegratedStepperMotorsCLI import LongTravelStage
            from System import Decimal
        except Exception as e:
            raise BackendLoadError(
                f"unable to load .NET assemblies from {self.kinesis_path}: {e}") from e

        self._device_manager = DeviceManagerCLI
        self._long_travel_stage = LongTravelStage
        self._decimal = Decimal
        self._loaded = True
        logger.debug("Loaded Kinesis assemblies from %s", self.kinesis_path)

    def build_device_list(self):
        self.load()
        self._device_manager.BuildDeviceList()

    def get_device_list(self):
        self.load()
        return [str(sn) for sn in self._device_manager.GetDeviceList()]

    def create_long_travel_stage(self, serial_number):
        self.load()
        net_device = self._long_travel_stage.CreateLongTravelStage(serial_number)
        if net_device is None:
            raise BackendLoadError(f"Kinesis returned no device for {serial_number}")
        return KinesisStageDevice(net_device, self._decimal)
