"""
Shared pytest fixtures for the LTS driver tests.

Provides a recording fake of the motion backend so the driver can be
exercised without Kinesis or a stage attached.
"""

import pytest

from lts import ThorlabsLTSDriver
from lts_config import LTSConfig
from motion_backend import (DeviceInfo, MotionBackend, MotorConfiguration,
                            StageDevice, VelocityParams)


class FakeMotorConfiguration(MotorConfiguration):

    def __init__(self, calls, name='LTS150'):
        self._calls = calls
        self._name = name

    @property
    def device_settings_name(self):
        return self._name

    def update_current_configuration(self):
        self._calls.append(('update_current_configuration',))


class FakeStageDevice(StageDevice):
    """
    Fake stage that records every call in order.

    Set ``fail_on[method_name] = exception`` to make a call raise.
    """

    def __init__(self, calls, serial_number):
        self.calls = calls
        self.serial_number = serial_number
        self.fail_on = {}
        self.connected = False
        self.settings_ready = True
        self.ready_after_wait = True
        self.current_position = 0.0
        self.velocity = VelocityParams(min_velocity=0.0, max_velocity=10.0,
                                       acceleration=10.0)

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise self.fail_on[name]

    def connect(self, serial_number):
        self._record('connect', serial_number)
        self.connected = True

    def disconnect(self):
        self._record('disconnect')
        self.connected = False

    def is_connected(self):
        return self.connected

    @property
    def device_id(self):
        return self.serial_number

    def is_settings_initialized(self):
        return self.settings_ready

    def wait_for_settings_initialized(self, timeout):
        self._record('wait_for_settings_initialized', timeout)
        if self.ready_after_wait:
            self.settings_ready = True

    def load_motor_configuration(self, serial_number):
        self._record('load_motor_configuration', serial_number)
        return FakeMotorConfiguration(self.calls)

    def apply_device_settings(self):
        self._record('apply_device_settings')

    def get_device_info(self):
        self._record('get_device_info')
        return DeviceInfo(name='LTS', description='Long Travel Stage')

    def start_polling(self, interval):
        self._record('start_polling', interval)

    def stop_polling(self):
        self._record('stop_polling')

    def enable_device(self):
        self._record('enable_device')

    def disable_device(self):
        self._record('disable_device')

    def home(self, timeout):
        self._record('home', timeout)
        self.current_position = 0.0

    def move_to(self, position, timeout):
        self._record('move_to', position, timeout)
        self.current_position = float(position)

    def get_velocity_params(self):
        return VelocityParams(self.velocity.min_velocity,
                              self.velocity.max_velocity,
                              self.velocity.acceleration)

    def set_velocity_params(self, params):
        self._record('set_velocity_params', params.max_velocity,
                     params.acceleration)
        self.velocity = VelocityParams(params.min_velocity,
                                       params.max_velocity,
                                       params.acceleration)

    @property
    def position(self):
        return self.current_position


class FakeBackend(MotionBackend):
    """Fake device manager handing out FakeStageDevice objects."""

    def __init__(self, serial_numbers=('45000001', '45000002')):
        self.calls = []
        self.serial_numbers = list(serial_numbers)
        self.loaded = False
        self.devices = {}

    def load(self):
        self.calls.append(('load',))
        self.loaded = True

    def build_device_list(self):
        self.calls.append(('build_device_list',))

    def get_device_list(self):
        return list(self.serial_numbers)

    def create_long_travel_stage(self, serial_number):
        self.calls.append(('create_long_travel_stage', serial_number))
        device = self.devices.get(serial_number)
        if device is None:
            device = FakeStageDevice(self.calls, serial_number)
            self.devices[serial_number] = device
        return device


@pytest.fixture
def backend():
    """
    Fake backend with two LTS serial numbers attached.

    Returns:
        FakeBackend: records every SDK call in ``backend.calls``
    """
    return FakeBackend()


@pytest.fixture
def config():
    return LTSConfig()


@pytest.fixture
def lts(backend, config):
    """Driver bound to the fake backend, not connected."""
    driver = ThorlabsLTSDriver(backend=backend, config=config)
    yield driver
    if driver.is_connected:
        driver.disconnect()


@pytest.fixture
def connected_lts(lts, backend):
    """
    Driver connected to serial 45000001 with the call log cleared.

    Returns:
        tuple: (driver, fake device)
    """
    lts.connect('45000001')
    device = backend.devices['45000001']
    backend.calls.clear()
    return lts, device
