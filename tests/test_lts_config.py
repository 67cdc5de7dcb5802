"""
Tests for LTSConfig defaults and TOML loading.
"""

import logging

import pytest

from lts_config import LTSConfig


class TestDefaults:

    def test_default_values(self):
        config = LTSConfig()
        assert config.default_velocity == 20.0
        assert config.default_acceleration == 20.0
        assert config.polling_interval == 0.25
        assert config.settings_timeout == 7.0
        assert config.move_timeout == 100.0
        assert config.velocity_limit == 50.0
        assert config.acceleration_limit == 50.0
        assert config.clamp_limits is True
        assert config.serial_prefixes == ('45',)

    @pytest.mark.parametrize('serial, supported', [
        ('45123456', True),
        ('45', True),
        ('27123456', False),
        ('', False),
        (None, False),
        (45123456, True),
    ])
    def test_is_supported_serial(self, serial, supported):
        assert LTSConfig().is_supported_serial(serial) is supported


class TestLoad:

    def test_load_overrides(self, tmp_path):
        path = tmp_path / 'lts.toml'
        path.write_text(
            '[lts]\n'
            'kinesis_path = "D:/Kinesis"\n'
            'move_timeout = 60.0\n'
            'clamp_limits = false\n'
            'serial_prefixes = ["45", 46]\n'
        )

        config = LTSConfig.load(path)

        assert config.kinesis_path == 'D:/Kinesis'
        assert config.move_timeout == 60.0
        assert config.clamp_limits is False
        assert config.serial_prefixes == ('45', '46')
        # untouched keys keep their defaults
        assert config.default_velocity == 20.0

    def test_missing_section_gives_defaults(self, tmp_path):
        path = tmp_path / 'other.toml'
        path.write_text('[camera]\nexposure_us = 100\n')
        assert LTSConfig.load(path) == LTSConfig()

    def test_unknown_key_is_ignored(self, tmp_path, caplog):
        path = tmp_path / 'lts.toml'
        path.write_text('[lts]\nmove_timeout = 10.0\nspeed = 3\n')

        with caplog.at_level(logging.WARNING, logger='lts_config'):
            config = LTSConfig.load(str(path))

        assert config.move_timeout == 10.0
        assert 'speed' in caplog.text

    def test_custom_section(self, tmp_path):
        path = tmp_path / 'rig.toml'
        path.write_text('[stage_x]\nvelocity_limit = 40.0\n')
        assert LTSConfig.load(path, section='stage_x').velocity_limit == 40.0
