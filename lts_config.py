'''
    Thorlabs LTS Driver Configuration
    pylts | Oct 2026
    Version 1
    Defaults for the LTS150/LTS300 stages and an optional TOML loader.
'''
import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Kinesis install location (edit as appropriate)
KINESIS_PATH = r'C:\Program Files\Thorlabs\Kinesis'

DEFAULT_VELOCITY = 20.0      # mm/s
DEFAULT_ACCELERATION = 20.0  # mm/s2
POLLING_INTERVAL = 0.25      # seconds
SETTINGS_TIMEOUT = 7.0       # seconds
MOVE_TIMEOUT = 100.0         # seconds

# Outside these the stage is out of specification
VELOCITY_LIMIT = 50.0        # mm/s
ACCELERATION_LIMIT = 50.0    # mm/s2

# Serial numbers starting with 45 are LTS150/LTS300
LTS_SERIAL_PREFIXES = ('45',)


@dataclass
class LTSConfig:
    """Settings used by ThorlabsLTSDriver."""
    kinesis_path: str = KINESIS_PATH
    default_velocity: float = DEFAULT_VELOCITY
    default_acceleration: float = DEFAULT_ACCELERATION
    polling_interval: float = POLLING_INTERVAL
    settings_timeout: float = SETTINGS_TIMEOUT
    move_timeout: float = MOVE_TIMEOUT
    velocity_limit: float = VELOCITY_LIMIT
    acceleration_limit: float = ACCELERATION_LIMIT
    clamp_limits: bool = True
    serial_prefixes: tuple = LTS_SERIAL_PREFIXES

    @classmethod
    def load(cls, config_path: Union[str, Path], section: str = 'lts') -> "LTSConfig":
        """
        Load configuration from a TOML file.

        Only keys found in the ``[lts]`` table override the defaults,
        unknown keys are ignored with a warning.

        Args:
            config_path: Path to the TOML file
            section: Name of the table holding the settings

        Returns:
            Loaded LTSConfig instance.
        """
        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        table = data.get(section, {})
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in table.items():
            if key not in known:
                logger.warning("Ignoring unknown LTS config key '%s' in %s",
                               key, config_path)
                continue
            kwargs[key] = value

        if 'serial_prefixes' in kwargs:
            kwargs['serial_prefixes'] = tuple(str(p) for p in kwargs['serial_prefixes'])

        return cls(**kwargs)

    def is_supported_serial(self, serial_number: Optional[str]) -> bool:
        """True if the serial number belongs to the LTS family."""
        if not serial_number:
            return False
        return str(serial_number).startswith(self.serial_prefixes)
