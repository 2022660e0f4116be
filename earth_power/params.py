"""
Base station parameters for the EARTH power model.

A `StationConfig` is built once, validated in full at construction and never
changed afterwards. Named presets cover the macro cell variants; JSON files
can pick a preset and override individual fields.
"""

import dataclasses
import json
import logging
import math
import numbers
from dataclasses import dataclass
from pathlib import Path

from earth_power.errors import InvalidConfiguration
from earth_power.utils import from_watts_to_dBm

logger = logging.getLogger(__name__)

DEFAULT_PRESET = 'macro'


def _check_real(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfiguration(f'{name} must be a real number, got {value!r}.')
    if not math.isfinite(value):
        raise InvalidConfiguration(f'{name} must be finite, got {value!r}.')


def _check_loss_fraction(name, value):
    _check_real(name, value)
    if not 0.0 <= value < 1.0:
        raise InvalidConfiguration(f'{name} must be in [0, 1), got {value!r}.')


def _check_non_negative(name, value):
    _check_real(name, value)
    if value < 0.0:
        raise InvalidConfiguration(f'{name} must be non-negative, got {value!r}.')


@dataclass(frozen=True)
class StationConfig:
    """ Object for setting base station parameters (per TRX chain unless stated)."""
    n_chains: int = 6
    power_rf_watts: float = 13.0
    power_baseband_watts: float = 29.5
    loss_feed: float = 0.05
    loss_dc: float = 0.075
    loss_mains: float = 0.09
    loss_cool: float = 0.10
    eta_pa: float = 0.311
    p_max_watts: float = 128.2
    power_sleep_watts: float = 75.0     # whole station, not per chain
    name: str = 'custom'

    def __post_init__(self):
        if isinstance(self.n_chains, bool) or not isinstance(self.n_chains, numbers.Integral):
            raise InvalidConfiguration(f'n_chains must be an integer, got {self.n_chains!r}.')
        if self.n_chains < 1:
            raise InvalidConfiguration(f'n_chains must be at least 1, got {self.n_chains!r}.')

        _check_non_negative('power_rf_watts', self.power_rf_watts)
        _check_non_negative('power_baseband_watts', self.power_baseband_watts)
        _check_non_negative('power_sleep_watts', self.power_sleep_watts)

        for field_name in ('loss_feed', 'loss_dc', 'loss_mains', 'loss_cool'):
            _check_loss_fraction(field_name, getattr(self, field_name))

        _check_real('eta_pa', self.eta_pa)
        if not 0.0 < self.eta_pa <= 1.0:
            raise InvalidConfiguration(f'eta_pa must be in (0, 1], got {self.eta_pa!r}.')

        _check_real('p_max_watts', self.p_max_watts)
        if self.p_max_watts <= 0.0:
            raise InvalidConfiguration(f'p_max_watts must be positive, got {self.p_max_watts!r}.')

        if not isinstance(self.name, str):
            raise InvalidConfiguration(f'name must be a string, got {self.name!r}.')

    @property
    def p_max_dbm(self):
        """Maximum output power per TRX chain in dBm."""
        return float(from_watts_to_dBm(self.p_max_watts))

    def replace(self, **changes):
        """Return a new, validated config with `changes` applied."""
        unknown = set(changes) - set(field_names())
        if unknown:
            raise InvalidConfiguration(f'Unknown station parameter(s): {sorted(unknown)}.')
        return dataclasses.replace(self, **changes)

    def to_dict(self):
        return dataclasses.asdict(self)


def field_names():
    return [f.name for f in dataclasses.fields(StationConfig)]


PRESETS = {
    # Classical EARTH macro cell, 6 TRX chains at up to 128.2 W each
    'macro': StationConfig(name='macro'),
    # 3 TRX chains at 39.5 W with a lossier feeder
    'macro_5g': StationConfig(
        n_chains=3,
        loss_feed=0.10,
        eta_pa=0.38,
        p_max_watts=39.5,
        name='macro_5g',
    ),
    # Cooling loss switched off at station level
    'macro_no_cooling': StationConfig(
        loss_cool=0.0,
        p_max_watts=20.0,
        name='macro_no_cooling',
    ),
}


def get_preset(name):
    """Return the named preset config."""
    if not isinstance(name, str) or name not in PRESETS:
        raise InvalidConfiguration(
            f'Unknown preset {name!r}. Must be one of the following: {sorted(PRESETS)}.')
    return PRESETS[name]


def load_config(config_file):
    """
    Load a `StationConfig` from a JSON file.

    The file holds a JSON object. The optional key "preset" selects the base
    parameters (default 'macro'); every other key overrides the field of the
    same name.
    """
    config_file = Path(config_file)
    try:
        with open(config_file) as f:
            config = json.load(f)
    except FileNotFoundError:
        raise InvalidConfiguration(f'Config file not found: {config_file}') from None
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f'Config file {config_file} is not valid JSON: {e}') from e

    if not isinstance(config, dict):
        raise InvalidConfiguration(f'Config file {config_file} must contain a JSON object.')

    preset_name = config.pop('preset', DEFAULT_PRESET)
    base = get_preset(preset_name)
    logger.debug('Loading %s on top of preset %s: %s', config_file, preset_name, config)
    # A file that overrides parameters without naming itself is no longer the preset
    if config and 'name' not in config:
        config['name'] = config_file.stem
    return base.replace(**config)


def save_config(station_config, config_file):
    """Write `station_config` as JSON that `load_config` reads back unchanged."""
    config_file = Path(config_file)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, 'w') as f:
        json.dump(station_config.to_dict(), f, indent=4)
    logger.debug('Saved station config %s to %s', station_config.name, config_file)
    return config_file
