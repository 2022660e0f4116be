"""
EARTH power model for cellular base stations.

Maps the radiated output power of a base station to its electrical draw,
broken down into power amplifier, RF, baseband, DC-DC, mains supply, cooling
and sleep contributions.
"""

from earth_power.energy_model import EarthPowerModel, PowerBreakdown, evaluate
from earth_power.errors import EarthModelError, InvalidConfiguration, InvalidInput
from earth_power.params import PRESETS, StationConfig, get_preset, load_config, save_config

__version__ = '0.1.0'

__all__ = [
    'EarthPowerModel',
    'PowerBreakdown',
    'evaluate',
    'EarthModelError',
    'InvalidConfiguration',
    'InvalidInput',
    'PRESETS',
    'StationConfig',
    'get_preset',
    'load_config',
    'save_config',
]
