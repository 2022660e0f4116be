"""Shared fixtures: the classical macro cell and a few variants."""

import matplotlib

matplotlib.use('Agg')

import pytest

from earth_power.energy_model import EarthPowerModel
from earth_power.params import StationConfig, get_preset


@pytest.fixture
def macro() -> StationConfig:
    return StationConfig(
        n_chains=6,
        power_rf_watts=13.0,
        power_baseband_watts=29.5,
        loss_feed=0.05,
        loss_dc=0.075,
        loss_mains=0.09,
        loss_cool=0.10,
        eta_pa=0.311,
        p_max_watts=128.2,
        power_sleep_watts=75.0,
        name='macro',
    )


@pytest.fixture
def lossless() -> StationConfig:
    return StationConfig(
        n_chains=1,
        power_rf_watts=10.0,
        power_baseband_watts=20.0,
        loss_feed=0.0,
        loss_dc=0.0,
        loss_mains=0.0,
        loss_cool=0.0,
        eta_pa=1.0,
        p_max_watts=40.0,
        power_sleep_watts=0.0,
        name='lossless',
    )


@pytest.fixture
def model(macro) -> EarthPowerModel:
    return EarthPowerModel(macro)


@pytest.fixture(params=['macro', 'macro_5g', 'macro_no_cooling'])
def preset_model(request) -> EarthPowerModel:
    return EarthPowerModel(get_preset(request.param))
