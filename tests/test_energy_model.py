"""EarthPowerModel: sleep and active breakdowns, invariants and input checks."""

import math

import numpy as np
import pytest

from earth_power.energy_model import EarthPowerModel, PowerBreakdown, evaluate
from earth_power.errors import InvalidInput
from earth_power.params import StationConfig

COMPONENTS = [
    'power_sleep_watts',
    'power_pa_watts',
    'power_rf_watts',
    'power_baseband_watts',
    'loss_dc_watts',
    'loss_mains_watts',
    'loss_cool_watts',
]


def component_sum(b: PowerBreakdown):
    return (b.power_sleep_watts + b.power_pa_watts + b.power_rf_watts + b.power_baseband_watts
            + b.loss_dc_watts + b.loss_mains_watts + b.loss_cool_watts)


class TestSleep:

    def test_zero_output_is_sleep_power(self, model, macro):
        b = model.evaluate(0)
        assert b.power_total_watts == macro.power_sleep_watts == 75.0
        assert b.power_sleep_watts == 75.0
        assert b.is_sleeping

    def test_active_components_exactly_zero(self, model):
        b = model.evaluate(0.0)
        for name in COMPONENTS[1:]:
            assert getattr(b, name) == 0.0

    def test_sleep_for_every_preset(self, preset_model):
        b = preset_model.evaluate(0.0)
        assert b.power_total_watts == preset_model.params.power_sleep_watts

    def test_zero_sleep_power(self, lossless):
        assert EarthPowerModel(lossless).evaluate(0.0).power_total_watts == 0.0


class TestActive:

    def test_macro_at_full_load(self, model):
        b = model.evaluate(128.2)
        assert b.power_pa_watts == pytest.approx(6 * 128.2 / (0.311 * 0.95))
        assert b.power_pa_watts == pytest.approx(2603.49, abs=0.1)
        assert b.power_rf_watts == 78.0
        assert b.power_baseband_watts == 177.0
        assert b.active_sum_watts == pytest.approx(2858.49, abs=0.1)
        assert b.power_total_watts == pytest.approx(3773.21, abs=0.1)
        assert b.power_sleep_watts == 0.0
        assert not b.is_sleeping

    def test_total_matches_closed_form(self, model):
        b = model.evaluate(64.1)
        expected = (6 * 64.1 / (0.311 * 0.95) + 78.0 + 177.0) / (0.925 * 0.91 * 0.9)
        assert b.power_total_watts == pytest.approx(expected, rel=1e-12)

    def test_stage_losses(self, model):
        b = model.evaluate(128.2)
        p_in = b.power_total_watts
        assert b.loss_cool_watts == pytest.approx(p_in * 0.10)
        assert b.loss_mains_watts == pytest.approx(p_in * 0.90 * 0.09)
        assert b.loss_dc_watts == pytest.approx(p_in * 0.90 * 0.91 * 0.075)

    def test_all_components_non_negative(self, preset_model):
        for load in np.linspace(0.0, 1.0, 11):
            b = preset_model.evaluate_load(load)
            for name in COMPONENTS:
                assert getattr(b, name) >= 0.0

    def test_lossless_station(self, lossless):
        b = EarthPowerModel(lossless).evaluate(10.0)
        assert b.power_pa_watts == 10.0
        assert b.loss_dc_watts == b.loss_mains_watts == b.loss_cool_watts == 0.0
        assert b.power_total_watts == 40.0

    def test_no_cooling_has_no_cooling_loss(self, macro):
        b = EarthPowerModel(macro.replace(loss_cool=0.0)).evaluate(50.0)
        assert b.loss_cool_watts == 0.0
        assert b.loss_mains_watts > 0.0

    def test_tiny_output_is_active(self, model):
        b = model.evaluate(1e-12)
        assert b.power_sleep_watts == 0.0
        assert b.power_total_watts == pytest.approx(model.static_power_watts)


class TestInvariants:

    @pytest.mark.parametrize('p_out', [0.0, 0.5, 12.3, 64.1, 100.0, 128.2])
    def test_total_is_exact_sum(self, model, p_out):
        b = model.evaluate(p_out)
        assert b.power_total_watts == component_sum(b)

    @pytest.mark.parametrize('p_out', [1e-6, 0.5, 12.3, 64.1, 128.2])
    def test_losses_reconstruct_active_sum(self, model, p_out):
        b = model.evaluate(p_out)
        p_in = b.power_input_watts
        recovered = p_in - (b.loss_dc_watts + b.loss_mains_watts + b.loss_cool_watts)
        assert math.isclose(recovered, b.active_sum_watts, rel_tol=1e-9)
        assert math.isclose(p_in, b.power_total_watts, rel_tol=1e-12)

    def test_strictly_increasing_in_output(self, preset_model):
        p_max = preset_model.params.p_max_watts
        totals = [preset_model.evaluate(p).power_total_watts for p in np.linspace(p_max / 100, p_max, 100)]
        assert all(b > a for a, b in zip(totals, totals[1:]))

    def test_repeat_calls_identical(self, model):
        assert model.evaluate(77.7) == model.evaluate(77.7)

    def test_gradient_matches_finite_difference(self, model):
        p1, p2 = 40.0, 80.0
        slope = (model.evaluate(p2).power_total_watts - model.evaluate(p1).power_total_watts) / (p2 - p1)
        assert slope == pytest.approx(model.power_gradient)

    def test_static_power(self, model):
        assert model.static_power_watts == pytest.approx((78.0 + 177.0) / (0.925 * 0.91 * 0.9))


class TestInvalidInput:

    def test_negative_output(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate(-1)

    def test_above_max(self, model, macro):
        with pytest.raises(InvalidInput):
            model.evaluate(macro.p_max_watts + 1)

    def test_exactly_max_accepted(self, model, macro):
        assert model.evaluate(macro.p_max_watts).p_out_watts == macro.p_max_watts

    def test_nan(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate(math.nan)

    def test_not_a_number(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate('10')

    def test_load_out_of_range(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate_load(1.01)
        with pytest.raises(InvalidInput):
            model.evaluate_load(-0.01)

    @pytest.mark.parametrize('p_out_dbm', [1e4, 1e300, math.inf])
    def test_dbm_too_large_to_represent(self, model, p_out_dbm):
        with pytest.raises(InvalidInput):
            model.evaluate_dbm(p_out_dbm)

    def test_dbm_nan(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate_dbm(math.nan)

    def test_dbm_above_max(self, model):
        with pytest.raises(InvalidInput):
            model.evaluate_dbm(60.0)

    def test_model_needs_station_config(self):
        with pytest.raises(TypeError):
            EarthPowerModel({'n_chains': 6})


class TestConvenience:

    def test_function_form(self, macro, model):
        assert evaluate(50.0, macro) == model.evaluate(50.0)

    def test_default_params(self):
        assert EarthPowerModel().params == StationConfig()

    def test_evaluate_load(self, model, macro):
        assert model.evaluate_load(0.5) == model.evaluate(0.5 * macro.p_max_watts)
        assert model.evaluate_load(0).is_sleeping

    def test_evaluate_dbm(self, model):
        assert model.evaluate_dbm(40.0).p_out_watts == pytest.approx(10.0)
        assert model.evaluate_dbm(-math.inf).is_sleeping

    def test_numpy_scalar_accepted(self, model):
        assert model.evaluate(np.float64(10.0)) == model.evaluate(10.0)

    def test_as_dict_order(self, model):
        d = model.evaluate(10.0).as_dict()
        assert list(d) == COMPONENTS + ['power_total_watts']
        assert d['power_total_watts'] == model.evaluate(10.0).power_total_watts
