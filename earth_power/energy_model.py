"""
EARTH power model for a base station.
Based on the EARTH framework (10.1109/MWC.2011.6056691).

The station draws

    P_in = (P_PA + P_RF + P_BB) / ((1 - sigma_DC) * (1 - sigma_MS) * (1 - sigma_cool))

with P_PA = N_TRX * P_out / (eta_PA * (1 - sigma_feed)) while it radiates, and a
flat P_sleep when P_out is zero. The conversion losses are recovered stage by
stage from P_in (cooling, then mains, then DC-DC) so that each one can be
reported on its own.
"""

import logging
import math
import numbers
from collections import OrderedDict
from dataclasses import dataclass

from earth_power.errors import InvalidInput
from earth_power.params import StationConfig
from earth_power.utils import from_dBm_to_watts

logger = logging.getLogger(__name__)

# Relative tolerance for the stage peel-back to reproduce the active sum
RECONSTRUCTION_RTOL = 1e-9


@dataclass(frozen=True)
class PowerBreakdown:
    """
    Power drawn by each contributor of a base station at one output level (watts).

    Attributes
    ----------
    p_out_watts : float
        Requested output power per TRX chain.
    power_pa_watts, power_rf_watts, power_baseband_watts : float
        Power amplifier, RF transceiver and baseband unit draw, all chains.
    loss_dc_watts, loss_mains_watts, loss_cool_watts : float
        DC-DC, mains supply and cooling losses.
    power_sleep_watts : float
        Sleep mode draw. Non-zero only when `p_out_watts` is zero.
    """
    p_out_watts: float
    power_pa_watts: float = 0.0
    power_rf_watts: float = 0.0
    power_baseband_watts: float = 0.0
    loss_dc_watts: float = 0.0
    loss_mains_watts: float = 0.0
    loss_cool_watts: float = 0.0
    power_sleep_watts: float = 0.0

    @property
    def power_total_watts(self):
        """Sum of the seven components, always in the same order."""
        return (self.power_sleep_watts
                + self.power_pa_watts
                + self.power_rf_watts
                + self.power_baseband_watts
                + self.loss_dc_watts
                + self.loss_mains_watts
                + self.loss_cool_watts)

    @property
    def active_sum_watts(self):
        return self.power_pa_watts + self.power_rf_watts + self.power_baseband_watts

    @property
    def power_input_watts(self):
        """Draw from the grid while active: the active sum plus all conversion losses."""
        return self.active_sum_watts + self.loss_dc_watts + self.loss_mains_watts + self.loss_cool_watts

    @property
    def is_sleeping(self):
        return self.p_out_watts == 0.0

    def as_dict(self):
        """Components in report order, ending with the total."""
        return OrderedDict([
            ('power_sleep_watts', self.power_sleep_watts),
            ('power_pa_watts', self.power_pa_watts),
            ('power_rf_watts', self.power_rf_watts),
            ('power_baseband_watts', self.power_baseband_watts),
            ('loss_dc_watts', self.loss_dc_watts),
            ('loss_mains_watts', self.loss_mains_watts),
            ('loss_cool_watts', self.loss_cool_watts),
            ('power_total_watts', self.power_total_watts),
        ])


class EarthPowerModel:
    """
    Maps the output power of a base station to a `PowerBreakdown`.

    Parameters
    ----------
    params : StationConfig
        Validated station parameters. The model keeps no other state.
    """

    def __init__(self, params: StationConfig = None):
        if params is None:
            params = StationConfig()
        if not isinstance(params, StationConfig):
            raise TypeError(f'params must be a StationConfig, got {type(params).__name__}.')
        self.params = params
        logger.debug("EarthPowerModel using %s params: %s", params.name, params)

    def __repr__(self):
        return f'{self.__class__.__name__}({self.params!r})'

    def loss_ratio(self):
        """Combined efficiency of the DC-DC, mains supply and cooling stages."""
        return (1 - self.params.loss_dc) * (1 - self.params.loss_mains) * (1 - self.params.loss_cool)

    def power_pa_watts(self, p_out):
        """Power drawn by all PA chains to radiate `p_out` per chain past the feeder."""
        return self.params.n_chains * p_out / (self.params.eta_pa * (1 - self.params.loss_feed))

    @property
    def static_power_watts(self):
        """Load-independent draw while active (the limit of P_in as P_out -> 0+)."""
        p_static = self.params.n_chains * (self.params.power_rf_watts + self.params.power_baseband_watts)
        return p_static / self.loss_ratio()

    @property
    def power_gradient(self):
        """Slope of P_in against per-chain P_out while active."""
        return self.params.n_chains / (
            self.params.eta_pa * (1 - self.params.loss_feed) * self.loss_ratio())

    def _check_p_out(self, p_out):
        if isinstance(p_out, bool) or not isinstance(p_out, numbers.Real):
            raise InvalidInput(f'Output power must be a real number, got {p_out!r}.')
        if math.isnan(p_out) or p_out < 0.0:
            raise InvalidInput(f'Output power must be non-negative, got {p_out!r} W.')
        if p_out > self.params.p_max_watts:
            raise InvalidInput(
                f'Power cannot exceed the maximum cell power! '
                f'Got {p_out!r} W, maximum is {self.params.p_max_watts!r} W.')

    def evaluate(self, p_out):
        """
        Return the `PowerBreakdown` for an output power of `p_out` watts per TRX chain.

        Zero output puts the station to sleep; anything above zero is active.
        Raises `InvalidInput` if `p_out` is negative or above `p_max_watts`.
        """
        self._check_p_out(p_out)
        p_out = float(p_out)

        if p_out == 0.0:
            logger.debug("P_out is zero, %s station is in SLEEP mode.", self.params.name)
            return PowerBreakdown(p_out_watts=0.0, power_sleep_watts=float(self.params.power_sleep_watts))

        p_pa = self.power_pa_watts(p_out)
        p_rf = float(self.params.n_chains * self.params.power_rf_watts)
        p_bb = float(self.params.n_chains * self.params.power_baseband_watts)
        active_sum = p_pa + p_rf + p_bb

        p_in = active_sum / self.loss_ratio()

        # Peel the stages off from the grid side
        after_cool = p_in * (1 - self.params.loss_cool)
        after_mains = after_cool * (1 - self.params.loss_mains)
        after_dc = after_mains * (1 - self.params.loss_dc)

        residual = after_dc - active_sum
        if not math.isclose(after_dc, active_sum, rel_tol=RECONSTRUCTION_RTOL):
            logger.warning("Loss stages do not reconstruct the active power: "
                           "P_in=%s, after DC=%s, active=%s", p_in, after_dc, active_sum)
        logger.debug("P_out=%s W: P_PA=%s, P_RF=%s, P_BB=%s, P_in=%s, residual=%s",
                     p_out, p_pa, p_rf, p_bb, p_in, residual)

        return PowerBreakdown(
            p_out_watts=p_out,
            power_pa_watts=p_pa,
            power_rf_watts=p_rf,
            power_baseband_watts=p_bb,
            loss_dc_watts=after_mains - after_dc,
            loss_mains_watts=after_cool - after_mains,
            loss_cool_watts=p_in - after_cool,
        )

    def evaluate_load(self, load):
        """Evaluate at a fraction `load` in [0, 1] of the maximum output power."""
        if isinstance(load, bool) or not isinstance(load, numbers.Real) or not 0.0 <= load <= 1.0:
            raise InvalidInput(f'Load must be in [0, 1], got {load!r}.')
        return self.evaluate(float(load) * self.params.p_max_watts)

    def evaluate_dbm(self, p_out_dbm):
        """Evaluate at an output power given in dBm. -inf dBm is sleep."""
        if isinstance(p_out_dbm, bool) or not isinstance(p_out_dbm, numbers.Real) or math.isnan(p_out_dbm):
            raise InvalidInput(f'Output power must be a real number of dBm, got {p_out_dbm!r}.')
        return self.evaluate(float(from_dBm_to_watts(p_out_dbm)))


def evaluate(p_out, params: StationConfig):
    """Function form of `EarthPowerModel(params).evaluate(p_out)`."""
    return EarthPowerModel(params).evaluate(p_out)
