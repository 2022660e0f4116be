"""
Sweep the EARTH power model over evenly spaced load fractions.
"""

import logging

import numpy as np

from earth_power.energy_model import EarthPowerModel

logger = logging.getLogger(__name__)

DEFAULT_STEP = 0.05
STEP_TOLERANCE = 1e-9


def load_fractions(step=DEFAULT_STEP):
    """
    Returns the loads 0.0, step, 2*step, ..., 1.0.

    `step` must divide 1 evenly. The end points are exact so that the last
    load evaluates at exactly P_max.
    """
    if not 0.0 < step <= 1.0:
        raise ValueError(f'Load step must be in (0, 1], got {step!r}.')
    n_steps = int(round(1.0 / step))
    if abs(n_steps * step - 1.0) > STEP_TOLERANCE:
        raise ValueError(f'Load step must divide 1 evenly, got {step!r}.')
    return np.linspace(0.0, 1.0, n_steps + 1)


def sweep_load(model: EarthPowerModel, step=DEFAULT_STEP):
    """
    Evaluate `model` at each load fraction.

    Returns
    -------
    list of (float, PowerBreakdown)
        One (load, breakdown) pair per load fraction, in increasing load order.
    """
    loads = load_fractions(step)
    p_max = model.params.p_max_watts
    logger.info("Sweeping %s station over %d loads (step %.3g, P_max %.2f W per chain)",
                model.params.name, len(loads), step, p_max)

    results = []
    for load in loads:
        breakdown = model.evaluate(float(load) * p_max)
        logger.debug("[SUPPLY] Load: %.2f, Power cons.: %.4f W", load, breakdown.power_total_watts)
        results.append((float(load), breakdown))
    return results
