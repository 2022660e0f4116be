"""
Tabulate, write and plot the results of a load sweep.
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from earth_power.utils import stamp_figure

logger = logging.getLogger(__name__)

LOAD_COLUMN = 'load(%)'
TOTAL_COLUMN = 'P_total(W)'

# Bottom to top of the stacked plot
COMPONENT_COLUMNS = [
    'P_sleep(W)',
    'P_PA(W)',
    'P_RF(W)',
    'P_BB(W)',
    'loss_DC(W)',
    'loss_MS(W)',
    'loss_cool(W)',
]

REPORT_COLUMNS = [LOAD_COLUMN] + COMPONENT_COLUMNS + [TOTAL_COLUMN]

COMPONENT_LABELS = {
    'P_sleep(W)': 'Sleep',
    'P_PA(W)': 'Power amplifier',
    'P_RF(W)': 'RF transceiver',
    'P_BB(W)': 'Baseband',
    'loss_DC(W)': 'DC-DC loss',
    'loss_MS(W)': 'Mains supply loss',
    'loss_cool(W)': 'Cooling loss',
}


def sweep_to_dataframe(sweep):
    """
    Turn a list of (load, PowerBreakdown) pairs into a dataframe with `REPORT_COLUMNS`.
    """
    rows = []
    for load, b in sweep:
        rows.append((
            load * 100.0,
            b.power_sleep_watts,
            b.power_pa_watts,
            b.power_rf_watts,
            b.power_baseband_watts,
            b.loss_dc_watts,
            b.loss_mains_watts,
            b.loss_cool_watts,
            b.power_total_watts,
        ))
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def stack_boundaries(df: pd.DataFrame):
    """
    Cumulative sums of the component columns, i.e. the upper edge of each band
    in the stacked plot. The last column matches `P_total(W)`.
    """
    return df[COMPONENT_COLUMNS].cumsum(axis=1)


def write_dat(df: pd.DataFrame, path):
    """
    Write `df` as whitespace separated '%f' columns with a '#' header line.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    header = ' '.join(df.columns)
    np.savetxt(path, df.to_numpy(dtype=float), fmt='%f', delimiter=' ', header=header, comments='# ')
    logger.info("Wrote %d rows to %s", len(df), path)
    return path


def read_dat(path):
    """Read a file written by `write_dat` back into a dataframe."""
    path = Path(path)
    with open(path) as f:
        columns = f.readline().lstrip('#').split()
    return pd.read_csv(path, sep=r'\s+', comment='#', header=None, names=columns)


def write_table(df: pd.DataFrame, path):
    """Write `df` as TSV, or as CSV when `path` ends in '.csv'."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    sep = ',' if path.suffix == '.csv' else '\t'
    df.to_csv(path, sep=sep, index=False, encoding='ascii')
    logger.info("Wrote %d rows to %s", len(df), path)
    return path


def plot_stacked_power(df: pd.DataFrame, title='Base station power consumption', ax=None):
    """
    Stacked area plot of each power component against load, with the total on top.

    Parameters
    ----------
    df : pandas.DataFrame
        Dataframe from `sweep_to_dataframe`.
    title : str, optional
        Axes title.
    ax : matplotlib Axes, optional
        Axes to draw on. A new figure is created if not given.

    Returns
    -------
    matplotlib Figure
    """
    if ax is None:
        fig = Figure(figsize=(10, 6))
        ax = fig.add_subplot()
    else:
        fig = ax.get_figure()

    x = df[LOAD_COLUMN]
    ax.stackplot(x, *[df[c] for c in COMPONENT_COLUMNS],
                 labels=[COMPONENT_LABELS[c] for c in COMPONENT_COLUMNS], alpha=0.8)
    ax.plot(x, df[TOTAL_COLUMN], color='black', marker='.', label='Total')
    ax.set_xlabel('RF output power (% of max)')
    ax.set_ylabel('BS power consumption (W)')
    ax.set_title(title)
    ax.set_xlim(left=0, right=max(x.max(), 1.0))
    ax.set_ylim(bottom=0)
    ax.grid()
    ax.legend(loc='upper left')
    stamp_figure(fig, label=title)
    return fig
