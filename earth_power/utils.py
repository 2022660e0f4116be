import numpy as np
from pandas import Timestamp

FILENAME_STAMP_FORMAT = '%Y-%m-%d_%H%M%S'


def get_timestamp(for_filename: bool = False) -> str:
    """
    Current local time, to the second.

    ISO 8601 by default; with `for_filename` the form is YYYY-MM-DD_HHMMSS,
    which sorts by time and holds no ':'.
    """
    now = Timestamp.now(tz=None)
    if for_filename:
        return now.strftime(FILENAME_STAMP_FORMAT)
    return now.isoformat(timespec='seconds')


def from_dBm_to_watts(x):
    """Converts dBm to watts. Values too large to represent come back as inf."""
    with np.errstate(over='ignore'):
        return np.power(10.0, np.divide(x, 10.0)) / 1000.0


def from_watts_to_dBm(x):
    """Converts watts to dBm. Zero watts maps to -inf."""
    with np.errstate(divide='ignore'):
        return 10.0 * np.log10(np.multiply(x, 1000.0))


def stamp_figure(fig, label=''):
    """Write `label` and the time of plotting in small grey text at the bottom left of `fig`."""
    stamp = Timestamp.now(tz=None).strftime('%Y-%m-%d %H:%M')
    fig.text(0.01, 0.005, f'{label} {stamp}'.strip(),
             ha='left', va='bottom', fontsize=6, color='gray', alpha=0.7,
             transform=fig.transFigure)
