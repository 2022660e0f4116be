"""
Sweep a base station config over load and write the power breakdown.

    python -m earth_power -p macro --plot
    python -m earth_power -c data/input/configs/macro_5g_sleep_100w.json --format tsv
"""

import argparse
import logging
import re
from pathlib import Path

from earth_power.energy_model import EarthPowerModel
from earth_power.logging_earth import get_logger
from earth_power.params import DEFAULT_PRESET, PRESETS, get_preset, load_config
from earth_power.report import plot_stacked_power, sweep_to_dataframe, write_dat, write_table
from earth_power.sweep import DEFAULT_STEP, sweep_load
from earth_power.utils import get_timestamp

EXIT_INVALID = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog='earth-power',
        description='Sweep the EARTH base station power model over load.')
    parser.add_argument('-c', '--config-file', type=str, default=None,
                        help='JSON station config (overrides --preset)')
    parser.add_argument('-p', '--preset', type=str, default=DEFAULT_PRESET, choices=sorted(PRESETS),
                        help='named station parameters')
    parser.add_argument('-s', '--step', type=float, default=DEFAULT_STEP,
                        help='load fraction step')
    parser.add_argument('-o', '--output-dir', type=str, default='data/output',
                        help='directory for the table and plot')
    parser.add_argument('--format', dest='fmt', choices=['dat', 'tsv', 'csv'], default='dat',
                        help='table format')
    parser.add_argument('--plot', action='store_true', help='save a stacked area plot')
    parser.add_argument('--show', action='store_true', help='show the plot window')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-dir', type=str, default=None, help='also log to a file here')
    return parser


def output_stem(station_name):
    """File name stem for a run: the station name reduced to [A-Za-z0-9_-], then a timestamp."""
    safe_name = re.sub(r'[^\w-]+', '_', station_name, flags=re.ASCII).strip('_') or 'station'
    return f'{safe_name}_{get_timestamp(for_filename=True)}'


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger = get_logger('earth_power', log_dir=args.log_dir, log_level=getattr(logging, args.log_level))

    try:
        if args.config_file is not None:
            params = load_config(args.config_file)
        else:
            params = get_preset(args.preset)
        model = EarthPowerModel(params)
        df = sweep_to_dataframe(sweep_load(model, step=args.step))
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_INVALID

    logger.info("Static power %.2f W, gradient %.3f W/W, P_total at max load %.2f W",
                model.static_power_watts, model.power_gradient, df['P_total(W)'].iloc[-1])

    output_dir = Path(args.output_dir)
    stem = output_stem(params.name)
    if args.fmt == 'dat':
        write_dat(df, output_dir / f'{stem}.dat')
    else:
        write_table(df, output_dir / f'{stem}.{args.fmt}')

    if args.plot or args.show:
        if args.show:
            import matplotlib.pyplot as plt
            fig, ax = plt.subplots(figsize=(10, 6))
            plot_stacked_power(df, title=params.name.upper(), ax=ax)
        else:
            fig = plot_stacked_power(df, title=params.name.upper())
        if args.plot:
            figure_path = output_dir / f'{stem}.png'
            fig.savefig(figure_path, dpi=300)
            logger.info("Saved plot to %s", figure_path)
        if args.show:
            plt.show()

    return 0


if __name__ == '__main__':
    raise SystemExit(main())
