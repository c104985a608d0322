# -*- coding: utf-8 -*-
"""
Command-line interface (CLI) for the FilterPicker package.

This module provides a collection of scripts for:
    - picking phase arrivals in waveform files;
    - and listing the filter bands a configuration resolves to.

:copyright:
    2020–2024, FilterPicker developers.
:license:
    GNU General Public License, Version 3
    (https://www.gnu.org/licenses/gpl-3.0.html)

"""

import argparse
import logging
import pathlib
import sys


def _load_config(args):
    """Read the picker configuration and the log level from a .toml config file."""

    from filterpicker.io.config import config_from_parameters, read_parameters

    parameters = read_parameters(args.config)

    return config_from_parameters(parameters), parameters.get("log_level", "info")


def _run_pick(args) -> None:
    """Pick every trace in a set of waveform files."""

    from obspy import Stream, read

    import filterpicker.util as util
    from filterpicker.signal.pickers import FilterPicker

    config, loglevel = _load_config(args)

    logstem = pathlib.Path(args.output).with_suffix("") if args.output else None
    util.logger(logstem, args.log and logstem is not None, loglevel)
    logging.info(util.log_spacer)
    logging.info("\tFilterPicker - picking phase arrivals")
    logging.info(util.log_spacer)
    logging.info(str(config))

    # --- Read in the waveform data ---
    stream = Stream()
    for fname in args.waveforms:
        stream += read(fname)
    logging.info(f"\tRead {len(stream)} traces from {len(args.waveforms)} files")

    # --- Run the picker ---
    picker = FilterPicker(config)
    picks = picker.pick_phases(stream)
    logging.info(f"\tMade {len(picks)} picks")
    logging.info(util.log_spacer)

    if args.output is not None:
        picker.write(picks, args.output)
    else:
        picks.to_csv(sys.stdout, index=False)


def _run_bands(args) -> None:
    """Print the filter bands a configuration resolves to for a sample interval."""

    from filterpicker.signal import bands as fpbands
    from filterpicker.signal.filters import BandFilterBank

    config, _ = _load_config(args)

    bands = config.resolve_bands(args.delta)
    fpbands.check_nyquist(bands, args.delta)
    filter_bank = BandFilterBank(
        [band.period for band in bands],
        config.bandwidth_factor,
        args.delta,
        config.num_poles_bandpass,
    )
    f_low, f_high = filter_bank.corners()

    print(
        f"{'Band':>4}  {'Period':>10}  {'Freq':>10}  {'Scale':>6}  "
        f"{'f_low':>10}  {'f_high':>10}  {'Shift':>6}"
    )
    for n, (band, fl, fh) in enumerate(zip(bands, f_low, f_high)):
        print(
            f"{n:>4}  {band.period:>10.4f}  {band.frequency:>10.4f}  "
            f"{band.threshold_scale_factor:>6.3f}  {fl:>10.4f}  {fh:>10.4f}  "
            f"{filter_bank.phase_shift(band.period):>6d}"
        )
    print(fpbands.format_band_parameters(bands))


FN_MAP = {
    "pick": _run_pick,
    "bands": _run_bands,
}


def entry_point(args=None) -> None:
    """Entry point for the `filterpicker` command-line utility."""

    parser = argparse.ArgumentParser()

    sub_parser = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True,
        help="Select a sub-command.",
    )

    pick_parser = sub_parser.add_parser(
        "pick", help="Pick phase arrivals in waveform files."
    )
    pick_parser.add_argument(
        "-c",
        "--config",
        help="Specify the .toml configuration file.",
        required=True,
    )
    pick_parser.add_argument(
        "-o",
        "--output",
        help="Specify a .picks (CSV) file to write the picks to. Default: stdout.",
    )
    pick_parser.add_argument(
        "-l",
        "--log",
        action="store_true",
        help="Also write a log file alongside the output file.",
    )
    pick_parser.add_argument(
        "waveforms",
        nargs="+",
        help="Waveform files, in any format readable by ObsPy.",
    )

    bands_parser = sub_parser.add_parser(
        "bands", help="List the filter bands of a configuration."
    )
    bands_parser.add_argument(
        "-c",
        "--config",
        help="Specify the .toml configuration file.",
        required=True,
    )
    bands_parser.add_argument(
        "-d",
        "--delta",
        type=float,
        help="Specify the sample interval of the data, in seconds.",
        required=True,
    )

    args = parser.parse_args(args)

    # Parse arguments and execute relevant function
    FN_MAP[args.command](args)
