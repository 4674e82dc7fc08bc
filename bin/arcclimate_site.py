#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import sys
import time
import logging
import argparse

import arcclimate.dataset
from arcclimate.elevation import MODES
from arcclimate.separate import SeparationModel
from arcclimate.util import format_elapsed


def main():
    """
    Create hourly site weather at a latitude and longitude in Japan from
    the four surrounding MSM grid points
    """

    parser = argparse.ArgumentParser(
        description=main.__doc__, formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument("lat", type=float, help="Latitude (deg)")

    parser.add_argument("lon", type=float, help="Longitude (deg)")

    parser.add_argument(
        "-o",
        "--output",
        metavar="file",
        help="Write CSV to file; default is standard output",
    )

    parser.add_argument(
        "--start_year", type=int, metavar="year", help="First year to output"
    )

    parser.add_argument(
        "--end_year", type=int, metavar="year", help="Last year to output"
    )

    parser.add_argument(
        "--mode_elevation",
        choices=MODES,
        default="api",
        help="Target elevation from 3rd-order mesh files or GSI web service",
    )

    parser.add_argument(
        "--mode_separate",
        choices=[_.value for _ in SeparationModel],
        default=SeparationModel.PEREZ.value,
        help="Model splitting global into direct and diffuse irradiance",
    )

    parser.add_argument(
        "-d",
        "--data_dir",
        metavar="dir",
        help="MSM data directory; default from $ARCCLIMATE or arcclimate.conf",
    )

    parser.add_argument(
        "--plot",
        metavar="file",
        help="Save Kt-Kd scatter of the separated irradiance to file",
    )

    parser.add_argument(
        "--log",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    tstart = time.time()

    try:
        msm = arcclimate.dataset.MSM(
            data_dir=args.data_dir, mode_elevation=args.mode_elevation
        )
        df = msm(
            args.lat,
            args.lon,
            model=args.mode_separate,
            start_year=args.start_year,
            end_year=args.end_year,
        )
    except ValueError as e:
        sys.exit("arcclimate: %s" % e)

    if args.output is None:
        df.to_csv(sys.stdout)
    else:
        df.to_csv(args.output)

    if args.plot:
        try:
            arcclimate.dataset.plot_separation(df, args.plot)
        except ValueError as e:
            sys.exit("arcclimate: %s" % e)

    logging.getLogger("arcclimate").info(
        "Done in %s", format_elapsed(time.time() - tstart)
    )


if __name__ == "__main__":
    main()
