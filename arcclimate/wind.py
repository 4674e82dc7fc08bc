# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Wind speed and direction on a 16-point compass from vector components
"""

import numpy as np


def calc_wind16(u, v):
    """
    Calculate 16-point wind speed (m/s) and direction (deg) from the
    east-west u and north-south v components (m/s).

    Direction is where the wind blows from, snapped to 22.5° bins.  Speed
    is projected onto the snapped direction.
    """

    u = np.asarray(u, dtype=float)
    v = np.asarray(v, dtype=float)

    # Speed
    ws = np.hypot(u, v)

    # Direction the wind blows from (0-360)
    wd = np.degrees(np.arctan2(u, v) + np.pi)

    # Round half away from zero; wd is never negative
    wd16 = np.floor(wd / 22.5 + 0.5) * 22.5

    # Component along the snapped direction
    ws16 = np.cos(np.radians(np.abs(wd16 - wd))) * ws

    return ws16, wd16


def resolve(df):
    """
    Add 16-point wind speed w_spd and direction w_dir to df from UGRD & VGRD
    """
    ws, wd = calc_wind16(df["UGRD"].values, df["VGRD"].values)
    df["w_spd"] = ws
    df["w_dir"] = wd
    return df
