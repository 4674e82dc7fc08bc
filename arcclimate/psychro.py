# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Psychrometric relationships in the units of the MSM grid: temperature (°C),
pressure (hPa) and mixing ratio (g/kg of dry air).
"""

import numpy as np

# Ratio of molecular weights of water and dry air
epsilon = 0.622

# Dew point fit ranges (hPa)
PW_MIN = 0.039
PW_ICE = 6.112
PW_MAX = 123.50


def calc_saturation_vapor_pressure(t):
    """
    Calculate saturation vapor pressure eSAT (hPa) given a temperature t (°C).
    From ASHRAE HOF 2013, pg 1.2 (Wexler-Hyland).
    The two branches are identical at the triple point 0.01°C.
    """
    t = np.asarray(t, dtype=float)
    T = t + 273.15
    with np.errstate(invalid="ignore"):
        pws = np.where(
            # triple point
            t >= 0.01,
            # Over water: equation (6)
            np.exp(
                -5.8002206e3 / T
                + 1.3914993
                - 4.8640239e-2 * T
                + 4.1764768e-5 * T ** 2
                - 1.4452093e-8 * T ** 3
                + 6.5459673 * np.log(T)
            ),
            # Over ice:  equation (5)
            np.exp(
                -5.6745359e3 / T
                + 6.3925247
                - 9.6778430e-3 * T
                + 6.2215701e-7 * T ** 2
                + 2.0747825e-9 * T ** 3
                - 9.4840240e-13 * T ** 4
                + 4.1635019 * np.log(T)
            ),
        )

    # Pa to hPa
    return pws / 100.0


def calc_vapor_pressure(mr, p):
    """
    Calculate vapor pressure Pw (hPa) from mixing ratio mr (g/kg) and
    pressure p (hPa).
    """
    W = np.asarray(mr, dtype=float) / 1000.0
    return W * p / (epsilon + W)


def calc_mixing_ratio(pw, p):
    """
    Calculate mixing ratio (g/kg) from vapor pressure pw (hPa) and
    pressure p (hPa).
    """
    return 1000.0 * epsilon * pw / (p - pw)


def calc_saturation_mixing_ratio(t, p):
    """
    Calculate saturation mixing ratio (g/kg) at temperature t (°C) and
    pressure p (hPa).
    """
    return calc_mixing_ratio(calc_saturation_vapor_pressure(t), p)


def calc_relative_humidity(mr, t, p):
    """
    Calculate relative humidity RH (%) and vapor pressure Pw (hPa) given
    mixing ratio mr (g/kg), temperature t (°C) and pressure p (hPa).
    """
    pw = calc_vapor_pressure(mr, p)
    rh = pw / calc_saturation_vapor_pressure(t) * 100.0
    return rh, pw


def calc_mixing_ratio_from_rh(rh, t, p):
    """
    Calculate mixing ratio (g/kg) from relative humidity rh (%),
    temperature t (°C) and pressure p (hPa).
    """
    return calc_mixing_ratio(rh / 100.0 * calc_saturation_vapor_pressure(t), p)


def calc_dew_point_water(pw):
    """
    Dew point (°C) over 0-50°C, valid for 6.112 <= pw <= 123.50 hPa
    """
    Y = np.log(pw * 100.0)
    return -77.199 + 13.198 * Y - 0.63772 * Y ** 2 + 0.071098 * Y ** 3


def calc_dew_point_ice(pw):
    """
    Dew point (°C) over -50-0°C, valid for 0.039 <= pw < 6.112 hPa
    """
    Y = np.log(pw * 100.0)
    return -60.662 + 7.4624 * Y + 0.20594 * Y ** 2 + 0.016321 * Y ** 3


def calc_dew_point_temperature(pw):
    """
    Calculate dew point temperature (°C) from vapor pressure pw (hPa).

    Undefined (NaN) outside 0.039 <= pw <= 123.50 hPa.
    """
    pw = np.asarray(pw, dtype=float)

    td = np.full(pw.shape, np.nan)

    with np.errstate(invalid="ignore", divide="ignore"):
        water = (pw >= PW_ICE) & (pw <= PW_MAX)
        ice = (pw >= PW_MIN) & (pw < PW_ICE)
        np.copyto(td, calc_dew_point_water(pw), where=water)
        np.copyto(td, calc_dew_point_ice(pw), where=ice)

    return td
