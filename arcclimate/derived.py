# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Humidity and longwave quantities derived from the interpolated series
"""

import numpy as np

from arcclimate.psychro import calc_relative_humidity, calc_dew_point_temperature

# Stefan-Boltzmann constant (W/m²/K⁴)
SIGMA = 5.67e-8


def calc_humidity(df):
    """
    Add relative humidity RH (%), vapor pressure Pw (hPa) and dew point
    DT (°C) to df.  DT is NaN where Pw is outside the range of the fits.
    """
    rh, pw = calc_relative_humidity(df["MR"].values, df["TMP"].values, df["PRES"].values)
    df["RH"] = rh
    df["Pw"] = pw
    df["DT"] = calc_dew_point_temperature(pw)
    return df


def convert_ld_unit(df):
    """
    Convert downward longwave Ld from W/m² to MJ/m² (hourly)
    """
    df["Ld"] = df["Ld"] * (3.6 / 1000)
    return df


def calc_nocturnal_radiation(tmp, ld):
    """
    Calculate nocturnal (net longwave) radiation NR (MJ/m²) given
    temperature tmp (°C) and downward longwave ld (MJ/m²)
    """
    return SIGMA * np.power(np.asarray(tmp) + 273.15, 4) * (3600 * 1e-6) - ld


def derive(df):
    """
    Add derived quantities to the target frame df in place.

    Ld is converted to MJ/m² here, once; NR uses the converted value.
    """
    calc_humidity(df)
    convert_ld_unit(df)
    df["NR"] = calc_nocturnal_radiation(df["TMP"].values, df["Ld"].values)
    return df
