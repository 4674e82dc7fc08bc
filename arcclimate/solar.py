# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import numpy as np
import pandas as pd

# Solar constant (MJ/m²h)
J0 = 4.921

# Declination at winter solstice (deg)
_DEC0 = -23.4393

# Meridian of Japan Standard Time (deg)
LON_JST = 135.0

# Offsets (hours) before the timestamp used to average the previous hour
OFFSETS = np.array([1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1])


def split_date(dates):
    """
    Split dates into year, day of year (Jan 1st = 1) and hour of day.
    """
    dates = pd.DatetimeIndex(dates)
    return (
        dates.year.values.astype(int),
        dates.dayofyear.values.astype(float),
        dates.hour.values.astype(float),
    )


def orbit(dates):
    """
    Calculate solar parameters following Akasaka's approximation of the
    Earth's orbit.

    Returns sine and cosine of declination, equation of time (deg) and
    extraterrestrial normal irradiance IN0 (MJ/m²h).
    """

    y, nday, _ = split_date(dates)

    # Years since 1968
    n = y - 1968.0

    # Perihelion passage (day)
    d0 = 3.71 + 0.2596 * n - np.floor((n + 3) / 4)

    # Mean anomaly (deg)
    m = 360 * (nday - d0) / 365.2596

    # Angle between perihelion and winter solstice (deg)
    eps = 12.3901 + 0.0172 * (n + m / 360)

    # True anomaly (deg)
    v = m + 1.914 * np.sin(np.radians(m)) + 0.02 * np.sin(np.radians(2 * m))
    veps = np.radians(v + eps)

    # Equation of time (deg)
    eqnOfTime = (m - v) - np.degrees(
        np.arctan(0.043 * np.sin(2 * veps) / (1.0 - 0.043 * np.cos(2 * veps)))
    )

    # Declination
    sinDec = np.cos(veps) * np.sin(np.radians(_DEC0))
    cosDec = np.sqrt(np.abs(1.0 - sinDec ** 2))

    # Extraterrestrial normal irradiance
    IN0 = J0 * (1 + 0.033 * np.cos(np.radians(v)))

    return sinDec, cosDec, eqnOfTime, IN0


def hour_angle(lon, hour, eot):
    """
    Calculate hour angle (deg) given longitude (deg), local standard hour
    and equation of time (deg).
    """
    return 15 * (hour - 12) + (lon - LON_JST) + eot


def altitude_azimuth(lat, sinDec, cosDec, h):
    """
    Calculate solar altitude and azimuth (deg) given latitude (deg),
    sine & cosine of declination and hour angle h (deg).

    Azimuth is measured clockwise from north.
    """
    sinLat = np.sin(np.radians(lat))
    cosLat = np.cos(np.radians(lat))
    h = np.radians(h)

    sinAlt = sinLat * sinDec + cosLat * cosDec * np.cos(h)
    cosAlt = np.sqrt(1 - sinAlt ** 2)

    with np.errstate(invalid="ignore", divide="ignore"):
        sinA = cosDec * np.sin(h) / cosAlt
        cosA = (sinAlt * sinLat - sinDec) / (cosAlt * cosLat)

    return np.degrees(np.arcsin(sinAlt)), np.degrees(np.arctan2(sinA, cosA) + np.pi)


def position(lat, lon, dates):
    """
    Calculate extraterrestrial normal irradiance IN0 (MJ/m²h), solar
    altitude h (deg), its sine Sinh, and azimuth A (deg) at (lat, lon) for
    each timestamp of dates (local standard time).

    Altitude and azimuth are averages over the hour preceding each timestamp
    (ten samples, 6 minutes apart); Sinh is taken from the average altitude.
    """

    dates = pd.DatetimeIndex(dates)

    sinDec, cosDec, eqnOfTime, IN0 = orbit(dates)
    _, _, hour = split_date(dates)

    # Sample (n, 10) hour angles over the previous hour
    h = hour_angle(lon, hour[:, None] - OFFSETS[None, :], eqnOfTime[:, None])

    alt, azi = altitude_azimuth(lat, sinDec[:, None], cosDec[:, None], h)

    alt = alt.mean(axis=1)
    azi = azi.mean(axis=1)

    return pd.DataFrame(
        {"IN0": IN0, "h": alt, "Sinh": np.sin(np.radians(alt)), "A": azi},
        index=dates,
    )
