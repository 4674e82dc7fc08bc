# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Separation of total horizontal irradiance TH into direct normal DN and
diffuse (sky) horizontal SH irradiance.

All irradiances are hourly totals in MJ/m²h.  Every model estimates one of
SH or DN; the other follows from TH = DN·sinh + SH.
"""

import enum
import logging
import numpy as np
import pandas as pd

from arcclimate import perez

logger = logging.getLogger(__name__)

# Convergence of TH (MJ/m²h) in the transmissivity search
LIMIT1 = 1e-5

# Collapse of the transmissivity interval
LIMIT2 = 1e-10

# Bounds on the solved atmospheric transmissivity
P_MIN = 0.0
P_MAX = 0.85

# Initial search interval; transmissivity may exceed 1 at low sun
P_LOWER = 0.0
P_UPPER = 1.2


class SeparationModel(enum.Enum):
    NAGATA = "Nagata"
    WATANABE = "Watanabe"
    ERBS = "Erbs"
    UDAGAWA = "Udagawa"
    PEREZ = "Perez"

    @classmethod
    def parse(cls, name):
        """
        Return model given its name (case insensitive) or the model itself
        """
        if isinstance(name, cls):
            return name
        for model in cls:
            if str(name).lower() == model.value.lower():
                return model
        raise ValueError(
            "Separation model must be one of %r, not %r"
            % ([m.value for m in cls], name)
        )

    @property
    def estimates_sky(self):
        """
        True if the model estimates SH (DN derived), False if DN (SH derived)
        """
        return self in (
            SeparationModel.NAGATA,
            SeparationModel.WATANABE,
            SeparationModel.ERBS,
        )


def W_to_MJ(W):
    """
    Convert W/m² to MJ/m²h
    """
    return W * 3600 / 1000000


def MJ_to_W(MJ):
    """
    Convert MJ/m²h to W/m²
    """
    return MJ / 3600 * 1000000


def calc_th(P, IN0, Sinh, SH):
    """
    Total horizontal irradiance given transmissivity P
    """
    return IN0 * np.power(P, 1 / Sinh) * Sinh + SH


def calc_kt(TH, IN0, Sinh):
    """
    Clearness index
    """
    return TH / (IN0 * Sinh)


def sky_nagata(P, IN0, Sinh):
    """
    Sky irradiance given transmissivity P via Nagata
    """
    return (
        IN0
        * Sinh
        * (1.0 - np.power(P, 1 / Sinh))
        * (0.66 - 0.32 * Sinh)
        * (0.5 + (0.4 - 0.3 * P) * Sinh)
    )


def sky_watanabe(P, IN0, Sinh):
    """
    Sky irradiance given transmissivity P via Watanabe; undefined above P=1
    """
    P = min(P, 1.0)
    Q = (
        (0.8672 + 0.7505 * Sinh)
        * np.power(P, 0.421 / Sinh)
        * np.power(1 - np.power(P, 1 / Sinh), 2.277)
    )
    return IN0 * Sinh * (Q / (1 + Q))


def solve_sky(TH, Sinh, IN0, sky):
    """
    Bisect for the transmissivity P reproducing TH and return the sky
    irradiance sky(P, IN0, Sinh), never more than TH.

    The TH(P) relation is not guaranteed to bracket a root; the branches
    below are applied in order.  Returns NaN if the interval collapses
    without convergence.
    """

    a, b = P_LOWER, P_UPPER

    with np.errstate(over="ignore", invalid="ignore"):

        while True:

            P = (a + b) / 2
            SH = sky(P, IN0, Sinh)
            TH0 = calc_th(P, IN0, Sinh, SH)

            if abs(TH0 - TH) <= LIMIT1:
                # Converged; transmissivity capped at P_MAX
                if P >= P_MAX:
                    SH = sky(P_MAX, IN0, Sinh)
                return np.minimum(SH, TH)

            elif a >= P_MAX:
                return np.minimum(sky(P_MAX, IN0, Sinh), TH)

            elif b <= P_MIN:
                return np.minimum(sky(P_MIN, IN0, Sinh), TH)

            elif P <= LIMIT2 * 10:
                return np.minimum(sky(0.0, IN0, Sinh), TH)

            elif abs(a - b) <= LIMIT2:
                return np.nan

            elif TH0 < TH:
                a = P

            else:
                b = P


def sky_bisection(TH, Sinh, IN0, sky):
    """
    Sky irradiance SH for each hour via the transmissivity search.
    Zero if the sun is down.
    """
    SH = np.zeros(len(TH))

    for k, (th, sinh, in0) in enumerate(zip(TH, Sinh, IN0)):
        if np.isnan(th):
            SH[k] = np.nan
        elif sinh > 0.0:
            SH[k] = np.maximum(0.0, solve_sky(th, sinh, in0, sky))

    n = np.count_nonzero(np.isnan(SH) & ~np.isnan(TH))
    if n:
        logger.warning("Transmissivity search did not converge for %d hours", n)

    return SH


def sky_erbs(TH, IN0, Sinh):
    """
    Sky irradiance SH via the Erbs diffuse fraction of clearness index.
    Zero if TH is zero; all of TH if the sun is down.
    """
    TH = np.asarray(TH, dtype=float)

    up = (TH > 0) & (Sinh > 0)

    with np.errstate(invalid="ignore", divide="ignore"):
        Kt = np.minimum(1.0, calc_kt(TH, IN0, Sinh))

    Kd = 0.9511 - 0.1604 * Kt + 4.388 * Kt ** 2 - 16.638 * Kt ** 3 + 12.336 * Kt ** 4
    np.copyto(Kd, 1.0 - 0.09 * Kt, where=Kt <= 0.22)
    np.copyto(Kd, 0.165, where=Kt > 0.80)

    SH = np.where(up, Kd * TH, np.where(TH > 0, TH, 0.0))
    np.copyto(SH, np.nan, where=np.isnan(TH))

    return SH


def direct_udagawa(TH, IN0, Sinh):
    """
    Direct normal DN via Udagawa; cubic in clearness index below the
    crossover KC, linear above.  Zero if TH is zero or the sun is down.
    """
    TH = np.asarray(TH, dtype=float)

    up = (TH > 0) & (Sinh > 0)

    # Crossover of the cubic and linear branches
    KC = (0.5163 + 0.333 * Sinh + 0.00803 * Sinh ** 2) * IN0 * Sinh

    with np.errstate(invalid="ignore", divide="ignore"):
        Kt = np.minimum(1.0, calc_kt(TH, IN0, Sinh))

    DN = np.where(
        Kt < KC,
        IN0 * (2.277 - 1.258 * Sinh + 0.2396 * Sinh ** 2) * Kt ** 3,
        IN0 * (-0.43 + 1.43 * Kt),
    )

    DN = np.where(up, np.maximum(0.0, DN), 0.0)
    np.copyto(DN, np.nan, where=np.isnan(TH))

    return DN


def index_of(x, bins):
    """
    Bin index of x: the first bin whose threshold exceeds x, so a value
    equal to a threshold falls above it.  NaN falls in the last bin.
    """
    for i, b in enumerate(bins):
        if x < b:
            return i
    return len(bins)


def direct_perez_hour(G_mj, h_deg, TD, ALT, IN0):
    """
    Direct normal DN (MJ/m²h) for a single hour via Perez.

    G_mj and h_deg hold TH (MJ/m²h) and altitude (deg) of the previous,
    current and next hour; NaN where not available.  TD is the dew point
    (°C, may be NaN), ALT the site elevation (m) and IN0 the
    extraterrestrial normal irradiance (MJ/m²h).
    """

    # Model is in W/m²
    G = MJ_to_W(np.asarray(G_mj, dtype=float))

    # Nothing to split
    if G[1] < 1.0 or np.isnan(G[1]):
        return 0.0

    if h_deg[1] <= 0.0:
        return 0.0

    IO = MJ_to_W(IN0)

    with np.errstate(invalid="ignore"):

        # Neighbours below the horizon are not used
        h_deg = np.array(h_deg, dtype=float)
        h_deg[h_deg < 0.0] = np.nan

        zenith = 90.0 - h_deg
        cz = np.cos(np.radians(zenith))
        CZ = np.maximum(cz, 0.065)

        # Clearness index
        KT = G / (IO * CZ)

        # Air mass (Kasten 1966)
        AM = np.minimum(15.25, 1.0 / (CZ + 0.15 * np.power(93.9 - zenith, -1.253)))

        # Pressure corrected air mass
        KTPAM = AM * np.exp(-0.0001184 * ALT)

        # Zenith independent clearness index
        KT1 = KT / (1.031 * np.exp(-1.4 / (0.9 + 9.4 / KTPAM)) + 0.1)
        KT1[cz < 0.0] = np.nan

    # Missing neighbours
    if np.isnan(G[0]) or np.isnan(zenith[0]):
        KT1[0] = np.nan
    if np.isnan(G[2]) or np.isnan(zenith[2]):
        KT1[2] = np.nan

    kt = KT[1]
    if kt <= 0.6:
        A = 0.512 - 1.56 * kt + 2.286 * kt ** 2 - 2.22 * kt ** 3
        B = 0.37 + 0.962 * kt
        C = -0.28 + 0.932 * kt - 2.048 * kt ** 2
    else:
        A = -5.743 + 21.77 * kt - 27.49 * kt ** 2 + 11.56 * kt ** 3
        B = 41.40 - 118.5 * kt + 66.05 * kt ** 2 + 31.9 * kt ** 3
        C = -47.01 + 184.2 * kt - 222.0 * kt ** 2 + 73.81 * kt ** 3

    am = AM[1]
    KNC = 0.866 - 0.122 * am + 0.0121 * am ** 2 - 0.000653 * am ** 3 + 0.000014 * am ** 4

    BMAX = IO * (KNC - (A + B * np.exp(C * am)))

    # Clearness variability bin
    if np.isnan(KT1[0]) and np.isnan(KT1[2]):
        K = perez.DKT_MISSING
    else:
        if np.isnan(KT1[0]) or zenith[0] >= 85.0:
            DKT1 = abs(KT1[2] - KT1[1])
        elif np.isnan(KT1[2]) or zenith[2] >= 85.0:
            DKT1 = abs(KT1[1] - KT1[0])
        else:
            DKT1 = 0.5 * (abs(KT1[1] - KT1[0]) + abs(KT1[2] - KT1[1]))
        K = index_of(DKT1, perez.DKT_BINS)

    I = index_of(KT1[1], perez.KT_BINS)
    J = index_of(zenith[1], perez.ZENITH_BINS)

    # Precipitable water bin
    if np.isnan(TD):
        L = perez.W_MISSING
    else:
        W = np.exp(-0.075 + 0.07 * TD)
        L = index_of(W, perez.W_BINS)

    DIRMAX = max(BMAX * perez.CM[I, J, K, L], 0.0)

    return W_to_MJ(DIRMAX)


def direct_perez(TH, h, TD, ALT, IN0):
    """
    Direct normal DN via Perez for each hour, using the neighbouring hours
    where available.  NaN where TH is NaN.
    """
    TH = np.asarray(TH, dtype=float)
    h = np.asarray(h, dtype=float)

    # Pad with NaN so the first and last hours lack a neighbour
    THp = np.concatenate(([np.nan], TH, [np.nan]))
    hp = np.concatenate(([np.nan], h, [np.nan]))

    DN = np.zeros(len(TH))

    for k in range(len(TH)):
        if np.isnan(TH[k]):
            DN[k] = np.nan
        else:
            DN[k] = direct_perez_hour(THp[k:k + 3], hp[k:k + 3], TD[k], ALT, IN0[k])

    return DN


def separate(TH, solpos, model, DT=None, elevation=None):
    """
    Separate total horizontal irradiance TH (MJ/m²h) into a DataFrame of
    direct normal DN and sky horizontal SH given solar position solpos
    (IN0, h, Sinh) and model.

    The Perez model requires dew point DT (°C) and site elevation (m).
    """

    model = SeparationModel.parse(model)

    TH = np.asarray(TH, dtype=float)
    IN0 = solpos["IN0"].values
    Sinh = solpos["Sinh"].values

    if len(TH) != len(solpos):
        raise ValueError("Irradiance and solar position lengths differ")

    if model is SeparationModel.NAGATA:
        SH = sky_bisection(TH, Sinh, IN0, sky_nagata)

    elif model is SeparationModel.WATANABE:
        SH = sky_bisection(TH, Sinh, IN0, sky_watanabe)

    elif model is SeparationModel.ERBS:
        SH = sky_erbs(TH, IN0, Sinh)

    elif model is SeparationModel.UDAGAWA:
        DN = direct_udagawa(TH, IN0, Sinh)

    elif model is SeparationModel.PEREZ:
        if DT is None or elevation is None:
            raise ValueError("Perez requires dew point and elevation")
        DN = direct_perez(TH, solpos["h"].values, np.asarray(DT, dtype=float),
                          elevation, IN0)

    with np.errstate(invalid="ignore", divide="ignore"):
        if model.estimates_sky:
            # DN from the balance; zero if the sun is down
            DN = np.where(Sinh > 0, (TH - SH) / Sinh, 0.0)
            DN = np.where(DN <= 0.0, 0.0, DN)
        else:
            SH = TH - DN * Sinh
            SH = np.where(SH <= 0.0, 0.0, SH)

    # Undefined input stays undefined
    DN = np.where(np.isnan(TH), np.nan, DN)
    SH = np.where(np.isnan(TH), np.nan, SH)

    return pd.DataFrame({"DN": DN, "SH": SH}, index=solpos.index)


def separate_all(df, solpos, model, elevation):
    """
    Separate each irradiance variant DSWRF_<x> present in df and add the
    DN_<x> & SH_<x> columns.  Returns dict of results keyed by variant.
    """

    model = SeparationModel.parse(model)

    results = {}

    for col in ["DSWRF_est", "DSWRF_msm"]:

        if col not in df:
            continue

        variant = col.split("_")[1]
        logger.info("Separating %s via %s", col, model.value)

        res = separate(df[col].values, solpos, model, DT=df["DT"].values,
                       elevation=elevation)

        df["DN_" + variant] = res["DN"].values
        df["SH_" + variant] = res["SH"].values

        results[variant] = res

    return results
