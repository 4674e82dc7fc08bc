# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Elevation correction of MSM grid-point series and distance-weighted
interpolation to the target point.
"""

import logging
import numpy as np
import pandas as pd

from arcclimate.psychro import calc_saturation_mixing_ratio

logger = logging.getLogger(__name__)

# Standard atmosphere lapse rate (°C/m)
LAPSE_RATE = 0.0065

# g/(R·L) for the standard atmosphere
_EXPONENT = 5.257

# Columns blended by weight; the irradiance variants are optional
COLUMNS = ["TMP", "MR", "DSWRF_est", "DSWRF_msm", "Ld", "VGRD", "UGRD", "PRES", "APCP01"]
OPTIONAL = ["DSWRF_est", "DSWRF_msm"]


def correct_tmp(tmp, ele_gap):
    """
    Correct temperature (°C) for an elevation gap (m, target - source)
    """
    return tmp - LAPSE_RATE * ele_gap


def correct_pres(pres, ele_gap, tmp_corr):
    """
    Correct pressure (hPa) for an elevation gap (m, target - source) given
    the corrected temperature (°C) at the target.
    """
    return pres * np.power(
        1 - (LAPSE_RATE * ele_gap) / (tmp_corr + LAPSE_RATE * ele_gap + 273.15),
        _EXPONENT,
    )


def correct_mr(mr, tmp_corr, pres_corr):
    """
    Correct mixing ratio (g/kg) at the corrected temperature (°C) and
    pressure (hPa).

    Mixing ratio is conserved but may not exceed saturation.
    """
    mr = np.asarray(mr, dtype=float)
    mr_sat = calc_saturation_mixing_ratio(tmp_corr, pres_corr)
    with np.errstate(invalid="ignore"):
        capped = mr > mr_sat
    if np.any(capped):
        logger.warning(
            "Mixing ratio capped at saturation for %d of %d values",
            np.count_nonzero(capped),
            capped.size,
        )
    return np.where(capped, mr_sat, mr)


def correct_elevation(msm, elevation, ele_target):
    """
    Correct TMP, PRES & MR of grid-point frame msm in place from its
    elevation (m) to ele_target (m).
    """
    ele_gap = ele_target - elevation

    tmp = correct_tmp(msm["TMP"].values, ele_gap)
    pres = correct_pres(msm["PRES"].values, ele_gap, tmp)
    mr = correct_mr(msm["MR"].values, tmp, pres)

    msm["TMP"] = tmp
    msm["PRES"] = pres
    msm["MR"] = mr

    return msm


def interpolate(msms, weights, elevations, ele_target):
    """
    Create the target frame from the four grid-point frames msms, ordered
    south-west, south-east, north-west, north-east.

    Each frame is elevation corrected *in place* to ele_target (m) before
    blending by weights; the frames are not reusable afterwards.
    """

    if not (len(msms) == len(weights) == len(elevations) == 4):
        raise ValueError("Need four series, weights and elevations (SW, SE, NW, NE)")

    index = msms[0].index
    for msm in msms[1:]:
        if len(msm) != len(index):
            raise ValueError(
                "Series lengths differ: %d vs %d" % (len(msm), len(index))
            )
        if not msm.index.equals(index):
            raise ValueError("Series timestamps are not aligned")

    # Elevation correction
    for msm, elevation in zip(msms, elevations):
        correct_elevation(msm, elevation, ele_target)

    target = pd.DataFrame(index=index.copy())

    for col in COLUMNS:

        if not all(col in msm for msm in msms):
            if col in OPTIONAL:
                logger.info("%s missing from grid points... skipping", col)
                continue
            raise ValueError("%s missing from grid points" % col)

        val = None
        for msm, w in zip(msms, weights):
            if val is None:
                val = w * msm[col].values
            else:
                val = val + w * msm[col].values

        target[col] = val

    return target
