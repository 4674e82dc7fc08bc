# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import logging

from arcclimate.interpolate import interpolate
from arcclimate.derived import derive
from arcclimate.solar import position
from arcclimate.separate import SeparationModel, separate_all
from arcclimate.wind import resolve
from arcclimate.util import Timer

logger = logging.getLogger(__name__)


def run(lat, lon, msms, weights, elevations, ele_target, model="Perez"):
    """
    Create the site series at (lat, lon, ele_target) from the four MSM
    grid-point frames msms (SW, SE, NW, NE) with their weights and
    elevations, splitting irradiance with model.

    The grid-point frames are corrected in place.

    Returns the target frame and a dict of the DN/SH frames per irradiance
    variant ("est", "msm").
    """

    # Fail before any work
    model = SeparationModel.parse(model)

    logger.info("Interpolating (%.4f, %.4f) at %.1f m", lat, lon, ele_target)

    with Timer("interpolate"):
        target = interpolate(msms, weights, elevations, ele_target)

    with Timer("derive"):
        derive(target)

    with Timer("solar position"):
        solpos = position(lat, lon, target.index)
        target["h"] = solpos["h"].values
        target["A"] = solpos["A"].values

    with Timer("separate"):
        results = separate_all(target, solpos, model, ele_target)

    resolve(target)

    return target, results
