# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

"""
Elevation lookups: MSM grid-point elevations, 3rd-order mesh elevations and
the GSI elevation web service.  All are callables lookup(lat, lon) -> metres.
"""

import os
import logging
import numpy as np
import pandas as pd
import requests

from arcclimate.grid import MSM_GRID

logger = logging.getLogger(__name__)

# Modes for target elevation
MODES = ["mesh", "api"]

_GSI_URL = "https://cyberjapandata2.gsi.go.jp/general/dem/scripts/getelevation.php"


def mesh_code(lat, lon):
    """
    Calculate the JIS X 0410 standard mesh codes (1st, 3rd) of (lat, lon).

    1st mesh: 40' latitude x 1° longitude, 4 digits
    2nd mesh: 1/8 of the 1st, 2 digits
    3rd mesh: 1/10 of the 2nd, 2 digits; full code is 8 digits
    """

    # Work in minutes of latitude to avoid floating error on the edges
    y = lat * 60.0
    p, a = divmod(y, 40.0)
    q, b = divmod(a, 5.0)
    r = np.floor(b * 60.0 / 30.0)

    u = np.floor(lon - 100.0)
    f = (lon - 100.0 - u) * 60.0
    v, g = divmod(f, 7.5)
    w = np.floor(g * 60.0 / 45.0)

    code1 = int(p) * 100 + int(u)
    code3 = code1 * 10000 + int(q) * 1000 + int(v) * 100 + int(r) * 10 + int(w)

    return code1, code3


class MsmElevation(object):
    """
    Elevation of MSM grid points from a 2-D table (rows north to south,
    columns west to east), e.g. MSM_elevation.csv.
    """

    def __init__(self, table, grid=MSM_GRID):
        self.table = np.asarray(table, dtype=float)
        self.grid = grid
        if self.table.shape != tuple(grid.shape):
            raise ValueError(
                "MSM elevation table %r does not match grid %r"
                % (self.table.shape, grid.shape)
            )

    @classmethod
    def from_csv(cls, path, grid=MSM_GRID):
        return cls(pd.read_csv(path, header=None).values, grid=grid)

    def __call__(self, lat, lon):
        """
        Elevation (m) of the grid point nearest (lat, lon)
        """
        i, j = self.grid(lat, lon, snap=True)
        return self[i, j]

    def __getitem__(self, ij):
        ele = self.table[ij]
        if np.isnan(ele):
            raise ValueError("MSM elevation undefined at %r" % (ij,))
        return float(ele)

    def elevations(self, lat, lon):
        """
        Elevations (m) of the quadrant enclosing (lat, lon) in the order
        south-west, south-east, north-west, north-east.
        """
        return [self[ij] for ij in self.grid.quadrant(lat, lon)]


class MeshElevation(object):
    """
    Mean elevation of 3rd-order (1 km) meshes, one CSV per 1st-order mesh
    with columns (meshcode, elevation).
    """

    def __init__(self, mesh_dir):
        self.mesh_dir = mesh_dir
        self.tables = {}

    def load(self, code1):
        if code1 not in self.tables:
            path = os.path.join(self.mesh_dir, "mesh_3d_ele_%d.csv" % code1)
            if not os.path.exists(path):
                raise ValueError("Mesh elevation file %s not found" % path)
            df = pd.read_csv(path)
            self.tables[code1] = pd.Series(
                data=df.iloc[:, 1].values, index=df.iloc[:, 0].values
            )
        return self.tables[code1]

    def __call__(self, lat, lon):
        code1, code3 = mesh_code(lat, lon)
        table = self.load(code1)
        if code3 not in table.index:
            raise ValueError("Mesh %d not in elevation table" % code3)
        ele = table[code3]
        if np.isnan(ele):
            raise ValueError("Elevation undefined for mesh %d" % code3)
        logger.debug("Mesh %d elevation %.1f m", code3, ele)
        return float(ele)


class ApiElevation(object):
    """
    Elevation from the Geospatial Information Authority of Japan (GSI) web
    service.
    """

    def __init__(self, url=_GSI_URL, timeout=30):
        self.url = url
        self.timeout = timeout

    def __call__(self, lat, lon):
        params = {"lon": lon, "lat": lat, "outtype": "JSON"}
        response = requests.get(self.url, params=params, timeout=self.timeout)
        if not response.ok:
            raise ValueError(
                "Elevation service returned %d for (%r, %r)"
                % (response.status_code, lat, lon)
            )
        ele = response.json().get("elevation")
        # Service returns "-----" where no elevation is available
        try:
            ele = float(ele)
        except (TypeError, ValueError):
            raise ValueError("Elevation undefined at (%r, %r)" % (lat, lon))
        logger.debug("GSI elevation %.1f m at (%r, %r)", ele, lat, lon)
        return ele


def get_lookup(mode, mesh_dir=None, **kwargs):
    """
    Return the target elevation lookup for mode ("mesh" or "api")
    """
    if mode == "mesh":
        if mesh_dir is None:
            raise ValueError("Mesh elevation requires a mesh directory")
        return MeshElevation(mesh_dir)
    elif mode == "api":
        return ApiElevation(**kwargs)
    raise ValueError("Elevation mode must be one of %r" % (MODES,))
