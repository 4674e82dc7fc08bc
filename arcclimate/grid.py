# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import numpy as np

_EARTH_RADIUS = 6371.009


def calc_distance(lat1, lon1, lat2, lon2, r=_EARTH_RADIUS):
    """
    Calculate the great circle distance in kilometres between two points
    on the earth (specified in decimal degrees) using the haversine.
    """

    # Convert decimal degrees to radians
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    c = 2 * np.arcsin(np.sqrt(a))

    # Distance is angle*radius
    return r * c


class Grid(object):
    """
    Regular latitude/longitude grid, row 0 at origin.
    """

    def __init__(self, shape=(505, 481), origin=(47.6, 120.0), delta=(-0.05, 0.0625)):

        self.shape = shape
        self.origin = origin
        self.delta = delta

        # Default coordinates in map'd space
        self.y0, self.x0 = origin
        self.dy, self.dx = delta

    def __getitem__(self, args):
        """
        Given (i, j), what is corresponding (lat, lon)?
        """
        i, j = map(np.asarray, args)
        lat, lon = self.y0 + self.dy * i, self.x0 + self.dx * j
        return (
            float(lat) if np.isscalar(args[0]) else lat,
            float(lon) if np.isscalar(args[1]) else lon,
        )

    def __call__(self, lat, lon, snap=False):
        """
        Return location (i, j) in grid given latitude, longitude.
        """
        i = (np.asarray(lat) - self.y0) / self.dy
        j = (np.asarray(lon) - self.x0) / self.dx

        if snap:
            i, j = np.rint(i).astype(int), np.rint(j).astype(int)

        return (
            i.item() if np.isscalar(lat) else i,
            j.item() if np.isscalar(lon) else j,
        )

    def __contains__(self, latlon):
        i, j = self(*latlon)
        return (0 <= i <= self.shape[0] - 1) and (0 <= j <= self.shape[1] - 1)

    def lats(self):
        return self[np.arange(self.shape[0]), 0][0]

    def lons(self):
        return self[0, np.arange(self.shape[1])][1]

    def quadrant(self, lat, lon):
        """
        Return indices (i, j) of the grid points enclosing (lat, lon) in the
        order south-west, south-east, north-west, north-east.
        """
        if (lat, lon) not in self:
            raise ValueError("(%r, %r) outside grid" % (lat, lon))

        # Snap first so that points exactly on a row/column stay there
        i, j = self(lat, lon)
        si, sj = np.rint(i), np.rint(j)
        i = si if np.isclose(i, si) else i
        j = sj if np.isclose(j, sj) else j

        # Southern row (rows run north to south if dy < 0)
        if self.dy < 0:
            iS = int(np.ceil(i))
            iN = iS - 1 if iS > 0 else iS
        else:
            iS = int(np.floor(i))
            iN = iS + 1 if iS < self.shape[0] - 1 else iS

        # Western column
        jW = int(np.floor(j))
        jE = jW + 1 if jW < self.shape[1] - 1 else jW

        # Keep a proper quadrant at the northern/eastern edges
        if iN == iS:
            iS, iN = (iS + 1, iS) if self.dy < 0 else (iS - 1, iS)
        if jE == jW:
            jW -= 1

        return ((iS, jW), (iS, jE), (iN, jW), (iN, jE))

    def weights(self, lat, lon):
        """
        Return inverse-distance weights of the quadrant enclosing (lat, lon)
        in the order south-west, south-east, north-west, north-east.

        Weights sum to one.  If (lat, lon) sits on a grid point, that point
        receives the full weight.
        """
        inds = self.quadrant(lat, lon)
        lats, lons = self[[i for i, _ in inds], [j for _, j in inds]]

        d = calc_distance(lat, lon, lats, lons)

        if np.any(d == 0):
            w = np.where(d == 0, 1.0, 0.0)
        else:
            w = 1.0 / d

        return w / np.sum(w)


# Mesoscale model (MSM) surface grid
MSM_GRID = Grid(shape=(505, 481), origin=(47.6, 120.0), delta=(-0.05, 0.0625))
