# -*- coding: utf-8 -*-
#
# Copyright 2023 ArcClimate

import os
import logging
import configparser
import numpy as np
import pandas as pd

from arcclimate.grid import MSM_GRID
from arcclimate.elevation import MsmElevation, get_lookup
from arcclimate.separate import calc_kt
from arcclimate import pipeline

logger = logging.getLogger(__name__)

# Columns of an MSM grid-point file (besides the date)
MSM_COLUMNS = ["TMP", "MR", "DSWRF_est", "DSWRF_msm", "Ld", "VGRD", "UGRD", "PRES", "APCP01"]


def get_config_dir(config_file, name="arcclimate"):
    config = configparser.ConfigParser()
    config.read(config_file)
    data_dir = config.get("Data", name, fallback=None)
    if data_dir is None:
        return os.path.join(os.path.expanduser("~"), "." + name)
    else:
        return os.path.normpath(data_dir)


def extract_years(df, start_year=None, end_year=None):
    """
    Return the rows of df from start_year to end_year (inclusive)
    """
    if start_year is None and end_year is None:
        return df
    start = None if start_year is None else "%04d" % start_year
    end = None if end_year is None else "%04d" % end_year
    return df.loc[start:end]


class MSM(object):
    """
    Mesoscale model (MSM) grid-point files and elevation tables in a data
    directory:

        msm/<i>_<j>.csv.gz              grid-point series
        MSM_elevation.csv               grid-point elevations
        mesh/mesh_3d_ele_<code>.csv     3rd-order mesh elevations
    """

    grid = MSM_GRID

    def __init__(self, data_dir=None, mode_elevation="api", **kwargs):

        # Set data_dir
        self.set_data_dir(data_dir)

        # Grid-point elevations (lazy)
        self._msm_elevation = None

        # Target elevation
        self.mode_elevation = mode_elevation
        self.lookup = get_lookup(
            mode_elevation, mesh_dir=self.get_data_path("mesh"), **kwargs
        )

    def __str__(self):
        return self.__class__.__name__

    def set_data_dir(self, data_dir=None):
        """
        Set data directory
        """
        if data_dir is None:
            if "ARCCLIMATE" in os.environ:
                # Use environment variable directly
                self.data_dir = os.path.normpath(os.environ["ARCCLIMATE"])

            elif "XDG_CONFIG_HOME" in os.environ:
                # Read from config file, i.e. ~/.config/arcclimate.conf
                self.data_dir = get_config_dir(
                    os.path.join(os.environ["XDG_CONFIG_HOME"], "arcclimate.conf")
                )

            else:
                # Default is $HOME/.arcclimate
                self.data_dir = os.path.join(os.path.expanduser("~"), ".arcclimate")

        else:
            # Specified
            self.data_dir = os.path.normpath(data_dir)

    def get_data_path(self, *sub_dirs):
        """
        Return path to data + all sub_dirs.
        """
        return os.path.join(self.data_dir, *sub_dirs)

    @property
    def msm_elevation(self):
        if self._msm_elevation is None:
            path = self.get_data_path("MSM_elevation.csv")
            if not os.path.exists(path):
                raise ValueError("MSM elevation table %s not found" % path)
            self._msm_elevation = MsmElevation.from_csv(path, grid=self.grid)
        return self._msm_elevation

    def __getitem__(self, ij):
        """
        Return frame of grid point (i, j)
        """
        i, j = ij
        path = self.get_data_path("msm", "%d_%d.csv.gz" % (i, j))
        if not os.path.exists(path):
            raise ValueError("MSM file %s not found" % path)
        df = pd.read_csv(path, index_col="date", parse_dates=True)
        return df[[col for col in MSM_COLUMNS if col in df]]

    def load(self, lat, lon):
        """
        Load the four grid-point frames enclosing (lat, lon), ordered
        south-west, south-east, north-west, north-east.
        """
        msms = []
        for ij in self.grid.quadrant(lat, lon):
            logger.info("Loading MSM %d_%d", *ij)
            msms.append(self[ij])
        return msms

    def __call__(self, lat, lon, model="Perez", start_year=None, end_year=None):
        """
        Create the site series at (lat, lon) separating irradiance with model.
        """

        if (lat, lon) not in self.grid:
            raise ValueError("(%r, %r) outside MSM grid" % (lat, lon))

        # Target elevation
        ele_target = self.lookup(lat, lon)

        # Weights & grid-point elevations
        weights = self.grid.weights(lat, lon)
        elevations = self.msm_elevation.elevations(lat, lon)

        msms = self.load(lat, lon)

        df, _ = pipeline.run(lat, lon, msms, weights, elevations, ele_target,
                             model=model)

        return extract_years(df, start_year, end_year)


def plot_separation(df, fn, variants=None):
    """
    Save scatter of diffuse fraction Kd vs. clearness index Kt of each
    separated irradiance variant of df to fn.

    By default every variant present in df ("est", "msm") is plotted.
    """

    if variants is None:
        variants = [v for v in ["est", "msm"] if "DSWRF_" + v in df and "SH_" + v in df]
    else:
        missing = [v for v in variants if "DSWRF_" + v not in df or "SH_" + v not in df]
        if missing:
            raise ValueError("Irradiance variant(s) %r not in frame" % (missing,))

    if not variants:
        raise ValueError("No separated irradiance to plot")

    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from arcclimate.solar import orbit

    IN0 = orbit(df.index)[3]
    h = df["h"].values

    f, ax = plt.subplots(figsize=(5, 5), dpi=200)

    for variant, color in zip(variants, ["orange", "steelblue"]):

        TH = df["DSWRF_" + variant].values
        SH = df["SH_" + variant].values

        # Daytime only
        with np.errstate(invalid="ignore"):
            i = (TH > 0) & (h > 0)

        with np.errstate(invalid="ignore", divide="ignore"):
            Kt = np.clip(calc_kt(TH[i], IN0[i], np.sin(np.radians(h[i]))), 0, 1)
            Kd = np.clip(SH[i] / TH[i], 0, 1)

        ax.plot(Kt, Kd, ".", color=color, markersize=2,
                label="%s (%d points)" % (variant, len(Kt)))

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.legend(loc="upper right", markerscale=4, numpoints=1, fontsize="smaller")
    ax.set_xlabel(r"Clearness Index $K_t$", fontsize="smaller")
    ax.set_ylabel(r"Diffuse Fraction $K_d$", fontsize="smaller")
    plt.tight_layout()
    f.savefig(fn, dpi=f.dpi, bbox_inches="tight")
    plt.close(f)
