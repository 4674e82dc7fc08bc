"""
Tests for the dataset module.
"""

import os

import numpy as np
import pandas as pd
import pytest

from arcclimate import dataset, solar
from arcclimate.elevation import MsmElevation
from arcclimate.grid import MSM_GRID

from conftest import make_grid_series


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("ARCCLIMATE", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return monkeypatch


class TestDataDir:
    """Tests for resolving the data directory."""

    def test_explicit(self, clean_env, tmp_path):
        msm = dataset.MSM(data_dir=str(tmp_path), mode_elevation="mesh")
        assert msm.data_dir == os.path.normpath(str(tmp_path))
        assert msm.lookup.mesh_dir == os.path.join(msm.data_dir, "mesh")

    def test_environment(self, clean_env, tmp_path):
        clean_env.setenv("ARCCLIMATE", str(tmp_path))
        msm = dataset.MSM(mode_elevation="mesh")
        assert msm.data_dir == os.path.normpath(str(tmp_path))

    def test_config_file(self, clean_env, tmp_path):
        (tmp_path / "arcclimate.conf").write_text("[Data]\narcclimate = /data/msm/\n")
        clean_env.setenv("XDG_CONFIG_HOME", str(tmp_path))
        msm = dataset.MSM(mode_elevation="mesh")
        assert msm.data_dir == os.path.normpath("/data/msm/")

    def test_config_without_key(self, tmp_path):
        path = tmp_path / "arcclimate.conf"
        path.write_text("[Other]\nkey = value\n")
        assert dataset.get_config_dir(str(path)) == os.path.join(
            os.path.expanduser("~"), ".arcclimate"
        )

    def test_default(self, clean_env):
        msm = dataset.MSM(mode_elevation="mesh")
        assert msm.data_dir == os.path.join(os.path.expanduser("~"), ".arcclimate")

    def test_unknown_mode(self, tmp_path):
        with pytest.raises(ValueError):
            dataset.MSM(data_dir=str(tmp_path), mode_elevation="gps")


class TestExtractYears:

    @pytest.fixture
    def frame(self):
        dates = pd.date_range("2010-01-01", "2013-12-31 23:00", freq="h")
        return pd.DataFrame({"x": np.arange(len(dates))}, index=dates)

    def test_range(self, frame):
        df = dataset.extract_years(frame, 2011, 2012)
        assert df.index[0] == pd.Timestamp("2011-01-01 00:00")
        assert df.index[-1] == pd.Timestamp("2012-12-31 23:00")

    def test_open_ended(self, frame):
        assert dataset.extract_years(frame, start_year=2013).index[0].year == 2013
        assert dataset.extract_years(frame, end_year=2010).index[-1].year == 2010
        assert dataset.extract_years(frame) is frame


class TestMSM:
    """Tests for creating a site series from grid-point files."""

    @pytest.fixture
    def data_dir(self, tmp_path, summer_dates, tokyo):
        os.makedirs(str(tmp_path / "msm"))
        for i, j in MSM_GRID.quadrant(*tokyo):
            make_grid_series(summer_dates).to_csv(
                str(tmp_path / "msm" / ("%d_%d.csv.gz" % (i, j))), index_label="date"
            )
        os.makedirs(str(tmp_path / "mesh"))
        (tmp_path / "mesh" / "mesh_3d_ele_5339.csv").write_text(
            "meshcode,elevation\n53393589,17.2\n"
        )
        return tmp_path

    @pytest.fixture
    def msm(self, data_dir):
        msm = dataset.MSM(data_dir=str(data_dir), mode_elevation="mesh")
        msm._msm_elevation = MsmElevation(np.full(MSM_GRID.shape, 17.2))
        return msm

    def test_read(self, msm, summer_dates, tokyo):
        df = msm[MSM_GRID.quadrant(*tokyo)[0]]
        assert df.index.equals(summer_dates)
        assert list(df.columns) == dataset.MSM_COLUMNS

    def test_missing_file(self, msm):
        with pytest.raises(ValueError):
            msm[0, 0]

    def test_missing_elevation_table(self, data_dir):
        msm = dataset.MSM(data_dir=str(data_dir), mode_elevation="mesh")
        with pytest.raises(ValueError):
            msm.msm_elevation

    def test_elevation_table(self, data_dir, tokyo):
        pd.DataFrame(np.full(MSM_GRID.shape, 3.0)).to_csv(
            str(data_dir / "MSM_elevation.csv"), header=False, index=False
        )
        msm = dataset.MSM(data_dir=str(data_dir), mode_elevation="mesh")
        assert msm.msm_elevation.elevations(*tokyo) == [3.0] * 4

    def test_site(self, msm, tokyo):
        df = msm(*tokyo, model="Erbs")
        np.testing.assert_allclose(df["TMP"].values, 20.0)
        np.testing.assert_allclose(df["PRES"].values, 1013.0)
        for col in ["RH", "DT", "NR", "h", "A", "DN_est", "SH_est", "DN_msm", "SH_msm",
                    "w_spd", "w_dir"]:
            assert col in df

    def test_site_years(self, msm, tokyo):
        assert len(msm(*tokyo, start_year=2012)) == 0
        assert len(msm(*tokyo, start_year=2011, end_year=2011)) == 48

    def test_outside(self, msm):
        with pytest.raises(ValueError):
            msm(10.0, 100.0)

    def test_plot(self, msm, tokyo, tmp_path):
        df = msm(*tokyo, model="Udagawa")
        fn = str(tmp_path / "kt_kd.png")
        dataset.plot_separation(df, fn)
        assert os.path.exists(fn)


class TestPlotSeparation:
    """Tests for the Kt-Kd diagnostic plot."""

    @pytest.fixture
    def frame(self, summer_dates, tokyo):
        pos = solar.position(tokyo[0], tokyo[1], summer_dates)
        TH = np.clip(0.6 * pos["IN0"].values * pos["Sinh"].values, 0, None)
        return pd.DataFrame(
            {"DSWRF_msm": TH, "SH_msm": 0.3 * TH, "h": pos["h"].values},
            index=summer_dates,
        )

    def test_only_msm(self, frame, tmp_path):
        """Test a frame without the estimated variant is plotted."""
        fn = str(tmp_path / "kt_kd.png")
        dataset.plot_separation(frame, fn)
        assert os.path.exists(fn)

    def test_missing_variant(self, frame, tmp_path):
        with pytest.raises(ValueError):
            dataset.plot_separation(frame, str(tmp_path / "kt_kd.png"), variants=["est"])

    def test_nothing_to_plot(self, frame, tmp_path):
        fn = str(tmp_path / "kt_kd.png")
        with pytest.raises(ValueError):
            dataset.plot_separation(frame[["h"]], fn)
        assert not os.path.exists(fn)
