"""
Tests for the separate module.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from arcclimate import separate, solar
from arcclimate.separate import SeparationModel


def make_solpos(IN0, h):
    """Solar position frame from IN0 (MJ/m²h) and altitude (deg)."""
    IN0 = np.atleast_1d(np.asarray(IN0, dtype=float))
    h = np.atleast_1d(np.asarray(h, dtype=float))
    return pd.DataFrame(
        {"IN0": IN0, "h": h, "Sinh": np.sin(np.radians(h))},
        index=pd.date_range("2011-06-21 12:00", periods=len(h), freq="h"),
    )


def step_sky(P, IN0, Sinh):
    """Sky irradiance with a jump at P = 0.5."""
    return 0.0 if P < 0.5 else 2.0


@pytest.fixture
def clear_day(summer_dates, tokyo):
    """Solar position and a clear-ish TH over two summer days."""
    solpos = solar.position(tokyo[0], tokyo[1], summer_dates)
    TH = np.clip(0.7 * solpos["IN0"].values * solpos["Sinh"].values, 0, None)
    # Some cloud on the second day
    TH[24:] *= np.linspace(0.3, 1.0, 24)
    return TH, solpos


class TestSeparationModel:
    """Tests for model selection."""

    def test_parse(self):
        assert SeparationModel.parse("Erbs") is SeparationModel.ERBS
        assert SeparationModel.parse("perez") is SeparationModel.PEREZ
        assert SeparationModel.parse("NAGATA") is SeparationModel.NAGATA
        assert SeparationModel.parse(SeparationModel.UDAGAWA) is SeparationModel.UDAGAWA

    def test_unknown(self):
        with pytest.raises(ValueError):
            SeparationModel.parse("Liu-Jordan")

    def test_unknown_before_work(self):
        """Test an unknown model raises from separate."""
        with pytest.raises(ValueError):
            separate.separate([1.0], make_solpos(4.8, 30.0), "bogus")

    def test_primary_output(self):
        assert SeparationModel.NAGATA.estimates_sky
        assert SeparationModel.WATANABE.estimates_sky
        assert SeparationModel.ERBS.estimates_sky
        assert not SeparationModel.UDAGAWA.estimates_sky
        assert not SeparationModel.PEREZ.estimates_sky


class TestUnits:

    def test_conversion(self):
        assert separate.W_to_MJ(1000.0) == pytest.approx(3.6)
        assert separate.MJ_to_W(3.6) == pytest.approx(1000.0)


class TestBisection:
    """Tests for the transmissivity search of Nagata & Watanabe."""

    IN0 = 4.8
    SINH = 0.5

    def test_recovers_transmissivity(self):
        """Test TH built from a known P returns that P's sky irradiance."""
        P = 0.45
        SH0 = separate.sky_nagata(P, self.IN0, self.SINH)
        TH = separate.calc_th(P, self.IN0, self.SINH, SH0)
        SH = separate.solve_sky(TH, self.SINH, self.IN0, separate.sky_nagata)
        assert SH == pytest.approx(SH0, abs=1e-4)
        # Reconstructed TH within the tolerance
        DN = (TH - SH) / self.SINH
        assert abs(DN * self.SINH + SH - TH) < 1e-5

    def test_watanabe_recovers_transmissivity(self):
        P = 0.4
        SH0 = separate.sky_watanabe(P, self.IN0, self.SINH)
        TH = separate.calc_th(P, self.IN0, self.SINH, SH0)
        SH = separate.solve_sky(TH, self.SINH, self.IN0, separate.sky_watanabe)
        assert SH == pytest.approx(SH0, abs=1e-4)

    def test_watanabe_capped(self):
        """Test Watanabe is evaluated at P = 1 above it."""
        assert separate.sky_watanabe(1.1, self.IN0, self.SINH) == separate.sky_watanabe(1.0, self.IN0, self.SINH)

    def test_capped_at_max_transmissivity(self):
        """Test TH beyond reach uses the maximum transmissivity."""
        SH = separate.solve_sky(5.0, self.SINH, self.IN0, separate.sky_nagata)
        assert SH == pytest.approx(separate.sky_nagata(separate.P_MAX, self.IN0, self.SINH))

    def test_floor(self):
        """Test TH below the overcast sky gives all diffuse."""
        SH = separate.solve_sky(1e-4, self.SINH, self.IN0, separate.sky_nagata)
        assert SH == min(separate.sky_nagata(0.0, self.IN0, self.SINH), 1e-4)

    def test_floor_uses_zero_transmissivity(self):
        """Test the collapsed lower bound evaluates the sky at P = 0."""
        # Sky jumps above TH for any P > 0
        def sky(P, IN0, Sinh):
            return 0.1 if P == 0.0 else 0.5

        SH = separate.solve_sky(0.2, self.SINH, self.IN0, sky)
        assert SH == 0.1

    def test_collapse(self):
        """Test TH inside a jump of TH(P) cannot be met and gives NaN."""
        # TH(P) jumps from 0.6 to 2.6 at P = 0.5
        assert np.isnan(separate.solve_sky(1.5, self.SINH, self.IN0, step_sky))

    def test_never_exceeds_th(self):
        for TH in [0.05, 0.5, 1.0, 2.0]:
            assert separate.solve_sky(TH, self.SINH, self.IN0, separate.sky_nagata) <= TH

    def test_sun_down(self):
        """Test zero when the sun is down, NaN when TH is undefined."""
        SH = separate.sky_bisection(
            np.array([0.5, np.nan, 1.0]), np.array([-0.1, 0.5, 0.5]),
            np.array([4.8, 4.8, 4.8]), separate.sky_nagata,
        )
        assert SH[0] == 0
        assert np.isnan(SH[1])
        assert 0 < SH[2] <= 1.0


class TestErbs:
    """Tests for the Erbs diffuse fraction."""

    def test_hand_computed(self):
        """Test KT = 0.5 at 30° altitude."""
        res = separate.separate([1.2], make_solpos(4.8, 30.0), "Erbs")
        Kd = 0.9511 - 0.1604 * 0.5 + 4.388 * 0.25 - 16.638 * 0.125 + 12.336 * 0.0625
        assert res["SH"].iloc[0] == pytest.approx(1.2 * Kd)
        assert res["DN"].iloc[0] == pytest.approx((1.2 - 1.2 * Kd) / 0.5)
        assert res["SH"].iloc[0] == pytest.approx(0.79098, abs=1e-5)

    def test_low_clearness(self):
        SH = separate.sky_erbs([0.3], np.array([4.8]), np.array([0.5]))
        assert SH[0] == pytest.approx(0.3 * (1 - 0.09 * 0.125))

    def test_high_clearness(self):
        SH = separate.sky_erbs([2.2], np.array([4.8]), np.array([0.5]))
        assert SH[0] == pytest.approx(0.165 * 2.2)

    def test_kt_capped(self):
        """Test clearness index is capped at one."""
        SH = separate.sky_erbs([3.0], np.array([4.8]), np.array([0.5]))
        assert SH[0] == pytest.approx(0.165 * 3.0)

    def test_zero(self):
        """Test no irradiance gives no sky irradiance."""
        SH = separate.sky_erbs([0.0, 0.0], np.array([4.8, 4.8]), np.array([0.5, -0.2]))
        np.testing.assert_array_equal(SH, [0.0, 0.0])

    def test_below_horizon(self):
        """Test irradiance with the sun below the horizon is all diffuse."""
        res = separate.separate([0.2], make_solpos(4.8, -1.0), "Erbs")
        assert res["DN"].iloc[0] == 0
        assert res["SH"].iloc[0] == pytest.approx(0.2)
        sinh = np.sin(np.radians(-1.0))
        assert res["SH"].iloc[0] + res["DN"].iloc[0] * sinh == pytest.approx(0.2)


class TestUdagawa:
    """Tests for the Udagawa direct normal."""

    def test_hand_computed(self):
        """Test the cubic branch at KT = 0.5, 30° altitude."""
        DN = separate.direct_udagawa([1.2], np.array([4.8]), np.array([0.5]))
        expected = 4.8 * (2.277 - 1.258 * 0.5 + 0.2396 * 0.25) * 0.125
        assert DN[0] == pytest.approx(expected)

    def test_sky_from_balance(self):
        res = separate.separate([1.2], make_solpos(4.8, 30.0), "Udagawa")
        assert res["SH"].iloc[0] == pytest.approx(1.2 - res["DN"].iloc[0] * 0.5)

    def test_sun_down(self):
        """Test all diffuse when the sun is down."""
        res = separate.separate([0.1], make_solpos(4.8, -2.0), "Udagawa")
        assert res["DN"].iloc[0] == 0
        assert res["SH"].iloc[0] == pytest.approx(0.1)


class TestSeparate:
    """Tests across all models."""

    @pytest.mark.parametrize("model", ["Nagata", "Watanabe", "Erbs", "Udagawa", "Perez"])
    def test_balance(self, model, clear_day):
        """Test DN·sinh + SH = TH wherever neither output is clamped."""
        TH, solpos = clear_day
        res = separate.separate(TH, solpos, model, DT=np.full(len(TH), 15.0), elevation=40.0)
        DN, SH = res["DN"].values, res["SH"].values
        assert np.all(DN >= 0) and np.all(SH >= 0)
        up = (solpos["Sinh"].values > 0) & (DN > 0) & (SH > 0)
        assert np.any(up)
        np.testing.assert_allclose(DN[up] * solpos["Sinh"].values[up] + SH[up], TH[up], atol=1e-9)

    @pytest.mark.parametrize("model", ["Nagata", "Watanabe", "Erbs", "Udagawa", "Perez"])
    def test_night(self, model, clear_day):
        """Test no direct irradiance at night."""
        TH, solpos = clear_day
        res = separate.separate(TH, solpos, model, DT=np.full(len(TH), 15.0), elevation=40.0)
        night = solpos["h"].values <= 0
        assert np.all(res["DN"].values[night] == 0)

    @pytest.mark.parametrize("model", ["Nagata", "Watanabe", "Erbs", "Udagawa", "Perez"])
    def test_undefined(self, model, clear_day):
        """Test undefined TH gives undefined DN and SH at that hour only."""
        TH, solpos = clear_day
        TH = TH.copy()
        TH[12] = np.nan
        res = separate.separate(TH, solpos, model, DT=np.full(len(TH), 15.0), elevation=40.0)
        assert np.isnan(res["DN"].iloc[12]) and np.isnan(res["SH"].iloc[12])
        assert np.isfinite(res["DN"].iloc[11]) and np.isfinite(res["SH"].iloc[13])

    def test_clamp_breaks_balance(self):
        """Test DN·sinh may exceed TH where SH is clamped at zero."""
        # Udagawa at KT = 0.83 overshoots TH
        res = separate.separate([2.0], make_solpos(4.8, 30.0), "Udagawa")
        DN = separate.direct_udagawa([2.0], np.array([4.8]), np.array([0.5]))
        assert res["DN"].iloc[0] == DN[0]
        assert res["SH"].iloc[0] == 0
        assert res["DN"].iloc[0] * 0.5 > 2.0

    def test_perez_requires_dew_point(self, clear_day):
        TH, solpos = clear_day
        with pytest.raises(ValueError):
            separate.separate(TH, solpos, "Perez")

    def test_length_mismatch(self, clear_day):
        TH, solpos = clear_day
        with pytest.raises(ValueError):
            separate.separate(TH[:-1], solpos, "Erbs")

    def test_non_convergence_logged(self, caplog):
        """Test a search that collapses without convergence is NaN and logged."""
        with caplog.at_level(logging.WARNING, logger="arcclimate.separate"):
            SH = separate.sky_bisection(np.array([1.5]), np.array([0.5]), np.array([4.8]),
                                        step_sky)
        assert np.isnan(SH[0])
        assert "did not converge" in caplog.text


class TestSeparateAll:
    """Tests for separating every irradiance variant of a frame."""

    def test_variants(self, clear_day):
        TH, solpos = clear_day
        df = pd.DataFrame({"DSWRF_est": TH, "DT": 15.0}, index=solpos.index)
        results = separate.separate_all(df, solpos, "Erbs", 40.0)
        assert list(results) == ["est"]
        assert "DN_est" in df and "SH_est" in df
        assert "DN_msm" not in df
