"""Tests for padded domains, nice rounding and linear scales"""
import numpy as np
import pandas as pd
import pytest

from DXConfig import Margins, PlotConfig, Viewport
from DXErrors import EmptySurveyError
from DXScales import LinearScale, get_scales, nice_domain, padded_domain, tick_increment, ticks
from DXSurveys import minimum_curvature
from DXSurveyValidator import validate_survey


class TestPaddedDomain:

    def test_asymmetric_padding(self):
        assert padded_domain([0, 100]) == (-1.0, 105.0)

    def test_padding_uses_maximum_for_both_bounds(self):
        lower, upper = padded_domain([50, 200])
        assert lower == pytest.approx(48.0)
        assert upper == pytest.approx(210.0)

    def test_degenerate_domain_gets_minimum_span(self):
        assert padded_domain([0, 0, 0]) == (0.0, 1.0)

    def test_custom_minimum_span(self):
        assert padded_domain([0], min_span=10.0) == (0.0, 10.0)

    def test_small_span_keeps_padding(self):
        lower, upper = padded_domain([0, 0.5])
        assert lower == pytest.approx(-0.005)
        assert upper == pytest.approx(0.525)

    def test_small_span_is_unit_independent(self):
        lower, upper = padded_domain([0, 0.5 / 3.28084])
        assert upper - lower == pytest.approx(0.53 / 3.28084)

    def test_no_values(self):
        with pytest.raises(EmptySurveyError):
            padded_domain([])


class TestNiceRounding:

    @pytest.mark.parametrize('start, stop, count, expected', [
        (0, 100, 10, 10),
        (0, 1, 10, -10),
        (0, 1000, 20, 50),
        (-1, 105, 20, 5),
    ])
    def test_tick_increment(self, start, stop, count, expected):
        assert tick_increment(start, stop, count) == expected

    def test_tick_increment_degenerate(self):
        assert tick_increment(5, 5, 10) == 0
        assert tick_increment(0, 10, 0) == 0

    def test_nice_domain_extends_outward(self):
        assert nice_domain(-1, 105, 20) == (-5, 105)

    def test_nice_domain_fractional(self):
        start, stop = nice_domain(0.013, 0.987, 10)
        assert start == pytest.approx(0.0)
        assert stop == pytest.approx(1.0)

    def test_nice_domain_already_nice(self):
        assert nice_domain(0, 100, 10) == (0, 100)

    def test_ticks(self):
        assert ticks(0, 10, 5) == [0, 2, 4, 6, 8, 10]

    def test_fractional_ticks(self):
        assert ticks(0, 1, 5) == pytest.approx([0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_reversed_ticks(self):
        assert ticks(10, 0, 5) == [10, 8, 6, 4, 2, 0]


class TestLinearScale:

    def test_maps_and_inverts(self):
        scale = LinearScale((0, 100), (80, 760))
        assert scale(0) == 80.0
        assert scale(100) == 760.0
        assert scale(50) == 420.0
        assert scale.invert(420) == 50.0

    def test_maps_arrays(self):
        scale = LinearScale((0, 10), (0, 100))
        np.testing.assert_allclose(scale(np.array([0, 5, 10])), [0, 50, 100])

    def test_zero_span_maps_mid_range(self):
        scale = LinearScale((3, 3), (0, 100))
        assert scale(3) == 50.0

    def test_nice_returns_new_scale(self):
        scale = LinearScale((-1, 105), (0, 1))
        nice = scale.nice(20)
        assert nice.domain == (-5.0, 105.0)
        assert scale.domain == (-1.0, 105.0)
        assert nice.range == scale.range


class TestGetScales:

    def test_ranges_follow_margins(self, build_and_hold_rows):
        positioned = minimum_curvature(validate_survey(build_and_hold_rows))
        x_scale, y_scale = get_scales(positioned, Viewport(800, 600))
        assert x_scale.range == (80.0, 760.0)
        assert y_scale.range == (20.0, 560.0)

    def test_custom_margins(self, build_and_hold_rows):
        positioned = minimum_curvature(validate_survey(build_and_hold_rows))
        config = PlotConfig(margins=Margins(top=10, right=10, bottom=10, left=10))
        x_scale, y_scale = get_scales(positioned, Viewport(400, 300), config)
        assert x_scale.range == (10.0, 390.0)
        assert y_scale.range == (10.0, 290.0)

    def test_domains_cover_padded_extent(self, build_and_hold_rows):
        positioned = minimum_curvature(validate_survey(build_and_hold_rows))
        x_scale, y_scale = get_scales(positioned, Viewport(800, 600))
        tvd_max = positioned['tvd'].max()
        assert y_scale.domain[0] <= -0.01 * tvd_max
        assert y_scale.domain[1] >= 1.05 * tvd_max
        x_max = positioned['horizontal_distance'].max()
        assert x_scale.domain[1] >= 1.05 * x_max

    def test_depth_increases_downward(self, build_and_hold_rows):
        positioned = minimum_curvature(validate_survey(build_and_hold_rows))
        _, y_scale = get_scales(positioned, Viewport(800, 600))
        assert y_scale(0) < y_scale(positioned['tvd'].max())

    def test_vertical_well_has_finite_horizontal_scale(self):
        positioned = minimum_curvature(pd.DataFrame({
            'measured_depth': [0, 1000], 'inclination': [0, 0], 'azimuth': [0, 0]}))
        x_scale, _ = get_scales(positioned, Viewport(800, 600))
        assert x_scale.domain[1] - x_scale.domain[0] > 0
        assert np.isfinite(x_scale(0.0))

    def test_near_vertical_well_keeps_tight_horizontal_scale(self):
        positioned = minimum_curvature(pd.DataFrame({
            'measured_depth': [0, 1000], 'inclination': [0, 0.05], 'azimuth': [0, 0]}))
        drift = positioned['horizontal_distance'].iloc[-1]
        assert 0.4 < drift < 0.5
        x_scale, _ = get_scales(positioned, Viewport(800, 600))
        assert x_scale.domain[1] >= 1.05 * drift
        assert x_scale.domain[1] < 0.6
