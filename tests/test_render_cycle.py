"""Tests for the full render cycle and error channel handling"""
import dataclasses
import math

import pytest

from DXConfig import Margins, PlotConfig, Viewport
from DXErrors import (DATA_VIEW_CHANNEL, SURVEY_CHANNEL, DataFetchError, EmptySurveyError,
                      ErrorChannels, ValidationError)
from mainDX import CycleFailure, CycleSkipped, RenderFrame, apply_outcome, run_render_cycle

VIEWPORT = Viewport(800, 600)


def _failing_source():
    raise DataFetchError("Data view contains errors")


class _CountingSource:

    def __init__(self, rows):
        self.rows = rows
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.rows


class TestRunRenderCycle:

    def test_successful_frame(self, build_and_hold_rows):
        outcome = run_render_cycle(lambda: build_and_hold_rows, VIEWPORT)
        assert isinstance(outcome, RenderFrame)
        assert len(outcome.stations) == len(build_and_hold_rows) + 1
        for col in ('tvd', 'horizontal_distance', 'theta', 'upper_x', 'lower_y'):
            assert col in outcome.stations.columns
        assert outcome.radius == pytest.approx(15.0)
        assert outcome.outline.area > 0
        assert outcome.x_scale.range == (80.0, 760.0)
        assert outcome.clears_canvas

    def test_render_disabled_skips_without_fetching(self, build_and_hold_rows):
        source = _CountingSource(build_and_hold_rows)
        outcome = run_render_cycle(source, VIEWPORT, render_enabled=False)
        assert isinstance(outcome, CycleSkipped)
        assert not outcome.clears_canvas
        assert source.calls == 0

    def test_small_viewport_skips(self, build_and_hold_rows):
        source = _CountingSource(build_and_hold_rows)
        outcome = run_render_cycle(source, Viewport(100, 50))
        assert isinstance(outcome, CycleSkipped)
        assert outcome.clears_canvas
        assert source.calls == 0

    def test_zero_plot_area_still_renders(self, two_station_rows):
        config = PlotConfig(margins=Margins(0, 0, 0, 0))
        outcome = run_render_cycle(lambda: two_station_rows, Viewport(0, 0), config)
        assert isinstance(outcome, RenderFrame)

    def test_fetch_error(self):
        outcome = run_render_cycle(_failing_source, VIEWPORT)
        assert isinstance(outcome, CycleFailure)
        assert outcome.clears_canvas
        assert outcome.channel == DATA_VIEW_CHANNEL
        assert outcome.message == "Data view contains errors"

    def test_validation_error(self):
        rows = [{'md': 0, 'inc': 0, 'az': 0}, {'md': 100, 'inc': 200, 'az': 0}]
        outcome = run_render_cycle(lambda: rows, VIEWPORT)
        assert isinstance(outcome, CycleFailure)
        assert outcome.channel == SURVEY_CHANNEL
        assert isinstance(outcome.error, ValidationError)
        assert outcome.error.row == 2
        assert 'Inclination' in outcome.message

    def test_empty_survey(self):
        outcome = run_render_cycle(lambda: [], VIEWPORT)
        assert isinstance(outcome, CycleFailure)
        assert isinstance(outcome.error, EmptySurveyError)

    def test_single_station_frame(self):
        outcome = run_render_cycle(lambda: [{'md': 0, 'inc': 0, 'az': 0}], VIEWPORT)
        assert isinstance(outcome, RenderFrame)
        assert len(outcome.stations) == 1
        assert not math.isnan(outcome.stations['theta'].iloc[0])
        assert outcome.outline.is_empty

    def test_each_cycle_is_independent(self, build_and_hold_rows, two_station_rows):
        first = run_render_cycle(lambda: build_and_hold_rows, VIEWPORT)
        second = run_render_cycle(lambda: two_station_rows, VIEWPORT)
        again = run_render_cycle(lambda: build_and_hold_rows, VIEWPORT)
        assert len(second.stations) == 2
        assert first.stations['theta'].tolist() == again.stations['theta'].tolist()


    def test_outcomes_share_clears_canvas_field(self):
        field_sets = [{f.name for f in dataclasses.fields(cls)}
                      for cls in (RenderFrame, CycleFailure, CycleSkipped)]
        assert all('clears_canvas' in names for names in field_sets)


class TestApplyOutcome:

    def test_fetch_failure_shows_data_view_only(self):
        channels = ErrorChannels()
        channels.show(SURVEY_CHANNEL, "old survey error")
        apply_outcome(run_render_cycle(_failing_source, VIEWPORT), channels)
        assert channels.message(DATA_VIEW_CHANNEL) == "Data view contains errors"
        assert channels.message(SURVEY_CHANNEL) == "old survey error"

    def test_survey_failure_clears_data_view(self):
        channels = ErrorChannels()
        channels.show(DATA_VIEW_CHANNEL, "stale fetch error")
        apply_outcome(run_render_cycle(lambda: [{'md': -1, 'inc': 0, 'az': 0}], VIEWPORT), channels)
        assert not channels.is_shown(DATA_VIEW_CHANNEL)
        assert 'row 1' in channels.message(SURVEY_CHANNEL)

    def test_frame_clears_both(self, two_station_rows):
        channels = ErrorChannels()
        channels.show(DATA_VIEW_CHANNEL, "a")
        channels.show(SURVEY_CHANNEL, "b")
        apply_outcome(run_render_cycle(lambda: two_station_rows, VIEWPORT), channels)
        assert channels.active == {}

    def test_disabled_render_leaves_channels(self):
        channels = ErrorChannels()
        channels.show(SURVEY_CHANNEL, "b")
        apply_outcome(run_render_cycle(_failing_source, VIEWPORT, render_enabled=False), channels)
        assert channels.active == {SURVEY_CHANNEL: "b"}


class TestErrorChannels:

    def test_independent_channels(self):
        channels = ErrorChannels()
        channels.show(DATA_VIEW_CHANNEL, "fetch")
        channels.show(SURVEY_CHANNEL, "survey")
        channels.hide(DATA_VIEW_CHANNEL)
        assert channels.active == {SURVEY_CHANNEL: "survey"}

    def test_unknown_channel(self):
        with pytest.raises(KeyError):
            ErrorChannels().show('tooltip', 'x')
