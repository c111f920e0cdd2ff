"""
mainDX.py
Author: Colton Goodrich
Date: 11/10/2024
Python Version: 3.12
Wellbore vertical-section profile: one render cycle from raw survey rows.

Single-line summary: Turns survey rows into plotted stations, scales and a casing envelope.

Every trigger from the host (new data, resize) runs a full cycle:

    rows -> validate_survey -> minimum_curvature -> get_scales
         -> estimate_tangents -> casing_envelope

Nothing is kept between cycles. Each cycle returns one of three outcome values
and never raises for data problems:
    - RenderFrame: everything the renderer needs
    - CycleFailure: a user-visible error for the 'dataView' or 'survey' channel
    - CycleSkipped: nothing to draw (render disabled, viewport too small)

apply_outcome() pushes an outcome onto an ErrorChannels instance.

Typical usage example:
    outcome = run_render_cycle(lambda: survey_df, Viewport(800, 600))
    apply_outcome(outcome, channels)
    if isinstance(outcome, RenderFrame):
        draw(outcome)

Dependencies:
    numpy
    pandas
    shapely
    pyyaml
"""
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import pandas as pd
from shapely.geometry import Polygon

from CasingEnvelope import casing_envelope, casing_radius, envelope_polygon
from DXConfig import PlotConfig, Viewport, load_plot_config
from DXErrors import (DATA_VIEW_CHANNEL, SURVEY_CHANNEL, DataFetchError, EmptySurveyError,
                      ErrorChannels, SurveyInputError, ValidationError)
from DXScales import LinearScale, get_scales
from DXSurveyValidator import validate_survey
from DXSurveys import minimum_curvature
from DXTangents import estimate_tangents

logger = logging.getLogger(__name__)

Rows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class RenderFrame:
    """Result of a successful cycle.

    Attributes:
        stations: Plotted stations with envelope columns (see CasingEnvelope.casing_envelope)
        x_scale: horizontal_distance -> plot x
        y_scale: tvd -> plot y
        radius: Casing radius in plot units
        outline: Closed casing outline (empty for a single station)
        clears_canvas: The renderer replaces what it last drew
    """
    stations: pd.DataFrame
    x_scale: LinearScale
    y_scale: LinearScale
    radius: float
    outline: Polygon
    clears_canvas: bool = True


@dataclass(frozen=True)
class CycleFailure:
    """A terminal, user-visible failure.

    Attributes:
        channel: Error channel to show the message on ('dataView' or 'survey')
        message: Human readable message
        error: The exception that ended the cycle
        clears_canvas: The renderer removes the previous drawing
    """
    channel: str
    message: str
    error: Exception
    clears_canvas: bool = True


@dataclass(frozen=True)
class CycleSkipped:
    reason: str
    clears_canvas: bool = True


RenderOutcome = Union[RenderFrame, CycleFailure, CycleSkipped]


def run_render_cycle(
        source: Callable[[], Rows],
        viewport: Viewport,
        config: Optional[PlotConfig] = None,
        render_enabled: bool = True
) -> RenderOutcome:
    """Run validate -> integrate -> scale -> tangents -> envelope once.

    Args:
        source: Zero-argument callable returning the survey rows. Raises
            DataFetchError when the host cannot supply them.
        viewport: Full drawing size
        config: Plot settings; defaults to PlotConfig()
        render_enabled: False while an unrelated interaction (drag selection)
            must not trigger a redraw

    Returns:
        RenderOutcome: RenderFrame, CycleFailure or CycleSkipped

    Notes:
        - The source is not called when rendering is disabled or the plot area
          is negative
        - A fetch failure stops the cycle before any validation
    """
    if not render_enabled:
        return CycleSkipped('render disabled', clears_canvas=False)

    config = config or PlotConfig()
    area = config.plot_area(viewport)
    if area.width < 0 or area.height < 0:
        logger.debug(f"Viewport {viewport.width}x{viewport.height} leaves no plot area")
        return CycleSkipped('viewport too small')

    try:
        rows = source()
    except DataFetchError as e:
        return CycleFailure(DATA_VIEW_CHANNEL, str(e), e)

    try:
        stations = validate_survey(rows)
        positioned = minimum_curvature(stations)
    except (SurveyInputError, ValidationError, EmptySurveyError) as e:
        return CycleFailure(SURVEY_CHANNEL, str(e), e)

    x_scale, y_scale = get_scales(positioned, viewport, config)
    plotted = estimate_tangents(positioned, x_scale, y_scale)
    radius = casing_radius(viewport, config.radius_fraction)
    envelope = casing_envelope(plotted, radius)

    logger.info(f"Rendered {len(envelope)} stations, "
                f"TVD {envelope['tvd'].iloc[-1]:.0f}, "
                f"horizontal distance {envelope['horizontal_distance'].iloc[-1]:.0f}")
    return RenderFrame(envelope, x_scale, y_scale, radius, envelope_polygon(envelope))


def apply_outcome(outcome: RenderOutcome, channels: ErrorChannels) -> None:
    """Show or clear the error channels for a finished cycle.

    A channel is cleared once the cycle has got past the step it reports on,
    so a survey failure clears a stale fetch error and a frame clears both.
    A disabled render leaves every channel as it was.
    """
    if isinstance(outcome, CycleSkipped):
        return
    if isinstance(outcome, CycleFailure):
        if outcome.channel == SURVEY_CHANNEL:
            channels.hide(DATA_VIEW_CHANNEL)
        channels.show(outcome.channel, outcome.message)
        return
    channels.hide(DATA_VIEW_CHANNEL)
    channels.hide(SURVEY_CHANNEL)


def _read_rows(path: str) -> pd.DataFrame:
    try:
        if path.lower().endswith(('.xlsx', '.xls')):
            return pd.read_excel(path)
        return pd.read_csv(path)
    except (OSError, ValueError) as e:
        raise DataFetchError(f"Failed to read survey '{path}': {e}") from e


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-8s %(name)s: %(message)s")

    if len(sys.argv) < 2:
        print("usage: python mainDX.py SURVEY.csv|SURVEY.xlsx [plot_config.yaml]")
        sys.exit(2)

    plot_config = load_plot_config(sys.argv[2]) if len(sys.argv) > 2 else PlotConfig()
    survey_path = sys.argv[1]
    channels = ErrorChannels()
    outcome = run_render_cycle(lambda: _read_rows(survey_path), Viewport(800, 600), plot_config)
    apply_outcome(outcome, channels)

    if isinstance(outcome, RenderFrame):
        print(outcome.stations[['measured_depth', 'inclination', 'azimuth', 'tvd',
                                'horizontal_distance', 'theta']].round(2).to_string())
        print(outcome.x_scale, outcome.y_scale)
    else:
        print(channels.active or outcome)
        sys.exit(1)
