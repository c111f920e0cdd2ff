"""Casing envelope drawn around the plotted wellbore centerline.

Each plotted station (plot_x, plot_y, theta) is offset by the casing radius
along the normal of its tangent:

    upper = (x + r*cos(theta), y - r*sin(theta))
    lower = (x - r*cos(theta), y + r*sin(theta))

Joining the upper points down the hole and the lower points back up gives a
closed outline polygon. The radius is a fixed fraction of the smaller
viewport side and is recomputed on every resize. Station points and tooltip
labels for hit testing are built here too.

Dependencies:
    numpy
    pandas
    shapely
"""

import logging
import math
from typing import Any, List, Mapping

import numpy as np
import pandas as pd
from shapely.geometry import LineString, Point, Polygon

from DXConfig import Viewport

logger = logging.getLogger(__name__)

ENVELOPE_COLUMNS = ['upper_x', 'upper_y', 'lower_x', 'lower_y']


def casing_radius(viewport: Viewport, fraction: float = 0.025) -> float:
    """Casing radius in plot units, a fraction of the smaller viewport side.

    Example:
        >>> casing_radius(Viewport(800, 600))
        15.0
    """
    return fraction * min(viewport.height, viewport.width)


def casing_envelope(plotted: pd.DataFrame, radius: float) -> pd.DataFrame:
    """Offset the plotted centerline by +/- radius along each station's normal.

    Args:
        plotted: Output of DXTangents.estimate_tangents (needs plot_x, plot_y, theta)
        radius: Offset distance in plot units

    Returns:
        pd.DataFrame: Stations with extra columns:
            - upper_x, upper_y: (x + r*cos(theta), y - r*sin(theta)), top of casing
            - lower_x, lower_y: (x - r*cos(theta), y + r*sin(theta)), bottom of casing

    Raises:
        ValueError: If radius is negative
    """
    if radius < 0:
        raise ValueError(f"Casing radius cannot be negative, got {radius}")

    df = plotted.copy()
    cos_t = np.cos(df['theta'].to_numpy(dtype=float))
    sin_t = np.sin(df['theta'].to_numpy(dtype=float))

    df['upper_x'] = df['plot_x'] + radius * cos_t
    df['upper_y'] = df['plot_y'] - radius * sin_t
    df['lower_x'] = df['plot_x'] - radius * cos_t
    df['lower_y'] = df['plot_y'] + radius * sin_t
    return df


def centerline(plotted: pd.DataFrame) -> LineString:
    """Centerline through the plotted stations; needs at least two stations."""
    return LineString(plotted[['plot_x', 'plot_y']].to_numpy())


def envelope_polygon(envelope: pd.DataFrame) -> Polygon:
    """Closed casing outline: upper curve down the hole, lower curve back up.

    An envelope with fewer than two stations has no area and gives an empty Polygon.
    """
    if len(envelope) < 2:
        return Polygon()
    upper = envelope[['upper_x', 'upper_y']].to_numpy()
    lower = envelope[['lower_x', 'lower_y']].to_numpy()[::-1]
    return Polygon(np.vstack([upper, lower]))


def station_points(plotted: pd.DataFrame) -> List[Point]:
    """One shapely Point per station, used as pointer targets."""
    return [Point(x, y) for x, y in zip(plotted['plot_x'], plotted['plot_y'])]


def _thousands(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    return f"{value:,.0f}"


def tooltip_text(station: Mapping[str, Any]) -> str:
    """Hover label for a station.

    Example:
        >>> tooltip_text({'measured_depth': 12345.6, 'tvd': 9876.4})
        'MD: 12,346 | TVD: 9,876'
    """
    return f"MD: {_thousands(float(station['measured_depth']))} | TVD: {_thousands(float(station['tvd']))}"
