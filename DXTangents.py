"""Station-wise tangent estimation in plot space.

The casing envelope is drawn as two curves offset from the centerline along
its normal. The normal has to look perpendicular on screen, so slopes are
taken between mapped (scaled) station coordinates, not physical ones.

For every station the slope m comes from a secant:
    FIRST     forward secant to the next station
    LAST      backward secant from the previous station
    INTERIOR  mean of the forward and backward secants
    SOLE      none (single-station survey)

theta = atan(-1/m), shifted into [0, pi). A theta that comes out NaN (zero
length secants, opposite infinite slopes) is replaced through
carry_last_theta.
"""

import logging
import math
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

from DXScales import LinearScale

logger = logging.getLogger(__name__)

# Theta used when the first station has no usable slope: a vertical
# centerline at the wellhead, offsets to either side
FIRST_STATION_THETA = 0.0


class StationPosition(Enum):
    FIRST = 'first'
    INTERIOR = 'interior'
    LAST = 'last'
    SOLE = 'sole'


def classify_station(index: int, count: int) -> StationPosition:
    """Position of station `index` in a survey of `count` stations."""
    if count < 1 or not 0 <= index < count:
        raise IndexError(f"Station {index} outside survey of {count} stations")
    if count == 1:
        return StationPosition.SOLE
    if index == 0:
        return StationPosition.FIRST
    if index == count - 1:
        return StationPosition.LAST
    return StationPosition.INTERIOR


def secant_slope(x0: float, y0: float, x1: float, y1: float) -> float:
    """Screen slope between two mapped points, (y0 - y1) / (x1 - x0).

    Screen y grows downward, so the sign is flipped to give the usual
    orientation. Division follows IEEE rules: a vertical secant is +/-inf and
    a zero-length one is NaN.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.float64(y0 - y1) / np.float64(x1 - x0))


def slope_at(position: StationPosition, xs: np.ndarray, ys: np.ndarray, index: int) -> float:
    if position is StationPosition.FIRST:
        return secant_slope(xs[index], ys[index], xs[index + 1], ys[index + 1])
    if position is StationPosition.LAST:
        return secant_slope(xs[index - 1], ys[index - 1], xs[index], ys[index])
    if position is StationPosition.INTERIOR:
        forward = secant_slope(xs[index], ys[index], xs[index + 1], ys[index + 1])
        backward = secant_slope(xs[index - 1], ys[index - 1], xs[index], ys[index])
        return 0.5 * forward + 0.5 * backward
    return math.nan


def theta_from_slope(m: float) -> float:
    """Angle of the normal to a line of slope m, in [0, pi); NaN if undefined."""
    with np.errstate(divide='ignore', invalid='ignore'):
        theta = float(np.arctan(np.float64(-1.0) / np.float64(m)))
    if theta < 0:
        theta += math.pi
    if theta >= math.pi:
        # tiny negative angles round up to pi, which is the same normal as 0
        theta = 0.0
    # -0.0 from atan(-0.0) becomes 0.0
    return theta + 0.0


def carry_last_theta(previous: Optional[float]) -> float:
    """Fallback for an undefined theta: reuse the previous station's theta.

    The first station has no predecessor and gets FIRST_STATION_THETA.
    """
    if previous is None:
        return FIRST_STATION_THETA
    return previous


def estimate_tangents(
        positioned: pd.DataFrame,
        x_scale: LinearScale,
        y_scale: LinearScale
) -> pd.DataFrame:
    """Add mapped coordinates, slope and theta to every station.

    Args:
        positioned: Output of DXSurveys.minimum_curvature
        x_scale: horizontal_distance -> plot x
        y_scale: tvd -> plot y

    Returns:
        pd.DataFrame: Copy of positioned with extra columns:
            - plot_x, plot_y: Mapped station coordinates
            - slope: Secant slope m in plot space
            - theta: Normal angle in radians, [0, pi)
            - theta_fallback: True where carry_last_theta supplied theta
    """
    df = positioned.reset_index(drop=True).copy()
    xs = np.asarray(x_scale(df['horizontal_distance'].to_numpy(dtype=float)), dtype=float)
    ys = np.asarray(y_scale(df['tvd'].to_numpy(dtype=float)), dtype=float)

    count = len(df)
    slopes: List[float] = []
    thetas: List[float] = []
    fallbacks: List[bool] = []
    previous: Optional[float] = None

    for index in range(count):
        position = classify_station(index, count)
        m = slope_at(position, xs, ys, index)
        theta = theta_from_slope(m)
        fallback = math.isnan(theta)
        if fallback:
            theta = carry_last_theta(previous)
            logger.debug(f"Undefined theta at station {index} ({position.value}), using {theta:.4f}")
        slopes.append(m)
        thetas.append(theta)
        fallbacks.append(fallback)
        previous = theta

    df['plot_x'] = xs
    df['plot_y'] = ys
    df['slope'] = slopes
    df['theta'] = thetas
    df['theta_fallback'] = fallbacks
    return df
