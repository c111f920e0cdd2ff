"""Linear plot scales for the vertical-section profile.

Each axis gets an independent linear mapping from the data domain to the plot
range. The domain is padded asymmetrically (1% of the maximum below the
minimum, 5% above the maximum), widened when it collapses to a point, then rounded
outward to 1/2/5 x 10^k tick boundaries.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import numpy.typing as npt
import pandas as pd

from DXConfig import PlotConfig, Viewport
from DXErrors import EmptySurveyError

logger = logging.getLogger(__name__)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)

# Outward rounding converges in a couple of passes; this bounds pathological input
_NICE_MAX_ITER = 10

Number = Union[float, int]


def padded_domain(
        values: npt.ArrayLike,
        lower_pad: float = 0.01,
        upper_pad: float = 0.05,
        min_span: float = 1.0
) -> Tuple[float, float]:
    """Padded domain (min - lower_pad*max, (1 + upper_pad)*max) of the values.

    When the padded domain collapses to a point (all values zero, e.g. a
    vertical well on the horizontal axis) the upper bound is moved to
    lower + min_span. Small but non-zero spans are kept as they are.

    Examples:
        >>> padded_domain([0, 100])
        (-1.0, 105.0)
        >>> padded_domain([0, 0])
        (0.0, 1.0)
        >>> padded_domain([0, 0.5])
        (-0.005, 0.525)
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise EmptySurveyError("Cannot build a scale domain from no values")
    lo, hi = float(np.min(arr)), float(np.max(arr))
    lower = lo - lower_pad * hi
    upper = (1 + upper_pad) * hi
    if upper == lower:
        logger.debug(f"Degenerate domain [{lower}, {upper}], widening to span {min_span}")
        upper = lower + min_span
    return lower, upper


def tick_increment(start: float, stop: float, count: Number) -> float:
    """Step between "nice" ticks covering [start, stop] with about count ticks.

    Positive results are the step itself. Steps below 1 are returned as the
    negative inverse (-10 means a step of 0.1) so they stay exact integers.
    """
    if count <= 0:
        return 0.0
    step = (stop - start) / count
    if not step > 0 or not math.isfinite(step):
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def nice_domain(start: float, stop: float, count: Number = 10) -> Tuple[float, float]:
    """Extend [start, stop] outward to tick boundaries for the given tick count.

    Examples:
        >>> nice_domain(-1, 105, 20)
        (-5, 105)
    """
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    prestep = None
    for _ in range(_NICE_MAX_ITER):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step

    return (stop, start) if reverse else (start, stop)


def ticks(start: float, stop: float, count: Number = 10) -> List[float]:
    """Tick values inside [start, stop] at the nice step for count ticks."""
    if start == stop and count > 0:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    step = tick_increment(start, stop, count)
    if step == 0 or not math.isfinite(step):
        return []
    if step > 0:
        i0, i1 = math.ceil(start / step), math.floor(stop / step)
        values = [i * step for i in range(i0, i1 + 1)]
    else:
        inv = -step
        i0, i1 = math.ceil(start * inv), math.floor(stop * inv)
        values = [i / inv for i in range(i0, i1 + 1)]
    return values[::-1] if reverse else values


class LinearScale:
    """Linear mapping from a data domain to a plot range.

    Attributes:
        domain (Tuple[float, float]): Data interval (d0, d1)
        range (Tuple[float, float]): Plot interval (r0, r1); r0 maps from d0

    Example:
        >>> scale = LinearScale((0, 100), (80, 760))
        >>> scale(50)
        420.0
        >>> scale.invert(420)
        50.0
    """

    def __init__(self, domain: Sequence[Number], range: Sequence[Number]) -> None:
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range[0]), float(range[1]))

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        x = np.asarray(value, dtype=float)
        if d1 == d0:
            # Zero span: everything lands mid-range
            mapped = np.full_like(x, (r0 + r1) / 2)
        else:
            mapped = r0 + (x - d0) / (d1 - d0) * (r1 - r0)
        return float(mapped) if mapped.ndim == 0 else mapped

    def invert(self, value):
        r0, r1 = self.range
        d0, d1 = self.domain
        y = np.asarray(value, dtype=float)
        if r1 == r0:
            mapped = np.full_like(y, (d0 + d1) / 2)
        else:
            mapped = d0 + (y - r0) / (r1 - r0) * (d1 - d0)
        return float(mapped) if mapped.ndim == 0 else mapped

    def nice(self, count: Number = 10) -> "LinearScale":
        """Return a copy whose domain is extended to nice tick boundaries."""
        return LinearScale(nice_domain(*self.domain, count), self.range)

    def ticks(self, count: Number = 10) -> List[float]:
        return ticks(*self.domain, count)


def get_scales(
        positioned: pd.DataFrame,
        viewport: Viewport,
        config: Optional[PlotConfig] = None
) -> Tuple[LinearScale, LinearScale]:
    """Build the horizontal and vertical scales for a positioned survey.

    Args:
        positioned: Output of DXSurveys.minimum_curvature (needs
            'horizontal_distance' and 'tvd')
        viewport: Full drawing size
        config: Margins, padding, minimum span and tick count

    Returns:
        Tuple of (x_scale, y_scale):
            - x_scale: horizontal_distance -> [left, width - right]
            - y_scale: tvd -> [top, height - bottom], depth increasing downward
    """
    config = config or PlotConfig()
    margins = config.margins

    x_domain = padded_domain(positioned['horizontal_distance'],
                             config.lower_pad, config.upper_pad, config.min_domain_span)
    x_scale = LinearScale(x_domain, (margins.left, viewport.width - margins.right)).nice(config.tick_count)

    y_domain = padded_domain(positioned['tvd'],
                             config.lower_pad, config.upper_pad, config.min_domain_span)
    y_scale = LinearScale(y_domain, (margins.top, viewport.height - margins.bottom)).nice(config.tick_count)

    logger.debug(f"Scales: x {x_scale.domain} -> {x_scale.range}, y {y_scale.domain} -> {y_scale.range}")
    return x_scale, y_scale
