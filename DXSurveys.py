"""
DXSurveys.py
Author: Colton Goodrich
Date: 11/10/2024
Python Version: 3.12
Minimum curvature trajectory integration for directional well surveys.

This module converts a validated station table (measured depth, inclination,
azimuth) into cumulative wellbore positions using the minimum curvature method,
and projects the path into a vertical section: true vertical depth against
the along-path horizontal distance.

Key Features:
    - Vectorised dogleg and ratio factor calculation
    - Segment increments (east/west, north/south, vertical, horizontal arc)
    - Cumulative positions anchored at the first station
    - Dogleg severity per 100 depth units

Typical usage example:
    process = SurveyProcess(raw_df)
    positioned = process.positioned

Notes:
    - Input DataFrame columns:
        * measured_depth: Measured depth values
        * inclination: inclination angles in degrees
        * azimuth: azimuth angles in degrees
    - All positions share the linear unit of measured depth
    - Results depend only on the prefix of stations up to each row

Dependencies:
    - numpy
    - pandas
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt
import pandas as pd

from DXErrors import EmptySurveyError, SurveyInputError
from DXSurveyValidator import STATION_COLUMNS, validate_survey

logger = logging.getLogger(__name__)

# Doglegs at or below this (radians) are treated as straight segments
STRAIGHT_DOGLEG_TOL = 1e-5


def _dogleg(
        inc1: npt.NDArray[np.float64],
        inc2: npt.NDArray[np.float64],
        azi1: npt.NDArray[np.float64],
        azi2: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Total angular change (radians) between consecutive stations.

    The cosine is clipped to [-1, 1] so that rounding on straight segments
    cannot push arccos out of its domain.
    """
    cos_beta = np.sin(inc1) * np.sin(inc2) * (np.cos(azi2 - azi1) - 1) + np.cos(inc2 - inc1)
    return np.arccos(np.clip(cos_beta, -1.0, 1.0))


def _ratio_factor(beta: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Minimum curvature ratio factor 2*tan(beta/2)/beta, 1 for straight segments."""
    rf = np.ones_like(beta)
    curved = np.abs(beta) > STRAIGHT_DOGLEG_TOL
    rf[curved] = 2 * np.tan(beta[curved] / 2) / beta[curved]
    return rf


def segment_increments(
        md: npt.ArrayLike,
        inc: npt.ArrayLike,
        azi: npt.ArrayLike
) -> Dict[str, npt.NDArray[np.float64]]:
    """Compute minimum curvature increments for every consecutive station pair.

    Args:
        md: Measured depths, ascending
        inc: Inclinations in degrees
        azi: Azimuths in degrees

    Returns:
        Dict of arrays of length n - 1, one entry per segment:
            - delta_md: Segment length along the wellbore
            - dogleg: Dogleg angle beta in radians
            - ratio_factor: Minimum curvature ratio factor
            - delta_x: East/west increment
            - delta_y: North/south increment
            - delta_z: True vertical depth increment
            - delta_s: Horizontal arc increment, sqrt(dx^2 + dy^2)

    Examples:
        >>> inc = segment_increments([0, 100], [0, 0], [0, 0])
        >>> float(inc['delta_z'][0])
        100.0
    """
    md = np.asarray(md, dtype=float)
    inc_rad = np.radians(np.asarray(inc, dtype=float))
    azi_rad = np.radians(np.asarray(azi, dtype=float))

    i1, i2 = inc_rad[:-1], inc_rad[1:]
    a1, a2 = azi_rad[:-1], azi_rad[1:]

    beta = _dogleg(i1, i2, a1, a2)
    rf = _ratio_factor(beta)
    delta_md = np.diff(md)
    half = 0.5 * delta_md * rf

    delta_z = half * (np.cos(i1) + np.cos(i2))
    delta_x = half * (np.sin(i1) * np.sin(a1) + np.sin(i2) * np.sin(a2))
    delta_y = half * (np.sin(i1) * np.cos(a1) + np.sin(i2) * np.cos(a2))

    return {
        'delta_md': delta_md,
        'dogleg': beta,
        'ratio_factor': rf,
        'delta_x': delta_x,
        'delta_y': delta_y,
        'delta_z': delta_z,
        'delta_s': np.hypot(delta_x, delta_y),
    }


def _dogleg_severity(beta: npt.NDArray[np.float64], delta_md: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Dogleg severity in degrees per 100 depth units, 0 for zero-length segments."""
    dls = np.zeros_like(beta)
    moved = delta_md > 0
    dls[moved] = np.degrees(beta[moved]) / delta_md[moved] * 100
    return dls


def minimum_curvature(stations: pd.DataFrame) -> pd.DataFrame:
    """Integrate a station table into cumulative positions with minimum curvature.

    Args:
        stations: Validated stations (see DXSurveyValidator.validate_survey) with:
            - measured_depth (float): ascending measured depth
            - inclination (float): degrees
            - azimuth (float): degrees

    Returns:
        pd.DataFrame: The station columns (and any extra input columns such as
        'synthetic') plus:
            Segment values (ending at the row, 0 on the anchor):
                - delta_md, dogleg, ratio_factor
                - delta_x (east), delta_y (north), delta_z (vertical), delta_s
                - dls: Dogleg severity, degrees per 100 depth units
            Cumulative positions (0 on the anchor):
                - n_offset: North/south displacement
                - e_offset: East/west displacement
                - tvd: True vertical depth
                - horizontal_distance: Arc length of the horizontal projection

    Raises:
        SurveyInputError: If a station column is missing
        EmptySurveyError: If the table has no rows

    Notes:
        - Duplicate measured depths give zero-length segments that add nothing
        - horizontal_distance is non-decreasing; tvd is non-decreasing for
          inclinations up to 90 degrees

    Example:
        >>> stations = pd.DataFrame({
        ...     'measured_depth': [0, 1000],
        ...     'inclination': [0, 30],
        ...     'azimuth': [0, 90]
        ... })
        >>> positioned = minimum_curvature(stations)
        >>> print(positioned[['tvd', 'e_offset', 'horizontal_distance']])
    """
    missing = [c for c in STATION_COLUMNS if c not in stations.columns]
    if missing:
        raise SurveyInputError(f"Stations must contain columns: {missing}")
    if len(stations) == 0:
        raise EmptySurveyError()

    df = stations.reset_index(drop=True).copy()
    increments = segment_increments(df['measured_depth'], df['inclination'], df['azimuth'])
    increments['dls'] = _dogleg_severity(increments['dogleg'], increments['delta_md'])

    # Anchor row carries zero for every segment value
    for name, values in increments.items():
        df[name] = np.concatenate(([0.0], values))

    df['e_offset'] = df['delta_x'].cumsum()
    df['n_offset'] = df['delta_y'].cumsum()
    df['tvd'] = df['delta_z'].cumsum()
    df['horizontal_distance'] = df['delta_s'].cumsum()

    logger.debug(f"Minimum curvature over {len(df)} stations: "
                 f"TVD {df['tvd'].iloc[-1]:.2f}, horizontal {df['horizontal_distance'].iloc[-1]:.2f}")
    return df


class SurveyProcess:
    """Validate raw survey rows and integrate them into a positioned trajectory.

    Attributes:
        original (pd.DataFrame): Copy of the raw rows as supplied
        stations (pd.DataFrame): Validated, sorted stations (with surface station)
        positioned (pd.DataFrame): Stations with minimum curvature positions

    Args:
        rows: Raw survey rows (DataFrame or iterable of mappings)
        column_map: Optional field-to-column mapping passed to validate_survey

    Notes:
        - Validation errors propagate unchanged (ValidationError, EmptySurveyError,
          SurveyInputError)
        - Each instance is computed once; build a new one when the rows change
    """

    def __init__(self,
                 rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]],
                 column_map: Optional[Dict[str, str]] = None) -> None:
        """Initialize the SurveyProcess class and run validation and integration."""
        if isinstance(rows, pd.DataFrame):
            rows = rows.copy()
        else:
            rows = list(rows)
        self.original = rows
        self.stations = validate_survey(rows, column_map)
        self.positioned = minimum_curvature(self.stations)

    @property
    def final_position(self) -> Tuple[float, float, float]:
        """(north, east, tvd) of the deepest station."""
        last = self.positioned.iloc[-1]
        return float(last['n_offset']), float(last['e_offset']), float(last['tvd'])

    @property
    def total_horizontal_distance(self) -> float:
        return float(self.positioned['horizontal_distance'].iloc[-1])
