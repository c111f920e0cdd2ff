"""Parsing and validation of raw directional survey rows.

Turns the rows supplied by the host into a station table that the
minimum curvature integration can consume:

    - Column resolution (measured_depth/md/MD, inclination/inc/INC, azimuth/az/azi/AZI)
    - Range checks on every row, reporting the first offending row (1-based)
    - Stable sort by measured depth
    - A synthetic surface station when the survey does not start at the wellhead

Typical usage example:
    stations = validate_survey(pd.DataFrame({
        'MD': [500, 1000],
        'INC': [5, 10],
        'AZI': [90, 90]
    }))
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from DXErrors import EmptySurveyError, SurveyInputError, ValidationError

logger = logging.getLogger(__name__)

STATION_COLUMNS = ('measured_depth', 'inclination', 'azimuth')

COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    'measured_depth': ('measured_depth', 'md', 'MD'),
    'inclination': ('inclination', 'inc', 'INC'),
    'azimuth': ('azimuth', 'az', 'azi', 'AZI'),
}

# First stations deeper than this get a synthetic wellhead station
SURFACE_TOLERANCE = 0.1

_LABELS = {'measured_depth': 'MD', 'inclination': 'Inclination', 'azimuth': 'Azimuth'}


def _to_frame(rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]]) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    if isinstance(rows, (str, bytes)) or not isinstance(rows, Iterable):
        raise SurveyInputError(f"Survey rows must be a DataFrame or an iterable of mappings, "
                               f"got {type(rows).__name__}")
    records = list(rows)
    if not all(isinstance(r, Mapping) for r in records):
        raise SurveyInputError("Every survey row must be a mapping of field names to values")
    return pd.DataFrame.from_records(records)


def _resolve_columns(df: pd.DataFrame, column_map: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Map each station field to the input column holding it."""
    resolved = {}
    for name in STATION_COLUMNS:
        if column_map and name in column_map:
            candidates: Tuple[str, ...] = (column_map[name],)
        else:
            candidates = COLUMN_ALIASES[name]
        found = next((c for c in candidates if c in df.columns), None)
        if found is None:
            raise SurveyInputError(f"Survey must contain a '{name}' column (one of {list(candidates)})")
        resolved[name] = found
    return resolved


def _row_violation(md: float, inc: float, az: float) -> Optional[Tuple[str, str]]:
    """Return (field, message template) for the first failed range rule, or None."""
    if inc < 0 or inc > 180:
        return 'inclination', "Inclination {value} out of range at row {row}. check survey"
    if md < 0:
        return 'measured_depth', "MD {value} cannot be negative. check survey at row {row}"
    # Azimuth is a half-open range, 360 itself is rejected
    if az < 0 or az >= 360:
        return 'azimuth', "Azimuth {value} out of range at row {row}. check survey"
    return None


def validate_survey(
        rows: Union[pd.DataFrame, Iterable[Mapping[str, Any]]],
        column_map: Optional[Dict[str, str]] = None
) -> pd.DataFrame:
    """Validate raw survey rows and return an ordered station table.

    Args:
        rows: Survey rows as a DataFrame, or any iterable of mappings. Each row
            must provide measured depth, inclination (degrees) and azimuth (degrees).
        column_map: Optional explicit mapping from station field name
            ('measured_depth', 'inclination', 'azimuth') to input column name.
            Fields not listed are looked up through COLUMN_ALIASES.

    Returns:
        pd.DataFrame: Stations sorted by measured depth with columns:
            - measured_depth (float)
            - inclination (float, degrees)
            - azimuth (float, degrees)
            - synthetic (bool): True for a prepended wellhead station

    Raises:
        SurveyInputError: If the input type is unsupported or a column is missing
        EmptySurveyError: If there are no rows
        ValidationError: For the first row holding a non-numeric or out of range value

    Notes:
        - Rows are checked in input order, so the reported row number matches
          the host's row numbering
        - Sorting is stable; stations sharing a measured depth keep input order
        - A {0, 0, 0} station is prepended when the shallowest station lies
          deeper than SURFACE_TOLERANCE

    Examples:
        >>> validate_survey([{'md': 100, 'inc': 0, 'az': 0}])['measured_depth'].tolist()
        [0.0, 100.0]
    """
    df = _to_frame(rows)
    if len(df) == 0:
        raise EmptySurveyError()

    columns = _resolve_columns(df, column_map)
    raw = df[[columns[name] for name in STATION_COLUMNS]].copy()
    raw.columns = list(STATION_COLUMNS)

    # Non-numeric entries become NaN and are reported with their raw value
    values = raw.apply(pd.to_numeric, errors='coerce').astype(float)
    finite = np.isfinite(values.to_numpy())

    for position, (md, inc, az) in enumerate(values.itertuples(index=False, name=None)):
        row = position + 1
        for col, name in enumerate(STATION_COLUMNS):
            if not finite[position, col]:
                value = raw.iloc[position, col]
                raise ValidationError(
                    row, name, value,
                    f"{_LABELS[name]} {value!r} is not a number at row {row}. check survey"
                )
        violation = _row_violation(md, inc, az)
        if violation is not None:
            name, template = violation
            value = {'measured_depth': md, 'inclination': inc, 'azimuth': az}[name]
            raise ValidationError(row, name, value, template.format(value=value, row=row))

    stations = values.sort_values('measured_depth', kind='mergesort').reset_index(drop=True)
    stations['synthetic'] = False

    if stations['measured_depth'].iloc[0] > SURFACE_TOLERANCE:
        surface = pd.DataFrame({'measured_depth': [0.0], 'inclination': [0.0],
                                'azimuth': [0.0], 'synthetic': [True]})
        stations = pd.concat([surface, stations]).reset_index(drop=True)
        logger.debug(f"Inserted surface station above first MD "
                     f"{stations['measured_depth'].iloc[1]}")

    logger.debug(f"Validated {len(df)} survey rows into {len(stations)} stations")
    return stations
