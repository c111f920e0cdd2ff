"""Plot configuration for the wellbore profile: margins, viewport and scale settings.

Settings are frozen dataclasses with the defaults used by the profile chart.
They can be built from a plain dict or loaded from a YAML file:

    margins:
      top: 20
      right: 40
      bottom: 40
      left: 80
    tick_count: 20
    radius_fraction: 0.025
"""

import inspect
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from DXErrors import ConfigError

logger = logging.getLogger(__name__)


def _number(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{name}' must be numeric, got {value!r}") from e
    if not math.isfinite(number):
        raise ConfigError(f"'{name}' must be finite, got {value!r}")
    return number


def _whole_number(name: str, value: Any) -> int:
    number = _number(name, value)
    if not number.is_integer():
        raise ConfigError(f"'{name}' must be a whole number, got {value!r}")
    return int(number)


def _known_keys(cls, d: Dict[str, Any]) -> Dict[str, Any]:
    valid_keys = inspect.signature(cls).parameters
    unknown = sorted(k for k in d if k not in valid_keys)
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {unknown}")
    return {k: v for k, v in d.items() if k in valid_keys}


@dataclass(frozen=True)
class Margins:
    """Space in plot units between the viewport edge and the plot area."""
    top: float = 20.0
    right: float = 40.0
    bottom: float = 40.0
    left: float = 80.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Margins":
        """Create from YAML dict, ignoring unknown keys."""
        return cls(**{k: _number(f"margins.{k}", v) for k, v in _known_keys(cls, d).items()})


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(frozen=True)
class PlotConfig:
    """Settings consumed by the scale mapper and the casing envelope.

    Attributes:
        margins: Plot margins (top/right/bottom/left)
        tick_count: Target tick count used for "nice" domain rounding
        radius_fraction: Casing radius as a fraction of the smaller viewport side
        lower_pad: Fraction of the domain maximum subtracted from the minimum
        upper_pad: Fraction of the domain maximum added above it
        min_domain_span: Span given to a domain that collapses to a point
    """
    margins: Margins = field(default_factory=Margins)
    tick_count: int = 20
    radius_fraction: float = 0.025
    lower_pad: float = 0.01
    upper_pad: float = 0.05
    min_domain_span: float = 1.0

    def __post_init__(self) -> None:
        if self.tick_count <= 0:
            raise ConfigError(f"tick_count must be positive, got {self.tick_count}")
        if self.radius_fraction < 0:
            raise ConfigError(f"radius_fraction cannot be negative, got {self.radius_fraction}")
        for name in ('lower_pad', 'upper_pad'):
            pad = getattr(self, name)
            if not 0 <= pad < 1:
                raise ConfigError(f"{name} must be in [0, 1), got {pad}")
        if self.min_domain_span <= 0:
            raise ConfigError(f"min_domain_span must be positive, got {self.min_domain_span}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PlotConfig":
        """Create from YAML dict, ignoring unknown keys."""
        kwargs: Dict[str, Any] = {}
        for key, value in _known_keys(cls, d).items():
            if key == 'margins':
                if not isinstance(value, dict):
                    raise ConfigError(f"'margins' must be a mapping, got {type(value).__name__}")
                kwargs[key] = Margins.from_dict(value)
            elif key == 'tick_count':
                kwargs[key] = _whole_number(key, value)
            else:
                kwargs[key] = _number(key, value)
        return cls(**kwargs)

    def plot_area(self, viewport: Viewport) -> Viewport:
        """Width and height left for the plot once margins are removed (may be negative)."""
        return Viewport(
            width=viewport.width - (self.margins.left + self.margins.right),
            height=viewport.height - (self.margins.top + self.margins.bottom),
        )


def load_plot_config(path: str) -> PlotConfig:
    """Read a PlotConfig from a YAML file.

    Raises:
        ConfigError: If the file cannot be read, is not a mapping, or holds
            invalid values
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read YAML '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML must be a mapping/dict: {path}")
    return PlotConfig.from_dict(data)
