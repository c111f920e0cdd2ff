"""Error taxonomy and error channels for the wellbore profile render cycle.

Exceptions are raised by the stage that detects the problem. The render cycle
in mainDX converts them into outcome values and the host shows them through
an ErrorChannels instance, one channel per error source.
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DATA_VIEW_CHANNEL = 'dataView'
SURVEY_CHANNEL = 'survey'


class SurveyError(Exception):
    """Base class for all survey processing errors."""
    pass


class DataFetchError(SurveyError):
    """Raised by the data-access layer when the rows cannot be read."""
    pass


class ConfigError(SurveyError):
    """Raised for unreadable or invalid plot configuration."""
    pass


class SurveyInputError(SurveyError, ValueError):
    """The row set itself is unusable (missing columns, unsupported type)."""
    pass


class EmptySurveyError(SurveyError, ValueError):
    """Raised when there are no stations to process."""

    def __init__(self, message: str = "Survey contains no stations. check survey") -> None:
        super().__init__(message)


class ValidationError(SurveyError, ValueError):
    """A single survey row holds a value outside its physical domain.

    Attributes:
        row: 1-based index of the offending row in the input order
        field: Name of the offending field ('measured_depth', 'inclination', 'azimuth')
        value: The raw value found in the row
    """

    def __init__(self, row: int, field: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.row = row
        self.field = field
        self.value = value


class ErrorChannels:
    """Two independently toggled error channels.

    One channel reports data-fetch errors, the other survey validation errors.
    Each channel holds at most one message with its category tag and is
    cleared on its own when the condition resolves.

    Example:
        >>> channels = ErrorChannels()
        >>> channels.show(SURVEY_CHANNEL, 'Inclination 200 out of range at row 3. check survey')
        >>> channels.active
        {'survey': 'Inclination 200 out of range at row 3. check survey'}
        >>> channels.hide(SURVEY_CHANNEL)
        >>> channels.active
        {}
    """

    CHANNELS = (DATA_VIEW_CHANNEL, SURVEY_CHANNEL)

    def __init__(self) -> None:
        self._messages: Dict[str, Optional[str]] = {name: None for name in self.CHANNELS}

    def _check(self, channel: str) -> None:
        if channel not in self._messages:
            raise KeyError(f"Unknown error channel '{channel}', expected one of {self.CHANNELS}")

    def show(self, channel: str, message: str) -> None:
        self._check(channel)
        logger.warning(f"[{channel}] {message}")
        self._messages[channel] = message

    def hide(self, channel: str) -> None:
        self._check(channel)
        self._messages[channel] = None

    def message(self, channel: str) -> Optional[str]:
        self._check(channel)
        return self._messages[channel]

    def is_shown(self, channel: str) -> bool:
        return self.message(channel) is not None

    @property
    def active(self) -> Dict[str, str]:
        """Messages of the channels currently shown, keyed by category."""
        return {name: msg for name, msg in self._messages.items() if msg is not None}
