# tests/conftest.py
import pathlib
import sys

import pandas as pd
import pytest

# Modules live at the repository root
REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def build_and_hold_rows():
    """Vertical to 1000, build to 60 degrees by 3000, hold to 5000."""
    return pd.DataFrame({
        'MD': [1000, 1500, 2000, 2500, 3000, 4000, 5000],
        'INC': [0, 12, 24, 36, 48, 60, 60],
        'AZI': [0, 45, 45, 45, 45, 45, 45],
    })


@pytest.fixture
def two_station_rows():
    return [{'md': 0, 'inc': 0, 'az': 0}, {'md': 1000, 'inc': 30, 'az': 90}]
