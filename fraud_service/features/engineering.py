import numpy as np
from typing import List, Optional

from fraud_service.config import Config

def feature_label(index: int) -> str:
    """Display name of the feature at 0-based `index` (0 -> 'V1')."""
    return f"V{index + 1}"

# Anonymized feature columns, 1-indexed for display
FEATURE_NAMES = [feature_label(i) for i in range(Config.FEATURE_COUNT)]

# Example values offered when entering a transaction by hand
TIME_SUGGESTIONS = [
    {"value": 0, "label": "12:00 AM (Midnight)"},
    {"value": 3600, "label": "1:00 AM"},
    {"value": 9000, "label": "2:30 AM"},
    {"value": 21600, "label": "6:00 AM"},
    {"value": 43200, "label": "12:00 PM (Noon)"},
    {"value": 64800, "label": "6:00 PM"},
    {"value": 86340, "label": "11:59 PM"},
]

AMOUNT_SUGGESTIONS = [
    {"value": 0.99, "label": "$0.99 - Test Transaction"},
    {"value": 1.99, "label": "$1.99 - Small Test"},
    {"value": 149.62, "label": "$149.62 - Medium Purchase"},
    {"value": 15000, "label": "$15,000 - Very Large"},
    {"value": 900000, "label": "$900,000 - Extremely Large"},
]


def feature_index(name: str) -> int:
    """
    Map a feature label such as 'V14' back to its 0-based position.

    Raises:
        ValueError: if `name` is not one of V1..V28
    """
    if len(name) < 2 or name[0] != "V" or not name[1:].isdigit():
        raise ValueError(f"Unknown feature: {name!r}")

    index = int(name[1:]) - 1
    if not 0 <= index < Config.FEATURE_COUNT:
        raise ValueError(f"Feature out of range: {name!r}")

    return index

def generate_feature_vector(rng: Optional[np.random.Generator] = None) -> List[float]:
    """
    Generate a random vector of anonymized transaction features.

    Each value is the mean of six uniform samples in [-1, 1], which gives a
    roughly normal shape centred at 0 while staying inside [-1, 1].
    Values are rounded to 8 decimal places.

    Args:
        rng: Optional numpy generator; pass a seeded one for reproducible output

    Returns:
        List of 28 floats, index 0 being V1
    """
    if rng is None:
        rng = np.random.default_rng()

    samples = rng.uniform(-1.0, 1.0, size=(Config.FEATURE_COUNT, Config.SAMPLES_PER_FEATURE))
    values = np.round(samples.mean(axis=1), Config.FEATURE_DECIMALS)

    return [float(v) for v in values]

def format_time(seconds: float) -> str:
    """Render seconds since midnight as a 12-hour clock string, e.g. '2:30 AM'."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)

    period = "AM" if hours < 12 else "PM"
    hour = hours % 12
    if hour == 0:
        hour = 12

    return f"{hour}:{minutes:02d} {period}"

def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for whole values, e.g. 10800 or 1.5"""
    return str(int(value)) if float(value).is_integer() else str(value)
