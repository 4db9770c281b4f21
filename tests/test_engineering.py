import re

import numpy as np
import pytest

from fraud_service.features.engineering import (
    FEATURE_NAMES,
    feature_index,
    feature_label,
    format_number,
    format_time,
    generate_feature_vector,
)


@pytest.mark.parametrize("seconds,expected", [
    (0, "12:00 AM"),
    (59, "12:00 AM"),
    (3600, "1:00 AM"),
    (9000, "2:30 AM"),
    (43199, "11:59 AM"),
    (43200, "12:00 PM"),
    (50000, "1:53 PM"),
    (86340, "11:59 PM"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


def test_format_time_shape_over_the_day():
    pattern = re.compile(r"^\d{1,2}:\d{2} (AM|PM)$")
    for seconds in range(0, 86400, 397):
        assert pattern.match(format_time(seconds))


def test_feature_vector_shape_and_range():
    for _ in range(50):
        values = generate_feature_vector()
        assert len(values) == 28
        assert all(-1 <= v <= 1 for v in values)
        assert all(round(v, 8) == v for v in values)


def test_feature_vector_with_seeded_generator():
    first = generate_feature_vector(np.random.default_rng(7))
    second = generate_feature_vector(np.random.default_rng(7))
    assert first == second


def test_feature_vector_is_centred():
    rng = np.random.default_rng(0)
    values = np.array([generate_feature_vector(rng) for _ in range(200)])
    assert abs(values.mean()) < 0.05


def test_feature_labels():
    assert FEATURE_NAMES[0] == "V1"
    assert FEATURE_NAMES[-1] == "V28"
    assert feature_label(13) == "V14"
    assert feature_index("V14") == 13


@pytest.mark.parametrize("name", ["V0", "V29", "X1", "V", "Vx", "time"])
def test_feature_index_rejects_unknown_names(name):
    with pytest.raises(ValueError):
        feature_index(name)


def test_feature_names_use_labels():
    assert FEATURE_NAMES == [feature_label(i) for i in range(28)]


@pytest.mark.parametrize("value,expected", [
    (0.0, "0"),
    (10800, "10800"),
    (50000.0, "50000"),
    (1.5, "1.5"),
    (-2, "-2"),
    (1.99, "1.99"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected
