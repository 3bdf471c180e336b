"""Tests for utility functions."""

import math
from datetime import datetime, timezone

import numpy as np
import pytest

from facepay.errors import InvalidAmount
from facepay.utils import FrameRateLimiter, l2_distance, parse_amount, short_address, utc_timestamp


def test_l2_distance():
    assert l2_distance(np.zeros(3), np.array([3.0, 4.0, 0.0])) == pytest.approx(5.0)
    assert l2_distance([1.0, 1.0], [1.0, 1.0]) == 0.0


@pytest.mark.parametrize("value,expected", [
    ("25", 25.0),
    (" 0.01 ", 0.01),
    ("1e3", 1000.0),
    (25, 25.0),
    (2.5, 2.5),
])
def test_parse_amount_valid(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", [
    "", "   ", "abc", "0", "-5", "nan", "inf", "-inf", None, True, 0, -1.0, math.nan, [1],
])
def test_parse_amount_invalid(value):
    with pytest.raises(InvalidAmount):
        parse_amount(value)


def test_utc_timestamp():
    now = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
    assert utc_timestamp(now) == "2024-05-01T12:00:00.123+00:00"


def test_short_address():
    assert short_address("0x1234567890") == "0x1234..."
    assert short_address("0x12") == "0x12"


class TestFrameRateLimiter:
    """Test suite for FrameRateLimiter."""

    def test_unlimited(self):
        limiter = FrameRateLimiter(0)
        assert all(limiter.should_process() for _ in range(5))

    def test_limits_rate(self, monkeypatch):
        clock = [100.0]
        monkeypatch.setattr("facepay.utils.time.time", lambda: clock[0])
        limiter = FrameRateLimiter(10)

        assert limiter.should_process()
        assert not limiter.should_process()
        clock[0] += 0.2
        assert limiter.should_process()

        limiter.reset()
        assert limiter.should_process()
