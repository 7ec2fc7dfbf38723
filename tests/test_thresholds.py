"""Unit tests for band classification and desired alert kind."""
import pytest

from models import AlertKind, Band, Sample, Thresholds
from rules.thresholds import classify, color_hint, desired_alert, evaluate


THR = Thresholds(upper=90, lower=15)


def test_every_percent_maps_to_one_band():
    """Classification is total over [0, 100] in 0.1 steps."""
    for i in range(0, 1001):
        band = classify(i / 10, THR)
        assert isinstance(band, Band)


@pytest.mark.parametrize(
    "percent,expected",
    [
        (100, Band.FULL),
        (95, Band.HIGH),
        (90, Band.HIGH),          # upper itself is "at or above"
        (89.9, Band.MID_HIGH),
        (52.6, Band.MID_HIGH),
        (52.5, Band.MID_LOW),     # mid = 52.5 goes down
        (15.1, Band.MID_LOW),
        (15, Band.CRITICAL),      # lower itself is "at or below"
        (0, Band.CRITICAL),
    ],
)
def test_classify_boundaries(percent, expected):
    assert classify(percent, THR) is expected


def test_upper_of_100_gives_full_not_high():
    thr = Thresholds(upper=100, lower=20)
    assert classify(100, thr) is Band.FULL
    assert classify(99.9, thr) is Band.MID_HIGH


def test_desired_alert_depends_on_charging():
    assert desired_alert(Band.HIGH, charging=True) is AlertKind.UPPER
    assert desired_alert(Band.FULL, charging=True) is AlertKind.UPPER
    assert desired_alert(Band.HIGH, charging=False) is AlertKind.NONE
    assert desired_alert(Band.CRITICAL, charging=False) is AlertKind.LOWER
    assert desired_alert(Band.CRITICAL, charging=True) is AlertKind.NONE
    assert desired_alert(Band.MID_LOW, charging=False) is AlertKind.NONE


def test_evaluate_returns_band_and_kind():
    assert evaluate(Sample(0.0, 92, True), THR) == (Band.HIGH, AlertKind.UPPER)
    assert evaluate(Sample(0.0, 10, False), THR) == (Band.CRITICAL, AlertKind.LOWER)
    assert evaluate(Sample(0.0, 50, False), THR) == (Band.MID_LOW, AlertKind.NONE)


def test_color_hint():
    assert color_hint(Band.HIGH, charging=False) == "green"
    assert color_hint(Band.MID_HIGH, charging=False) == "yellowgreen"
    assert color_hint(Band.MID_LOW, charging=False) == "orange"
    assert color_hint(Band.CRITICAL, charging=False) == "red"
    assert color_hint(Band.MID_LOW, charging=True) == "blue"
    assert color_hint(Band.FULL, charging=True) == "green"
