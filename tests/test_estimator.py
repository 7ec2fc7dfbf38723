"""Unit tests for the rolling-window charge rate estimator."""
import pytest

from models import Sample
from rules.estimator import ChargeRateEstimator


def test_time_to_full_from_two_samples():
    est = ChargeRateEstimator()
    assert est.update(Sample(0.0, 25.0, True)) is None

    result = est.update(Sample(20.0, 30.0, True))
    assert result is not None
    assert result.seconds_per_percent == pytest.approx(4.0)
    assert result.remaining_seconds == pytest.approx(280.0)


def test_window_never_exceeds_capacity():
    est = ChargeRateEstimator()
    for i in range(12):
        est.update(Sample(float(i * 5), 20.0 + i, True))
        assert len(est.window) <= 5

    # oldest evicted: window holds samples 7..11
    assert est.window[0] == (35.0, 27.0)
    assert est.window[-1] == (55.0, 31.0)


def test_discharging_clears_window():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 40.0, True))
    est.update(Sample(5.0, 41.0, True))
    assert est.update(Sample(10.0, 41.0, False)) is None
    assert est.window == ()


def test_no_estimate_without_movement():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 50.0, True))
    assert est.update(Sample(5.0, 50.0, True)) is None
    assert est.update(Sample(10.0, 50.005, True)) is None


def test_no_estimate_when_dropping_while_plugged():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 60.0, True))
    assert est.update(Sample(5.0, 59.0, True)) is None


def test_remaining_is_zero_at_full():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 98.0, True))
    result = est.update(Sample(10.0, 100.0, True))
    assert result.remaining_seconds == 0.0


def test_restore_keeps_capacity():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 10.0, True))
    snap = est.snapshot()
    est.update(Sample(5.0, 11.0, False))
    est.restore(snap)
    assert est.window == ((0.0, 10.0),)
    for i in range(10):
        est.update(Sample(float(i), 10.0 + i, True))
    assert len(est.window) == 5


def test_clear_drops_history():
    est = ChargeRateEstimator()
    est.update(Sample(0.0, 40.0, True))
    est.update(Sample(5.0, 41.0, True))
    est.clear()
    assert est.window == ()
    assert est.update(Sample(10.0, 42.0, True)) is None
