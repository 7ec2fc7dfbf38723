"""Unit tests for startup configuration validation."""
import pytest

from errors import ConfigurationError
from models import AlertConfig, Thresholds
from rules.validator import validate_alert_config


def cfg(upper=90, lower=15, full="full.wav", low="low.wav"):
    return AlertConfig(thresholds=Thresholds(upper=upper, lower=lower), full_sound=full, low_sound=low)


def test_valid_config_returns_resolved_paths(resolver):
    sounds = validate_alert_config(cfg(), resolver)
    assert sounds.full_sound == "/sounds/full.wav"
    assert sounds.low_sound == "/sounds/low.wav"


def test_inverted_thresholds_rejected(resolver):
    with pytest.raises(ConfigurationError, match="lower must be less than upper"):
        validate_alert_config(cfg(upper=40, lower=50), resolver)


def test_equal_thresholds_rejected(resolver):
    with pytest.raises(ConfigurationError, match="lower must be less than upper"):
        validate_alert_config(cfg(upper=50, lower=50), resolver)


@pytest.mark.parametrize("upper", [0, -5, 100.5, float("nan")])
def test_upper_out_of_range(upper, resolver):
    with pytest.raises(ConfigurationError, match="UpperThreshold"):
        validate_alert_config(cfg(upper=upper), resolver)


@pytest.mark.parametrize("lower", [-1, 100, float("nan")])
def test_lower_out_of_range(lower, resolver):
    with pytest.raises(ConfigurationError, match="LowerThreshold"):
        validate_alert_config(cfg(lower=lower), resolver)


def test_boundaries_accepted(resolver):
    validate_alert_config(cfg(upper=100, lower=0), resolver)


def test_first_failing_check_wins(resolver):
    # upper out of range is reported before the missing sound
    with pytest.raises(ConfigurationError, match="UpperThreshold"):
        validate_alert_config(cfg(upper=150, full=""), resolver)


def test_missing_sound_names(resolver):
    with pytest.raises(ConfigurationError, match="FullBatterySound file name is missing"):
        validate_alert_config(cfg(full="  "), resolver)
    with pytest.raises(ConfigurationError, match="LowBatterySound file name is missing"):
        validate_alert_config(cfg(low=""), resolver)


def test_unresolvable_sound():
    def resolver(ref):
        return None if ref == "low.wav" else f"/x/{ref}"

    with pytest.raises(ConfigurationError, match="LowBatterySound file not found: low.wav"):
        validate_alert_config(cfg(), resolver)
