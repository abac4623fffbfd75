# ABOUTME: Tests overdue and late wait classification against configured thresholds.
# ABOUTME: Checks the closed-open interval boundaries and config validation.

import pytest

from src.booking_common.errors import InvalidConfig, InvalidSnapshot
from src.booking_common.schemas import WaitConfig, WaitWarningLevel
from src.priority_engine.wait_warning import WaitWarningClassifier, classify

CONFIG = WaitConfig(base_wait_days=10, overdue_multiplier=3, late_multiplier=4)


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, WaitWarningLevel.NONE),
        (29, WaitWarningLevel.NONE),
        (30, WaitWarningLevel.OVERDUE),
        (39, WaitWarningLevel.OVERDUE),
        (40, WaitWarningLevel.LATE),
        (365, WaitWarningLevel.LATE),
    ],
)
def test_classify_boundaries(days, expected):
    assert classify(days, CONFIG) is expected


def test_fractional_multipliers():
    config = WaitConfig(base_wait_days=7, overdue_multiplier=1.5, late_multiplier=2.5)
    assert classify(10, config) is WaitWarningLevel.NONE
    assert classify(11, config) is WaitWarningLevel.OVERDUE
    assert classify(17, config) is WaitWarningLevel.OVERDUE
    assert classify(18, config) is WaitWarningLevel.LATE


def test_classifier_defaults_to_built_in_wait():
    classifier = WaitWarningClassifier()
    assert classifier.config.base_wait_days == 9
    assert classifier.classify(26) is WaitWarningLevel.NONE
    assert classifier.classify(27) is WaitWarningLevel.OVERDUE
    assert classifier.classify(36) is WaitWarningLevel.LATE


def test_negative_days_rejected():
    with pytest.raises(InvalidSnapshot):
        classify(-1, CONFIG)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_wait_days": 0, "overdue_multiplier": 3, "late_multiplier": 4},
        {"base_wait_days": -5, "overdue_multiplier": 3, "late_multiplier": 4},
        {"base_wait_days": 10, "overdue_multiplier": 4, "late_multiplier": 4},
        {"base_wait_days": 10, "overdue_multiplier": 5, "late_multiplier": 4},
        {"base_wait_days": 10, "overdue_multiplier": "3", "late_multiplier": 4},
    ],
)
def test_invalid_wait_config(kwargs):
    with pytest.raises(InvalidConfig):
        WaitConfig(**kwargs)


def test_warning_levels_match_flag_values():
    assert int(WaitWarningLevel.OVERDUE) == 1
    assert int(WaitWarningLevel.LATE) == 2
