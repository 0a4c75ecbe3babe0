"""
Tests for rule configuration.
"""

import pytest
from pydantic import ValidationError

from bucaro_engine.rules import RuleConfig, create_rules, default_rules


def test_default_rules():
    assert default_rules.seed is None
    assert default_rules.dealer_index == 0
    assert default_rules.joker_card_value == 0


def test_create_rules_overrides():
    rules = create_rules(seed=5, dealer_index=3)
    assert rules.seed == 5
    assert rules.dealer_index == 3
    assert default_rules.seed is None


@pytest.mark.parametrize("overrides", [
    {"dealer_index": 4},
    {"dealer_index": -1},
    {"joker_card_value": -5},
    {"seed": -1},
    {"room_timeout": 10},
])
def test_invalid_rules_rejected(overrides):
    with pytest.raises(ValidationError):
        RuleConfig(**overrides)
