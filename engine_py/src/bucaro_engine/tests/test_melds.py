"""
Tests for meld classification and the open-pile pickup search.
"""

import pytest

from bucaro_engine.melds import can_pick_open_top, classify_meld, find_pickup_meld, is_pure_seven
from bucaro_engine.models import MeldType

from .conftest import card, cards


def test_pure_set():
    assert classify_meld(cards('7H', '7D', '7C')) == MeldType.SET_PURE


def test_set_may_repeat_suits_across_decks():
    assert classify_meld(cards('7H', '7H', '7C')) == MeldType.SET_PURE


def test_impure_set_with_printed_joker():
    assert classify_meld(cards('7H', '7D', 'JK')) == MeldType.SET_IMPURE


def test_three_printed_jokers():
    assert classify_meld(cards('JK', 'JK', 'JK')) == MeldType.THREE_JOKERS


def test_three_jokers_counts_twos():
    assert classify_meld(cards('2S', 'JK', '2H')) == MeldType.THREE_JOKERS


def test_pure_sequence():
    assert classify_meld(cards('5S', '6S', '7S')) == MeldType.SEQUENCE_PURE


def test_sequence_order_does_not_matter():
    assert classify_meld(cards('9H', '7H', '8H', '10H')) == MeldType.SEQUENCE_PURE


def test_joker_fills_single_gap():
    assert classify_meld(cards('5S', '6S', '8S', 'JK')) == MeldType.SEQUENCE_IMPURE


def test_joker_cannot_fill_gap_of_two():
    assert classify_meld(cards('5S', '6S', '9S', 'JK')) is None


def test_joker_extends_run():
    assert classify_meld(cards('5S', '6S', '7S', 'JK')) == MeldType.SEQUENCE_IMPURE


def test_two_of_same_suit_is_wild_in_sequence():
    """The 2 counts as a joker, so A-2-3 is an impure run of A and 3 with the gap filled."""
    assert classify_meld(cards('AS', '2S', '3S')) == MeldType.SEQUENCE_IMPURE


def test_gap_without_joker_is_invalid():
    assert classify_meld(cards('5S', '6S', '8S')) is None


def test_no_wraparound():
    assert classify_meld(cards('QS', 'KS', 'AS')) is None


def test_king_as_top_of_run():
    assert classify_meld(cards('JS', 'QS', 'KS')) == MeldType.SEQUENCE_PURE


def test_joker_stands_in_for_the_two_in_a_full_suit():
    run = cards('AD', '3D', '4D', '5D', '6D', '7D', '8D', '9D', '10D', 'JD', 'QD', 'KD')
    assert classify_meld(run) is None
    assert classify_meld(run + cards('JK')) == MeldType.SEQUENCE_IMPURE
    assert classify_meld(run + cards('2D')) == MeldType.SEQUENCE_IMPURE


def test_mixed_suits_invalid():
    assert classify_meld(cards('5S', '6H', '7S')) is None


def test_duplicate_rank_in_run_invalid():
    assert classify_meld(cards('5S', '6S', '6S', '7S')) is None


@pytest.mark.parametrize("tokens", [
    ('5S', '6S', 'JK', '2H'),
    ('7H', '7D', '2C', '2D'),
    ('JK', 'JK', '9C', '9D'),
])
def test_more_than_one_joker_rejected(tokens):
    assert classify_meld(cards(*tokens)) is None


def test_four_jokers_rejected():
    assert classify_meld(cards('JK', 'JK', 'JK', 'JK')) is None


def test_two_naturals_is_minimum():
    assert classify_meld(cards('9C', '9D')) == MeldType.SET_PURE
    assert classify_meld(cards('9C', 'JK')) is None
    assert classify_meld(cards('9C')) is None
    assert classify_meld([]) is None


def test_pure_seven_qualifier():
    assert is_pure_seven(cards('3H', '4H', '5H', '6H', '7H', '8H', '9H'))
    assert is_pure_seven(cards('QS', 'QS', 'QH', 'QH', 'QD', 'QD', 'QC'))
    assert not is_pure_seven(cards('3H', '4H', '5H', '6H', '7H', '8H'))
    assert not is_pure_seven(cards('3H', '4H', '5H', '6H', '7H', '8H', 'JK'))


def test_pickup_needs_pure_sequence_when_team_has_none():
    top = card('7S')
    hand = cards('7H', '7D', 'KC')
    assert not can_pick_open_top(top, hand, team_has_pure=False)
    assert can_pick_open_top(top, hand, team_has_pure=True)


def test_pickup_pure_sequence_satisfies_obligation():
    top = card('7S')
    hand = cards('5S', '6S', 'KC')
    found = find_pickup_meld(top, hand, team_has_pure=False)
    assert found is not None
    assert found[0] is top
    assert classify_meld(found) == MeldType.SEQUENCE_PURE


def test_pickup_ignores_two_card_melds():
    """The search starts at three cards even though two naturals classify as a meld."""
    assert not can_pick_open_top(card('7S'), cards('7H', 'KC'), team_has_pure=True)


def test_pickup_joker_only_into_three_jokers():
    top = card('JK')
    assert can_pick_open_top(top, cards('2H', 'JK', '5C'), team_has_pure=True)
    assert not can_pick_open_top(top, cards('5C', '6C', '7C'), team_has_pure=True)


def test_pickup_joker_blocked_without_team_pure():
    assert not can_pick_open_top(card('JK'), cards('2H', 'JK'), team_has_pure=False)


def test_pickup_impure_meld_allowed_once_team_has_pure():
    assert can_pick_open_top(card('9D'), cards('9C', 'JK', '4H'), team_has_pure=True)
