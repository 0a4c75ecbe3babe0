"""
Meld classification and open-pile pickup checks.
"""

from itertools import combinations
from typing import List, Optional, Sequence

from .constants import (
    ACE, KING, MAX_JOKERS_PER_MELD, MIN_NATURALS, PICKUP_MAX_SIZE,
    PICKUP_MIN_SIZE, PURE_SEVEN_LENGTH, THREE_JOKERS_SIZE
)
from .models import Card, MeldType


def split_jokers(cards: Sequence[Card]):
    """Split cards into (jokers, naturals)."""
    jokers = [c for c in cards if c.is_joker]
    naturals = [c for c in cards if not c.is_joker]
    return jokers, naturals


def _is_sequence(naturals: List[Card], joker_count: int) -> bool:
    if len({c.suit for c in naturals}) != 1:
        return False

    ranks = sorted(c.rank for c in naturals)
    gaps = 0
    for low, high in zip(ranks, ranks[1:]):
        if high == low:
            return False  # no pairs inside a run
        gaps += high - low - 1

    if joker_count == 0:
        return gaps == 0
    if gaps > 1:
        return False
    if gaps == 0:
        # The joker has to extend the run, which needs room below A or above K.
        return ranks[0] > ACE or ranks[-1] < KING
    return True


def classify_meld(cards: Sequence[Card]) -> Optional[MeldType]:
    """
    Classify a group of cards as a meld.

    Args:
        cards: Cards making up the proposed meld

    Returns:
        The MeldType, or None if the cards do not form a legal meld
    """
    if len(cards) == THREE_JOKERS_SIZE and all(c.is_joker for c in cards):
        return MeldType.THREE_JOKERS

    jokers, naturals = split_jokers(cards)
    if len(jokers) > MAX_JOKERS_PER_MELD:
        return None
    if len(naturals) < MIN_NATURALS:
        return None

    if len({c.rank for c in naturals}) == 1:
        return MeldType.SET_PURE if not jokers else MeldType.SET_IMPURE

    if _is_sequence(naturals, len(jokers)):
        return MeldType.SEQUENCE_PURE if not jokers else MeldType.SEQUENCE_IMPURE

    return None


def is_pure_seven(cards: Sequence[Card], meld_type: Optional[MeldType] = None) -> bool:
    """Whether the cards form a pure sequence or pure set of at least seven cards."""
    if meld_type is None:
        meld_type = classify_meld(cards)
    return meld_type is not None and meld_type.is_pure and len(cards) >= PURE_SEVEN_LENGTH


def _pickup_partners(top: Card, hand: Sequence[Card]) -> List[Card]:
    """Hand cards that could share a meld with the open-pile top card."""
    if top.is_joker:
        return [c for c in hand if c.is_joker]
    return [c for c in hand if c.is_joker or c.rank == top.rank or c.suit == top.suit]


def find_pickup_meld(top: Card, hand: Sequence[Card], team_has_pure: bool) -> Optional[List[Card]]:
    """
    Search for a meld of 3..7 cards that uses the open-pile top card.

    A joker on top may only be taken into a pure sequence or the three-jokers
    set. When the team has no pure sequence yet, the meld found must itself
    be a pure sequence.

    Note the search starts at three cards even though the classifier accepts
    two-card melds.

    Returns:
        The first qualifying card combination (top card first), or None
    """
    partners = _pickup_partners(top, hand)
    for size in range(PICKUP_MIN_SIZE, PICKUP_MAX_SIZE + 1):
        for combo in combinations(partners, size - 1):
            cards = [top, *combo]
            meld_type = classify_meld(cards)
            if meld_type is None:
                continue
            if top.is_joker and meld_type not in (MeldType.SEQUENCE_PURE, MeldType.THREE_JOKERS):
                continue
            if not team_has_pure and meld_type != MeldType.SEQUENCE_PURE:
                continue
            return cards
    return None


def can_pick_open_top(top: Card, hand: Sequence[Card], team_has_pure: bool) -> bool:
    return find_pickup_meld(top, hand, team_has_pure) is not None
