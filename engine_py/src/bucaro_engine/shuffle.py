"""
Card shuffling and dealing utilities.
"""

import random
from typing import List, Optional, Tuple

from .constants import (
    DECK_COUNT, ERROR_SETUP, HAND_SIZE, JOKER_SUIT, PRINTED_JOKER_RANK,
    PRINTED_JOKERS_PER_DECK, RANKS, STACK_COUNT, SUITS
)
from .errors import GameError
from .models import Card


DECK_TAGS = 'ab'


def create_deck() -> List[Card]:
    """Create the two-deck pool: 2 x 52 standard cards plus 2 printed jokers per deck.

    Card ids carry the deck tag so duplicates stay distinct, e.g. '10H-a' and '10H-b'.
    """
    deck = []
    for tag in DECK_TAGS[:DECK_COUNT]:
        for suit in SUITS:
            for rank in RANKS:
                deck.append(Card(suit=suit, rank=rank, id=f"{rank}{suit}-{tag}"))
        for n in range(PRINTED_JOKERS_PER_DECK):
            deck.append(Card(suit=JOKER_SUIT, rank=PRINTED_JOKER_RANK, id=f"JOKER-{tag}{n + 1}"))
    return deck


def shuffle_deck(deck: List[Card], seed: Optional[int] = None) -> List[Card]:
    """
    Shuffle a deck deterministically if seed is provided.

    Args:
        deck: Cards to shuffle
        seed: Optional seed for deterministic shuffling

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()

    if seed is not None:
        rng = random.Random(seed)
        rng.shuffle(deck_copy)
    else:
        random.shuffle(deck_copy)

    return deck_copy


def deal_stacks(deck: List[Card]) -> Tuple[List[List[Card]], List[Card]]:
    """
    Split a shuffled deck into five 13-card stacks and the remainder.

    The first four stacks become player hands, the fifth is the bonus stack
    reserved for the first show. At least one card must be left over to seed
    the open pile.

    Returns:
        Tuple of (stacks, remainder)
    """
    needed = STACK_COUNT * HAND_SIZE + 1
    if len(deck) < needed:
        raise GameError(ERROR_SETUP, f"Not enough cards to deal: have {len(deck)}, need {needed}")

    stacks = [deck[i * HAND_SIZE:(i + 1) * HAND_SIZE] for i in range(STACK_COUNT)]
    remainder = deck[STACK_COUNT * HAND_SIZE:]
    return stacks, remainder
