"""
Shared fixtures for the Bucaro engine tests.
"""

import itertools

import pytest

from bucaro_engine.constants import JOKER_SUIT, PHASE_ACTIVE
from bucaro_engine.engine import BucaroGame
from bucaro_engine.models import Card
from bucaro_engine.rules import create_rules

_RANKS = {'A': 1, 'J': 11, 'Q': 12, 'K': 13}
_serial = itertools.count()


def card(token: str) -> Card:
    """Build a card from a short label such as '5S', '10H', 'QD' or 'JK' (printed joker)."""
    if token == 'JK':
        return Card(suit=JOKER_SUIT, rank=0, id=f"JOKER-t{next(_serial)}")
    rank_label, suit = token[:-1], token[-1]
    rank = _RANKS.get(rank_label) or int(rank_label)
    return Card(suit=suit, rank=rank, id=f"{token}-t{next(_serial)}")


def cards(*tokens: str):
    return [card(s) for s in tokens]


def ids(card_list):
    return [c.id for c in card_list]


@pytest.fixture
def lobby_game():
    """A game with four seated players: p0 and p2 on team 0, p1 and p3 on team 1."""
    game = BucaroGame(game_id="TEST", rules=create_rules(seed=42))
    for i, name in enumerate(["Alice", "Bob", "Carol", "Dave"]):
        game.add_player(name, player_id=f"p{i}")
    return game


@pytest.fixture
def started_game(lobby_game):
    lobby_game.start_game()
    return lobby_game


@pytest.fixture
def rigged_game(lobby_game):
    """
    Factory for an active game with hand-picked piles.

    Hands default to a few filler cards so every seat holds something.
    The acting seat defaults to 1 (left of dealer 0).
    """
    def _rig(hands=None, open_pile=None, closed_pile=None, turn=1, bonus=None, has_drawn=False):
        state = lobby_game.state
        hands = hands or {}
        for player in state.players:
            player.hand = list(hands.get(player.seat, cards('KC', 'QC', '9D')))
        state.open_pile = list(open_pile if open_pile is not None else cards('4D'))
        state.closed_pile = list(closed_pile if closed_pile is not None else cards('6C', '7C', '8C'))
        state.bonus_stack = list(bonus if bonus is not None else cards(*(['5D'] * 13)))
        state.bonus_claimed = False
        state.current_turn = turn
        state.has_drawn = has_drawn
        state.has_placed = False
        state.phase = PHASE_ACTIVE
        return lobby_game
    return _rig


def stack_hand(game, seat, tokens):
    """
    Swap real cards from anywhere in the game into one player's hand.

    Keeps the total card count unchanged, so conservation still holds.
    Returns the cards now in hand that match ``tokens``, in order.
    """
    state = game.state
    player = state.players[seat]
    locations = [p.hand for p in state.players if p is not player]
    locations += [state.closed_pile, state.bonus_stack, state.open_pile]
    kept = []

    def matches(c, suit, rank):
        return c.suit == suit and c.rank == rank and c.id not in {k.id for k in kept}

    for token in tokens:
        target = card(token)
        found = next((c for c in player.hand if matches(c, target.suit, target.rank)), None)
        if found is None:
            for loc in locations:
                idx = next((i for i, c in enumerate(loc) if matches(c, target.suit, target.rank)), None)
                if idx is not None:
                    break
            spare = next(i for i, c in enumerate(player.hand) if c.id not in {k.id for k in kept})
            loc[idx], player.hand[spare] = player.hand[spare], loc[idx]
            found = player.hand[spare]
        kept.append(found)
    return kept
