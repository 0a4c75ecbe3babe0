"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, List, Optional

from .constants import PLAYER_COUNT, SUITS
from .models import Card, GameState, Meld, Player, TeamBoard

_SUIT_ORDER = {suit: i for i, suit in enumerate(SUITS)}


def card_sort_key(card: Card):
    """Sort by suit, then rank, then id; printed jokers last."""
    return (_SUIT_ORDER.get(card.suit, len(SUITS)), card.rank, card.id)


def serialize_card(card: Optional[Card]) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    return {
        "id": card.id,
        "suit": card.suit,
        "rank": card.rank,
        "label": card.label,
        "is_joker": card.is_joker,
    }


def serialize_meld(meld: Meld) -> Dict[str, Any]:
    return {
        "id": meld.id,
        "type": meld.type.value,
        "cards": [serialize_card(c) for c in meld.cards],
    }


def serialize_board(board: TeamBoard) -> Dict[str, Any]:
    return {
        "team_id": board.team_id,
        "melds": [serialize_meld(m) for m in board.melds],
    }


def _seat_summary(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "seat": player.seat,
        "team_id": player.team_id,
        "card_count": len(player.hand),
    }


def public_view(state: GameState) -> Dict[str, Any]:
    """
    Snapshot safe to broadcast to every observer.

    Contains no hand contents and no board detail, only counts and flags.
    """
    return {
        "id": state.id,
        "version": state.version,
        "status": state.phase,
        "current_turn": state.current_turn,
        "dealer_index": state.dealer_index,
        "open_top": serialize_card(state.open_top),
        "open_count": len(state.open_pile),
        "closed_count": len(state.closed_pile),
        "shows_done": state.shows_done,
        "team_pure_present": state.team_pure_present,
    }


def player_view(state: GameState, player: Player) -> Dict[str, Any]:
    """
    Public snapshot plus what one player is allowed to see.

    Args:
        state: Game state
        player: The viewing player

    Returns:
        Dictionary with the viewer's own hand, seat summaries for the
        partner and opponents, and both team boards
    """
    view = public_view(state)
    seated = len(state.players)
    others: List[Player] = []
    partner = None
    if seated == PLAYER_COUNT:
        partner = state.players[(player.seat + 2) % PLAYER_COUNT]
        others = [state.players[(player.seat + 1) % PLAYER_COUNT],
                  state.players[(player.seat + 3) % PLAYER_COUNT]]

    view.update({
        "you": _seat_summary(player),
        "your_hand": [serialize_card(c) for c in sorted(player.hand, key=card_sort_key)],
        "partner": _seat_summary(partner) if partner else None,
        "opponents": [_seat_summary(p) for p in others],
        "team_boards": [serialize_board(b) for b in state.team_boards],
        "has_drawn": state.has_drawn if state.current_turn == player.seat else False,
    })
    return view


def serialize_player_for_list(player: Player) -> Dict[str, Any]:
    """Serialize player for lobby player list."""
    return {
        "id": player.id,
        "name": player.name,
        "seat": player.seat,
        "team_id": player.team_id,
    }
