"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .constants import (
    JOKER_SUIT, PHASE_LOBBY, RANK_LABELS, SUIT_SYMBOLS, TEAM_COUNT, WILD_RANK
)


class MeldType(str, Enum):
    """Classification of a meld. Three jokers together score as impure."""
    SEQUENCE_PURE = "sequence_pure"
    SEQUENCE_IMPURE = "sequence_impure"
    SET_PURE = "set_pure"
    SET_IMPURE = "set_impure"
    THREE_JOKERS = "three_jokers"

    @property
    def is_pure(self) -> bool:
        return self in (MeldType.SEQUENCE_PURE, MeldType.SET_PURE)


@dataclass(frozen=True)
class Card:
    suit: str  # S|H|D|C|JOKER
    rank: int  # 0 for printed joker, 1..13 for A..K
    id: str    # unique per physical card, even across the two decks

    @property
    def is_printed_joker(self) -> bool:
        return self.suit == JOKER_SUIT

    @property
    def is_joker(self) -> bool:
        return self.is_printed_joker or self.rank == WILD_RANK

    @property
    def label(self) -> str:
        if self.is_printed_joker:
            return 'JOKER'
        return f"{RANK_LABELS.get(self.rank, str(self.rank))}{SUIT_SYMBOLS[self.suit]}"


@dataclass
class Meld:
    id: str
    type: MeldType
    cards: List[Card] = field(default_factory=list)


@dataclass
class TeamBoard:
    team_id: int
    melds: List[Meld] = field(default_factory=list)

    def find_meld(self, meld_id: str) -> Optional[Meld]:
        for meld in self.melds:
            if meld.id == meld_id:
                return meld
        return None

    @property
    def has_pure_sequence(self) -> bool:
        return any(m.type == MeldType.SEQUENCE_PURE for m in self.melds)


@dataclass
class Player:
    id: str
    name: str
    seat: int
    team_id: int  # 0 or 1, alternating by join order
    hand: List[Card] = field(default_factory=list)

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None


@dataclass
class GameState:
    id: str
    version: int = 0
    phase: str = PHASE_LOBBY  # lobby|active|ended
    players: List[Player] = field(default_factory=list)  # seating order
    team_boards: List[TeamBoard] = field(
        default_factory=lambda: [TeamBoard(team_id=t) for t in range(TEAM_COUNT)]
    )
    dealer_index: int = 0
    current_turn: int = 0
    closed_pile: List[Card] = field(default_factory=list)  # top = last
    open_pile: List[Card] = field(default_factory=list)    # top = last
    bonus_stack: List[Card] = field(default_factory=list)
    bonus_claimed: bool = False
    shows_done: int = 0
    has_drawn: bool = False
    has_placed: bool = False
    game_log: List[str] = field(default_factory=list)

    @property
    def open_top(self) -> Optional[Card]:
        return self.open_pile[-1] if self.open_pile else None

    @property
    def team_pure_present(self) -> List[bool]:
        return [board.has_pure_sequence for board in self.team_boards]

    def card_count(self) -> int:
        """Total cards across every location; constant for the whole game once dealt."""
        in_hands = sum(len(p.hand) for p in self.players)
        on_boards = sum(len(m.cards) for board in self.team_boards for m in board.melds)
        return in_hands + on_boards + len(self.closed_pile) + len(self.open_pile) + len(self.bonus_stack)
