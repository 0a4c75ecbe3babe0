"""
Final scoring for an ended game.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from .constants import (
    ACE, ACE_POINTS, DEFAULT_JOKER_CARD_VALUE, ERROR_GAME_NOT_ENDED,
    HIGH_CARD_POINTS, IMPURE_MELD_POINTS, LOW_CARD_POINTS,
    NO_PURE_SEVEN_PENALTY, PHASE_ENDED, PURE_MELD_POINTS, TEAM_COUNT
)
from .errors import GameError
from .melds import is_pure_seven
from .models import Card, GameState, Meld


@dataclass
class TeamScore:
    team_id: int
    meld_points: int = 0
    card_points: int = 0
    penalty: int = 0
    in_hand_gain: int = 0  # opponents' hand value transferred to this team
    has_pure_seven: bool = False
    comment: str = "OK"

    @property
    def total(self) -> int:
        return self.meld_points + self.card_points + self.penalty + self.in_hand_gain


@dataclass
class FinalScores:
    teams: List[TeamScore] = field(default_factory=list)

    @property
    def team_scores(self) -> List[int]:
        return [t.total for t in self.teams]

    def to_dict(self) -> dict:
        return {
            "team_scores": self.team_scores,
            "details": [
                {
                    "team_id": t.team_id,
                    "meld_points": t.meld_points,
                    "card_points": t.card_points,
                    "penalty": t.penalty,
                    "in_hand_gain": t.in_hand_gain,
                    "total": t.total,
                    "comment": t.comment,
                }
                for t in self.teams
            ],
        }


def card_value(card: Card, joker_value: int = DEFAULT_JOKER_CARD_VALUE) -> int:
    """Tally value: 3-7 -> 5, 8-K -> 10, A -> 15, jokers (including every 2) -> joker_value."""
    if card.is_joker:
        return joker_value
    if card.rank == ACE:
        return ACE_POINTS
    if 3 <= card.rank <= 7:
        return LOW_CARD_POINTS
    return HIGH_CARD_POINTS


def cards_value(cards: Iterable[Card], joker_value: int = DEFAULT_JOKER_CARD_VALUE) -> int:
    return sum(card_value(c, joker_value) for c in cards)


def meld_points(meld: Meld) -> int:
    return PURE_MELD_POINTS if meld.type.is_pure else IMPURE_MELD_POINTS


def _tally_board(state: GameState, team_id: int, joker_value: int) -> TeamScore:
    score = TeamScore(team_id=team_id)
    for meld in state.team_boards[team_id].melds:
        score.meld_points += meld_points(meld)
        score.card_points += cards_value(meld.cards, joker_value)
        if is_pure_seven(meld.cards, meld.type):
            score.has_pure_seven = True
    if not score.has_pure_seven:
        score.penalty = NO_PURE_SEVEN_PENALTY
        score.comment = f"No 7-card pure: {NO_PURE_SEVEN_PENALTY} applied"
    return score


def compute_final_scores(state: GameState, joker_value: int = DEFAULT_JOKER_CARD_VALUE) -> FinalScores:
    """
    Compute final team totals.

    A team without a 7-card pure meld on its board takes the penalty. When
    exactly one team is penalized, the value of every card still held by
    that team's players is credited to the other team.

    Raises:
        GameError: if the game has not ended
    """
    if state.phase != PHASE_ENDED:
        raise GameError(ERROR_GAME_NOT_ENDED, f"Game has not ended (current: {state.phase})")

    teams = [_tally_board(state, team_id, joker_value) for team_id in range(TEAM_COUNT)]

    for loser, winner in ((teams[0], teams[1]), (teams[1], teams[0])):
        if not loser.has_pure_seven and winner.has_pure_seven:
            held = [c for p in state.players if p.team_id == loser.team_id for c in p.hand]
            winner.in_hand_gain += cards_value(held, joker_value)

    return FinalScores(teams=teams)
