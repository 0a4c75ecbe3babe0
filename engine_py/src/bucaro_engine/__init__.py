"""Rule engine for Bucaro, a 4-player, 2-team, two-deck rummy game."""

from .engine import BucaroGame
from .errors import GameError
from .melds import classify_meld, is_pure_seven
from .models import Card, GameState, Meld, MeldType, Player, TeamBoard
from .rules import RuleConfig, create_rules, default_rules
from .scoring import FinalScores, compute_final_scores

__all__ = [
    "BucaroGame",
    "Card",
    "FinalScores",
    "GameError",
    "GameState",
    "Meld",
    "MeldType",
    "Player",
    "RuleConfig",
    "TeamBoard",
    "classify_meld",
    "compute_final_scores",
    "create_rules",
    "default_rules",
    "is_pure_seven",
]
