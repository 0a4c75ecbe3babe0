"""Turn engine: owns one game session and enforces the per-turn protocol."""

import logging
import uuid
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .constants import (
    ERROR_ALREADY_DREW, ERROR_BONUS_STACK_CLAIMED, ERROR_CARD_NOT_IN_HAND,
    ERROR_DUPLICATE_CARD, ERROR_DUPLICATE_PLAYER, ERROR_GAME_ALREADY_STARTED,
    ERROR_GAME_NOT_ACTIVE, ERROR_INVALID_MELD, ERROR_JOKER_ON_JOKER, ERROR_MELD_NOT_FOUND,
    ERROR_MUST_DRAW_FIRST, ERROR_NOT_ENOUGH_PLAYERS, ERROR_NOT_YOUR_TURN,
    ERROR_OPEN_PICKUP_NOT_ALLOWED, ERROR_PILE_EMPTY,
    ERROR_PURE_SEQUENCE_REQUIRED, ERROR_ROOM_FULL, ERROR_SHOW_MUST_LEAVE_ONE,
    ERROR_SHOW_NEEDS_PURE_SEVEN, ERROR_UNKNOWN_PLAYER, PHASE_ACTIVE,
    PHASE_ENDED, PHASE_LOBBY, PLAYER_COUNT, SHOWS_TO_END, TEAM_COUNT
)
from .errors import GameError
from .melds import can_pick_open_top, classify_meld, is_pure_seven
from .models import Card, GameState, Meld, MeldType, Player
from .rules import RuleConfig, default_rules
from .scoring import FinalScores, compute_final_scores
from .serialization import player_view, public_view
from .shuffle import create_deck, deal_stacks, shuffle_deck

logger = logging.getLogger(__name__)

MeldAddition = Tuple[str, Sequence[str]]  # (meld id, card ids from hand)


def _new_meld_id() -> str:
    return f"meld_{uuid.uuid4().hex[:8]}"


def _labels(cards: Sequence[Card]) -> str:
    return ', '.join(c.label for c in cards)


class BucaroGame:
    """
    A single game session.

    Every action validates completely before touching state, so a raised
    GameError means nothing changed. The engine is not reentrant; callers
    serialize actions per session.
    """

    def __init__(self, game_id: Optional[str] = None, rules: Optional[RuleConfig] = None):
        self.rules = rules or default_rules
        self.state = GameState(
            id=game_id or uuid.uuid4().hex[:8].upper(),
            dealer_index=self.rules.dealer_index,
        )

    # ------------------------------------------------------------------
    # Reads

    @property
    def phase(self) -> str:
        return self.state.phase

    @property
    def is_ended(self) -> bool:
        return self.state.phase == PHASE_ENDED

    def get_player(self, player_id: str) -> Player:
        for player in self.state.players:
            if player.id == player_id:
                return player
        raise GameError(ERROR_UNKNOWN_PLAYER, f"Unknown player {player_id}")

    def get_public_state(self) -> Dict:
        return public_view(self.state)

    def get_player_state(self, player_id: str) -> Dict:
        return player_view(self.state, self.get_player(player_id))

    # ------------------------------------------------------------------
    # Lobby

    def add_player(self, name: str, player_id: Optional[str] = None) -> Player:
        """Seat a player by join order; teams alternate 0, 1, 0, 1."""
        state = self.state
        if state.phase != PHASE_LOBBY:
            raise GameError(ERROR_GAME_ALREADY_STARTED, "Cannot join after game start")
        if len(state.players) >= PLAYER_COUNT:
            raise GameError(ERROR_ROOM_FULL, "Lobby full")

        player_id = player_id or uuid.uuid4().hex[:8]
        if any(p.id == player_id for p in state.players):
            raise GameError(ERROR_DUPLICATE_PLAYER, f"Player {player_id} already seated")

        seat = len(state.players)
        player = Player(id=player_id, name=name, seat=seat, team_id=seat % TEAM_COUNT)
        state.players.append(player)
        self._record(f"{name} joined seat {seat} (team {player.team_id})")
        return player

    def start_game(self) -> None:
        """Deal five 13-card stacks, seed the open pile and hand the turn to the dealer's left."""
        state = self.state
        if state.phase != PHASE_LOBBY:
            raise GameError(ERROR_GAME_ALREADY_STARTED, "Game already started")
        if len(state.players) != PLAYER_COUNT:
            raise GameError(ERROR_NOT_ENOUGH_PLAYERS, f"Need {PLAYER_COUNT} players")

        deck = shuffle_deck(create_deck(), self.rules.seed)
        stacks, remainder = deal_stacks(deck)

        # Hands go out by simple rotation from the dealer.
        for offset in range(PLAYER_COUNT):
            seat = (state.dealer_index + offset) % PLAYER_COUNT
            state.players[seat].hand = list(stacks[offset])
        state.bonus_stack = list(stacks[PLAYER_COUNT])
        state.bonus_claimed = False

        state.closed_pile = list(remainder)
        state.open_pile = [state.closed_pile.pop()]

        state.current_turn = (state.dealer_index + 1) % PLAYER_COUNT
        state.shows_done = 0
        state.has_drawn = False
        state.has_placed = False
        state.phase = PHASE_ACTIVE

        starter = state.players[state.current_turn]
        self._record(f"Game started! {starter.name} goes first")
        logger.info("Game %s started, dealer seat %d, %s to act",
                    state.id, state.dealer_index, starter.name)

    # ------------------------------------------------------------------
    # Draw

    def draw_from_closed(self, player_id: str) -> Card:
        player = self._require_turn(player_id)
        self._require_not_drawn()
        state = self.state
        if not state.closed_pile:
            raise GameError(ERROR_PILE_EMPTY, "Closed pile empty")

        card = state.closed_pile.pop()
        player.hand.append(card)
        state.has_drawn = True
        self._record(f"{player.name} drew from the closed pile")
        return card

    def draw_from_open(self, player_id: str) -> Card:
        """Take the open-pile top card; only allowed if it could be melded right away."""
        player = self._require_turn(player_id)
        self._require_not_drawn()
        state = self.state
        top = state.open_top
        if top is None:
            raise GameError(ERROR_PILE_EMPTY, "Open pile empty")

        team_has_pure = state.team_boards[player.team_id].has_pure_sequence
        if not can_pick_open_top(top, player.hand, team_has_pure):
            raise GameError(
                ERROR_OPEN_PICKUP_NOT_ALLOWED,
                f"Cannot pick {top.label} from open: not immediately placeable"
            )

        state.open_pile.pop()
        player.hand.append(top)
        state.has_drawn = True
        self._record(f"{player.name} picked {top.label} from the open pile")
        return top

    # ------------------------------------------------------------------
    # Melds

    def place_melds(self, player_id: str, melds: Sequence[Sequence[str]]) -> List[Meld]:
        """Place one or more new melds on the team board, all or nothing."""
        player = self._require_turn(player_id)
        self._require_drawn()
        if not melds:
            raise GameError(ERROR_INVALID_MELD, "No melds proposed")

        realized = self._realize_melds(player, melds, set())
        board = self.state.team_boards[player.team_id]
        if not board.has_pure_sequence and not any(m.type == MeldType.SEQUENCE_PURE for m in realized):
            raise GameError(
                ERROR_PURE_SEQUENCE_REQUIRED,
                "Your team must establish a pure sequence with this placement"
            )

        for meld in realized:
            self._remove_from_hand(player, meld.cards)
            board.melds.append(meld)
        self.state.has_placed = True
        self._record(f"{player.name} placed " + '; '.join(_labels(m.cards) for m in realized))
        return realized

    def add_cards_to_meld(self, player_id: str, additions: Sequence[MeldAddition]) -> List[Meld]:
        """Extend melds already on the caller's team board. A meld may change type."""
        player = self._require_turn(player_id)
        self._require_drawn()
        if not additions:
            raise GameError(ERROR_INVALID_MELD, "No additions proposed")

        board = self.state.team_boards[player.team_id]
        used: Set[str] = set()
        pending: Dict[str, List[Card]] = {}
        for meld_id, card_ids in additions:
            meld = board.find_meld(meld_id)
            if meld is None:
                raise GameError(ERROR_MELD_NOT_FOUND, f"Meld {meld_id} is not on your team board")
            cards = self._take_cards(player, card_ids, used)
            pending.setdefault(meld_id, list(meld.cards)).extend(cards)

        new_types: Dict[str, MeldType] = {}
        for meld_id, cards in pending.items():
            meld_type = classify_meld(cards)
            if meld_type is None:
                raise GameError(ERROR_INVALID_MELD, f"Adding to meld {meld_id} would make it invalid")
            new_types[meld_id] = meld_type

        changed = []
        for meld_id, cards in pending.items():
            meld = board.find_meld(meld_id)
            added = cards[len(meld.cards):]
            self._remove_from_hand(player, added)
            meld.cards = cards
            meld.type = new_types[meld_id]
            changed.append(meld)
        self.state.has_placed = True
        self._record(f"{player.name} extended {len(changed)} meld(s)")
        return changed

    # ------------------------------------------------------------------
    # End of turn

    def discard(self, player_id: str, card_id: str) -> Card:
        """Discard one card. This is the only action that passes the turn."""
        player = self._require_turn(player_id)
        self._require_drawn()
        card = player.find_card(card_id)
        if card is None:
            raise GameError(ERROR_CARD_NOT_IN_HAND, f"Card {card_id} not in hand")
        self._check_joker_on_joker(card)

        player.hand.remove(card)
        self.state.open_pile.append(card)
        self._record(f"{player.name} discarded {card.label}")
        self._end_turn()
        return card

    def show(self, player_id: str, melds: Sequence[Sequence[str]]) -> List[Meld]:
        """
        Lay down melds that use all but one card of the hand.

        At least one meld must be a 7-card pure sequence or set. The last card
        is discarded, the bonus stack joins the hand and the turn stays open.
        A second show ends the game.
        """
        player = self._require_turn(player_id)
        self._require_drawn()
        state = self.state

        used: Set[str] = set()
        realized = self._realize_melds(player, melds, used)
        if not any(is_pure_seven(m.cards, m.type) for m in realized):
            raise GameError(ERROR_SHOW_NEEDS_PURE_SEVEN, "Show requires a 7-card pure sequence or pure set")

        remaining = [c for c in player.hand if c.id not in used]
        if len(remaining) != 1:
            raise GameError(
                ERROR_SHOW_MUST_LEAVE_ONE,
                f"Show must leave exactly one card to discard, would leave {len(remaining)}"
            )
        last_card = remaining[0]
        self._check_joker_on_joker(last_card)
        if state.bonus_claimed:
            raise GameError(ERROR_BONUS_STACK_CLAIMED, "Bonus stack already taken")

        board = state.team_boards[player.team_id]
        board.melds.extend(realized)
        state.open_pile.append(last_card)
        player.hand = list(state.bonus_stack)
        state.bonus_stack = []
        state.bonus_claimed = True
        state.shows_done += 1
        state.has_placed = True
        self._record(f"{player.name} made a show and discarded {last_card.label}")
        logger.info("Game %s: show #%d by %s", state.id, state.shows_done, player.name)

        if state.shows_done >= SHOWS_TO_END:
            self._end_game("second show")
        return realized

    def compute_final_scores(self) -> FinalScores:
        return compute_final_scores(self.state, self.rules.joker_card_value)

    # ------------------------------------------------------------------
    # Helpers

    def _record(self, message: str) -> None:
        self.state.version += 1
        self.state.game_log.append(message)
        logger.debug("Game %s v%d: %s", self.state.id, self.state.version, message)

    def _end_turn(self) -> None:
        state = self.state
        if not state.closed_pile:
            self._end_game("closed pile exhausted")
            return
        state.current_turn = (state.current_turn + 1) % PLAYER_COUNT
        state.has_drawn = False
        state.has_placed = False

    def _end_game(self, reason: str) -> None:
        self.state.phase = PHASE_ENDED
        self._record(f"Game over: {reason}")
        logger.info("Game %s ended: %s", self.state.id, reason)

    def _require_turn(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if self.state.phase != PHASE_ACTIVE:
            raise GameError(ERROR_GAME_NOT_ACTIVE, f"Game is not active (current: {self.state.phase})")
        if player.seat != self.state.current_turn:
            raise GameError(ERROR_NOT_YOUR_TURN, "Not your turn")
        return player

    def _require_not_drawn(self) -> None:
        if self.state.has_drawn:
            raise GameError(ERROR_ALREADY_DREW, "Already drew this turn")

    def _require_drawn(self) -> None:
        if not self.state.has_drawn:
            raise GameError(ERROR_MUST_DRAW_FIRST, "Must draw first")

    def _check_joker_on_joker(self, card: Card) -> None:
        top = self.state.open_top
        if top is not None and top.is_joker and card.is_joker:
            raise GameError(ERROR_JOKER_ON_JOKER, "Cannot discard a joker on top of a joker")

    def _take_cards(self, player: Player, card_ids: Sequence[str], used: Set[str]) -> List[Card]:
        """Resolve card ids against the hand, rejecting ids already claimed by this call."""
        cards = []
        for card_id in card_ids:
            if card_id in used:
                raise GameError(ERROR_DUPLICATE_CARD, f"Card {card_id} used more than once")
            card = player.find_card(card_id)
            if card is None:
                raise GameError(ERROR_CARD_NOT_IN_HAND, f"Card {card_id} not in hand")
            used.add(card_id)
            cards.append(card)
        return cards

    def _realize_melds(self, player: Player, melds: Sequence[Sequence[str]], used: Set[str]) -> List[Meld]:
        realized = []
        for card_ids in melds:
            cards = self._take_cards(player, card_ids, used)
            meld_type = classify_meld(cards)
            if meld_type is None:
                raise GameError(ERROR_INVALID_MELD, f"Invalid meld: {_labels(cards) or 'no cards'}")
            realized.append(Meld(id=_new_meld_id(), type=meld_type, cards=cards))
        return realized

    @staticmethod
    def _remove_from_hand(player: Player, cards: Sequence[Card]) -> None:
        ids = {c.id for c in cards}
        player.hand = [c for c in player.hand if c.id not in ids]
