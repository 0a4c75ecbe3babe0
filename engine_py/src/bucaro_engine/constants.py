"""Game constants and utilities"""

# Suits
SUITS = ['S', 'H', 'D', 'C']
JOKER_SUIT = 'JOKER'
SUIT_SYMBOLS = {'S': '♠', 'H': '♥', 'D': '♦', 'C': '♣'}

# Ranks: 0 for a printed joker, 1..13 for A..K. Every 2 is wild.
PRINTED_JOKER_RANK = 0
ACE = 1
WILD_RANK = 2
KING = 13
RANKS = list(range(ACE, KING + 1))
RANK_LABELS = {1: 'A', 11: 'J', 12: 'Q', 13: 'K'}

# Deck composition
DECK_COUNT = 2
PRINTED_JOKERS_PER_DECK = 2
TOTAL_CARDS = DECK_COUNT * (len(SUITS) * len(RANKS) + PRINTED_JOKERS_PER_DECK)  # 108

# Seating and deal
PLAYER_COUNT = 4
TEAM_COUNT = 2
HAND_SIZE = 13
STACK_COUNT = 5  # four hands plus the bonus stack

# Phases
PHASE_LOBBY = 'lobby'
PHASE_ACTIVE = 'active'
PHASE_ENDED = 'ended'

# Meld rules
THREE_JOKERS_SIZE = 3
MIN_NATURALS = 2
MAX_JOKERS_PER_MELD = 1
PURE_SEVEN_LENGTH = 7
PICKUP_MIN_SIZE = 3
PICKUP_MAX_SIZE = 7
SHOWS_TO_END = 2

# Scoring
PURE_MELD_POINTS = 200
IMPURE_MELD_POINTS = 100
NO_PURE_SEVEN_PENALTY = -200
LOW_CARD_POINTS = 5     # 3..7
HIGH_CARD_POINTS = 10   # 8..K
ACE_POINTS = 15
DEFAULT_JOKER_CARD_VALUE = 0

# Error codes
ERROR_UNKNOWN_PLAYER = 'UNKNOWN_PLAYER'
ERROR_ROOM_FULL = 'ROOM_FULL'
ERROR_DUPLICATE_PLAYER = 'DUPLICATE_PLAYER'
ERROR_GAME_ALREADY_STARTED = 'GAME_ALREADY_STARTED'
ERROR_NOT_ENOUGH_PLAYERS = 'NOT_ENOUGH_PLAYERS'
ERROR_GAME_NOT_ACTIVE = 'GAME_NOT_ACTIVE'
ERROR_GAME_NOT_ENDED = 'GAME_NOT_ENDED'
ERROR_NOT_YOUR_TURN = 'NOT_YOUR_TURN'
ERROR_ALREADY_DREW = 'ALREADY_DREW'
ERROR_MUST_DRAW_FIRST = 'MUST_DRAW_FIRST'
ERROR_PILE_EMPTY = 'PILE_EMPTY'
ERROR_OPEN_PICKUP_NOT_ALLOWED = 'OPEN_PICKUP_NOT_ALLOWED'
ERROR_CARD_NOT_IN_HAND = 'CARD_NOT_IN_HAND'
ERROR_DUPLICATE_CARD = 'DUPLICATE_CARD'
ERROR_INVALID_MELD = 'INVALID_MELD'
ERROR_PURE_SEQUENCE_REQUIRED = 'PURE_SEQUENCE_REQUIRED'
ERROR_MELD_NOT_FOUND = 'MELD_NOT_FOUND'
ERROR_JOKER_ON_JOKER = 'JOKER_ON_JOKER'
ERROR_SHOW_NEEDS_PURE_SEVEN = 'SHOW_NEEDS_PURE_SEVEN'
ERROR_SHOW_MUST_LEAVE_ONE = 'SHOW_MUST_LEAVE_ONE'
ERROR_BONUS_STACK_CLAIMED = 'BONUS_STACK_CLAIMED'
ERROR_SETUP = 'SETUP_ERROR'
