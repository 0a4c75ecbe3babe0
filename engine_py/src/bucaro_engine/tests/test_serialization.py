"""
Tests for the public and per-player snapshots.
"""

from bucaro_engine.constants import PHASE_ACTIVE, TOTAL_CARDS

from .conftest import cards, ids


def test_public_state_fields(started_game):
    public = started_game.get_public_state()
    state = started_game.state
    assert public["status"] == PHASE_ACTIVE
    assert public["current_turn"] == 1
    assert public["dealer_index"] == 0
    assert public["open_top"]["id"] == state.open_top.id
    assert public["open_count"] == 1
    assert public["closed_count"] == TOTAL_CARDS - 66
    assert public["shows_done"] == 0
    assert public["team_pure_present"] == [False, False]


def test_public_state_has_no_hands(started_game):
    public = started_game.get_public_state()
    assert "your_hand" not in public
    assert "team_boards" not in public
    assert "players" not in public


def test_player_view_shows_only_own_hand(started_game):
    state = started_game.state
    view = started_game.get_player_state("p1")
    own_ids = {c.id for c in state.players[1].hand}
    assert {c["id"] for c in view["your_hand"]} == own_ids

    others = {c.id for p in state.players if p.seat != 1 for c in p.hand}
    assert not others & {c["id"] for c in view["your_hand"]}
    assert "hand" not in view["partner"]
    assert all("hand" not in o for o in view["opponents"])


def test_player_view_partner_and_opponents(started_game):
    view = started_game.get_player_state("p1")
    assert view["you"]["id"] == "p1"
    assert view["partner"]["id"] == "p3"
    assert view["partner"]["card_count"] == 13
    assert [o["id"] for o in view["opponents"]] == ["p2", "p0"]


def test_player_view_hand_sorted(rigged_game):
    game = rigged_game(hands={1: cards('JK', '9H', '3S', 'AH', 'KS')})
    labels = [c["label"] for c in game.get_player_state("p1")["your_hand"]]
    assert labels == ['3♠', 'K♠', 'A♥', '9♥', 'JOKER']


def test_player_view_includes_both_boards(rigged_game):
    game = rigged_game(hands={1: cards('5S', '6S', '7S', 'KC')}, has_drawn=True)
    game.place_melds("p1", [ids(game.state.players[1].hand[:3])])
    view = game.get_player_state("p0")
    boards = view["team_boards"]
    assert boards[0]["melds"] == []
    assert boards[1]["melds"][0]["type"] == "sequence_pure"
    assert [c["label"] for c in boards[1]["melds"][0]["cards"]] == ['5♠', '6♠', '7♠']
    assert view["team_pure_present"] == [False, True]


def test_lobby_player_view_without_full_table(lobby_game):
    lobby_game.state.players = lobby_game.state.players[:2]
    view = lobby_game.get_player_state("p0")
    assert view["partner"] is None
    assert view["opponents"] == []
