from shipwrecker.core.models import CellState, Coord, GamePhase
from shipwrecker.core.rules import add_player, create_game_state, fire_shot
from shipwrecker.core.views import get_client_view


def test_view_for_stranger_is_none(playing_state) -> None:
    assert get_client_view(playing_state, "mallory") is None


def test_view_shows_own_board_and_redacts_opponent(playing_state) -> None:
    view = get_client_view(playing_state, "alice")
    assert view is not None
    assert view.player_number == 1 and view.is_your_turn
    assert view.your_board.cell(Coord(0, 0)) is CellState.SHIP
    assert view.opponent_board.cell(Coord(0, 0)) is CellState.EMPTY
    assert all(ship.coords == [] for ship in view.opponent_board.ships)
    assert view.opponent_ready and view.opponent_connected
    assert not view.is_ai_opponent
    assert view.winner is None


def test_view_reports_winner_relative_to_requester(playing_state) -> None:
    playing_state.phase = GamePhase.FINISHED
    playing_state.winner = "alice"
    alice = get_client_view(playing_state, "alice")
    bob = get_client_view(playing_state, "bob")
    assert alice is not None and alice.winner == "you"
    assert bob is not None and bob.winner == "opponent"


def test_view_without_opponent_has_empty_board() -> None:
    state = create_game_state("ROOM01")
    add_player(state, "alice")
    view = get_client_view(state, "alice")
    assert view is not None
    assert view.opponent_board.ships == []
    assert not view.opponent_connected


def test_payload_uses_plain_json_types(playing_state) -> None:
    fire_shot(playing_state, "alice", Coord(9, 9))
    view = get_client_view(playing_state, "bob")
    assert view is not None
    payload = view.to_payload()
    assert payload["phase"] == "playing"
    assert payload["gameMode"] == "multiplayer"
    assert payload["isYourTurn"] is True
    your_board = payload["yourBoard"]
    assert isinstance(your_board, dict)
    assert your_board["grid"][9][9] == "miss"
    assert your_board["grid"][0][0] == "ship"
    opponent_board = payload["opponentBoard"]
    assert isinstance(opponent_board, dict)
    assert opponent_board["grid"][0][0] == "empty"
    assert opponent_board["ships"][0]["coords"] == []
