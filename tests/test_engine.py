from dotsboxes import available_moves, choose_automated_move, is_terminal, new_game, submit_move, winner
from dotsboxes.game_basics import AI, PLAYER, all_edges
from dotsboxes.tactics import boxes_completed_by, capturing_moves, completed_boxes


def test_empty_three_by_three_has_twelve_moves_and_first_move_passes_turn():
    s = new_game(3)
    assert len(available_moves(s)) == 12
    for edge in all_edges(3):
        t = new_game(3)
        ok, t = submit_move(t, edge, PLAYER)
        assert ok
        assert len(available_moves(t)) == 11
        assert t.turn == AI
        assert t.last_edge == edge
        assert t.scores == {PLAYER: 0, AI: 0}


def test_reversed_edge_is_the_same_edge():
    s = new_game(3)
    ok, s = submit_move(s, ((0, 1), (0, 0)), PLAYER)
    assert ok
    assert ((0, 0), (0, 1)) in s.edges
    assert ((0, 0), (0, 1)) not in available_moves(s)
    ok, _ = submit_move(s, ((0, 0), (0, 1)), AI)
    assert not ok


def test_repeated_edge_rejected_without_side_effects():
    s = new_game(2)
    for e in [((0, 0), (0, 1)), ((0, 0), (1, 0)), ((0, 1), (1, 1)), ((1, 0), (1, 1))]:
        submit_move(s, e, PLAYER)
    assert s.scores[PLAYER] == 1
    snapshot = s.copy()
    for _ in range(2):
        ok, s = submit_move(s, ((1, 1), (1, 0)), PLAYER)
        assert not ok
        assert s.edges == snapshot.edges
        assert s.owners == snapshot.owners
        assert s.scores == snapshot.scores
        assert s.turn == snapshot.turn


def test_malformed_edges_rejected():
    s = new_game(3)
    for bad in [((0, 0), (1, 1)), ((0, 0), (0, 2)), ((2, 2), (2, 3)), ((0, 0), (0, 0))]:
        ok, s = submit_move(s, bad, PLAYER)
        assert not ok
    assert s.edges == set()
    assert s.turn == PLAYER


def test_completing_a_box_keeps_the_turn():
    s = new_game(3)
    submit_move(s, ((0, 0), (0, 1)), PLAYER)
    submit_move(s, ((0, 0), (1, 0)), AI)
    submit_move(s, ((1, 0), (1, 1)), PLAYER)
    assert s.turn == AI
    ok, s = submit_move(s, ((0, 1), (1, 1)), AI)
    assert ok
    assert s.owners == {(0, 0): AI}
    assert s.scores == {PLAYER: 0, AI: 1}
    assert s.turn == AI


def test_one_edge_can_complete_two_boxes():
    s = new_game(3)
    setup = [
        ((0, 0), (0, 1)), ((1, 0), (1, 1)), ((0, 0), (1, 0)),
        ((0, 1), (0, 2)), ((1, 1), (1, 2)), ((0, 2), (1, 2)),
    ]
    for e in setup:
        ok, s = submit_move(s, e, s.turn)
        assert ok
    assert s.owners == {}
    mover = s.turn
    ok, s = submit_move(s, ((0, 1), (1, 1)), mover)
    assert ok
    assert s.owners == {(0, 0): mover, (0, 1): mover}
    assert s.scores[mover] == 2
    assert s.turn == mover


def test_single_box_scenario_ai_takes_last_edge():
    s = new_game(2)
    for e in [((0, 0), (0, 1)), ((0, 0), (1, 0)), ((0, 1), (1, 1))]:
        ok, s = submit_move(s, e, PLAYER)
        assert ok
    assert s.turn == AI
    mv = choose_automated_move(s)
    assert mv == ((1, 0), (1, 1))
    ok, s = submit_move(s, mv, AI)
    assert ok
    assert s.scores == {PLAYER: 0, AI: 1}
    assert is_terminal(s)
    assert winner(s) == AI
    assert choose_automated_move(s) is None
    ok, _ = submit_move(s, ((0, 0), (0, 1)), PLAYER)
    assert not ok


def test_completion_detector_uses_post_move_edges_and_skips_owned_boxes():
    top, bottom, left, right = ((0, 0), (0, 1)), ((1, 0), (1, 1)), ((0, 0), (1, 0)), ((0, 1), (1, 1))
    pre = {top, bottom, left}
    assert completed_boxes(pre, {}, 2) == []
    assert completed_boxes(pre | {right}, {}, 2) == [(0, 0)]
    owners = {(0, 0): PLAYER}
    assert completed_boxes(pre | {right}, owners, 2) == []
    assert owners == {(0, 0): PLAYER}
    assert boxes_completed_by(right, frozenset(pre), {}, 2) == [(0, 0)]
    assert boxes_completed_by(top, frozenset(pre), {}, 2) == []


def test_completion_detector_finds_boxes_away_from_the_new_edge():
    # box (1,1) is fully bordered but was never awarded
    full_11 = {((1, 1), (1, 2)), ((2, 1), (2, 2)), ((1, 1), (2, 1)), ((1, 2), (2, 2))}
    far = ((0, 0), (0, 1))
    assert completed_boxes(full_11 | {far}, {}, 3) == [(1, 1)]


def test_capturing_moves_in_raster_order():
    edges = {((0, 0), (0, 1)), ((0, 0), (1, 0)), ((1, 0), (1, 1)),
             ((1, 1), (1, 2)), ((1, 2), (2, 2)), ((2, 1), (2, 2))}
    assert capturing_moves(edges, {}, 3) == [((0, 1), (1, 1)), ((1, 1), (2, 1))]
