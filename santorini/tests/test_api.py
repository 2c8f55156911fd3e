"""
Tests for the front-end facing schemas and service helpers.
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import ActionKind, ActionRequest, PhaseName, PositionModel
from ..api.service import build_snapshot, game_outcome, legal_targets, parse_action, to_response
from ..engine_core.action import Action, ActionType
from ..engine_core.board import Position
from ..engine_core.reducer import apply_action
from ..engine_core.state import Phase, Player
from .conftest import make_state, flat


P = Position


class TestParseAction:
    def test_from_dict(self):
        action = parse_action({"action_type": "move_to", "position": {"row": 1, "col": 2}})
        assert action == Action.move_to(P(1, 2))

    def test_from_model(self):
        request = ActionRequest(action_type=ActionKind.PLACE_WORKER, position=PositionModel(row=0, col=4))
        assert parse_action(request) == Action.place_worker(P(0, 4))

    def test_resign_needs_no_position(self):
        assert parse_action({"action_type": "resign"}).action_type == ActionType.RESIGN

    def test_missing_position(self):
        with pytest.raises(ValueError):
            parse_action({"action_type": "build_at"})

    def test_off_board_position(self):
        with pytest.raises(ValidationError):
            parse_action({"action_type": "select_worker", "position": {"row": 5, "col": 0}})

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            parse_action({"action_type": "fly", "position": {"row": 0, "col": 0}})


class TestLegalTargets:
    def test_placement_targets_are_free_cells(self, new_game):
        state = apply_action(new_game, Action.place_worker(P(2, 2))).new_state
        targets = legal_targets(state)

        assert len(targets) == 24
        assert P(2, 2) not in targets

    def test_selectable_workers(self):
        state = make_state(flat(c01=2, c10=2, c11=2), p1=(P(0, 0), P(4, 0)))
        assert legal_targets(state) == [P(4, 0)]

    def test_destinations_then_builds(self, opening_state):
        state = apply_action(opening_state, Action.select_worker(P(0, 0))).new_state
        assert set(legal_targets(state)) == {P(1, 0), P(1, 1)}

        state = apply_action(state, Action.move_to(P(1, 0))).new_state
        assert set(legal_targets(state)) == {P(0, 0), P(1, 1), P(2, 0), P(2, 1)}

    def test_nothing_after_game_over(self, opening_state):
        state = apply_action(opening_state, Action.resign()).new_state
        assert legal_targets(state) == []


class TestSnapshot:
    def test_opening_snapshot(self, opening_state):
        snapshot = build_snapshot(opening_state)

        assert snapshot.phase == PhaseName.SELECTING_WORKER
        assert snapshot.current_player == 1
        assert len(snapshot.cells) == 5 and all(len(row) == 5 for row in snapshot.cells)
        assert snapshot.cells[0][1].occupant == 1
        assert snapshot.cells[4][3].occupant == 2
        assert len(snapshot.workers) == 4
        assert not snapshot.outcome.is_over

    def test_selected_worker_flag(self, opening_state):
        state = apply_action(opening_state, Action.select_worker(P(0, 1))).new_state
        selected = [w for w in build_snapshot(state).workers if w.selected]

        assert len(selected) == 1
        assert (selected[0].row, selected[0].col) == (0, 1)

    def test_domes_and_heights(self):
        state = make_state(flat(c22=3, c23=2), capped={P(2, 2)})
        cells = build_snapshot(state).cells

        assert cells[2][2].capped and cells[2][2].height == 3
        assert cells[2][3].height == 2 and not cells[2][3].capped

    def test_serializes_to_json(self, opening_state):
        data = build_snapshot(opening_state).model_dump(mode="json")
        assert data["phase"] == "selecting_worker"
        assert data["outcome"]["is_over"] is False


class TestOutcome:
    def test_win(self, opening_state):
        state = apply_action(opening_state, Action.resign()).new_state
        outcome = game_outcome(state)

        assert outcome.is_over
        assert outcome.winner == 2
        assert not outcome.no_legal_move

    def test_no_legal_move(self):
        state = make_state(current=Player.TWO, phase=Phase.NO_LEGAL_MOVE)._copy_with(winner=Player.ONE)
        outcome = game_outcome(state)

        assert outcome.no_legal_move
        assert outcome.stuck_player == 2
        assert outcome.winner == 1


class TestResponse:
    def test_failure_response(self, opening_state):
        response = to_response(apply_action(opening_state, Action.build_at(P(1, 1))))

        assert not response.success
        assert response.error_code == "OutOfPhase"

    def test_success_response(self, opening_state):
        response = to_response(apply_action(opening_state, Action.select_worker(P(0, 0))))

        assert response.success
        assert response.changes
