"""
Santorini CLI - Command-line interface for the engine.

Usage:
    santorini play [--player1 KIND] [--player2 KIND]   Play a game in the terminal
    santorini elo [--games N]                          Rate the bots against each other

Player kinds: human, heuristic, random, mcts, mcts-puct.
"""

import argparse
import sys
from typing import Callable

from pydantic import ValidationError

from .api.schemas import ActionKind, ActionRequest, GameSnapshot, PhaseName
from .api.service import parse_action
from .bots import HeuristicBot, MctsBot, RandomPolicy, TREE_POLICIES
from .bots.policy import BotPolicy
from .config import Settings
from .engine_core.state import Player
from .logging_setup import setup_logging
from .session import EloConfig, GameLoop, GameSession, Tournament, default_contestants


PLAYER_KINDS = ["human", "heuristic", "random", "mcts", "mcts-puct"]

# Player kind -> TREE_POLICIES key
MCTS_KINDS = {"mcts": "ucb1", "mcts-puct": "puct"}

_PROMPTS = {
    PhaseName.PLACING_WORKERS: ("Place a worker", ActionKind.PLACE_WORKER),
    PhaseName.SELECTING_WORKER: ("Select a worker", ActionKind.SELECT_WORKER),
    PhaseName.CHOOSING_DESTINATION: ("Move to", ActionKind.MOVE_TO),
    PhaseName.CHOOSING_BUILD_SITE: ("Build at", ActionKind.BUILD_AT),
}


def main(argv=None):
    """Main CLI entry point."""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(
        description="Santorini - rules engine and computer opponents",
        prog="santorini",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--log-file", default=settings.log_file, help="Also log to this file")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--player1", choices=PLAYER_KINDS, default="human")
    play_parser.add_argument("--player2", choices=PLAYER_KINDS, default="heuristic")
    _add_bot_options(play_parser, settings)

    # Elo command
    elo_parser = subparsers.add_parser("elo", help="Rate the bots against each other")
    elo_parser.add_argument("--games", type=int, default=5, help="Games per pair per round")
    _add_bot_options(elo_parser, settings, depth=1)

    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "elo":
        cmd_elo(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_bot_options(parser, settings: Settings, depth: int | None = None):
    parser.add_argument("--depth", type=int, default=depth or settings.search_depth,
                        help="Heuristic search depth in full turns")
    parser.add_argument("--budget", type=int, default=settings.mcts_budget,
                        help="MCTS iterations per move")
    parser.add_argument("--seed", type=int, default=settings.seed, help="Random seed")


def make_bot(kind: str, depth: int, budget: int, seed: int | None) -> BotPolicy | None:
    """Build a bot for a player kind; None means a human seat."""
    if kind == "human":
        return None
    if kind == "heuristic":
        return HeuristicBot(depth=depth, seed=seed)
    if kind == "random":
        return RandomPolicy(seed=seed)
    if kind in MCTS_KINDS:
        tree_policy = TREE_POLICIES[MCTS_KINDS[kind]]()
        return MctsBot(budget=budget, tree_policy=tree_policy, seed=seed)
    raise ValueError(f"Unknown player kind: {kind}")


def render(snapshot: GameSnapshot) -> str:
    """
    Draw the board as text.

    Each cell shows its height (or X for a dome), then the worker's player
    number. Legal targets for the next step are marked with *.
    """
    highlights = {(p.row, p.col) for p in snapshot.highlights}
    lines = ["    " + "".join(f"  {c}   " for c in range(len(snapshot.cells)))]
    for r, row in enumerate(snapshot.cells):
        parts = []
        for cell in row:
            level = "X" if cell.capped else str(cell.height)
            worker = f"P{cell.occupant}" if cell.occupant else "  "
            mark = "*" if (cell.row, cell.col) in highlights else " "
            parts.append(f"[{level}{worker}{mark}]")
        lines.append(f" {r}  " + "".join(parts))
    return "\n".join(lines)


def describe(snapshot: GameSnapshot) -> str:
    outcome = snapshot.outcome
    if outcome.is_over:
        if outcome.no_legal_move:
            return f"Player {outcome.stuck_player} cannot move. Player {outcome.winner} wins!"
        return f"Player {outcome.winner} wins!"
    return f"Turn {snapshot.turn_number} - Player {snapshot.current_player}: {snapshot.phase.value}"


def read_human_action(
    snapshot: GameSnapshot,
    input_fn: Callable[[str], str] = input,
) -> ActionRequest:
    """
    Ask for the next sub-action. Input is "row,col", or "q" to resign.

    Raises ValidationError/ValueError for unparseable input.
    """
    prompt, kind = _PROMPTS[snapshot.phase]
    raw = input_fn(f"{prompt} (row,col or q to resign): ").strip().lower()
    if raw in ("q", "quit", "resign"):
        return ActionRequest(action_type=ActionKind.RESIGN)

    parts = raw.replace(" ", ",").split(",")
    parts = [p for p in parts if p]
    if len(parts) != 2:
        raise ValueError(f"Expected row,col but got {raw!r}")
    return ActionRequest.model_validate(
        {"action_type": kind, "position": {"row": parts[0], "col": parts[1]}}
    )


def seat_seed(seed: int | None, player: Player) -> int | None:
    """Per-seat seed, so two seeded bots do not share a random stream."""
    if seed is None:
        return None
    return seed + player.value - 1


def cmd_play(args, input_fn: Callable[[str], str] = input, output: Callable[[str], None] = print):
    """Play a game in the terminal."""
    bots = {}
    for player, kind in ((Player.ONE, args.player1), (Player.TWO, args.player2)):
        bot = make_bot(kind, args.depth, args.budget, seat_seed(args.seed, player))
        if bot is not None:
            bots[player] = bot

    session = GameSession()
    loop = GameLoop(session, bots)

    while not session.game_state.is_over:
        snapshot = session.snapshot()
        output(render(snapshot))
        output(describe(snapshot))

        if not loop.is_human_turn():
            result = loop.step()
            output(result.description or "; ".join(result.errors))
            if not result.success:
                sys.exit(1)
            continue

        try:
            request = read_human_action(snapshot, input_fn)
            result = session.submit(parse_action(request))
        except (ValidationError, ValueError) as e:
            output(f"Invalid input: {e}")
            continue
        except EOFError:
            if session.resign().success:
                output("Input closed, resigning.")
            else:
                output("Input closed, quitting.")
            break

        if not result.success:
            output(f"{result.error_code.value}: {result.error}")

    snapshot = session.snapshot()
    output(render(snapshot))
    output(describe(snapshot))


def cmd_elo(args, output: Callable[[str], None] = print):
    """Rate the bots against each other."""
    output("Calculating Elo scores...")
    tournament = Tournament(
        default_contestants(depth=args.depth, budget=args.budget, seed=args.seed),
        config=EloConfig(games_per_pair=args.games),
        on_round=lambda summary: output(
            f"\nK={summary.k:.1f}\n" + "\n".join(
                f"  {name}: {rating:.0f}" for name, rating in summary.ratings.items()
            )
        ),
    )
    tournament.run()


if __name__ == "__main__":
    main()
