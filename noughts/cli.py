"""
Noughts CLI - Command-line interface for the engine.

Usage:
    noughts play [--size N] [--win-length K] [--mode pvp|pvai]
                 [--difficulty easy|medium|hard] [--ai X|O] [--first X|O]
    noughts serve [--host HOST] [--port PORT]

During play, enter a cell as a 0-based index ("4") or as 1-based
"row col" ("2 2"). Other commands: n (new round), w (wire), q (quit).
"""

import argparse
import logging
import sys

from .engine_core.action import MoveResult
from .engine_core.errors import EngineError
from .engine_core.snapshot import Snapshot, to_wire
from .session import SessionConfig, SessionManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Noughts - N x N grid game engine",
        prog="noughts",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--size", type=int, default=3, help="Board size N (3-9)")
    play_parser.add_argument("--win-length", type=int, default=None, help="Marks in a row to win (default N)")
    play_parser.add_argument("--mode", choices=["pvp", "pvai"], default="pvai")
    play_parser.add_argument("--difficulty", choices=["easy", "medium", "hard"], default="hard")
    play_parser.add_argument("--ai", choices=["X", "O"], default="O", help="Mark played by the computer")
    play_parser.add_argument("--first", choices=["X", "O"], default="X", help="Mark that moves first")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    if args.command == "play":
        return cmd_play(args)
    elif args.command == "serve":
        return cmd_serve(args)
    parser.print_help()
    return 1


def cmd_play(args, input_fn=input, out=print) -> int:
    """Interactive game loop."""
    try:
        config = SessionConfig(
            board_size=args.size,
            win_length=args.win_length,
            starting_mark=args.first,
            mode=args.mode,
            difficulty=args.difficulty,
            ai_controls=args.ai,
        )
    except EngineError as e:
        out(f"Error: {e.message}")
        return 2

    manager = SessionManager()
    managed, result = manager.create_session(config)
    session_id = managed.session_id
    _show(result, out)

    while True:
        snapshot = managed.game.snapshot()
        prompt = "n/q > " if snapshot.is_over else f"{snapshot.side_to_move.value} > "
        try:
            line = input_fn(prompt).strip().lower()
        except EOFError:
            line = "q"

        if line in ("q", "quit"):
            break
        elif line in ("n", "new"):
            result = manager.reset_session(session_id)
        elif line in ("w", "wire"):
            out(to_wire(snapshot))
            continue
        elif not line:
            continue
        else:
            try:
                index = _parse_cell(line, snapshot)
            except EngineError as e:
                out(f"Rejected ({e.code.value}): {e.message}")
                continue
            if index is None:
                out("Enter an index, 'row col', n, w or q")
                continue
            result = manager.play(session_id, index)

        _show(result, out)
        if result.snapshot is not None and result.snapshot.is_over:
            score = managed.scoreboard
            out(f"Score: X {score.x_wins}  O {score.o_wins}  ties {score.ties}")

    manager.end_session(session_id, reason="quit")
    return 0


def cmd_serve(args) -> int:
    """Run the API under uvicorn."""
    try:
        import uvicorn
    except ImportError:
        raise ImportError(
            "uvicorn not installed. Install with: pip install noughts[server]"
        )
    uvicorn.run("noughts.api.app:app", host=args.host, port=args.port)
    return 0


def _parse_cell(text: str, snapshot: Snapshot):
    parts = text.replace(",", " ").split()
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        return None
    if len(numbers) == 1:
        return numbers[0]
    if len(numbers) == 2:
        row, col = numbers
        return snapshot.to_board().index_of(row - 1, col - 1)
    return None


def _show(result: MoveResult, out) -> None:
    for move in result.ai_moves:
        out(f"Computer plays {move.mark.value} at {move.index}")
    if not result.success:
        out(f"Rejected ({result.error_code.value}): {result.error}")
    snapshot = result.snapshot
    if snapshot is None:
        return
    out(snapshot.to_board().render())
    if snapshot.is_over:
        out(snapshot.outcome.describe())


if __name__ == "__main__":
    sys.exit(main())
