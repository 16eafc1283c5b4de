"""CLI entrypoint for the beginner-method solver."""

from __future__ import annotations

import argparse

from .codec import to_facelets
from .engine import CubeEngine
from .errors import CubeError
from .evaluate import add_arguments, run_evaluation
from .notation import format_moves
from .solver import BeginnerSolver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rubik 3x3 beginner-method solver")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--seed", type=int, default=None)

    scramble = sub.add_parser("scramble", parents=[common], help="Print a random scramble")
    scramble.add_argument("--length", type=int, default=20)

    solve = sub.add_parser("solve", parents=[common], help="Solve a move history")
    solve.add_argument("--moves", type=str, default=None, help="Space separated history, e.g. \"R U R' U'\"")
    solve.add_argument("--length", type=int, default=20, help="Scramble length when --moves is omitted")
    solve.add_argument("--phases", action="store_true", help="Also print the raw moves of every phase")

    evaluate = sub.add_parser("evaluate", help="Benchmark the solver over scramble lengths")
    add_arguments(evaluate)

    return parser


def _run_scramble(args: argparse.Namespace) -> None:
    engine = CubeEngine()
    moves = engine.scramble(args.length, seed=args.seed)
    print(f"scramble={format_moves(moves)}", flush=True)
    print(f"facelets={to_facelets(engine.state)}", flush=True)


def _run_solve(args: argparse.Namespace) -> None:
    engine = CubeEngine()
    if args.moves is not None:
        engine.apply(args.moves)
    else:
        engine.scramble(args.length, seed=args.seed)
    print(f"history={format_moves(engine.history)}", flush=True)

    solver = BeginnerSolver(engine.state)
    solution = solver.solve()
    if args.phases:
        for name, moves in solver.phase_moves.items():
            print(f"phase={name} moves={len(moves)} raw={format_moves(moves)}", flush=True)

    engine.apply(solution)
    print(f"solution={format_moves(solution)}", flush=True)
    print(f"length={len(solution)} raw_length={len(solver.moves)} solved={engine.is_solved()}", flush=True)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.mode == "scramble":
            _run_scramble(args)
        elif args.mode == "solve":
            _run_solve(args)
        elif args.mode == "evaluate":
            run_evaluation(args)
        else:
            parser.error(f"Unsupported mode: {args.mode}")
    except CubeError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
