"""Batch solver evaluation over scramble lengths."""

from __future__ import annotations

import argparse
import csv
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from .cubie import solved
from .engine import scramble_moves
from .simplify import simplify
from .solver import PHASE_NAMES, BeginnerSolver

matplotlib.use("Agg")


@dataclass
class SolveMetrics:
    scramble_length: int
    episodes: int
    solved_count: int
    unsolved_count: int
    success_rate: float
    solution_min: float
    solution_mean: float
    solution_max: float
    raw_mean: float
    cancelled_mean: float
    eval_time_sec: float
    solves_per_sec: float
    phase_means: dict[str, float]

    def to_dict(self) -> dict[str, Any]:
        row = {
            "scramble_length": self.scramble_length,
            "episodes": self.episodes,
            "solved_count": self.solved_count,
            "unsolved_count": self.unsolved_count,
            "success_rate": self.success_rate,
            "solution_min": self.solution_min,
            "solution_mean": self.solution_mean,
            "solution_max": self.solution_max,
            "raw_mean": self.raw_mean,
            "cancelled_mean": self.cancelled_mean,
            "eval_time_sec": self.eval_time_sec,
            "solves_per_sec": self.solves_per_sec,
        }
        for name in PHASE_NAMES:
            row[f"phase_{name}_mean"] = self.phase_means.get(name, 0.0)
        return row


FIELDNAMES = [
    "scramble_length",
    "episodes",
    "solved_count",
    "unsolved_count",
    "success_rate",
    "solution_min",
    "solution_mean",
    "solution_max",
    "raw_mean",
    "cancelled_mean",
    "eval_time_sec",
    "solves_per_sec",
] + [f"phase_{name}_mean" for name in PHASE_NAMES]


def _aggregate_metrics(
    scramble_length: int,
    solved_flags: np.ndarray,
    solution_lengths: np.ndarray,
    raw_lengths: np.ndarray,
    eval_time_sec: float,
    phase_lengths: dict[str, np.ndarray] | None = None,
) -> SolveMetrics:
    solved_flags = np.asarray(solved_flags, dtype=bool)
    solution_lengths = np.asarray(solution_lengths, dtype=np.int64)
    raw_lengths = np.asarray(raw_lengths, dtype=np.int64)
    episodes = int(solution_lengths.size)
    solved_count = int(solved_flags.sum())

    def _stat(fn, values: np.ndarray) -> float:
        return float(fn(values)) if episodes > 0 else 0.0

    phase_means = {
        name: _stat(np.mean, np.asarray(values, dtype=np.int64)) for name, values in (phase_lengths or {}).items()
    }
    return SolveMetrics(
        scramble_length=scramble_length,
        episodes=episodes,
        solved_count=solved_count,
        unsolved_count=episodes - solved_count,
        success_rate=float(solved_count / episodes) if episodes > 0 else 0.0,
        solution_min=_stat(np.min, solution_lengths),
        solution_mean=_stat(np.mean, solution_lengths),
        solution_max=_stat(np.max, solution_lengths),
        raw_mean=_stat(np.mean, raw_lengths),
        cancelled_mean=_stat(np.mean, raw_lengths - solution_lengths),
        eval_time_sec=float(eval_time_sec),
        solves_per_sec=float(episodes / max(eval_time_sec, 1e-9)),
        phase_means=phase_means,
    )


def _print_header() -> None:
    print("scramble | success_rate | solved/total | solution(min/mean/max) | raw_mean | solves/s", flush=True)


def _print_row(m: SolveMetrics) -> None:
    solution = f"{m.solution_min:.0f}/{m.solution_mean:.2f}/{m.solution_max:.0f}"
    print(
        f"{m.scramble_length:8d} | "
        f"{m.success_rate:12.4f} | "
        f"{m.solved_count:6d}/{m.episodes:<5d} | "
        f"{solution:22s} | "
        f"{m.raw_mean:8.2f} | "
        f"{m.solves_per_sec:8.1f}",
        flush=True,
    )


def _plot_metrics(metrics: list[SolveMetrics], output_dir: Path, prefix: str) -> Path:
    lengths = np.array([m.scramble_length for m in metrics], dtype=np.int64)
    sol_min = np.array([m.solution_min for m in metrics], dtype=np.float64)
    sol_mean = np.array([m.solution_mean for m in metrics], dtype=np.float64)
    sol_max = np.array([m.solution_max for m in metrics], dtype=np.float64)
    raw_mean = np.array([m.raw_mean for m in metrics], dtype=np.float64)

    fig = plt.figure(figsize=(11, 6))
    ax = fig.add_subplot(111)
    ax.plot(lengths, sol_min, marker="o", linewidth=1.8, label="Solution min")
    ax.plot(lengths, sol_mean, marker="o", linewidth=1.8, label="Solution mean")
    ax.plot(lengths, sol_max, marker="o", linewidth=1.8, label="Solution max")
    ax.plot(lengths, raw_mean, linestyle="--", alpha=0.7, linewidth=1.5, label="Raw mean")
    ax.set_title("Beginner Solver: Solution Length vs Scramble Length")
    ax.set_xlabel("Scramble length")
    ax.set_ylabel("Moves")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    plot_path = output_dir / f"{prefix}_solution_length.png"
    fig.tight_layout()
    fig.savefig(plot_path, dpi=160)
    plt.close(fig)
    return plot_path


def _save_reports(
    metrics: list[SolveMetrics],
    output_dir: Path,
    prefix: str,
    args: argparse.Namespace,
) -> tuple[Path, Path]:
    csv_path = output_dir / f"{prefix}_metrics.csv"
    json_path = output_dir / f"{prefix}_metrics.json"

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for m in metrics:
            writer.writerow(m.to_dict())

    payload = {
        "config": {
            "episodes": int(args.episodes),
            "scramble_min": int(args.scramble_min),
            "scramble_max": int(args.scramble_max),
            "seed": args.seed,
            "progress": args.progress,
        },
        "metrics": [m.to_dict() for m in metrics],
    }
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    return csv_path, json_path


def add_arguments(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
    p.add_argument("--episodes", type=int, default=200)
    p.add_argument("--scramble-min", type=int, default=1)
    p.add_argument("--scramble-max", type=int, default=25)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--output-dir", default="eval_reports")
    p.add_argument("--output-prefix", default="solver_eval")
    p.add_argument("--progress", default="on", choices=["on", "off"])
    return p


def build_parser() -> argparse.ArgumentParser:
    return add_arguments(argparse.ArgumentParser(description="Evaluate the beginner solver on seeded scrambles"))


def run_evaluation(args: argparse.Namespace) -> dict[str, Any]:
    if args.scramble_min < 0 or args.scramble_max < args.scramble_min:
        raise ValueError("Require 0 <= scramble_min <= scramble_max")
    if args.episodes < 1:
        raise ValueError("--episodes must be >= 1")

    rng = np.random.default_rng(args.seed)
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(
        "evaluation_init "
        f"episodes={args.episodes} scramble_range={args.scramble_min}..{args.scramble_max} seed={args.seed}",
        flush=True,
    )
    _print_header()

    metrics: list[SolveMetrics] = []
    for scramble_length in range(int(args.scramble_min), int(args.scramble_max) + 1):
        t0 = time.perf_counter()
        n = int(args.episodes)
        solved_out = np.zeros((n,), dtype=bool)
        solution_out = np.zeros((n,), dtype=np.int64)
        raw_out = np.zeros((n,), dtype=np.int64)
        phase_out = {name: np.zeros((n,), dtype=np.int64) for name in PHASE_NAMES}

        episode_iter = range(n)
        if args.progress == "on":
            episode_iter = tqdm(
                episode_iter,
                desc=f"scramble={scramble_length}",
                unit="solve",
                mininterval=1.0,
                leave=False,
            )

        for i in episode_iter:
            scramble = scramble_moves(scramble_length, seed=int(rng.integers(2**31)))
            state = solved().apply_moves(scramble)
            solver = BeginnerSolver(state)
            raw = solver.solve_raw()
            solution = simplify(raw)

            solved_out[i] = state.apply_moves(solution).is_solved()
            solution_out[i] = len(solution)
            raw_out[i] = len(raw)
            for name, moves in solver.phase_moves.items():
                phase_out[name][i] = len(moves)

        elapsed = time.perf_counter() - t0
        m = _aggregate_metrics(scramble_length, solved_out, solution_out, raw_out, elapsed, phase_out)
        metrics.append(m)
        _print_row(m)

    plot_path = _plot_metrics(metrics, output_dir, args.output_prefix)
    csv_path, json_path = _save_reports(metrics, output_dir, args.output_prefix, args)

    avg_sr = float(np.mean([m.success_rate for m in metrics]))
    avg_solution = float(np.mean([m.solution_mean for m in metrics]))
    print(
        "evaluation_summary "
        f"avg_success_rate={avg_sr:.4f} avg_solution_mean={avg_solution:.2f} "
        f"plot={plot_path} csv={csv_path} json={json_path}",
        flush=True,
    )

    return {
        "metrics": metrics,
        "plot": plot_path,
        "csv": csv_path,
        "json": json_path,
    }


def main() -> None:
    args = build_parser().parse_args()
    run_evaluation(args)


if __name__ == "__main__":
    main()
