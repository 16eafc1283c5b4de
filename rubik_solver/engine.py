"""Thread-safe cube engine keeping the logical and geometric models in step."""

from __future__ import annotations

import threading
from typing import Any, Iterable, Union

import numpy as np

from .codec import to_facelets
from .cubie import CubeState, solved
from .geometry import GeometricCube
from .notation import FACES, Move, MoveLike, format_moves, parse_moves
from .solver import solve_state

SCRAMBLE_MOVES = tuple(Move(face, turns) for face in FACES for turns in (1, 2, 3))


class CubeEngine:
    """Move history plus the permutation state and the 27-cubie model it drives."""

    def __init__(self, initial_moves: Union[str, Iterable[MoveLike], None] = None):
        self._lock = threading.RLock()
        self._rng = np.random.default_rng()

        self._state = solved()
        self._geometry = GeometricCube()
        self.step_count = 0
        self.history: list[Move] = []
        if initial_moves:
            self.apply(initial_moves)

    @property
    def state(self) -> CubeState:
        with self._lock:
            return self._state.copy()

    @property
    def geometry(self) -> GeometricCube:
        with self._lock:
            return self._geometry.copy()

    def reset(self) -> CubeState:
        with self._lock:
            self._state = solved()
            self._geometry = GeometricCube()
            self.step_count = 0
            self.history = []
            return self._state.copy()

    def is_solved(self) -> bool:
        with self._lock:
            return self._state.is_solved()

    def apply(self, moves: Union[str, Iterable[MoveLike], MoveLike]) -> list[Move]:
        """Apply one token or a sequence to both models.

        Tokens are parsed up front, so a bad token leaves everything untouched.
        """
        if isinstance(moves, Move):
            moves = [moves]
        parsed = parse_moves(moves)

        with self._lock:
            for move in parsed:
                self._state = self._state.apply_move(move)
                self._geometry.apply_move(move)
                self.step_count += 1
                self.history.append(move)
            return parsed

    def scramble(self, length: int, seed: int | None = None) -> list[Move]:
        if not isinstance(length, int) or length < 0:
            raise ValueError("Scramble length must be a non-negative integer")

        with self._lock:
            rng = np.random.default_rng(seed) if seed is not None else self._rng
            moves: list[Move] = []
            prev_face: str | None = None

            for _ in range(length):
                candidates = [m for m in SCRAMBLE_MOVES if m.face != prev_face]
                move = candidates[int(rng.integers(len(candidates)))]
                moves.append(move)
                prev_face = move.face

            return self.apply(moves)

    def solve(self) -> list[Move]:
        """Solution for the current state; nothing is applied."""
        with self._lock:
            state = self._state.copy()
        return solve_state(state)

    def solve_and_apply(self) -> list[Move]:
        with self._lock:
            solution = self.solve()
            self.apply(solution)
            return solution

    def payload(self) -> dict[str, Any]:
        with self._lock:
            return {
                "facelets": to_facelets(self._state),
                "frame": self._state.frame,
                "history": format_moves(self.history),
                "step_count": self.step_count,
                "scrambled": not self._state.is_solved(),
            }


def scramble_moves(length: int, seed: int | None = None) -> list[Move]:
    """Seeded scramble without touching any engine state."""
    return CubeEngine().scramble(length, seed=seed)
