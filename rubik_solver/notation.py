"""Singmaster move notation: face turns and whole-cube rotations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Union

from .errors import InvalidMoveError, InvalidNotationError

FACES = ("U", "D", "L", "R", "F", "B")
ROTATIONS = ("x", "y", "z")

# Quarter turns clockwise for each suffix; prime is three quarter turns.
SUFFIX_TURNS = {"": 1, "2": 2, "'": 3}
TURNS_SUFFIX = {turns: suffix for suffix, turns in SUFFIX_TURNS.items()}

_TOKEN_RE = re.compile(r"^([A-Za-z])(2|'|)$")


@dataclass(frozen=True)
class Move:
    face: str
    turns: int = 1

    def __post_init__(self):
        if self.face not in FACES and self.face not in ROTATIONS:
            raise InvalidMoveError(f"Unsupported face or rotation: {self.face!r}")
        if isinstance(self.turns, bool) or self.turns not in TURNS_SUFFIX:
            raise InvalidMoveError(f"Turn count must be 1, 2 or 3, got {self.turns!r}")

    @property
    def is_rotation(self) -> bool:
        return self.face in ROTATIONS

    @property
    def signed_turns(self) -> int:
        """Turn amount in {-1, 1, 2}: prime is -1, double is 2."""
        return -1 if self.turns == 3 else self.turns

    def inverse(self) -> "Move":
        return Move(self.face, (4 - self.turns) % 4)

    def __str__(self) -> str:
        return f"{self.face}{TURNS_SUFFIX[self.turns]}"


MoveLike = Union[Move, str]


def parse_move(token: MoveLike) -> Move:
    if isinstance(token, Move):
        return token
    if not isinstance(token, str):
        raise InvalidNotationError(f"Move token must be a string, got {type(token).__name__}")

    m = _TOKEN_RE.match(token)
    if m is None:
        raise InvalidNotationError(f"Malformed move token: {token!r}")
    face, suffix = m.groups()
    if face not in FACES and face not in ROTATIONS:
        raise InvalidMoveError(f"Unsupported face or rotation in token {token!r}")
    return Move(face, SUFFIX_TURNS[suffix])


def parse_moves(moves: Union[str, Iterable[MoveLike], None]) -> list[Move]:
    """Parse a space separated string or an iterable of tokens.

    The whole call fails on the first bad token; nothing is partially returned.
    """
    if moves is None:
        return []
    if isinstance(moves, str):
        moves = moves.split()
    return [parse_move(m) for m in moves]


def format_moves(moves: Iterable[MoveLike]) -> str:
    return " ".join(str(parse_move(m)) for m in moves)


def inverse(move: MoveLike) -> Move:
    return parse_move(move).inverse()


def invert_moves(moves: Union[str, Iterable[MoveLike]]) -> list[Move]:
    return [m.inverse() for m in reversed(parse_moves(moves))]


def is_rotation(move: MoveLike) -> bool:
    return parse_move(move).is_rotation
