"""Rubik 3x3 beginner-method solver package."""

from .cubie import CubeState, apply_move, apply_moves, solved, validate_state
from .engine import CubeEngine
from .errors import (
    CubeError,
    InvalidMoveError,
    InvalidNotationError,
    PieceNotFoundError,
    SolverInternalError,
    StateValidationError,
)
from .geometry import GeometricCube, project
from .notation import Move, format_moves, invert_moves, parse_moves
from .simplify import simplify
from .solver import BeginnerSolver, solve

__all__ = [
    "BeginnerSolver",
    "CubeEngine",
    "CubeError",
    "CubeState",
    "GeometricCube",
    "InvalidMoveError",
    "InvalidNotationError",
    "Move",
    "PieceNotFoundError",
    "SolverInternalError",
    "StateValidationError",
    "apply_move",
    "apply_moves",
    "format_moves",
    "invert_moves",
    "parse_moves",
    "project",
    "simplify",
    "solve",
    "solved",
    "validate_state",
]
