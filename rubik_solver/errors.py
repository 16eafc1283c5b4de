"""Exception types shared by the cube engine, geometric model and solver."""

from __future__ import annotations


class CubeError(Exception):
    """Base class for all errors raised by this package."""


class InvalidNotationError(CubeError, ValueError):
    """Raised when a move token does not follow the notation grammar."""


class InvalidMoveError(InvalidNotationError):
    """Raised when a well-formed token names an unsupported face or rotation."""


class StateValidationError(CubeError, ValueError):
    """Raised when a cube state violates the reachability invariants."""


class PieceNotFoundError(CubeError, LookupError):
    """Raised when a permutation array does not contain an expected piece."""


class SolverInternalError(CubeError, RuntimeError):
    """Raised when a solver phase exceeds its proven iteration bound."""
