"""Permutation cube engine: corner/edge permutation and orientation arrays."""

from __future__ import annotations

from typing import Iterable, Union

import numpy as np

from .errors import InvalidMoveError, PieceNotFoundError, StateValidationError
from .notation import FACES, Move, MoveLike, parse_move, parse_moves

FACE_ORDER = "URFDLB"
IDENTITY_FRAME = FACE_ORDER

# Sticker colour of each face centre.
COLORS = {"U": "W", "D": "Y", "L": "O", "R": "R", "F": "G", "B": "B"}

CORNERS = ("URF", "UFL", "ULB", "UBR", "DFR", "DLF", "DBL", "DRB")
EDGES = ("UR", "UF", "UL", "UB", "DR", "DF", "DL", "DB", "FR", "FL", "BL", "BR")
CORNER_INDEX = {name: i for i, name in enumerate(CORNERS)}
EDGE_INDEX = {name: i for i, name in enumerate(EDGES)}

# Clockwise quarter turn of each face, "replaced by" form:
# slot i receives the piece from slot table[i], twisted/flipped by the delta at i.
_BASIC_MOVES = {
    "U": (
        ("UBR", "URF", "UFL", "ULB", "DFR", "DLF", "DBL", "DRB"),
        (0, 0, 0, 0, 0, 0, 0, 0),
        ("UB", "UR", "UF", "UL", "DR", "DF", "DL", "DB", "FR", "FL", "BL", "BR"),
        (0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    "R": (
        ("DFR", "UFL", "ULB", "URF", "DRB", "DLF", "DBL", "UBR"),
        (2, 0, 0, 1, 1, 0, 0, 2),
        ("FR", "UF", "UL", "UB", "BR", "DF", "DL", "DB", "DR", "FL", "BL", "UR"),
        (0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    "F": (
        ("UFL", "DLF", "ULB", "UBR", "URF", "DFR", "DBL", "DRB"),
        (1, 2, 0, 0, 2, 1, 0, 0),
        ("UR", "FL", "UL", "UB", "DR", "FR", "DL", "DB", "UF", "DF", "BL", "BR"),
        (0, 1, 0, 0, 0, 1, 0, 0, 1, 1, 0, 0),
    ),
    "D": (
        ("URF", "UFL", "ULB", "UBR", "DLF", "DBL", "DRB", "DFR"),
        (0, 0, 0, 0, 0, 0, 0, 0),
        ("UR", "UF", "UL", "UB", "DF", "DL", "DB", "DR", "FR", "FL", "BL", "BR"),
        (0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    "L": (
        ("URF", "ULB", "DBL", "UBR", "DFR", "UFL", "DLF", "DRB"),
        (0, 1, 2, 0, 0, 2, 1, 0),
        ("UR", "UF", "BL", "UB", "DR", "DF", "FL", "DB", "FR", "UL", "DL", "BR"),
        (0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
    ),
    "B": (
        ("URF", "UFL", "UBR", "DRB", "DFR", "DLF", "ULB", "DBL"),
        (0, 0, 1, 2, 0, 0, 2, 1),
        ("UR", "UF", "UL", "BR", "DR", "DF", "DL", "BL", "FR", "FL", "UB", "DB"),
        (0, 0, 0, 1, 0, 0, 0, 1, 0, 0, 1, 1),
    ),
}

# Whole-cube rotation as a relabelling of logical faces:
# after the rotation, logical face k shows what logical face map[k] showed before.
# x follows R, y follows U, z follows F.
_ROTATION_MAPS = {
    "x": {"U": "F", "F": "D", "D": "B", "B": "U", "R": "R", "L": "L"},
    "y": {"F": "R", "L": "F", "B": "L", "R": "B", "U": "U", "D": "D"},
    "z": {"R": "U", "D": "R", "L": "D", "U": "L", "F": "F", "B": "B"},
}


class CubeState:
    """Corner/edge permutation and orientation plus the current reference frame.

    ``frame[i]`` is the physical face treated as logical face ``FACE_ORDER[i]``.
    Face tokens act on physical faces through the frame; rotation tokens only
    change the frame.
    """

    __slots__ = ("cp", "co", "ep", "eo", "frame")

    def __init__(self, cp=None, co=None, ep=None, eo=None, frame: str = IDENTITY_FRAME):
        self.cp = np.arange(8, dtype=np.int8) if cp is None else np.array(cp, dtype=np.int8)
        self.co = np.zeros(8, dtype=np.int8) if co is None else np.array(co, dtype=np.int8)
        self.ep = np.arange(12, dtype=np.int8) if ep is None else np.array(ep, dtype=np.int8)
        self.eo = np.zeros(12, dtype=np.int8) if eo is None else np.array(eo, dtype=np.int8)
        self.frame = frame

    def copy(self) -> "CubeState":
        return CubeState(self.cp, self.co, self.ep, self.eo, self.frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeState):
            return NotImplemented
        return (
            self.frame == other.frame
            and np.array_equal(self.cp, other.cp)
            and np.array_equal(self.co, other.co)
            and np.array_equal(self.ep, other.ep)
            and np.array_equal(self.eo, other.eo)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"CubeState(cp={self.cp.tolist()}, co={self.co.tolist()}, "
            f"ep={self.ep.tolist()}, eo={self.eo.tolist()}, frame={self.frame!r})"
        )

    def is_solved(self) -> bool:
        """True when every piece is home and oriented; the frame is ignored."""
        return (
            np.array_equal(self.cp, _IDENTITY_CP)
            and np.array_equal(self.ep, _IDENTITY_EP)
            and not self.co.any()
            and not self.eo.any()
        )

    def physical_face(self, face: str) -> str:
        return self.frame[FACE_ORDER.index(face)]

    def apply_move(self, move: MoveLike) -> "CubeState":
        move = parse_move(move)
        if move.is_rotation:
            return CubeState(self.cp, self.co, self.ep, self.eo, _rotate_frame(self.frame, move))

        table = MOVE_TABLES.get((self.physical_face(move.face), move.turns))
        if table is None:
            raise InvalidMoveError(f"No move table for {move}")
        cp, co, ep, eo = table
        return CubeState(
            self.cp[cp],
            (self.co[cp] + co) % 3,
            self.ep[ep],
            (self.eo[ep] + eo) % 2,
            self.frame,
        )

    def apply_moves(self, moves: Union[str, Iterable[MoveLike], None]) -> "CubeState":
        state = self
        for move in parse_moves(moves):
            state = state.apply_move(move)
        return state

    def corner_at(self, slot: Union[int, str]) -> tuple[int, int]:
        i = _corner_index(slot)
        return int(self.cp[i]), int(self.co[i])

    def edge_at(self, slot: Union[int, str]) -> tuple[int, int]:
        i = _edge_index(slot)
        return int(self.ep[i]), int(self.eo[i])

    def locate_corner(self, piece: Union[int, str]) -> tuple[int, int]:
        """Return ``(slot, orientation)`` of the slot currently holding ``piece``."""
        return _locate(self.cp, self.co, _corner_index(piece), "corner")

    def locate_edge(self, piece: Union[int, str]) -> tuple[int, int]:
        return _locate(self.ep, self.eo, _edge_index(piece), "edge")


_IDENTITY_CP = np.arange(8, dtype=np.int8)
_IDENTITY_EP = np.arange(12, dtype=np.int8)


def _corner_index(piece: Union[int, str]) -> int:
    if isinstance(piece, str):
        if piece not in CORNER_INDEX:
            raise PieceNotFoundError(f"Unknown corner: {piece!r}")
        return CORNER_INDEX[piece]
    return int(piece)


def _edge_index(piece: Union[int, str]) -> int:
    if isinstance(piece, str):
        if piece not in EDGE_INDEX:
            raise PieceNotFoundError(f"Unknown edge: {piece!r}")
        return EDGE_INDEX[piece]
    return int(piece)


def _locate(perm: np.ndarray, ori: np.ndarray, piece: int, kind: str) -> tuple[int, int]:
    slots = np.flatnonzero(perm == piece)
    if slots.size != 1:
        raise PieceNotFoundError(f"{kind} {piece} not found exactly once in {perm.tolist()}")
    slot = int(slots[0])
    return slot, int(ori[slot])


def _rotate_frame(frame: str, move: Move) -> str:
    mapping = _ROTATION_MAPS[move.face]
    current = dict(zip(FACE_ORDER, frame))
    for _ in range(move.turns):
        current = {face: current[mapping[face]] for face in FACE_ORDER}
    return "".join(current[face] for face in FACE_ORDER)


def _compose(a: tuple[np.ndarray, ...], b: tuple[np.ndarray, ...]) -> tuple[np.ndarray, ...]:
    a_cp, a_co, a_ep, a_eo = a
    b_cp, b_co, b_ep, b_eo = b
    return (
        a_cp[b_cp],
        (a_co[b_cp] + b_co) % 3,
        a_ep[b_ep],
        (a_eo[b_ep] + b_eo) % 2,
    )


def _generate_move_tables() -> dict[tuple[str, int], tuple[np.ndarray, ...]]:
    tables: dict[tuple[str, int], tuple[np.ndarray, ...]] = {}
    for face in FACES:
        corners, twists, edges, flips = _BASIC_MOVES[face]
        quarter = (
            np.array([CORNER_INDEX[c] for c in corners], dtype=np.int8),
            np.array(twists, dtype=np.int8),
            np.array([EDGE_INDEX[e] for e in edges], dtype=np.int8),
            np.array(flips, dtype=np.int8),
        )
        table = quarter
        for turns in (1, 2, 3):
            tables[(face, turns)] = table
            table = _compose(table, quarter)
    return tables


MOVE_TABLES = _generate_move_tables()


def solved() -> CubeState:
    return CubeState()


def apply_move(state: CubeState, move: MoveLike) -> CubeState:
    return state.apply_move(move)


def apply_moves(state: CubeState, moves: Union[str, Iterable[MoveLike], None]) -> CubeState:
    return state.apply_moves(moves)


def permutation_parity(perm) -> int:
    """Return 0 for an even permutation, 1 for an odd one."""
    perm = [int(v) for v in perm]
    seen = [False] * len(perm)
    parity = 0
    for start in range(len(perm)):
        if seen[start]:
            continue
        length = 0
        i = start
        while not seen[i]:
            seen[i] = True
            i = perm[i]
            length += 1
        parity ^= (length - 1) & 1
    return parity


def corner_parity(state: CubeState) -> int:
    return permutation_parity(state.cp)


def edge_parity(state: CubeState) -> int:
    return permutation_parity(state.ep)


def validate_state(state: CubeState) -> CubeState:
    """Check the reachability invariants and return the state unchanged."""
    if sorted(state.cp.tolist()) != list(range(8)):
        raise StateValidationError(f"Corner permutation is not a permutation of 0..7: {state.cp.tolist()}")
    if sorted(state.ep.tolist()) != list(range(12)):
        raise StateValidationError(f"Edge permutation is not a permutation of 0..11: {state.ep.tolist()}")
    if np.any((state.co < 0) | (state.co > 2)) or np.any((state.eo < 0) | (state.eo > 1)):
        raise StateValidationError("Orientation values out of range")
    if int(state.co.sum()) % 3 != 0:
        raise StateValidationError("Corner orientation sum is not divisible by 3")
    if int(state.eo.sum()) % 2 != 0:
        raise StateValidationError("Edge orientation sum is odd")
    if corner_parity(state) != edge_parity(state):
        raise StateValidationError("Corner and edge permutation parities differ")
    if sorted(state.frame) != sorted(FACE_ORDER):
        raise StateValidationError(f"Invalid reference frame: {state.frame!r}")
    return state
