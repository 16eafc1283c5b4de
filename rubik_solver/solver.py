"""Layer-by-layer beginner-method solver."""

from __future__ import annotations

from typing import Callable, Iterable, Union

from .codec import reoriented
from .cubie import CORNERS, EDGE_INDEX, EDGES, IDENTITY_FRAME, CubeState, solved
from .errors import SolverInternalError
from .notation import Move, MoveLike, parse_moves
from .simplify import simplify

SIDES = ("F", "R", "B", "L")
RIGHT_OF = {"F": "R", "R": "B", "B": "L", "L": "F"}

PHASE_NAMES = (
    "cross",
    "first_layer_corners",
    "middle_edges",
    "top_cross",
    "top_edges",
    "top_corner_permutation",
    "top_corner_orientation",
)

# Middle-layer edge -> setup that lifts it into the U layer without touching the D layer.
CROSS_LIFT = {
    "FR": "R U R'",
    "FL": "L' U L",
    "BR": "R' U R",
    "BL": "L U L'",
}
CROSS_FLIP_INSERT = "U' R' F R"
SEXY_MOVE = "R U R' U'"
INSERT_RIGHT = "U R U' R' U' F' U F"
INSERT_LEFT = "U' L' U L U F U' F'"
TOP_CROSS_LINE = "F R U R' U' F'"
TOP_CROSS_L = "F U R U' R' F'"
SUNE = "R U R' U R U2 R'"
CORNER_CYCLE = "U R U' L' U R' U' L"
CORNER_TWIST = "R' D' R D"

# Most algorithm applications each case analysis can need.
MAX_CORNER_REPEATS = 5
MAX_TOP_CROSS_ALGS = 2
MAX_TOP_EDGE_ALGS = 2
MAX_CORNER_CYCLES = 3
MAX_CORNER_TWISTS = 4

CROSS_TARGETS = ("DF", "DR", "DB", "DL")
CORNER_TARGETS = ("DFR", "DLF", "DBL", "DRB")
MIDDLE_TARGETS = ("FR", "FL", "BL", "BR")
U_CORNERS = CORNERS[:4]

_U_SLOT_ABOVE = {
    name: next(u for u in U_CORNERS if set(u) == {"U"} | (set(name) - {"D"}))
    for name in CORNER_TARGETS
}


def conjugate(alg: str, front: str) -> str:
    """Rewrite an algorithm written for the F face so it acts on ``front``.

    Side faces shift around the U axis; U and D are unchanged.
    """
    shift = SIDES.index(front)
    out = []
    for token in alg.split():
        face = token[0]
        if face in SIDES:
            face = SIDES[(SIDES.index(face) + shift) % 4]
        out.append(face + token[1:])
    return " ".join(out)


def _insertion(face: str, side: str) -> str:
    """Insert the edge above ``face`` into the middle slot between ``face`` and ``side``."""
    alg = INSERT_RIGHT if RIGHT_OF[face] == side else INSERT_LEFT
    return conjugate(alg, face)


class BeginnerSolver:
    """Runs the seven phases on a private copy of a cube state.

    The state is first expressed in its own reference frame, so the emitted
    moves are meant to be applied after whatever history produced ``state``.
    Every phase is a bounded loop and raises :class:`SolverInternalError`
    once its bound is exceeded.
    """

    def __init__(self, state: CubeState):
        self.cube = reoriented(state)
        self.moves: list[Move] = []
        self.phase_moves: dict[str, list[Move]] = {}
        self._view: CubeState | None = None

    @property
    def view(self) -> CubeState:
        """The cube as seen through its current frame, with an identity frame."""
        if self.cube.frame == IDENTITY_FRAME:
            return self.cube
        if self._view is None:
            self._view = reoriented(self.cube)
        return self._view

    def apply(self, moves: Union[str, Iterable[MoveLike]]) -> None:
        for move in parse_moves(moves):
            self.cube = self.cube.apply_move(move)
            self.moves.append(move)
        self._view = None

    def solve_phases(self) -> dict[str, list[Move]]:
        if self.phase_moves:
            return self.phase_moves
        phases = (
            self._solve_cross,
            self._solve_first_layer_corners,
            self._solve_middle_edges,
            self._solve_top_cross,
            self._solve_top_edges,
            self._solve_top_corner_permutation,
            self._solve_top_corner_orientation,
        )
        for name, phase in zip(PHASE_NAMES, phases):
            start = len(self.moves)
            phase()
            self.phase_moves[name] = self.moves[start:]
        if not self.cube.is_solved():
            raise SolverInternalError(f"Cube not solved after all phases: {self.cube!r}")
        return self.phase_moves

    def solve_raw(self) -> list[Move]:
        self.solve_phases()
        return list(self.moves)

    def solve(self) -> list[Move]:
        return simplify(self.solve_raw())

    # Helpers

    def _turn_until(self, done: Callable[[], bool], face: str = "U") -> int:
        for turns in range(4):
            if done():
                return turns
            if turns < 3:
                self.apply(face)
        raise SolverInternalError(f"Condition not reached within three {face} turns")

    def _repeat_until(self, alg: str, done: Callable[[], bool], limit: int) -> int:
        count = 0
        while not done():
            if count == limit:
                raise SolverInternalError(f"{alg!r} applied {limit} times without reaching the target")
            self.apply(alg)
            count += 1
        return count

    def _edge_slot(self, piece: str) -> tuple[str, int]:
        slot, ori = self.view.locate_edge(piece)
        return EDGES[slot], ori

    def _corner_slot(self, piece: str) -> tuple[str, int]:
        slot, ori = self.view.locate_corner(piece)
        return CORNERS[slot], ori

    def _edge_solved(self, piece: str) -> bool:
        return self._edge_slot(piece) == (piece, 0)

    def _corner_solved(self, piece: str) -> bool:
        return self._corner_slot(piece) == (piece, 0)

    def _check(self, done: bool, phase: str, piece: str) -> None:
        if not done:
            raise SolverInternalError(f"{phase}: {piece} not solved after its case algorithm")

    # Phases

    def _solve_cross(self) -> None:
        for target in CROSS_TARGETS:
            if self._edge_solved(target):
                continue
            side = target[1]
            slot, _ = self._edge_slot(target)
            if slot in CROSS_LIFT:
                self.apply(CROSS_LIFT[slot])
            elif slot[0] == "D":
                self.apply(slot[1] + "2")

            self._turn_until(lambda: self._edge_slot(target)[0] == "U" + side)
            if self._edge_slot(target)[1] == 0:
                self.apply(side + "2")
            else:
                self.apply(conjugate(CROSS_FLIP_INSERT, side))
            self._check(self._edge_solved(target), "cross", target)

    def _solve_first_layer_corners(self) -> None:
        for target in CORNER_TARGETS:
            if self._corner_solved(target):
                continue
            slot, _ = self._corner_slot(target)
            if slot[0] == "D":
                self.apply(conjugate(SEXY_MOVE, slot[1]))

            above = _U_SLOT_ABOVE[target]
            self._turn_until(lambda: self._corner_slot(target)[0] == above)
            self._repeat_until(
                conjugate(SEXY_MOVE, target[1]),
                lambda: self._corner_solved(target),
                limit=MAX_CORNER_REPEATS,
            )

    def _solve_middle_edges(self) -> None:
        for target in MIDDLE_TARGETS:
            if self._edge_solved(target):
                continue
            slot, _ = self._edge_slot(target)
            if slot[0] != "U":
                self.apply(_insertion(slot[0], slot[1]))

            first, second = target
            if self._edge_slot(target)[1] == 1:
                self._turn_until(lambda: self._edge_slot(target)[0] == "U" + first)
                self.apply(_insertion(first, second))
            else:
                self._turn_until(lambda: self._edge_slot(target)[0] == "U" + second)
                self.apply(_insertion(second, first))
            self._check(self._edge_solved(target), "middle edges", target)

    def _top_edge_oriented(self, side: str) -> bool:
        return self.view.edge_at("U" + side)[1] == 0

    def _solve_top_cross(self) -> None:
        for attempt in range(MAX_TOP_CROSS_ALGS + 1):
            good = {side for side in SIDES if self._top_edge_oriented(side)}
            if len(good) == 4:
                return
            if attempt == MAX_TOP_CROSS_ALGS:
                raise SolverInternalError(f"Top cross not oriented after {MAX_TOP_CROSS_ALGS} algorithms")
            if not good:
                self.apply(TOP_CROSS_LINE)
            elif len(good) != 2:
                raise SolverInternalError(f"Impossible top cross case: {sorted(good)}")
            elif good in ({"L", "R"}, {"F", "B"}):
                self._turn_until(lambda: self._top_edge_oriented("L") and self._top_edge_oriented("R"))
                self.apply(TOP_CROSS_LINE)
            else:
                self._turn_until(lambda: self._top_edge_oriented("B") and self._top_edge_oriented("L"))
                self.apply(TOP_CROSS_L)

    def _top_edge_matched(self, side: str, state: CubeState | None = None) -> bool:
        state = self.view if state is None else state
        slot = "U" + side
        return state.edge_at(slot) == (EDGE_INDEX[slot], 0)

    def _solve_top_edges(self) -> None:
        for attempt in range(MAX_TOP_EDGE_ALGS + 1):
            view = self.view
            counts = [
                sum(self._top_edge_matched(side, view.apply_moves([Move("U", k)] if k else [])) for side in SIDES)
                for k in range(4)
            ]
            best = max(range(4), key=lambda k: counts[k])
            if best:
                self.apply([Move("U", best)])

            matched = {side for side in SIDES if self._top_edge_matched(side)}
            if len(matched) == 4:
                return
            if attempt == MAX_TOP_EDGE_ALGS:
                raise SolverInternalError(f"Top edges not permuted after {MAX_TOP_EDGE_ALGS} algorithms")
            if len(matched) != 2:
                raise SolverInternalError(f"Impossible top edge case: {sorted(matched)}")
            if matched in ({"L", "R"}, {"F", "B"}):
                self._turn_until(lambda: self._top_edge_matched("F") and self._top_edge_matched("B"), face="y")
                self.apply(SUNE)
            else:
                self._turn_until(lambda: self._top_edge_matched("B") and self._top_edge_matched("R"), face="y")
                self.apply(SUNE + " U")

    def _corner_placed(self, slot: str) -> bool:
        return CORNERS[self.view.corner_at(slot)[0]] == slot

    def _solve_top_corner_permutation(self) -> None:
        for attempt in range(MAX_CORNER_CYCLES + 1):
            placed = [slot for slot in U_CORNERS if self._corner_placed(slot)]
            if len(placed) == 4:
                return
            if attempt == MAX_CORNER_CYCLES:
                raise SolverInternalError(f"Top corners not permuted after {MAX_CORNER_CYCLES} algorithms")
            if placed:
                self._turn_until(lambda: self._corner_placed("URF"), face="y")
            self.apply(CORNER_CYCLE)

    def _reference_corner_oriented(self) -> bool:
        piece, ori = self.view.corner_at("URF")
        return CORNERS[piece][0] == "U" and ori == 0

    def _solve_top_corner_orientation(self) -> None:
        for _ in range(4):
            self._repeat_until(CORNER_TWIST, self._reference_corner_oriented, limit=MAX_CORNER_TWISTS)
            self.apply("U")
        self._turn_until(lambda: self._edge_solved("UF"))


def solve_state(state: CubeState) -> list[Move]:
    return BeginnerSolver(state).solve()


def solve(history: Union[str, Iterable[MoveLike], None]) -> list[Move]:
    """Replay ``history`` on a solved cube and return the simplified solution.

    Applying ``history`` followed by the result to a solved cube leaves every
    piece home; whole-cube rotations in either list only change the frame.
    """
    return solve_state(solved().apply_moves(history))
