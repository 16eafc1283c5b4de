"""Geometric cubie model for rendering and animation.

Each of the 27 cubies sits on the integer lattice {-1, 0, 1}^3 and carries
its stickers keyed by the face direction they point to. Face tokens rotate one
layer; rotation tokens (x, y, z) rotate all 27 cubies, which is how the
renderer shows a reference-frame change of the permutation engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

import numpy as np

from .codec import to_stickers
from .cubie import COLORS, CORNERS, EDGES, FACE_ORDER, CubeState
from .notation import Move, MoveLike, parse_move, parse_moves

FACE_NORMALS = {
    "U": (0, 1, 0),
    "D": (0, -1, 0),
    "R": (1, 0, 0),
    "L": (-1, 0, 0),
    "F": (0, 0, 1),
    "B": (0, 0, -1),
}
NORMAL_TO_FACE = {normal: face for face, normal in FACE_NORMALS.items()}

# Clockwise turn from the face viewpoint expressed as a world-axis rotation angle.
CLOCKWISE_ANGLE_DEG = {
    "U": -90,
    "D": +90,
    "L": +90,
    "R": -90,
    "F": -90,
    "B": +90,
    "x": -90,
    "y": -90,
    "z": -90,
}

FACE_AXIS_LAYER = {
    "U": ("y", +1),
    "D": ("y", -1),
    "L": ("x", -1),
    "R": ("x", +1),
    "F": ("z", +1),
    "B": ("z", -1),
}
ROTATION_AXIS = {"x": "x", "y": "y", "z": "z"}
AXIS_INDEX = {"x": 0, "y": 1, "z": 2}

Vec3 = tuple[int, int, int]


def _rotation_matrix(axis: str, angle_deg: int) -> np.ndarray:
    """Return integer rotation matrix for +-90 around x/y/z axes."""
    if axis == "x" and angle_deg == +90:
        return np.array([[1, 0, 0], [0, 0, -1], [0, 1, 0]], dtype=np.int8)
    if axis == "x" and angle_deg == -90:
        return np.array([[1, 0, 0], [0, 0, 1], [0, -1, 0]], dtype=np.int8)
    if axis == "y" and angle_deg == +90:
        return np.array([[0, 0, 1], [0, 1, 0], [-1, 0, 0]], dtype=np.int8)
    if axis == "y" and angle_deg == -90:
        return np.array([[0, 0, -1], [0, 1, 0], [1, 0, 0]], dtype=np.int8)
    if axis == "z" and angle_deg == +90:
        return np.array([[0, -1, 0], [1, 0, 0], [0, 0, 1]], dtype=np.int8)
    if axis == "z" and angle_deg == -90:
        return np.array([[0, 1, 0], [-1, 0, 0], [0, 0, 1]], dtype=np.int8)
    raise ValueError(f"Unsupported rotation: axis={axis}, angle={angle_deg}")


def _as_vec(v: np.ndarray) -> Vec3:
    return tuple(int(c) for c in v)


def move_rotation(move: MoveLike) -> tuple[str, int | None, int]:
    """Return ``(axis, layer, angle_deg)`` for animating ``move``.

    ``layer`` is the coordinate of the turning layer along ``axis``, or None
    when the whole cube rotates. Prime turns reverse the angle, double turns
    use +-180.
    """
    move = parse_move(move)
    if move.is_rotation:
        axis, layer = ROTATION_AXIS[move.face], None
    else:
        axis, layer = FACE_AXIS_LAYER[move.face]
    return axis, layer, CLOCKWISE_ANGLE_DEG[move.face] * move.signed_turns


def _generate_move_matrices() -> dict[Move, np.ndarray]:
    matrices: dict[Move, np.ndarray] = {}
    for face in CLOCKWISE_ANGLE_DEG:
        axis = ROTATION_AXIS.get(face) or FACE_AXIS_LAYER[face][0]
        quarter = _rotation_matrix(axis, CLOCKWISE_ANGLE_DEG[face])
        for turns in (1, 2, 3):
            matrices[Move(face, turns)] = np.linalg.matrix_power(quarter, turns).astype(np.int8)
    return matrices


MOVE_MATRICES = _generate_move_matrices()


def _face_remap(rot: np.ndarray) -> dict[str, str]:
    return {face: NORMAL_TO_FACE[_as_vec(rot @ np.array(n))] for face, n in FACE_NORMALS.items()}


@dataclass
class Cubie:
    id: int
    position: Vec3
    stickers: dict[str, str] = field(default_factory=dict)

    def rotate(self, rot: np.ndarray, remap: dict[str, str]) -> None:
        self.position = _as_vec(rot @ np.array(self.position))
        self.stickers = {remap[face]: color for face, color in self.stickers.items()}


def _solved_cubies() -> list[Cubie]:
    cubies: list[Cubie] = []
    cubie_id = 0
    for x in (-1, 0, 1):
        for y in (-1, 0, 1):
            for z in (-1, 0, 1):
                position = (x, y, z)
                stickers = {
                    face: COLORS[face]
                    for face, normal in FACE_NORMALS.items()
                    if any(p == n != 0 for p, n in zip(position, normal))
                }
                cubies.append(Cubie(cubie_id, position, stickers))
                cubie_id += 1
    return cubies


_SOLVED_IDS = {c.position: c.id for c in _solved_cubies()}


class GeometricCube:
    """Render-facing cube of 27 cubies, mutated in place by every move."""

    def __init__(self, cubies: list[Cubie] | None = None):
        self.cubies = _solved_cubies() if cubies is None else cubies

    def copy(self) -> "GeometricCube":
        return GeometricCube([Cubie(c.id, c.position, dict(c.stickers)) for c in self.cubies])

    def apply_move(self, move: MoveLike) -> "GeometricCube":
        move = parse_move(move)
        rot = MOVE_MATRICES[move]
        remap = _face_remap(rot)
        for cubie in self._selected(move):
            cubie.rotate(rot, remap)
        return self

    def apply_moves(self, moves: Union[str, Iterable[MoveLike], None]) -> "GeometricCube":
        for move in parse_moves(moves):
            self.apply_move(move)
        return self

    def _selected(self, move: Move) -> list[Cubie]:
        if move.is_rotation:
            return list(self.cubies)
        axis, layer = FACE_AXIS_LAYER[move.face]
        return self.layer_cubies(axis, layer)

    def layer_cubies(self, axis: str, layer: int) -> list[Cubie]:
        i = AXIS_INDEX[axis]
        return [c for c in self.cubies if c.position[i] == layer]

    def layer(self, face: str) -> list[Cubie]:
        """Cubies currently in the layer that ``face`` turns."""
        axis, layer = FACE_AXIS_LAYER[face]
        return self.layer_cubies(axis, layer)

    def face_colors(self, face: str) -> list[str]:
        """The nine sticker colours pointing at ``face``.

        Ordered by lattice position ``(x, y, z)`` in world coordinates, not by
        the row and column a viewer facing ``face`` would read.
        """
        return [c.stickers[face] for c in sorted(self.layer(face), key=lambda c: c.position)]

    def is_solved(self) -> bool:
        """Visual check: every face shows a single colour, whatever the orientation."""
        return all(len(set(self.face_colors(face))) == 1 for face in FACE_NORMALS)

    def signature(self) -> tuple:
        """Canonical ``(position, stickers)`` form; cubie ids are left out."""
        return tuple(
            (c.position, tuple(sorted(c.stickers.items())))
            for c in sorted(self.cubies, key=lambda c: c.position)
        )


def _position(name: str) -> Vec3:
    return _as_vec(sum(np.array(FACE_NORMALS[face]) for face in name))


def frame_matrix(frame: str) -> np.ndarray:
    """Rotation taking each physical face direction to where the frame shows it."""
    rot = np.zeros((3, 3), dtype=np.int8)
    for logical, physical in zip(FACE_ORDER, frame):
        if physical in ("R", "U", "F"):
            column = {"R": 0, "U": 1, "F": 2}[physical]
            rot[:, column] = FACE_NORMALS[logical]
    return rot


def project(state: CubeState) -> GeometricCube:
    """Derive the geometric model of ``state`` without replaying any moves."""
    rot = frame_matrix(state.frame)
    remap = _face_remap(rot)
    stickers = to_stickers(state)
    cubies: list[Cubie] = []

    for perm, names in ((state.cp, CORNERS), (state.ep, EDGES)):
        for slot, name in enumerate(names):
            piece = names[int(perm[slot])]
            cubie = Cubie(
                _SOLVED_IDS[_position(piece)],
                _position(name),
                {face: COLORS[stickers[(name, face)]] for face in name},
            )
            cubie.rotate(rot, remap)
            cubies.append(cubie)

    for face in FACE_ORDER:
        cubie = Cubie(_SOLVED_IDS[FACE_NORMALS[face]], FACE_NORMALS[face], {face: COLORS[face]})
        cubie.rotate(rot, remap)
        cubies.append(cubie)
    cubies.append(Cubie(_SOLVED_IDS[(0, 0, 0)], (0, 0, 0), {}))

    cubies.sort(key=lambda c: c.id)
    return GeometricCube(cubies)
