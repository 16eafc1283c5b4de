"""Sticker and facelet codecs for cube states."""

from __future__ import annotations

from .cubie import (
    CORNER_INDEX,
    CORNERS,
    EDGE_INDEX,
    EDGES,
    FACE_ORDER,
    IDENTITY_FRAME,
    CubeState,
    validate_state,
)
from .errors import StateValidationError

N_FACELETS = 54
STICKERS_PER_FACE = 9

# Facelet indices in the URFDLB layout (U1..U9, R1..R9, F1..F9, D1..D9, L1..L9, B1..B9),
# listed in the letter order of each slot name.
CORNER_FACELETS = (
    (8, 9, 20),
    (6, 18, 38),
    (0, 36, 47),
    (2, 45, 11),
    (29, 26, 15),
    (27, 44, 24),
    (33, 53, 42),
    (35, 17, 51),
)
EDGE_FACELETS = (
    (5, 10),
    (7, 19),
    (3, 37),
    (1, 46),
    (32, 16),
    (28, 25),
    (30, 43),
    (34, 52),
    (23, 12),
    (21, 41),
    (50, 39),
    (48, 14),
)
CENTER_FACELETS = tuple(i * STICKERS_PER_FACE + 4 for i in range(len(FACE_ORDER)))

SOLVED_FACELETS = "".join(face * STICKERS_PER_FACE for face in FACE_ORDER)

_SLOT_BY_FACES = {frozenset(name): name for name in CORNERS + EDGES}


def to_stickers(state: CubeState) -> dict[tuple[str, str], str]:
    """Map ``(slot, face)`` to the home face of the sticker shown there.

    Covers the 48 moving stickers in physical coordinates; the frame is ignored.
    """
    stickers: dict[tuple[str, str], str] = {}
    for slot, name in enumerate(CORNERS):
        piece = CORNERS[int(state.cp[slot])]
        ori = int(state.co[slot])
        for n in range(3):
            stickers[(name, name[(n + ori) % 3])] = piece[n]
    for slot, name in enumerate(EDGES):
        piece = EDGES[int(state.ep[slot])]
        ori = int(state.eo[slot])
        for n in range(2):
            stickers[(name, name[(n + ori) % 2])] = piece[n]
    return stickers


def from_stickers(stickers: dict[tuple[str, str], str]) -> CubeState:
    cp, co, ep, eo = [], [], [], []
    for name in CORNERS:
        colors = "".join(_sticker(stickers, name, face) for face in name)
        ori = next((i for i, c in enumerate(colors) if c in "UD"), None)
        if ori is None:
            raise StateValidationError(f"Corner {name} has no U/D sticker: {colors}")
        piece = colors[ori:] + colors[:ori]
        if piece not in CORNER_INDEX:
            raise StateValidationError(f"Corner {name} shows an impossible colour set: {colors}")
        cp.append(CORNER_INDEX[piece])
        co.append(ori)
    for name in EDGES:
        colors = "".join(_sticker(stickers, name, face) for face in name)
        if colors in EDGE_INDEX:
            ep.append(EDGE_INDEX[colors])
            eo.append(0)
        elif colors[::-1] in EDGE_INDEX:
            ep.append(EDGE_INDEX[colors[::-1]])
            eo.append(1)
        else:
            raise StateValidationError(f"Edge {name} shows an impossible colour pair: {colors}")
    return validate_state(CubeState(cp, co, ep, eo))


def _sticker(stickers: dict[tuple[str, str], str], slot: str, face: str) -> str:
    try:
        return stickers[(slot, face)]
    except KeyError as exc:
        raise StateValidationError(f"Missing sticker for slot {slot} face {face}") from exc


def to_facelets(state: CubeState) -> str:
    """Return the 54-character facelet string of the physical cube."""
    facelets = list(SOLVED_FACELETS)
    stickers = to_stickers(state)
    for name, indices in zip(CORNERS + EDGES, CORNER_FACELETS + EDGE_FACELETS):
        for face, idx in zip(name, indices):
            facelets[idx] = stickers[(name, face)]
    return "".join(facelets)


def from_facelets(facelets: str) -> CubeState:
    if not isinstance(facelets, str) or len(facelets) != N_FACELETS:
        raise StateValidationError(f"Facelet string must have {N_FACELETS} characters")
    if set(facelets) - set(FACE_ORDER):
        raise StateValidationError("Facelet string may only contain the letters U, R, F, D, L, B")
    for face in FACE_ORDER:
        if facelets.count(face) != STICKERS_PER_FACE:
            raise StateValidationError(f"Facelet {face} must appear exactly {STICKERS_PER_FACE} times")
    for face, idx in zip(FACE_ORDER, CENTER_FACELETS):
        if facelets[idx] != face:
            raise StateValidationError(f"Centre of face {face} must be {face}, got {facelets[idx]}")

    stickers: dict[tuple[str, str], str] = {}
    for name, indices in zip(CORNERS + EDGES, CORNER_FACELETS + EDGE_FACELETS):
        for face, idx in zip(name, indices):
            stickers[(name, face)] = facelets[idx]
    return from_stickers(stickers)


def reoriented(state: CubeState) -> CubeState:
    """Express ``state`` in its own reference frame.

    The result describes the same physical cube as seen after the whole-cube
    rotations recorded in ``state.frame``, with an identity frame.
    """
    if state.frame == IDENTITY_FRAME:
        return state.copy()

    physical_of = dict(zip(FACE_ORDER, state.frame))
    logical_of = {physical: logical for logical, physical in physical_of.items()}
    physical = to_stickers(state)

    stickers: dict[tuple[str, str], str] = {}
    for name in CORNERS + EDGES:
        slot = _SLOT_BY_FACES[frozenset(physical_of[f] for f in name)]
        for face in name:
            stickers[(name, face)] = logical_of[physical[(slot, physical_of[face])]]
    return from_stickers(stickers)
