import unittest

import numpy as np

from rubik_solver.codec import (
    SOLVED_FACELETS,
    from_facelets,
    from_stickers,
    reoriented,
    to_facelets,
    to_stickers,
)
from rubik_solver.cubie import IDENTITY_FRAME, solved
from rubik_solver.errors import StateValidationError


def face(facelets: str, name: str) -> str:
    i = "URFDLB".index(name) * 9
    return facelets[i : i + 9]


class TestCodec(unittest.TestCase):
    def test_solved_facelets(self):
        self.assertEqual(to_facelets(solved()), SOLVED_FACELETS)
        self.assertEqual(from_facelets(SOLVED_FACELETS), solved())

    def test_r_turn_facelets(self):
        facelets = to_facelets(solved().apply_move("R"))
        self.assertEqual(face(facelets, "U"), "UUFUUFUUF")
        self.assertEqual(face(facelets, "F"), "FFDFFDFFD")
        self.assertEqual(face(facelets, "R"), "R" * 9)
        self.assertEqual(face(facelets, "L"), "L" * 9)

    def test_facelets_decode_scrambled_state(self):
        state = solved().apply_moves("R U2 F' L D B2 R' U F2 D'")
        self.assertEqual(from_facelets(to_facelets(state)), state)

    def test_stickers_decode_scrambled_state(self):
        state = solved().apply_moves("B L' D2 F U R2")
        stickers = to_stickers(state)
        self.assertEqual(len(stickers), 48)
        self.assertEqual(from_stickers(stickers), state)

    def test_invalid_facelets_raise(self):
        with self.assertRaises(StateValidationError):
            from_facelets("U" * 53)
        with self.assertRaises(StateValidationError):
            from_facelets(SOLVED_FACELETS.replace("B", "X"))
        with self.assertRaises(StateValidationError):
            from_facelets("R" + SOLVED_FACELETS[1:9] + "U" + SOLVED_FACELETS[10:])
        swapped_centres = list(SOLVED_FACELETS)
        swapped_centres[4], swapped_centres[13] = swapped_centres[13], swapped_centres[4]
        with self.assertRaises(StateValidationError):
            from_facelets("".join(swapped_centres))

    def test_single_twisted_corner_is_rejected(self):
        facelets = list(SOLVED_FACELETS)
        # URF corner stickers: U9, R1, F3
        facelets[8], facelets[9], facelets[20] = "F", "U", "R"
        with self.assertRaises(StateValidationError):
            from_facelets("".join(facelets))

    def test_reoriented_identity_frame_is_copy(self):
        state = solved().apply_moves("R U")
        view = reoriented(state)
        self.assertEqual(view, state)
        self.assertIsNot(view, state)

    def test_reoriented_matches_conjugated_moves(self):
        # After x, the logical U face is the physical F face.
        state = solved().apply_moves("x U R")
        view = reoriented(state)
        self.assertEqual(view.frame, IDENTITY_FRAME)
        self.assertEqual(view, solved().apply_moves("U R"))

    def test_reoriented_rotated_solved_cube_is_solved(self):
        for rotation in ["x", "y'", "z2", "x y"]:
            view = reoriented(solved().apply_moves(rotation))
            self.assertTrue(view.is_solved())
            self.assertTrue(np.array_equal(view.cp, np.arange(8)))


if __name__ == "__main__":
    unittest.main()
