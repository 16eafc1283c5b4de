import unittest

import numpy as np

from rubik_solver.cubie import solved
from rubik_solver.geometry import GeometricCube, move_rotation, project
from rubik_solver.notation import FACES

TOKENS = [f + s for f in FACES + ("x", "y", "z") for s in ("", "2", "'")]


class TestGeometry(unittest.TestCase):
    def test_solved_cube_layout(self):
        cube = GeometricCube()
        self.assertEqual(len(cube.cubies), 27)
        self.assertEqual(len({c.id for c in cube.cubies}), 27)
        self.assertTrue(cube.is_solved())
        self.assertEqual(cube.face_colors("U"), ["W"] * 9)
        self.assertEqual(cube.face_colors("F"), ["G"] * 9)
        sticker_count = sum(len(c.stickers) for c in cube.cubies)
        self.assertEqual(sticker_count, 54)

    def test_layers_hold_nine_cubies(self):
        cube = GeometricCube().apply_moves("R U F'")
        for face in FACES:
            self.assertEqual(len(cube.layer(face)), 9)

    def test_r_turn_moves_front_stickers_up(self):
        cube = GeometricCube().apply_move("R")
        # x = +1 column comes last in lattice order
        self.assertEqual(cube.face_colors("U"), ["W"] * 6 + ["G"] * 3)
        self.assertEqual(cube.face_colors("R"), ["R"] * 9)
        self.assertFalse(cube.is_solved())

    def test_whole_cube_rotation_keeps_cube_solved(self):
        cube = GeometricCube().apply_moves("x y' z2")
        self.assertTrue(cube.is_solved())
        self.assertNotEqual(cube.signature(), GeometricCube().signature())

    def test_inverse_restores_signature(self):
        cube = GeometricCube().apply_moves("R U R' U' x F2 y' B")
        cube.apply_moves("B' y F2 x' U R U' R'")
        self.assertEqual(cube.signature(), GeometricCube().signature())

    def test_copy_is_independent(self):
        cube = GeometricCube()
        other = cube.copy()
        other.apply_move("F")
        self.assertTrue(cube.is_solved())
        self.assertFalse(other.is_solved())

    def test_projection_matches_replayed_model(self):
        rng = np.random.default_rng(3)
        for _ in range(20):
            moves = [TOKENS[int(i)] for i in rng.integers(len(TOKENS), size=25)]
            projected = project(solved().apply_moves(moves))
            replayed = GeometricCube().apply_moves(moves)
            self.assertEqual(projected.signature(), replayed.signature(), msg=" ".join(moves))
            self.assertEqual(
                sorted((c.id, c.position) for c in projected.cubies),
                sorted((c.id, c.position) for c in replayed.cubies),
            )

    def test_move_rotation(self):
        self.assertEqual(move_rotation("R"), ("x", 1, -90))
        self.assertEqual(move_rotation("R'"), ("x", 1, 90))
        self.assertEqual(move_rotation("L"), ("x", -1, 90))
        self.assertEqual(move_rotation("U2"), ("y", 1, -180))
        self.assertEqual(move_rotation("B'"), ("z", -1, -90))
        self.assertEqual(move_rotation("y"), ("y", None, -90))


if __name__ == "__main__":
    unittest.main()
