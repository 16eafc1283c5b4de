import unittest
from unittest import mock

import numpy as np

from rubik_solver.codec import reoriented
from rubik_solver.cubie import CORNER_INDEX, EDGE_INDEX, CubeState, solved
from rubik_solver.engine import scramble_moves
from rubik_solver.errors import SolverInternalError
from rubik_solver.notation import Move, parse_moves
from rubik_solver.solver import (
    CORNER_CYCLE,
    CORNER_TARGETS,
    CROSS_TARGETS,
    MAX_CORNER_CYCLES,
    MAX_CORNER_REPEATS,
    MAX_TOP_CROSS_ALGS,
    MAX_TOP_EDGE_ALGS,
    MIDDLE_TARGETS,
    PHASE_NAMES,
    BeginnerSolver,
    conjugate,
    solve,
)


class TestSolver(unittest.TestCase):
    def assertRoundTrip(self, history, solution):
        final = solved().apply_moves(history).apply_moves(solution)
        self.assertTrue(final.is_solved(), msg=f"history={history}")

    def assertNoAdjacentSameFace(self, moves):
        for a, b in zip(moves, moves[1:]):
            self.assertNotEqual(a.face, b.face)

    def test_solved_history_needs_no_moves(self):
        self.assertEqual(solve([]), [])
        self.assertEqual(solve("R R'"), [])

    def test_double_front_turn(self):
        self.assertEqual(solve(["F", "F"]), [Move("F", 2)])

    def test_single_moves(self):
        for token in ["U", "D'", "L2", "R", "F'", "B"]:
            solution = solve([token])
            self.assertRoundTrip([token], solution)

    def test_random_scrambles_round_trip(self):
        rng = np.random.default_rng(2024)
        for _ in range(60):
            history = scramble_moves(20, seed=int(rng.integers(2**31)))
            solution = solve(history)
            self.assertRoundTrip(history, solution)
            self.assertNoAdjacentSameFace(solution)

    def test_history_with_rotations(self):
        for history in ["x R U y2 F' z", "y R U R' U' x' B2 D", "z' L F2 y U' R2 x2 D B'"]:
            solution = solve(history)
            self.assertRoundTrip(history, solution)

    def test_deterministic_for_fixed_seed(self):
        history = scramble_moves(20, seed=7)
        first = solve(history)
        second = solve(list(history))
        self.assertEqual(first, second)
        self.assertEqual(scramble_moves(20, seed=7), history)

    def test_phase_postconditions(self):
        history = scramble_moves(25, seed=99)
        solver = BeginnerSolver(solved().apply_moves(history))
        phases = solver.solve_phases()
        self.assertEqual(list(phases), list(PHASE_NAMES))

        state = reoriented(solved().apply_moves(history))
        state = state.apply_moves(phases["cross"])
        for edge in CROSS_TARGETS:
            self.assertEqual(state.locate_edge(edge), (EDGE_INDEX[edge], 0))

        state = state.apply_moves(phases["first_layer_corners"])
        for corner in CORNER_TARGETS:
            self.assertEqual(state.locate_corner(corner), (CORNER_INDEX[corner], 0))

        state = state.apply_moves(phases["middle_edges"])
        for edge in MIDDLE_TARGETS + CROSS_TARGETS:
            self.assertEqual(state.locate_edge(edge), (EDGE_INDEX[edge], 0))

        state = state.apply_moves(phases["top_cross"])
        for slot in ["UR", "UF", "UL", "UB"]:
            self.assertEqual(state.edge_at(slot)[1], 0)

        for name in PHASE_NAMES[4:]:
            state = state.apply_moves(phases[name])
        self.assertTrue(state.is_solved())
        self.assertEqual(sum(len(m) for m in phases.values()), len(solver.moves))

    def test_solve_raw_simplifies_to_solve(self):
        history = scramble_moves(15, seed=3)
        raw = BeginnerSolver(solved().apply_moves(history)).solve_raw()
        simplified = BeginnerSolver(solved().apply_moves(history)).solve()
        self.assertLessEqual(len(simplified), len(raw))
        self.assertRoundTrip(history, raw)

    def test_solver_does_not_mutate_input(self):
        state = solved().apply_moves("R U F")
        before = state.copy()
        BeginnerSolver(state).solve()
        self.assertEqual(state, before)

    def test_unreachable_state_raises_internal_error(self):
        flipped = CubeState(eo=[1] + [0] * 11)
        with self.assertRaises(SolverInternalError):
            BeginnerSolver(flipped).solve()

    def test_conjugate(self):
        self.assertEqual(conjugate("R U R' U'", "F"), "R U R' U'")
        self.assertEqual(conjugate("R U R' U'", "L"), "F U F' U'")
        self.assertEqual(conjugate("U' R' F R", "B"), "U' L' B L")
        self.assertEqual(parse_moves(conjugate("D2 R", "R")), parse_moves("D2 B"))


# Replaces a case algorithm so the phase can never make progress.
NOOP = "D D'"


class TestSolverBounds(unittest.TestCase):
    def assertRaisesAfter(self, solver, phase, applications):
        with self.assertRaises(SolverInternalError):
            phase()
        self.assertEqual(solver.moves.count(Move("D")), applications)

    def test_first_layer_corner_stops_after_five_repetitions(self):
        # R U R' U' leaves the DFR corner twisted in the URF slot.
        solver = BeginnerSolver(solved().apply_moves("R U R' U'"))
        with mock.patch("rubik_solver.solver.SEXY_MOVE", NOOP):
            self.assertRaisesAfter(solver, solver._solve_first_layer_corners, MAX_CORNER_REPEATS)
        self.assertEqual(MAX_CORNER_REPEATS, 5)

    def test_top_cross_stops_after_two_algorithms(self):
        solver = BeginnerSolver(solved().apply_moves("F R U R' U' F'"))
        with mock.patch("rubik_solver.solver.TOP_CROSS_LINE", NOOP), mock.patch(
            "rubik_solver.solver.TOP_CROSS_L", NOOP
        ):
            self.assertRaisesAfter(solver, solver._solve_top_cross, MAX_TOP_CROSS_ALGS)
        self.assertEqual(MAX_TOP_CROSS_ALGS, 2)

    def test_top_edges_stop_after_two_algorithms(self):
        solver = BeginnerSolver(solved().apply_moves("R U R' U R U2 R' U"))
        with mock.patch("rubik_solver.solver.SUNE", NOOP):
            self.assertRaisesAfter(solver, solver._solve_top_edges, MAX_TOP_EDGE_ALGS)
        self.assertEqual(MAX_TOP_EDGE_ALGS, 2)

    def test_corner_cycle_stops_after_three_algorithms(self):
        solver = BeginnerSolver(solved().apply_moves(CORNER_CYCLE))
        with mock.patch("rubik_solver.solver.CORNER_CYCLE", NOOP):
            self.assertRaisesAfter(solver, solver._solve_top_corner_permutation, MAX_CORNER_CYCLES)
        self.assertEqual(MAX_CORNER_CYCLES, 3)

    def test_turn_until_stops_after_three_turns(self):
        solver = BeginnerSolver(solved())
        with self.assertRaises(SolverInternalError):
            solver._turn_until(lambda: False)
        self.assertEqual(solver.moves, [Move("U")] * 3)


if __name__ == "__main__":
    unittest.main()
