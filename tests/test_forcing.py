from unittest import TestCase

import numpy as np

from rdengine.forcing import Tool, Channel, apply_force, apply_stamp, apply_tool, falloff_mask
from rdengine.grid import GridStore, torus_dist2, A, B


def empty_grid(n=64, a=1.0, b=0.0):
    grid = GridStore(n)
    field = np.zeros((2, n, n))
    field[A] = a
    field[B] = b
    grid.seed(field)
    return grid


class TestApplyForce(TestCase):

    def test_radial_falloff(self):
        grid = empty_grid()
        self.assertTrue(apply_force(grid, 32, 32, radius=10, strength=1.0))
        row = grid.current()[B, 32]
        self.assertEqual(row[32], 1.0)
        profile = row[32:43]
        for d in range(9):
            self.assertGreater(profile[d], profile[d + 1])
        self.assertEqual(profile[10], 0.0)
        outside = torus_dist2(64, 32, 32) >= 100
        self.assertFalse(grid.current()[B][outside].any())

    def test_zero_sign_is_a_noop(self):
        grid = empty_grid(b=0.5)
        front, before = grid.current(), grid.snapshot()
        self.assertFalse(apply_force(grid, 32, 32, radius=10, sign=0))
        self.assertIs(grid.current(), front)
        np.testing.assert_array_equal(grid.current(), before)

    def test_sign_direction(self):
        grid = empty_grid(b=0.5)
        self.assertTrue(apply_force(grid, 32, 32, radius=10, strength=0.25, sign=2))
        self.assertAlmostEqual(grid.current()[B, 32, 32], 0.75, places=6)
        self.assertTrue(apply_force(grid, 32, 32, radius=10, strength=0.5, sign=-3))
        self.assertAlmostEqual(grid.current()[B, 32, 32], 0.25, places=6)

    def test_only_target_channel_changes(self):
        grid = empty_grid(b=0.2)
        apply_force(grid, 10, 20, radius=6, channel=Channel.A, sign=-1)
        cur = grid.current()
        self.assertTrue(np.all(cur[B] == np.float32(0.2)))
        self.assertEqual(cur[A, 20, 10], 0.0)

    def test_x_is_column_y_is_row(self):
        grid = empty_grid()
        apply_force(grid, 5, 40, radius=3)
        self.assertEqual(grid.current()[B, 40, 5], 1.0)
        self.assertEqual(grid.current()[B, 5, 40], 0.0)

    def test_subtract_clamps_at_zero(self):
        grid = empty_grid(b=0.3)
        apply_force(grid, 32, 32, radius=8, strength=2.0, sign=-1)
        self.assertEqual(grid.current()[B, 32, 32], 0.0)
        self.assertGreaterEqual(grid.current().min(), 0.0)

    def test_wraps_around_edges(self):
        grid = empty_grid()
        apply_force(grid, 0, 0, radius=4)
        self.assertGreater(grid.current()[B, 63, 63], 0.0)
        self.assertGreater(grid.current()[B, 0, 62], 0.0)

    def test_zero_radius_is_noop(self):
        grid = empty_grid()
        front = grid.front_index
        self.assertFalse(apply_force(grid, 32, 32, radius=0))
        self.assertEqual(grid.front_index, front)
        self.assertFalse(grid.current()[B].any())

    def test_edit_goes_through_scratch(self):
        grid = empty_grid()
        front = grid.front_index
        apply_force(grid, 32, 32, radius=5)
        self.assertNotEqual(grid.front_index, front)

    def test_falloff_mask_strength(self):
        m = falloff_mask(32, 16, 16, 8, 0.5)
        self.assertAlmostEqual(m[16, 16], 0.5)
        self.assertAlmostEqual(m[16, 20], 0.5 * 0.25)


class TestStampAndTools(TestCase):

    def test_stamp_is_hard_disc(self):
        grid = empty_grid()
        apply_stamp(grid, 32, 32, radius=5)
        cur = grid.current()
        self.assertEqual(cur[B, 32, 37], 1.0)
        self.assertEqual(cur[B, 32, 38], 0.0)
        self.assertEqual(cur[B, 35, 36], 1.0)
        self.assertTrue(np.all(cur[A] == 1.0))

    def test_brush_paints_b(self):
        grid = empty_grid()
        apply_tool(grid, Tool.BRUSH, 20, 20, 6)
        self.assertEqual(grid.current()[B, 20, 20], 1.0)

    def test_eraser_and_a_brush_remove_b(self):
        for tool, channel in ((Tool.ERASER, Channel.B), (Tool.BRUSH, Channel.A)):
            grid = empty_grid(b=1.0)
            apply_tool(grid, tool, 20, 20, 6, channel=channel)
            self.assertEqual(grid.current()[B, 20, 20], 0.0)
            self.assertEqual(grid.current()[B, 50, 50], 1.0)

    def test_parse(self):
        self.assertIs(Tool.parse("Stamp"), Tool.STAMP)
        self.assertIs(Channel.parse("a"), Channel.A)
        self.assertIs(Channel.parse(1), Channel.B)
        with self.assertRaises(ValueError):
            Tool.parse("spray")
        with self.assertRaises(ValueError):
            Channel.parse("C")
