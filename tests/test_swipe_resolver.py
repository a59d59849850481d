import unittest

from swipe.resolver import (
    DOWN,
    LEFT,
    NONE,
    RIGHT,
    UP,
    SwipeThresholds,
    Vector,
    exit_trajectory,
    resolve,
    resolve_outcome,
    rotation_for,
)


class SwipeResolverTestCase(unittest.TestCase):
    def setUp(self):
        self.thresholds = SwipeThresholds(position_threshold=100, velocity_threshold=400)

    def test_translation_only_commit(self):
        self.assertEqual(RIGHT, resolve_outcome(Vector(300, 0), Vector(0, 0), self.thresholds))
        self.assertEqual(LEFT, resolve_outcome(Vector(-300, 0), Vector(0, 0), self.thresholds))

    def test_below_both_thresholds_is_none(self):
        result = resolve(Vector(50, 0), Vector(0, 0), self.thresholds)
        self.assertEqual(NONE, result.outcome)
        self.assertFalse(result.committed)
        self.assertEqual(Vector(0, 0), result.velocity)

    def test_vertical_dominance_decides_axis(self):
        self.assertEqual(DOWN, resolve_outcome(Vector(20, 300), Vector(0, 0), self.thresholds))
        self.assertEqual(UP, resolve_outcome(Vector(20, -300), Vector(0, 0), self.thresholds))

    def test_dominant_axis_below_threshold_ignores_other_axis(self):
        # Horizontal dominates but only the vertical velocity is above threshold.
        self.assertEqual(NONE, resolve_outcome(Vector(60, 40), Vector(0, 900), self.thresholds))

    def test_velocity_only_commit(self):
        result = resolve(Vector(30, 5), Vector(650, 0), self.thresholds)
        self.assertEqual(RIGHT, result.outcome)
        self.assertEqual(650, result.velocity.x)

    def test_direction_follows_translation_sign(self):
        # Flicked back toward the center but still past the line on the left.
        result = resolve(Vector(-150, 0), Vector(600, 0), self.thresholds)
        self.assertEqual(LEFT, result.outcome)
        self.assertEqual(Vector(-500, 0), result.velocity)
        down = resolve(Vector(10, 180), Vector(0, -900), self.thresholds)
        self.assertEqual(DOWN, down.outcome)
        self.assertEqual(500, down.velocity.y)

    def test_fast_release_keeps_its_velocity(self):
        result = resolve(Vector(200, 0), Vector(1500, 0), self.thresholds)
        self.assertEqual(Vector(1500, 0), result.velocity)
        self.assertEqual(1500, result.speed)
        self.assertEqual(0, resolve(Vector(50, 0), Vector(0, 0), self.thresholds).speed)

    def test_pure_fling_uses_velocity_sign(self):
        self.assertEqual(LEFT, resolve_outcome(Vector(0, 0), Vector(-800, 0), self.thresholds))
        self.assertEqual(RIGHT, resolve_outcome(Vector(0, 0), Vector(800, 0), self.thresholds))

    def test_slow_release_gets_decisive_velocity(self):
        result = resolve(Vector(-250, 10), Vector(-20, 0), self.thresholds)
        self.assertEqual(LEFT, result.outcome)
        self.assertEqual(-500, result.velocity.x)
        up = resolve(Vector(5, -250), Vector(0, 50), self.thresholds)
        self.assertEqual(UP, up.outcome)
        self.assertEqual(-500, up.velocity.y)

    def test_degenerate_input_is_none(self):
        self.assertEqual(NONE, resolve_outcome(Vector(0, 0), Vector(0, 0), self.thresholds))
        zero = SwipeThresholds(position_threshold=0, velocity_threshold=0)
        self.assertEqual(NONE, resolve_outcome(Vector(0, 0), Vector(0, 0), zero))

    def test_resolve_is_idempotent(self):
        args = (Vector(140, -90), Vector(30, -700), self.thresholds)
        self.assertEqual(resolve(*args), resolve(*args))

    def test_negative_thresholds_rejected(self):
        with self.assertRaises(ValueError):
            SwipeThresholds(position_threshold=-1)

    def test_thresholds_for_screen(self):
        thresholds = SwipeThresholds.for_screen(800)
        self.assertEqual(200, thresholds.position_threshold)
        self.assertEqual(400, thresholds.velocity_threshold)

    def test_exit_trajectory_leaves_screen(self):
        right = exit_trajectory(RIGHT, Vector(120, 30), 400, 800)
        self.assertGreaterEqual(right.x, 600)
        self.assertEqual(60, right.y)
        up = exit_trajectory(UP, Vector(10, -200), 400, 800)
        self.assertLessEqual(up.y, -1200)
        self.assertEqual(20, up.x)
        with self.assertRaises(ValueError):
            exit_trajectory(NONE, Vector(0, 0), 400, 800)

    def test_rotation_is_clamped(self):
        self.assertEqual(0.0, rotation_for(0, 400))
        self.assertAlmostEqual(10.0, rotation_for(100, 400))
        self.assertEqual(20.0, rotation_for(1000, 400))
        self.assertEqual(-20.0, rotation_for(-1000, 400))


if __name__ == "__main__":
    unittest.main()
