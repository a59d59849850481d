import unittest

from fake_scheduler import FakeScheduler
from swipe.animation import TransformChannels, Tween, ease_out_back, linear
from swipe.bridge import COMMITTING, DRAGGING, EXIT, IDLE, SNAPPING_BACK, AnimationFinished, GestureBridge
from swipe.cursor import CardStackCursor
from swipe.resolver import LEFT, NONE, RIGHT, UP, Vector
from swipe.velocity import VelocityTracker


class GestureBridgeTestCase(unittest.TestCase):
    def setUp(self):
        self.scheduler = FakeScheduler()
        self.swiped = []
        self.cursor = CardStackCursor(["A", "B", "C"], on_swipe=lambda c, d: self.swiped.append((c, d)))
        self.bridge = self.make_bridge(self.cursor)

    def make_bridge(self, cursor):
        return GestureBridge(cursor, self.scheduler, 400, 800, clock=self.scheduler.clock)

    def drag(self, x, y=0.0):
        self.assertTrue(self.bridge.begin())
        self.bridge.update(Vector(x, y))

    def test_drag_moves_top_card(self):
        self.drag(100, 40)
        channels = self.bridge.channels
        self.assertEqual(DRAGGING, self.bridge.state)
        self.assertEqual(100, channels.translate_x)
        self.assertEqual(20, channels.translate_y)
        self.assertAlmostEqual(10.0, channels.rotation)
        self.assertEqual(1.0, channels.opacity)

    def test_short_drag_snaps_back_without_commit(self):
        self.drag(50)
        self.assertEqual(NONE, self.bridge.end(Vector(0, 0)))
        self.assertEqual(SNAPPING_BACK, self.bridge.state)

        self.scheduler.run_all()
        self.assertEqual(IDLE, self.bridge.state)
        self.assertTrue(self.bridge.channels.is_identity())
        self.assertEqual(0, self.cursor.head)
        self.assertEqual([], self.swiped)

    def test_commit_happens_only_after_exit_finishes(self):
        first_channels = self.bridge.channels
        self.drag(300)
        self.assertEqual(RIGHT, self.bridge.end(Vector(0, 0)))
        self.assertEqual(COMMITTING, self.bridge.state)

        self.scheduler.advance(100)
        self.assertEqual(0, self.cursor.head)
        self.assertEqual([], self.swiped)
        self.assertGreater(first_channels.translate_x, 300)
        self.assertLess(first_channels.opacity, 1.0)

        self.scheduler.run_all()
        self.assertEqual(1, self.cursor.head)
        self.assertEqual([("A", RIGHT)], self.swiped)
        self.assertEqual(0.0, first_channels.opacity)
        self.assertEqual(0.8, first_channels.scale)

    def test_next_card_starts_from_identity(self):
        first_channels = self.bridge.channels
        self.drag(-300)
        self.bridge.end(Vector(-900, 0))
        self.scheduler.run_all()

        self.assertEqual("B", self.bridge.session.card)
        self.assertIsNot(first_channels, self.bridge.channels)
        self.assertTrue(self.bridge.channels.is_identity())
        self.assertEqual(IDLE, self.bridge.state)

    def test_velocity_only_release_commits(self):
        self.drag(30)
        self.assertEqual(RIGHT, self.bridge.end(Vector(650, 0)))
        self.scheduler.run_all()
        self.assertEqual([("A", RIGHT)], self.swiped)

    def test_begin_refused_while_committing(self):
        self.drag(300)
        self.bridge.end(Vector(0, 0))
        self.assertFalse(self.bridge.begin())
        self.assertFalse(self.bridge.swipe(LEFT))
        self.scheduler.run_all()
        self.assertEqual(1, self.cursor.head)

    def test_reset_during_exit_drops_stale_completion(self):
        self.drag(300)
        self.bridge.end(Vector(0, 0))
        self.scheduler.advance(64)
        self.cursor.reset()

        self.scheduler.run_all()
        self.assertEqual(0, self.cursor.head)
        self.assertEqual([], self.swiped)
        self.assertEqual(IDLE, self.bridge.state)
        self.assertTrue(self.bridge.channels.is_identity())

    def test_completion_for_old_session_is_ignored(self):
        old_id = self.bridge.session.session_id
        self.cursor.commit(LEFT)
        self.assertNotEqual(old_id, self.bridge.session.session_id)

        with self.assertLogs("swipe.bridge", level="DEBUG"):
            self.bridge.post(AnimationFinished(old_id, EXIT, RIGHT))
            self.scheduler.run_all()
        self.assertEqual(1, self.cursor.head)
        self.assertEqual([("A", LEFT)], self.swiped)

    def test_earlier_snap_back_completion_does_not_end_newer_one(self):
        self.drag(50)
        self.bridge.end(Vector(0, 0))
        first = self.bridge.session.tween
        # Finish the first spring; its completion is queued but not drained yet.
        self.scheduler.now_ms += 400
        first._frame()
        self.assertFalse(first.active)

        self.drag(80)
        self.assertEqual(NONE, self.bridge.end(Vector(0, 0)))
        second = self.bridge.session.tween
        with self.assertLogs("swipe.bridge", level="DEBUG"):
            self.scheduler.advance(0)
        self.assertEqual(SNAPPING_BACK, self.bridge.state)
        self.assertIs(second, self.bridge.session.tween)
        self.assertTrue(second.active)

        self.drag(120)
        self.assertFalse(second.active)
        self.scheduler.advance(16)
        self.assertEqual(120, self.bridge.channels.translate_x)
        self.scheduler.run_all()
        self.assertEqual(DRAGGING, self.bridge.state)
        self.assertEqual(120, self.bridge.channels.translate_x)

    def test_back_to_back_snap_backs_settle_once(self):
        self.drag(60)
        self.bridge.end(Vector(0, 0))
        self.scheduler.advance(100)
        self.drag(-70)
        self.bridge.end(Vector(0, 0))
        self.scheduler.run_all()
        self.assertEqual(IDLE, self.bridge.state)
        self.assertIsNone(self.bridge.session.tween)
        self.assertTrue(self.bridge.channels.is_identity())
        self.assertEqual(0, self.cursor.head)

    def test_fast_fling_leaves_sooner_than_slow_release(self):
        slow_cursor = CardStackCursor(["A", "B"])
        fast_cursor = CardStackCursor(["A", "B"])
        slow = self.make_bridge(slow_cursor)
        fast = self.make_bridge(fast_cursor)
        for bridge in (slow, fast):
            self.assertTrue(bridge.begin())
            bridge.update(Vector(300, 0))
        self.assertEqual(RIGHT, slow.end(Vector(20, 0)))
        self.assertEqual(RIGHT, fast.end(Vector(4000, 0)))

        self.scheduler.advance(112)
        self.assertEqual(1, fast_cursor.head)
        self.assertEqual(0, slow_cursor.head)
        self.scheduler.run_all()
        self.assertEqual(1, slow_cursor.head)

    def test_exit_duration_follows_speed(self):
        self.assertEqual(0.2, self.bridge.exit_duration_for(300, 0))
        self.assertEqual(0.2, self.bridge.exit_duration_for(300, 500))
        self.assertAlmostEqual(0.1, self.bridge.exit_duration_for(-300, 3000))
        self.assertEqual(0.08, self.bridge.exit_duration_for(300, 100000))

    def test_release_while_cursor_busy_snaps_back(self):
        scheduler = self.scheduler
        cursor = CardStackCursor(["A", "B"], scheduler=scheduler, advance_delay_ms=50)
        bridge = self.make_bridge(cursor)
        self.assertTrue(bridge.begin())
        bridge.update(Vector(300, 0))
        cursor.commit(LEFT)

        self.assertEqual(NONE, bridge.end(Vector(0, 0)))
        self.assertEqual(SNAPPING_BACK, bridge.state)
        scheduler.run_all()
        self.assertEqual(1, cursor.head)
        self.assertTrue(bridge.channels.is_identity())

    def test_begin_refused_while_cursor_animating(self):
        cursor = CardStackCursor(["A", "B"], scheduler=self.scheduler, advance_delay_ms=50)
        bridge = self.make_bridge(cursor)
        cursor.commit(RIGHT)
        self.assertFalse(bridge.begin())
        self.scheduler.advance(50)
        self.assertTrue(bridge.begin())

    def test_cancel_snaps_back(self):
        self.drag(250)
        self.bridge.cancel()
        self.assertEqual(SNAPPING_BACK, self.bridge.state)
        self.scheduler.run_all()
        self.assertEqual(IDLE, self.bridge.state)
        self.assertEqual(0, self.cursor.head)

    def test_programmatic_swipe(self):
        self.assertFalse(self.bridge.swipe(NONE))
        self.assertTrue(self.bridge.swipe(UP))
        self.assertEqual(COMMITTING, self.bridge.state)
        self.scheduler.run_all()
        self.assertEqual([("A", UP)], self.swiped)

    def test_exhausted_deck_has_no_session(self):
        cursor = CardStackCursor(["A"])
        bridge = self.make_bridge(cursor)
        self.assertTrue(bridge.swipe(RIGHT))
        self.scheduler.run_all()
        self.assertIsNone(bridge.session)
        self.assertIsNone(bridge.channels)
        self.assertFalse(bridge.begin())
        self.assertEqual(NONE, bridge.end(Vector(500, 0)))

    def test_change_callback_fires(self):
        calls = []
        self.bridge.on_change = lambda: calls.append(self.bridge.state)
        self.drag(10)
        self.assertEqual([DRAGGING], calls)

    def test_close_detaches_from_cursor(self):
        self.bridge.close()
        self.cursor.commit(RIGHT)
        self.assertIsNone(self.bridge.session)

    def test_invalid_screen_size(self):
        with self.assertRaises(ValueError):
            GestureBridge(self.cursor, self.scheduler, 0, 800)


class TweenTestCase(unittest.TestCase):
    def setUp(self):
        self.scheduler = FakeScheduler()

    def test_reaches_targets_and_completes_once(self):
        channels = TransformChannels()
        done = []
        tween = Tween(
            channels,
            {"translate_x": 200.0},
            0.1,
            self.scheduler,
            clock=self.scheduler.clock,
            easing=linear,
            on_complete=lambda: done.append(True),
        ).start()
        self.scheduler.advance(48)
        self.assertAlmostEqual(96.0, channels.translate_x)
        self.scheduler.run_all()
        self.assertEqual(200.0, channels.translate_x)
        self.assertEqual([True], done)
        self.assertFalse(tween.active)

    def test_cancel_suppresses_completion(self):
        channels = TransformChannels()
        done = []
        tween = Tween(
            channels, {"opacity": 0.0}, 0.2, self.scheduler, clock=self.scheduler.clock, on_complete=lambda: done.append(True)
        ).start()
        self.scheduler.advance(32)
        tween.cancel()
        self.scheduler.run_all()
        self.assertEqual([], done)
        self.assertEqual(0, self.scheduler.pending)

    def test_per_channel_duration(self):
        channels = TransformChannels()
        Tween(
            channels,
            {"opacity": 0.0, "scale": 0.5},
            0.2,
            self.scheduler,
            clock=self.scheduler.clock,
            easing=linear,
            durations={"opacity": 0.1},
        ).start()
        self.scheduler.advance(112)
        self.assertEqual(0.0, channels.opacity)
        self.assertGreater(channels.scale, 0.5)

    def test_unknown_channel_rejected(self):
        with self.assertRaises(ValueError):
            Tween(TransformChannels(), {"skew": 1.0}, 0.2, self.scheduler)

    def test_ease_out_back_settles_on_target(self):
        self.assertAlmostEqual(0.0, ease_out_back(0.0))
        self.assertAlmostEqual(1.0, ease_out_back(1.0))
        self.assertGreater(max(ease_out_back(i / 20) for i in range(21)), 1.0)


class VelocityTrackerTestCase(unittest.TestCase):
    def test_needs_two_samples(self):
        tracker = VelocityTracker()
        self.assertEqual(Vector(0, 0), tracker.velocity())
        tracker.add(10, 10, t=0.0)
        self.assertEqual(Vector(0, 0), tracker.velocity())

    def test_velocity_over_window(self):
        tracker = VelocityTracker(window=0.12)
        tracker.add(0, 0, t=0.00)
        tracker.add(100, 0, t=0.05)
        tracker.add(-500, 0, t=0.2)
        tracker.add(-450, 20, t=0.25)
        tracker.add(-400, 40, t=0.30)
        velocity = tracker.velocity()
        self.assertAlmostEqual(1000.0, velocity.x)
        self.assertAlmostEqual(400.0, velocity.y)

    def test_same_timestamp_is_zero(self):
        tracker = VelocityTracker()
        tracker.add(0, 0, t=1.0)
        tracker.add(50, 50, t=1.0)
        self.assertEqual(Vector(0, 0), tracker.velocity())

    def test_reset(self):
        tracker = VelocityTracker()
        tracker.add(0, 0, t=0.0)
        tracker.add(10, 0, t=0.01)
        tracker.reset()
        self.assertEqual(Vector(0, 0), tracker.velocity())


if __name__ == "__main__":
    unittest.main()
