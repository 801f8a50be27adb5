"""
Unit tests for the live presentation engine

Covers:
- Segment validation
- Countdown play/pause/tick and exhaustion
- Navigation bounds and timer reset
- View-mode switching
- Theme cycling
- Keyboard routing
- Render payloads
"""

import unittest

from minbar.engine import (
    THEMES,
    InputRouter,
    InvalidSession,
    OutOfRange,
    Segment,
    SegmentKind,
    Session,
    ViewMode,
    format_clock,
    render_state,
    theme_for,
)
from tests.fixtures.sample_data import make_segments


class TestSegment(unittest.TestCase):
    """Test suite for the immutable segment record."""

    def test_rejects_non_positive_duration(self):
        """Test zero and negative durations are refused."""
        for seconds in (0, -5):
            with self.assertRaises(ValueError):
                Segment(kind=SegmentKind.CORE, allotted_seconds=seconds, title="x")

    def test_rejects_non_integer_duration(self):
        """Test floats and booleans are not accepted as durations."""
        with self.assertRaises(ValueError):
            Segment(kind=SegmentKind.CORE, allotted_seconds=1.5, title="x")
        with self.assertRaises(ValueError):
            Segment(kind=SegmentKind.CORE, allotted_seconds=True, title="x")

    def test_kind_must_be_known(self):
        """Test free-form categories cannot enter the model."""
        self.assertEqual(
            Segment(kind="Scripture", allotted_seconds=10, title="x").kind,
            SegmentKind.SCRIPTURE,
        )
        with self.assertRaises(ValueError):
            Segment(kind="Ayah", allotted_seconds=10, title="x")

    def test_talking_points_stored_as_tuple(self):
        """Test talking points keep their order and cannot be mutated."""
        seg = Segment(
            kind=SegmentKind.CORE, allotted_seconds=10, title="x",
            talking_points=["first", "second"],
        )
        self.assertEqual(seg.talking_points, ("first", "second"))

    def test_preview_truncates_long_narration(self):
        seg = Segment(kind=SegmentKind.CORE, allotted_seconds=10, title="x", narration="a" * 100)
        self.assertEqual(seg.preview(), "a" * 80 + "...")
        short = Segment(kind=SegmentKind.CORE, allotted_seconds=10, title="x", narration="short")
        self.assertEqual(short.preview(), "short")


class TestSessionConstruction(unittest.TestCase):
    """Test suite for session creation."""

    def test_empty_script_is_invalid(self):
        with self.assertRaises(InvalidSession):
            Session([])

    def test_non_segment_items_are_invalid(self):
        with self.assertRaises(InvalidSession):
            Session([{"title": "not a segment"}])

    def test_initial_state(self):
        """Test a new session starts paused at the first segment's full time."""
        session = Session(make_segments())
        self.assertEqual(session.active_index, 0)
        self.assertEqual(session.remaining_seconds, 180)
        self.assertFalse(session.is_running)
        self.assertEqual(session.view_mode, ViewMode.CARDS)
        self.assertEqual(session.elapsed_seconds, 0)

    def test_segments_are_frozen(self):
        """Test the script is copied into an immutable tuple."""
        script = make_segments()
        session = Session(script)
        script.pop()
        self.assertEqual(len(session.segments), 4)
        self.assertIsInstance(session.segments, tuple)

    def test_segment_at_bounds(self):
        session = Session(make_segments())
        self.assertEqual(session.segment_at(3).allotted_seconds, 120)
        with self.assertRaises(OutOfRange):
            session.segment_at(4)


class TestCountdown(unittest.TestCase):
    """Test suite for the per-segment countdown."""

    def setUp(self):
        self.session = Session(make_segments())

    def test_tick_while_paused_is_noop(self):
        self.assertFalse(self.session.tick())
        self.assertEqual(self.session.remaining_seconds, 180)

    def test_tick_while_running_decrements(self):
        self.session.play()
        self.session.tick()
        self.assertEqual(self.session.remaining_seconds, 179)
        self.assertEqual(self.session.elapsed_seconds, 1)

    def test_exhaustion_stops_and_blocks_replay(self):
        """Test 180 ticks exhaust the first segment and play() cannot resume it."""
        self.session.play()
        for _ in range(180):
            self.session.tick()
        self.assertEqual(self.session.remaining_seconds, 0)
        self.assertFalse(self.session.is_running)

        self.assertFalse(self.session.play())
        self.assertFalse(self.session.is_running)

    def test_remaining_never_negative(self):
        self.session.play()
        for _ in range(500):
            self.session.tick()
            self.assertGreaterEqual(self.session.remaining_seconds, 0)
        self.assertEqual(self.session.active_index, 0)  # no auto-advance

    def test_pause_is_unconditional(self):
        self.assertFalse(self.session.pause())
        self.session.play()
        self.assertTrue(self.session.pause())
        self.assertFalse(self.session.is_running)

    def test_toggle_play(self):
        self.session.toggle_play()
        self.assertTrue(self.session.is_running)
        self.session.toggle_play()
        self.assertFalse(self.session.is_running)

    def test_progress_fraction(self):
        """Test the active fraction depletes and other segments report full."""
        self.assertEqual(self.session.progress_fraction(), 1.0)
        self.session.play()
        for _ in range(90):
            self.session.tick()
        self.assertAlmostEqual(self.session.progress_fraction(), 0.5)
        self.assertEqual(self.session.progress_fraction(2), 1.0)
        with self.assertRaises(OutOfRange):
            self.session.progress_fraction(7)

    def test_low_time(self):
        self.session.play()
        for _ in range(149):
            self.session.tick()
        self.assertFalse(self.session.is_low_on_time(30))
        self.session.tick()
        self.assertTrue(self.session.is_low_on_time(30))

    def test_elapsed_survives_navigation(self):
        self.session.play()
        for _ in range(10):
            self.session.tick()
        self.session.go_next()
        self.session.play()
        self.session.tick()
        self.assertEqual(self.session.elapsed_seconds, 11)


class TestNavigation(unittest.TestCase):
    """Test suite for index movement and the timer reset side effect."""

    def setUp(self):
        self.session = Session(make_segments())

    def test_previous_at_start_is_noop(self):
        self.assertFalse(self.session.go_previous())
        self.assertEqual(self.session.active_index, 0)

    def test_next_at_end_is_noop(self):
        for _ in range(10):
            self.session.go_next()
        self.assertEqual(self.session.active_index, 3)
        self.assertFalse(self.session.go_next())
        self.assertEqual(self.session.active_index, 3)

    def test_index_always_valid(self):
        """Test a mixed run of operations never leaves the valid range."""
        ops = [
            self.session.go_next, self.session.go_previous, self.session.play,
            self.session.tick, self.session.go_previous, self.session.go_previous,
            self.session.go_next, self.session.go_next, self.session.go_next,
            self.session.go_next, self.session.go_next, self.session.toggle_view_mode,
        ]
        for op in ops:
            op()
            self.assertTrue(0 <= self.session.active_index < len(self.session.segments))

    def test_change_resets_and_pauses(self):
        """Test a running countdown is reset and paused by moving on."""
        self.session.play()
        for _ in range(20):
            self.session.tick()
        self.session.go_next()
        self.assertEqual(self.session.active_index, 1)
        self.assertEqual(self.session.remaining_seconds, 600)
        self.assertFalse(self.session.is_running)

    def test_revisit_restores_full_time(self):
        self.session.play()
        for _ in range(180):
            self.session.tick()
        self.session.go_next()
        self.session.go_previous()
        self.assertEqual(self.session.remaining_seconds, 180)
        self.assertTrue(self.session.play())

    def test_jump_to(self):
        self.assertTrue(self.session.jump_to(2))
        self.assertEqual(self.session.active_index, 2)
        self.assertEqual(self.session.remaining_seconds, 300)

    def test_jump_out_of_range_raises(self):
        for index in (-1, 4, 100):
            with self.assertRaises(OutOfRange):
                self.session.jump_to(index)
        self.assertEqual(self.session.active_index, 0)

    def test_out_of_range_is_index_error(self):
        with self.assertRaises(IndexError):
            self.session.jump_to(9)

    def test_jump_to_active_keeps_timer(self):
        """Test jumping to the current segment is not an index change."""
        self.session.play()
        self.session.tick()
        self.assertFalse(self.session.jump_to(0))
        self.assertEqual(self.session.remaining_seconds, 179)
        self.assertTrue(self.session.is_running)


class TestViewMode(unittest.TestCase):
    """Test suite for the cards/teleprompter switch."""

    def test_switch_leaves_timer_and_index_alone(self):
        session = Session(make_segments())
        session.go_next()
        session.play()
        session.tick()
        before = (session.active_index, session.remaining_seconds, session.is_running)

        self.assertTrue(session.toggle_view_mode())
        self.assertEqual(session.view_mode, ViewMode.TELEPROMPTER)
        self.assertEqual(
            (session.active_index, session.remaining_seconds, session.is_running), before
        )

        self.assertTrue(session.set_view_mode("cards"))
        self.assertEqual(
            (session.active_index, session.remaining_seconds, session.is_running), before
        )

    def test_setting_same_mode_is_noop(self):
        session = Session(make_segments())
        self.assertFalse(session.set_view_mode(ViewMode.CARDS))

    def test_unknown_mode_rejected(self):
        session = Session(make_segments())
        with self.assertRaises(ValueError):
            session.set_view_mode("slides")


class TestChangeCallback(unittest.TestCase):
    """Test suite for the on_change hook and closing."""

    def setUp(self):
        self.calls = []
        self.session = Session(make_segments(), on_change=self.calls.append)

    def test_called_only_on_real_changes(self):
        self.session.go_previous()  # absorbed
        self.session.tick()  # paused
        self.assertEqual(self.calls, [])
        self.session.go_next()
        self.session.play()
        self.session.tick()
        self.session.toggle_view_mode()
        self.assertEqual(len(self.calls), 4)
        self.assertIs(self.calls[0], self.session)

    def test_closed_session_is_frozen(self):
        self.session.play()
        self.session.close()
        self.calls.clear()
        self.assertFalse(self.session.is_running)
        for op in (self.session.tick, self.session.go_next, self.session.play,
                   self.session.toggle_view_mode):
            self.assertFalse(op())
        self.assertFalse(self.session.jump_to(3))
        self.assertEqual(self.session.active_index, 0)
        self.assertEqual(self.session.remaining_seconds, 180)
        self.assertEqual(self.calls, [])


class TestThemes(unittest.TestCase):
    """Test suite for the positional theme lookup."""

    def test_cyclic(self):
        for i in range(12):
            self.assertEqual(theme_for(i), theme_for(i + len(THEMES)))

    def test_palette_order(self):
        self.assertEqual([theme_for(i).name for i in range(4)],
                         ["rose", "amber", "blue", "emerald"])

    def test_negative_index_is_safe(self):
        self.assertEqual(theme_for(-1), THEMES[-1])


class TestInputRouter(unittest.TestCase):
    """Test suite for keyboard routing."""

    def setUp(self):
        self.session = Session(make_segments())
        self.router = InputRouter()
        self.router.attach(self.session)

    def test_next_and_previous_keys(self):
        self.assertTrue(self.router.dispatch("ArrowRight"))
        self.assertTrue(self.router.dispatch(" "))
        self.assertEqual(self.session.active_index, 2)
        self.assertTrue(self.router.dispatch("ArrowLeft"))
        self.assertEqual(self.session.active_index, 1)

    def test_other_keys_ignored(self):
        for key in ("a", "Enter", "ArrowUp", ""):
            self.assertFalse(self.router.dispatch(key))
        self.assertEqual(self.session.active_index, 0)

    def test_bound_key_at_boundary_still_handled(self):
        self.assertTrue(self.router.dispatch("ArrowLeft"))
        self.assertEqual(self.session.active_index, 0)

    def test_detached_router_ignores_input(self):
        self.router.detach()
        self.assertFalse(self.router.is_attached)
        self.assertFalse(self.router.dispatch("ArrowRight"))
        self.assertEqual(self.session.active_index, 0)

    def test_custom_bindings(self):
        router = InputRouter(next_keys=["PageDown"], previous_keys=["PageUp"])
        router.attach(self.session)
        self.assertFalse(router.dispatch("ArrowRight"))
        self.assertTrue(router.dispatch("PageDown"))
        self.assertEqual(self.session.active_index, 1)


class TestRenderState(unittest.TestCase):
    """Test suite for render payloads."""

    def test_format_clock(self):
        self.assertEqual(format_clock(0), "0:00")
        self.assertEqual(format_clock(65), "1:05")
        self.assertEqual(format_clock(600), "10:00")

    def test_cards_payload(self):
        session = Session(make_segments())
        session.go_next()
        state = render_state(session)
        self.assertEqual(state["view_mode"], "cards")
        self.assertEqual(state["remaining_display"], "10:00")
        self.assertEqual(state["overall_progress"], 0.5)
        self.assertEqual(state["theme"]["name"], "amber")
        self.assertNotIn("script", state)
        self.assertEqual(len(state["cards"]), 4)
        self.assertEqual([c["is_active"] for c in state["cards"]],
                         [False, True, False, False])
        self.assertEqual(state["cards"][3]["number"], "04")
        self.assertEqual(state["cards"][0]["kind"], "Intro")

    def test_teleprompter_payload(self):
        session = Session(make_segments())
        session.set_view_mode(ViewMode.TELEPROMPTER)
        state = render_state(session)
        self.assertNotIn("cards", state)
        self.assertEqual(state["script"]["title"], "Segment 1")
        self.assertEqual(state["script"]["narration"], session.active_segment.narration)


if __name__ == '__main__':
    unittest.main()
