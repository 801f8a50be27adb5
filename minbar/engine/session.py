from enum import Enum
from typing import Callable, Iterable

from minbar.engine.errors import InvalidSession, OutOfRange
from minbar.engine.navigation import Navigator
from minbar.engine.segments import Segment
from minbar.engine.timer import Countdown


class ViewMode(str, Enum):
    CARDS = "cards"
    TELEPROMPTER = "teleprompter"


class Session:
    """State of one live delivery.

    Owns the fixed script, the navigator, the countdown and the view mode.
    Every operation that changes state calls ``on_change(session)`` once;
    absorbed no-ops (boundary navigation, paused ticks, replaying an
    exhausted segment) do not.

    Once :meth:`close` has been called every mutator is a no-op, so a
    session that outlives its host can no longer change.
    """

    def __init__(
        self,
        segments: Iterable[Segment],
        *,
        view_mode: ViewMode = ViewMode.CARDS,
        on_change: Callable[["Session"], None] | None = None,
    ) -> None:
        script = tuple(segments)
        if not script:
            raise InvalidSession("A live session needs at least one segment")
        for item in script:
            if not isinstance(item, Segment):
                raise InvalidSession(f"Not a segment: {item!r}")

        self._segments = script
        self._timer = Countdown(script[0].allotted_seconds)
        self._navigator = Navigator(script, self._timer)
        self._view_mode = ViewMode(view_mode)
        self._on_change = on_change
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    def segment_at(self, index: int) -> Segment:
        if not 0 <= index < len(self._segments):
            raise OutOfRange(index, len(self._segments))
        return self._segments[index]

    @property
    def active_index(self) -> int:
        return self._navigator.index

    @property
    def active_segment(self) -> Segment:
        return self._segments[self._navigator.index]

    @property
    def remaining_seconds(self) -> int:
        return self._timer.remaining_seconds

    @property
    def elapsed_seconds(self) -> int:
        return self._timer.elapsed_seconds

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def closed(self) -> bool:
        return self._closed

    def progress_fraction(self, index: int | None = None) -> float:
        """Remaining/allotted for the active segment; 1.0 for any other segment."""
        if index is None:
            index = self.active_index
        elif not 0 <= index < len(self._segments):
            raise OutOfRange(index, len(self._segments))
        if index != self.active_index:
            return 1.0
        return self._timer.progress_fraction

    @property
    def overall_progress(self) -> float:
        """Position through the script, counting the active segment as reached."""
        return (self.active_index + 1) / len(self._segments)

    def is_low_on_time(self, threshold_seconds: int) -> bool:
        return self._timer.is_low(threshold_seconds)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_next(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._navigator.go_next())

    def go_previous(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._navigator.go_previous())

    def jump_to(self, index: int) -> bool:
        if self._closed:
            return False
        return self._changed(self._navigator.jump_to(index))

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def play(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._timer.play())

    def pause(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._timer.pause())

    def toggle_play(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._timer.toggle())

    def tick(self) -> bool:
        if self._closed:
            return False
        return self._changed(self._timer.tick())

    # ------------------------------------------------------------------
    # View mode
    # ------------------------------------------------------------------

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        if self._closed:
            return False
        mode = ViewMode(mode)
        if mode == self._view_mode:
            return False
        self._view_mode = mode
        return self._changed(True)

    def toggle_view_mode(self) -> bool:
        if self._view_mode == ViewMode.CARDS:
            return self.set_view_mode(ViewMode.TELEPROMPTER)
        return self.set_view_mode(ViewMode.CARDS)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Freeze the session.  Called by the host on exit."""
        self._timer.pause()
        self._closed = True

    def _changed(self, changed: bool) -> bool:
        if changed and self._on_change is not None:
            self._on_change(self)
        return changed
