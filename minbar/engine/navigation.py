from minbar.engine.errors import OutOfRange
from minbar.engine.segments import Segment
from minbar.engine.timer import Countdown


class Navigator:
    """Tracks the active segment and keeps the countdown in step with it.

    Every index change rewinds the countdown to the new segment's full
    duration and pauses it, in the same call, so the timer can never show
    the previous segment's time against the new index.

    ``go_next`` / ``go_previous`` absorb out-of-bounds requests silently
    (keyboard repeat on stage routinely overshoots); ``jump_to`` raises
    :class:`OutOfRange` because it is only called with an explicit target.
    """

    def __init__(self, segments: tuple[Segment, ...], timer: Countdown) -> None:
        self._segments = segments
        self._timer = timer
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self._segments) - 1

    def go_next(self) -> bool:
        if self.is_last:
            return False
        self._move(self._index + 1)
        return True

    def go_previous(self) -> bool:
        if self.is_first:
            return False
        self._move(self._index - 1)
        return True

    def jump_to(self, index: int) -> bool:
        if not 0 <= index < len(self._segments):
            raise OutOfRange(index, len(self._segments))
        if index == self._index:
            return False
        self._move(index)
        return True

    def _move(self, index: int) -> None:
        self._index = index
        self._timer.reset(self._segments[index].allotted_seconds)
