class Countdown:
    """Per-segment countdown coupled to a play/pause flag.

    ``tick()`` is driven once per second by the session host.  The
    countdown never advances to the next segment by itself: reaching zero
    only stops it, leaving navigation to the presenter.
    """

    def __init__(self, allotted_seconds: int) -> None:
        self.allotted_seconds = allotted_seconds
        self.remaining_seconds = allotted_seconds
        self.is_running = False
        # Whole-session clock; survives segment changes
        self.elapsed_seconds = 0

    def reset(self, allotted_seconds: int) -> None:
        """Rewind to a fresh segment duration and stop."""
        self.allotted_seconds = allotted_seconds
        self.remaining_seconds = allotted_seconds
        self.is_running = False

    def play(self) -> bool:
        """Start counting.  An exhausted countdown cannot be resumed."""
        if self.is_running or self.remaining_seconds <= 0:
            return False
        self.is_running = True
        return True

    def pause(self) -> bool:
        was_running = self.is_running
        self.is_running = False
        return was_running

    def toggle(self) -> bool:
        if self.is_running:
            return self.pause()
        return self.play()

    def tick(self) -> bool:
        """Advance one second.  Returns True if any state changed."""
        if not self.is_running:
            return False
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        self.elapsed_seconds += 1
        if self.remaining_seconds == 0:
            self.is_running = False
        return True

    @property
    def progress_fraction(self) -> float:
        """Share of the allotted time still left, in [0, 1]."""
        return self.remaining_seconds / self.allotted_seconds

    def is_low(self, threshold_seconds: int) -> bool:
        return self.remaining_seconds <= threshold_seconds
