from dataclasses import dataclass
from enum import Enum


class SegmentKind(str, Enum):
    """Closed set of segment categories. Used for labels and theming only."""

    INTRO = "Intro"
    CORE = "Core"
    SCRIPTURE = "Scripture"
    CLOSING = "Closing"


@dataclass(frozen=True)
class Segment:
    """One scripted unit of a live delivery.

    ``narration`` is the full text read in teleprompter mode;
    ``talking_points`` are the bullets shown top to bottom in card mode.
    """

    kind: SegmentKind
    allotted_seconds: int
    title: str
    narration: str = ""
    talking_points: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SegmentKind):
            object.__setattr__(self, "kind", SegmentKind(self.kind))
        seconds = self.allotted_seconds
        if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
            raise ValueError(
                f"allotted_seconds must be a positive integer, got {seconds!r}"
            )
        # Lists are accepted for convenience but stored as a tuple
        object.__setattr__(self, "talking_points", tuple(self.talking_points))

    def preview(self, length: int = 80) -> str:
        """Opening words of the narration, shown in the card footer."""
        if len(self.narration) <= length:
            return self.narration
        return self.narration[:length].rstrip() + "..."
