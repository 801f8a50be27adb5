from minbar.engine.session import Session, ViewMode
from minbar.engine.themes import theme_for


def format_clock(seconds: int) -> str:
    """Format seconds as M:SS."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


def render_state(session: Session, low_time_threshold: int = 30) -> dict:
    """Build the payload a display needs to draw the current frame.

    Card mode carries every segment so neighbours can be drawn dimmed;
    teleprompter mode carries only the active segment's full narration.

    Returns::

        {
            "active_index": int,
            "segment_count": int,
            "remaining_seconds": int,
            "remaining_display": "M:SS",
            "elapsed_seconds": int,
            "elapsed_display": "M:SS",
            "is_running": bool,
            "view_mode": "cards" | "teleprompter",
            "progress_fraction": float,   # active segment, depleting
            "overall_progress": float,    # (active + 1) / count
            "low_time": bool,
            "theme": {...},
            "cards": [...],               # cards mode only
            "script": {"title", "narration"},  # teleprompter mode only
        }
    """
    active = session.active_index
    state: dict = {
        "active_index": active,
        "segment_count": len(session.segments),
        "remaining_seconds": session.remaining_seconds,
        "remaining_display": format_clock(session.remaining_seconds),
        "elapsed_seconds": session.elapsed_seconds,
        "elapsed_display": format_clock(session.elapsed_seconds),
        "is_running": session.is_running,
        "view_mode": session.view_mode.value,
        "progress_fraction": session.progress_fraction(),
        "overall_progress": session.overall_progress,
        "low_time": session.is_low_on_time(low_time_threshold),
        "theme": theme_for(active).as_dict(),
    }

    if session.view_mode == ViewMode.CARDS:
        state["cards"] = [
            {
                "index": i,
                "number": f"{i + 1:02d}",
                "kind": seg.kind.value,
                "title": seg.title,
                "talking_points": list(seg.talking_points),
                "preview": seg.preview(),
                "is_active": i == active,
                "theme": theme_for(i).as_dict(),
                "progress_fraction": session.progress_fraction(i),
            }
            for i, seg in enumerate(session.segments)
        ]
    else:
        segment = session.active_segment
        state["script"] = {
            "title": segment.title,
            "narration": segment.narration,
        }
    return state
