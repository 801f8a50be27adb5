import logging
import re

import aiosqlite

from minbar.config import settings
from minbar.engine import Segment, SegmentKind
from minbar.models import KhutbahCard

logger = logging.getLogger(__name__)

# First word of a card's section label -> segment kind.
# Anything not listed here is treated as the core message.
_LABEL_KINDS: dict[str, SegmentKind] = {
    "INTRO": SegmentKind.INTRO,
    "INTRODUCTION": SegmentKind.INTRO,
    "OPENING": SegmentKind.INTRO,
    "QURAN": SegmentKind.SCRIPTURE,
    "AYAH": SegmentKind.SCRIPTURE,
    "HADITH": SegmentKind.SCRIPTURE,
    "SCRIPTURE": SegmentKind.SCRIPTURE,
    "VERSE": SegmentKind.SCRIPTURE,
    "CLOSING": SegmentKind.CLOSING,
    "CONCLUSION": SegmentKind.CLOSING,
    "DUA": SegmentKind.CLOSING,
}

# Used when a khutbah has no prepared cards yet.
SAMPLE_SEGMENTS: tuple[Segment, ...] = (
    Segment(
        kind=SegmentKind.INTRO,
        allotted_seconds=180,
        title="Opening Duas",
        narration=(
            "In the name of Allah, the Most Gracious, the Most Merciful. All praise "
            "is due to Allah, Lord of the worlds. We praise Him, seek His help, and "
            "ask for His forgiveness."
        ),
        talking_points=(
            "Hamdala (Praise Allah)",
            "Salawat (Send peace on Prophet)",
            "Taqwa (Consciousness of Allah)",
        ),
    ),
    Segment(
        kind=SegmentKind.CORE,
        allotted_seconds=600,
        title="The Power of Forgiveness",
        narration=(
            "Today we wish to speak about a quality that liberates the heart: "
            "Forgiveness. It is often seen as a weakness, but in reality, it is the "
            "ultimate strength. Look at Prophet Yusuf (AS)."
        ),
        talking_points=(
            "Forgiveness is a strength",
            "Story of Prophet Yusuf (AS)",
            "Health benefits of letting go",
        ),
    ),
    Segment(
        kind=SegmentKind.SCRIPTURE,
        allotted_seconds=300,
        title="Surah Ash-Shura, Verse 40",
        narration=(
            "Allah (SWT) says: 'The recompense of an injury is an injury the like "
            "thereof; but whoever forgives and makes reconciliation, his reward is "
            "with Allah.'"
        ),
        talking_points=(
            "'The recompense of an injury...'",
            "'...his reward is with Allah.'",
            "Direct reward from the Creator",
        ),
    ),
    Segment(
        kind=SegmentKind.CLOSING,
        allotted_seconds=120,
        title="Conclusion & Dua",
        narration=(
            "To conclude, let us leave here today with a resolve to forgive one "
            "person who has wronged us. May Allah grant us soft hearts and forgive "
            "our shortcomings. Ameen."
        ),
        talking_points=(
            "Summary of key points",
            "Action item: Call a relative",
            "Final Dua for the Ummah",
        ),
    ),
)


def kind_for_label(label: str | None) -> SegmentKind:
    """Map a free-form section label ("Core Message", "QURAN", ...) to a kind."""
    words = [w for w in re.split(r"[^A-Z]+", (label or "").upper()) if w]
    if not words:
        return SegmentKind.CORE
    return _LABEL_KINDS.get(words[0], SegmentKind.CORE)


def _compose_narration(card: KhutbahCard) -> str:
    """Build teleprompter text for a card that has no written script."""
    parts: list[str] = []
    if card.arabic_text:
        parts.append(card.arabic_text)
    parts.extend(card.bullet_points)
    if card.key_quote:
        quote = f'"{card.key_quote}"'
        if card.quote_source:
            quote += f" ({card.quote_source})"
        parts.append(quote)
    if card.transition_text:
        parts.append(card.transition_text)
    return "\n\n".join(parts)


def segment_from_card(card: KhutbahCard) -> Segment:
    seconds = card.time_estimate_seconds
    if not seconds or seconds <= 0:
        seconds = settings.default_segment_seconds
    return Segment(
        kind=kind_for_label(card.section_label),
        allotted_seconds=int(seconds),
        title=card.title,
        narration=card.script or _compose_narration(card),
        talking_points=tuple(card.bullet_points),
    )


async def load_cards(conn: aiosqlite.Connection, khutbah_id: int) -> list[KhutbahCard]:
    rows = await conn.execute(
        "SELECT * FROM khutbah_cards WHERE khutbah_id = ? ORDER BY card_number",
        (khutbah_id,),
    )
    return [KhutbahCard.from_row(row) for row in await rows.fetchall()]


async def segments_for_khutbah(
    conn: aiosqlite.Connection, khutbah_id: int | None
) -> tuple[Segment, ...]:
    """Return the live script for a khutbah, or the sample script if it has none."""
    if khutbah_id is None:
        return SAMPLE_SEGMENTS
    cards = await load_cards(conn, khutbah_id)
    if not cards:
        logger.info("Khutbah %s has no cards; using the sample script", khutbah_id)
        return SAMPLE_SEGMENTS
    return tuple(segment_from_card(card) for card in cards)
