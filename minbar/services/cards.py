from minbar.clients import GroqClient

# ---------------------------------------------------------------------------
# JSON Schema: Groq strict mode requires additionalProperties: false
# everywhere and all properties in "required".
# ---------------------------------------------------------------------------

CARDS_SCHEMA = {
    "type": "object",
    "properties": {
        "cards": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "section_label": {
                        "type": "string",
                        "enum": [
                            "INTRO",
                            "MAIN",
                            "HADITH",
                            "QURAN",
                            "STORY",
                            "PRACTICAL",
                            "CLOSING",
                        ],
                    },
                    "title": {"type": "string"},
                    "bullet_points": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                    "script": {"type": "string"},
                    "arabic_text": {"type": "string"},
                    "key_quote": {"type": "string"},
                    "quote_source": {"type": "string"},
                    "time_estimate_seconds": {"type": "integer"},
                },
                "required": [
                    "section_label",
                    "title",
                    "bullet_points",
                    "script",
                    "arabic_text",
                    "key_quote",
                    "quote_source",
                    "time_estimate_seconds",
                ],
                "additionalProperties": False,
            },
        },
    },
    "required": ["cards"],
    "additionalProperties": False,
}


class CardService:
    """Split sermon text into ordered presentation cards via the Groq API."""

    def __init__(self, groq: GroqClient | None = None) -> None:
        self.groq = groq or GroqClient()

    async def generate_cards(self, content: str) -> list[dict]:
        """Return cards in delivery order, numbered from 1.

        Each card has: section_label, title, bullet_points, script (the
        words to read aloud), arabic_text, key_quote, quote_source and
        time_estimate_seconds.  Empty strings mean "not applicable".
        """
        messages = [
            {
                "role": "system",
                "content": (
                    "You prepare khutbahs for live delivery from the minbar. Split the "
                    "sermon into a sequence of presentation cards in delivery order. "
                    "Each card has a short title, 2-4 terse bullet points the speaker "
                    "can glance at, and the full script to be read for that part. Copy "
                    "any Arabic or Quranic text verbatim into arabic_text. Put a "
                    "translated verse or hadith in key_quote with its reference in "
                    "quote_source. Estimate speaking time at about 130 words per "
                    "minute. Use empty strings for fields that do not apply."
                ),
            },
            {
                "role": "user",
                "content": f"Khutbah:\n{content}\n\nGenerate the presentation cards.",
            },
        ]
        result = await self.groq.chat_json(
            messages, CARDS_SCHEMA, schema_name="khutbah_cards"
        )
        return [
            {**card, "card_number": number}
            for number, card in enumerate(result["cards"], start=1)
        ]
