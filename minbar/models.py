import json
from dataclasses import dataclass


@dataclass
class KhutbahCard:
    id: int
    khutbah_id: int
    card_number: int
    section_label: str  # free-form, e.g. INTRO | MAIN | QURAN | CLOSING
    title: str
    bullet_points_json: str  # JSON string
    script: str
    arabic_text: str | None
    key_quote: str | None
    quote_source: str | None
    transition_text: str | None
    notes: str | None
    time_estimate_seconds: int
    created_at: str

    @classmethod
    def from_row(cls, row) -> "KhutbahCard":
        return cls(**{name: row[name] for name in cls.__dataclass_fields__})

    @property
    def bullet_points(self) -> list[str]:
        return json.loads(self.bullet_points_json or "[]")

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self.__dataclass_fields__}
        data["bullet_points"] = self.bullet_points
        del data["bullet_points_json"]
        return data
