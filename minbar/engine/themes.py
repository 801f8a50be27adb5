from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Theme:
    """Colour treatment for one card. Values are CSS hex colours."""

    name: str
    accent: str
    footer: str
    progress: str
    shadow: str
    border: str
    icon: str

    def as_dict(self) -> dict:
        return asdict(self)


# Palette order follows the usual shape of a khutbah:
# opening, main message, verse, closing.
THEMES: tuple[Theme, ...] = (
    Theme(
        name="rose",
        accent="#e11d48",
        footer="#ffe4e6",
        progress="#f43f5e",
        shadow="#fecdd3",
        border="#ffe4e6",
        icon="#fda4af",
    ),
    Theme(
        name="amber",
        accent="#d97706",
        footer="#fef3c7",
        progress="#f59e0b",
        shadow="#fde68a",
        border="#fef3c7",
        icon="#fcd34d",
    ),
    Theme(
        name="blue",
        accent="#2563eb",
        footer="#dbeafe",
        progress="#3b82f6",
        shadow="#bfdbfe",
        border="#dbeafe",
        icon="#93c5fd",
    ),
    Theme(
        name="emerald",
        accent="#059669",
        footer="#d1fae5",
        progress="#10b981",
        shadow="#a7f3d0",
        border="#d1fae5",
        icon="#6ee7b7",
    ),
)


def theme_for(index: int) -> Theme:
    """Return the theme for the segment at *index*.

    Pure lookup, cyclic over the palette, so ``theme_for(i)`` equals
    ``theme_for(i + len(THEMES))``.  Works for any index, active or not.
    """
    return THEMES[index % len(THEMES)]
