"""Core data types: changelog records and the narration voice catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from changecast.ingest.categorize import ItemType, categorize_item


@dataclass(frozen=True)
class ChangelogItem:
    """A single bullet under a version header.

    Attributes:
        content: Raw inline markdown with the list marker stripped.
    """

    content: str

    @property
    def type(self) -> ItemType:
        """Category derived from :attr:`content` (see :func:`categorize_item`)."""
        return categorize_item(self.content)

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "content": self.content}


@dataclass
class ChangelogVersion:
    """One version section of the changelog, in document order.

    Attributes:
        version: Semver-like version string, possibly with a pre-release tag.
        date: Trailing header segment (usually a date); empty if absent.
        items: Change items in the order they appear.
    """

    version: str
    date: str = ""
    items: list[ChangelogItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "date": self.date,
            "items": [item.to_dict() for item in self.items],
        }


VOICE_NAMES: tuple[str, ...] = (
    "Charon",
    "Puck",
    "Kore",
    "Zephyr",
    "Aoede",
    "Fenrir",
    "Leda",
    "Orus",
    "Callirrhoe",
    "Autonoe",
    "Enceladus",
    "Iapetus",
    "Umbriel",
    "Algieba",
    "Despina",
    "Erinome",
    "Algenib",
    "Rasalgethi",
    "Laomedeia",
    "Achernar",
    "Alnilam",
    "Schedar",
    "Gacrux",
    "Pulcherrima",
    "Achird",
    "Zubenelgenubi",
    "Vindemiatrix",
    "Sadachbia",
    "Sadaltager",
    "Sulafat",
)

DEFAULT_VOICE = "Charon"


@dataclass(frozen=True)
class VoiceOption:
    """A voice offered in pickers, with a short description of its tone."""

    name: str
    tone: str


VOICE_OPTIONS: tuple[VoiceOption, ...] = (
    VoiceOption("Charon", "Informative"),
    VoiceOption("Puck", "Upbeat"),
    VoiceOption("Kore", "Firm"),
    VoiceOption("Zephyr", "Bright"),
    VoiceOption("Aoede", "Breezy"),
    VoiceOption("Fenrir", "Excitable"),
    VoiceOption("Leda", "Youthful"),
    VoiceOption("Orus", "Firm"),
    VoiceOption("Callirrhoe", "Easy-going"),
    VoiceOption("Autonoe", "Bright"),
)


def is_known_voice(name: str) -> bool:
    """Return ``True`` if ``name`` is one of the prebuilt voices."""
    return name in VOICE_NAMES


__all__ = [
    "ChangelogItem",
    "ChangelogVersion",
    "VOICE_NAMES",
    "DEFAULT_VOICE",
    "VoiceOption",
    "VOICE_OPTIONS",
    "is_known_voice",
]
