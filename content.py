"""Topic lists for the four content sections."""

from __future__ import annotations

from languages import Language
from models import ContentItem, Section
from translations import TranslationCatalog

SECTION_TOPICS: dict[str, tuple[str, ...]] = {
    "farming": ("crops", "pests", "irrigation", "fertilizers", "market", "weather"),
    "health": ("diseases", "firstAid", "nutrition", "mentalHealth", "vaccination", "hygiene"),
    "government": (
        "pmKisan",
        "ayushman",
        "rationCard",
        "pension",
        "aadhaar",
        "janDhan",
        "awas",
        "ujjwala",
        "soilCard",
        "scholarship",
    ),
    "education": (
        "literacy",
        "financial",
        "digital",
        "children",
        "adult",
        "skills",
        "online",
        "career",
    ),
}

SECTIONS = tuple(SECTION_TOPICS)


def section_items(section: str, language: Language, catalog: TranslationCatalog) -> list[ContentItem]:
    """Return the ordered items of *section* rendered in *language*.

    Item ids are 1-based positions, unique within the section.
    """
    try:
        topics = SECTION_TOPICS[section]
    except KeyError:
        raise ValueError(f"Unknown section: {section!r}") from None
    t = catalog.translator(language)
    return [
        ContentItem(
            id=index,
            title=t(f"{section}.{topic}.title"),
            description=t(f"{section}.{topic}.description"),
        )
        for index, topic in enumerate(topics, start=1)
    ]


def load_section(section: str, language: Language, catalog: TranslationCatalog) -> Section:
    t = catalog.translator(language)
    return Section(
        key=section,
        title=t(f"{section}.title"),
        subtitle=t(f"{section}.subtitle"),
        items=section_items(section, language, catalog),
    )
