"""Data models exchanged between the content source, presentation and narration."""

from pydantic import BaseModel, ConfigDict, Field

from languages import Language
from utils import clean_text, compose_utterance


ItemId = int | str


class ContentItem(BaseModel):
    """One topic shown in a content section."""

    model_config = ConfigDict(frozen=True)

    id: ItemId
    title: str
    description: str = ""


class Section(BaseModel):
    """A content section and its ordered topics."""

    key: str
    title: str
    subtitle: str
    items: list[ContentItem] = Field(default_factory=list)


class Utterance(BaseModel):
    """A request to narrate one item; never persisted."""

    model_config = ConfigDict(frozen=True)

    item_id: ItemId
    text: str
    language: Language

    @classmethod
    def for_item(cls, item: ContentItem, language: Language) -> "Utterance":
        text = compose_utterance(item.title, item.description)
        return cls(item_id=item.id, text=clean_text(text), language=language)
