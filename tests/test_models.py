import sys
import pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest
from pydantic import ValidationError

from languages import Language
from models import ContentItem, Section, Utterance


def test_content_item_parsing():
    item = ContentItem(**{'id': 3, 'title': 'Irrigation', 'description': 'Water management'})
    assert item.id == 3
    assert item.title == 'Irrigation'

    with pytest.raises(ValidationError):
        item.title = 'changed'


def test_content_item_accepts_string_ids():
    assert ContentItem(id='pm-kisan', title='PM-KISAN').description == ''


def test_utterance_for_item_composes_and_cleans_text():
    item = ContentItem(id=1, title='Crop Cultivation', description='Best practices\x00 for crops')
    utterance = Utterance.for_item(item, Language.HINDI)
    assert utterance.item_id == 1
    assert utterance.text == 'Crop Cultivation. Best practices for crops'
    assert utterance.language is Language.HINDI


def test_utterance_language_is_validated():
    assert Utterance(item_id=1, text='x', language='tamil').language is Language.TAMIL
    with pytest.raises(ValidationError):
        Utterance(item_id=1, text='x', language='klingon')


def test_section_defaults_to_no_items():
    assert Section(key='health', title='Health', subtitle='Advice').items == []
