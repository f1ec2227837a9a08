import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from languages import DEFAULT_LOCALE, LOCALE_CODES, Language, locale_for, parse_language


@pytest.mark.parametrize(
    "language, locale",
    [
        (Language.ENGLISH, "en-IN"),
        (Language.HINDI, "hi-IN"),
        (Language.MALAYALAM, "ml-IN"),
        (Language.MARATHI, "mr-IN"),
        (Language.TAMIL, "ta-IN"),
        (Language.TELUGU, "te-IN"),
        (Language.BENGALI, "bn-IN"),
    ],
)
def test_locale_codes(language, locale):
    assert locale_for(language) == locale


def test_every_language_has_a_locale_and_native_label():
    assert set(LOCALE_CODES) == set(Language)
    for language in Language:
        assert language.native_label
        assert language.label[0].isupper()


def test_locale_for_unknown_values_defaults_to_english():
    assert DEFAULT_LOCALE == "en-IN"
    assert locale_for("klingon") == "en-IN"
    assert locale_for(None) == "en-IN"
    assert locale_for(42) == "en-IN"
    assert locale_for("Hindi") == "hi-IN"


def test_parse_language():
    assert parse_language(" TAMIL ") is Language.TAMIL
    assert parse_language(Language.BENGALI) is Language.BENGALI
    assert parse_language("") is None
    assert parse_language(b"hindi") is None
