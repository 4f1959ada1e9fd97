# tests/test_i18n.py
import json

import pytest

from registration_service.config import DEFAULT_LOCALES_DIR
from registration_service.i18n import MessageCatalog, parse_accept_language

MESSAGE_KEYS = {
    "usernameNull",
    "usernameSize",
    "emailNull",
    "emailInvalid",
    "emailInUse",
    "passwordNull",
    "passwordSize",
    "passwordPattern",
    "usernameInvalid",
    "passwordInvalid",
    "bodyInvalid",
    "userCreatedSuccess",
    "internalError",
}


@pytest.fixture
def catalog():
    return MessageCatalog(
        {
            "en": {"greeting": "Hello", "farewell": "Bye"},
            "pt": {"greeting": "Ola"},
        },
        default_locale="en",
    )


def test_shipped_catalogs_define_the_same_keys():
    catalog = MessageCatalog.from_directory(DEFAULT_LOCALES_DIR)
    assert set(catalog.locales) == {"en", "pt"}
    for locale in catalog.locales:
        data = json.loads((DEFAULT_LOCALES_DIR / f"{locale}.json").read_text(encoding="utf-8"))
        assert set(data) == MESSAGE_KEYS


def test_translate_uses_requested_locale(catalog):
    assert catalog.translate("greeting", "pt") == "Ola"


def test_translate_falls_back_to_default_locale_then_key(catalog):
    assert catalog.translate("farewell", "pt") == "Bye"
    assert catalog.translate("greeting", "fr") == "Hello"
    assert catalog.translate("unknown", "pt") == "unknown"


def test_translate_all_keeps_field_order(catalog):
    translated = catalog.translate_all({"b": "greeting", "a": "farewell"}, "pt")
    assert list(translated.items()) == [("b", "Ola"), ("a", "Bye")]


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, "en"),
        ("", "en"),
        ("pt", "pt"),
        ("PT", "pt"),
        ("pt-BR", "pt"),
        ("fr, pt", "pt"),
        ("en;q=0.4, pt;q=0.9", "pt"),
        ("pt;q=0, en", "en"),
        ("*", "en"),
    ],
)
def test_negotiate(catalog, header, expected):
    assert catalog.negotiate(header) == expected


def test_parse_accept_language_orders_by_weight():
    header = "da, en-gb;q=0.8, en;q=0.7, fr;q=bad"
    assert parse_accept_language(header) == ["da", "en-gb", "en"]


def test_missing_default_catalog_is_rejected():
    with pytest.raises(ValueError):
        MessageCatalog({"pt": {}}, default_locale="en")


def test_from_directory_requires_catalog_files(tmp_path):
    with pytest.raises(ValueError):
        MessageCatalog.from_directory(tmp_path)


def test_from_directory_rejects_non_object_catalog(tmp_path):
    (tmp_path / "en.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        MessageCatalog.from_directory(tmp_path)


@pytest.mark.parametrize("weight", ["nan", "inf", "-inf", "2"])
def test_non_finite_or_out_of_range_weights_are_malformed(catalog, weight):
    header = f"pt;q={weight}, en;q=0.5"
    assert parse_accept_language(header) == ["en"]
    assert catalog.negotiate(header) == "en"
