import pytest

from order_lifecycle import translations
from order_lifecycle.formatting import DATE_FORMATS, LOCALE_TAGS
from order_lifecycle.statuses import OrderStatus


def test_shipped_tables_are_complete():
    assert translations.missing_translations() == []


def test_every_status_has_an_english_label():
    for status in OrderStatus:
        assert translations.status_label("en", status.value)


def test_every_language_has_a_date_format():
    for locale in LOCALE_TAGS.values():
        assert len(DATE_FORMATS[locale]["months"]) == 12


def test_gap_is_reported(monkeypatch):
    monkeypatch.delitem(translations.STATUS_MESSAGES["el"], "DELIVERED")
    assert ("status_messages", "el", "DELIVERED") in translations.missing_translations()


def test_branch_gap_is_reported(monkeypatch):
    monkeypatch.setitem(translations.STATUS_LABELS["sq"], "PREPARING", {"DEFAULT": "Duke U Përgatitur"})
    assert ("status_labels", "sq", "PREPARING.RETAIL") in translations.missing_translations()


def test_english_gap_fails_the_check(monkeypatch):
    monkeypatch.delitem(translations.PHRASES["en"], "greeting")
    with pytest.raises(RuntimeError):
        translations._check_tables()


def test_country_name_fallbacks():
    assert translations.country_name("XK", "sq") == "Kosovë"
    assert translations.country_name("MK", "xx") == "North Macedonia"
    assert translations.country_name("FR", "en") == "FR"
