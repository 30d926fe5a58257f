"""
Language, currency and date/time rendering for customer messages.

Everything here is table driven and never raises on codes it does not know:
unknown languages render in English, unknown currencies use their code as the
symbol and unknown locales use en-US date conventions.
"""
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from order_lifecycle.models import BusinessProfile

# Country-style codes some businesses store instead of the language code
LANGUAGE_ALIASES: dict[str, str] = {
    "gr": "el",
    "al": "sq",
}

LOCALE_TAGS: dict[str, str] = {
    "en": "en-US",
    "es": "es-ES",
    "sq": "sq-AL",
    "el": "el-GR",
}
FALLBACK_LOCALE = "en-US"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "ALL": "L",
}

DATE_FORMATS: dict[str, dict] = {
    "en-US": {
        "months": [
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ],
        "date": "{month} {day}, {year}",
        "joiner": " at ",
        "datetime_12h": "{date} at {time}",
        "am_pm": ("AM", "PM"),
    },
    "es-ES": {
        "months": [
            "enero", "febrero", "marzo", "abril", "mayo", "junio",
            "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
        ],
        "date": "{day} de {month} de {year}",
        "joiner": ", ",
        "datetime_12h": "{date}, {time}",
        "am_pm": ("a. m.", "p. m."),
    },
    "sq-AL": {
        "months": [
            "janar", "shkurt", "mars", "prill", "maj", "qershor",
            "korrik", "gusht", "shtator", "tetor", "nëntor", "dhjetor",
        ],
        "date": "{day} {month} {year}",
        "joiner": ", ora ",
        "datetime_12h": "{date}, ora {time}",
        "am_pm": ("e paradites", "e pasdites"),
    },
    "el-GR": {
        # genitive month names, as used in full dates
        "months": [
            "Ιανουαρίου", "Φεβρουαρίου", "Μαρτίου", "Απριλίου", "Μαΐου", "Ιουνίου",
            "Ιουλίου", "Αυγούστου", "Σεπτεμβρίου", "Οκτωβρίου", "Νοεμβρίου", "Δεκεμβρίου",
        ],
        "date": "{day} {month} {year}",
        "joiner": " στις ",
        "datetime_12h": "{date} στις {time}",
        "am_pm": ("π.μ.", "μ.μ."),
    },
}

TWELVE_HOUR_FORMATS = frozenset({"12", "12h"})


def normalize_language(code: str | None) -> str:
    """Lower-case, drop any region suffix and map alias codes ("gr" -> "el")."""
    if not code:
        return "en"
    base = code.strip().lower().replace("_", "-").split("-")[0]
    return LANGUAGE_ALIASES.get(base, base) or "en"


def resolve_language(business: BusinessProfile) -> str:
    if not business.translate_to_business_language:
        return "en"
    return normalize_language(business.language)


def locale_tag(language: str) -> str:
    return LOCALE_TAGS.get(language, FALLBACK_LOCALE)


def format_currency(amount, currency: str | None) -> str:
    code = (currency or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code, code)
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"


def uses_24_hour(time_format: str | None) -> bool:
    return str(time_format or "24").strip().lower() not in TWELVE_HOUR_FORMATS


def to_business_time(moment: datetime, timezone: str | None) -> datetime:
    """Aware datetimes move into the business's zone; naive ones are taken as already local."""
    if moment.tzinfo is None:
        return moment
    try:
        zone = ZoneInfo(timezone or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        zone = ZoneInfo("UTC")
    return moment.astimezone(zone)


def format_date(moment: datetime, locale: str) -> str:
    fmt = DATE_FORMATS.get(locale, DATE_FORMATS[FALLBACK_LOCALE])
    return fmt["date"].format(
        day=moment.day,
        month=fmt["months"][moment.month - 1],
        year=moment.year,
    )


def format_scheduled_time(moment: datetime, locale: str, twenty_four_hour: bool) -> str:
    """
    24-hour: localized date + joiner + raw HH:MM ("November 7, 2025 at 15:00").
    12-hour: the locale's own pattern ("November 7, 2025 at 3:00 PM").
    """
    fmt = DATE_FORMATS.get(locale, DATE_FORMATS[FALLBACK_LOCALE])
    date = format_date(moment, locale)
    if twenty_four_hour:
        return f"{date}{fmt['joiner']}{moment:%H:%M}"

    hour = moment.hour % 12 or 12
    marker = fmt["am_pm"][0 if moment.hour < 12 else 1]
    return fmt["datetime_12h"].format(date=date, time=f"{hour}:{moment:%M} {marker}")


def humanize_status(status: str) -> str:
    """Display form for a status no table knows: separators become spaces."""
    return str(status).replace("_", " ").replace("-", " ")
