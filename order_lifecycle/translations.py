"""
Static text tables for customer messages: status labels, structural phrases,
per-status sentences and country names.

Tables are language -> key -> text. A text may instead be a dict of branches
keyed by fulfillment type ("DELIVERY", "PICKUP", "DINE_IN"), by business kind
("RETAIL") or "DEFAULT". Lookups fall back to English per key, so a language
that lacks one entry still renders every other entry in its own words.

English is the canonical key set. A gap in English is a programming error and
fails at import; gaps in other languages are logged and reported by
missing_translations().
"""
import logging

from order_lifecycle.statuses import OrderStatus

logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "en"
DEFAULT_BRANCH = "DEFAULT"

STATUS_LABELS: dict[str, dict[str, str | dict[str, str]]] = {
    "en": {
        "PENDING": "Pending",
        "CONFIRMED": "Confirmed",
        "PREPARING": {"RETAIL": "Preparing Shipment", "DEFAULT": "Preparing"},
        "READY": "Ready",
        "PICKED_UP": "Picked Up",
        "OUT_FOR_DELIVERY": "Out for Delivery",
        "DELIVERED": "Delivered",
        "CANCELLED": "Cancelled",
        "RETURNED": "Returned",
        "REFUNDED": "Refunded",
    },
    "sq": {
        "PENDING": "Në Pritje",
        "CONFIRMED": "E Konfirmuar",
        "PREPARING": {"RETAIL": "Duke Përgatitur Dërgesën", "DEFAULT": "Duke U Përgatitur"},
        "READY": "Gati",
        "PICKED_UP": "Marrë",
        "OUT_FOR_DELIVERY": "Në Rrugë",
        "DELIVERED": "Dorëzuar",
        "CANCELLED": "Anuluar",
        "RETURNED": "Kthyer",
        "REFUNDED": "Rimbursuar",
    },
    "es": {
        "PENDING": "Pendiente",
        "CONFIRMED": "Confirmado",
        "PREPARING": {"RETAIL": "Preparando Envío", "DEFAULT": "Preparando"},
        "READY": "Listo",
        "PICKED_UP": "Recogido",
        "OUT_FOR_DELIVERY": "En Camino",
        "DELIVERED": "Entregado",
        "CANCELLED": "Cancelado",
        "RETURNED": "Devuelto",
        "REFUNDED": "Reembolsado",
    },
    "el": {
        "PENDING": "Σε Αναμονή",
        "CONFIRMED": "Επιβεβαιώθηκε",
        "PREPARING": {"RETAIL": "Προετοιμασία Αποστολής", "DEFAULT": "Σε Προετοιμασία"},
        "READY": "Έτοιμη",
        "PICKED_UP": "Παραλήφθηκε",
        "OUT_FOR_DELIVERY": "Καθ' Οδόν",
        "DELIVERED": "Παραδόθηκε",
        "CANCELLED": "Ακυρώθηκε",
        "RETURNED": "Επιστράφηκε",
        "REFUNDED": "Επιστροφή Χρημάτων",
    },
}

PHRASES: dict[str, dict[str, str]] = {
    "en": {
        "greeting": "Hello {name}!",
        "status_updated": "Your order #{order_number} status has been updated to: *{status}*",
        "delivery_address": "📍 Delivery Address: {address}",
        "pickup_at": "🏪 Pickup at: {location}",
        "dine_in_at": "🍽️ Dine-in at: {location}",
        "total": "💰 Total: {amount}",
        "scheduled_time": "⏰ {label}: {time}",
        "delivery_time": "Delivery time",
        "pickup_time": "Pickup time",
        "arrival_time": "Arrival time",
        "thank_you": "Thank you for choosing {business}!",
    },
    "sq": {
        "greeting": "Përshëndetje {name}!",
        "status_updated": "Statusi i porosisë suaj #{order_number} është përditësuar në: *{status}*",
        "delivery_address": "📍 Adresa e Dorëzimit: {address}",
        "pickup_at": "🏪 Merreni te: {location}",
        "dine_in_at": "🍽️ Në lokal te: {location}",
        "total": "💰 Totali: {amount}",
        "scheduled_time": "⏰ {label}: {time}",
        "delivery_time": "Koha e dorëzimit",
        "pickup_time": "Koha e marrjes",
        "arrival_time": "Koha e mbërritjes",
        "thank_you": "Faleminderit që zgjodhët {business}!",
    },
    "es": {
        "greeting": "¡Hola {name}!",
        "status_updated": "El estado de tu pedido #{order_number} se ha actualizado a: *{status}*",
        "delivery_address": "📍 Dirección de entrega: {address}",
        "pickup_at": "🏪 Recoger en: {location}",
        "dine_in_at": "🍽️ Comer en: {location}",
        "total": "💰 Total: {amount}",
        "scheduled_time": "⏰ {label}: {time}",
        "delivery_time": "Hora de entrega",
        "pickup_time": "Hora de recogida",
        "arrival_time": "Hora de llegada",
        "thank_you": "¡Gracias por elegir {business}!",
    },
    "el": {
        "greeting": "Γεια σας {name}!",
        "status_updated": "Η κατάσταση της παραγγελίας σας #{order_number} ενημερώθηκε σε: *{status}*",
        "delivery_address": "📍 Διεύθυνση παράδοσης: {address}",
        "pickup_at": "🏪 Παραλαβή από: {location}",
        "dine_in_at": "🍽️ Στο κατάστημα: {location}",
        "total": "💰 Σύνολο: {amount}",
        "scheduled_time": "⏰ {label}: {time}",
        "delivery_time": "Ώρα παράδοσης",
        "pickup_time": "Ώρα παραλαβής",
        "arrival_time": "Ώρα άφιξης",
        "thank_you": "Ευχαριστούμε που επιλέξατε {business}!",
    },
}

# Statuses without an entry (PENDING, CANCELLED, RETURNED, REFUNDED) get no extra sentence.
STATUS_MESSAGES: dict[str, dict[str, str | dict[str, str]]] = {
    "en": {
        "CONFIRMED": "✅ Your order has been confirmed and we're preparing it for you!",
        "PREPARING": {
            "RETAIL": "📦 Your order is being prepared for shipment!",
            "DEFAULT": "👨‍🍳 Your order is being prepared with care!",
        },
        "READY": {
            "PICKUP": "🎉 Your order is ready for pickup!",
            "DINE_IN": "🎉 Your table is ready!",
            "DEFAULT": "🎉 Your order is ready!",
        },
        "PICKED_UP": {
            "DINE_IN": "✨ Thank you for dining with us. Enjoy your meal!",
            "DEFAULT": "✨ Your order has been picked up. Enjoy!",
        },
        "OUT_FOR_DELIVERY": "🚗 Your order is on its way to you!",
        "DELIVERED": "✨ Your order has been delivered. Enjoy!",
    },
    "sq": {
        "CONFIRMED": "✅ Porosia juaj është konfirmuar dhe po e përgatisim për ju!",
        "PREPARING": {
            "RETAIL": "📦 Porosia juaj po përgatitet për dërgim!",
            "DEFAULT": "👨‍🍳 Porosia juaj po përgatitet me kujdes!",
        },
        "READY": {
            "PICKUP": "🎉 Porosia juaj është gati për t'u marrë!",
            "DINE_IN": "🎉 Tavolina juaj është gati!",
            "DEFAULT": "🎉 Porosia juaj është gati!",
        },
        "PICKED_UP": {
            "DINE_IN": "✨ Faleminderit që ngrënët me ne. Ju bëftë mirë!",
            "DEFAULT": "✨ Porosia juaj u mor. Ju bëftë mirë!",
        },
        "OUT_FOR_DELIVERY": "🚗 Porosia juaj është në rrugë drejt jush!",
        "DELIVERED": "✨ Porosia juaj u dorëzua. Ju bëftë mirë!",
    },
    "es": {
        "CONFIRMED": "✅ ¡Tu pedido ha sido confirmado y lo estamos preparando para ti!",
        "PREPARING": {
            "RETAIL": "📦 ¡Tu pedido se está preparando para el envío!",
            "DEFAULT": "👨‍🍳 ¡Tu pedido se está preparando con cariño!",
        },
        "READY": {
            "PICKUP": "🎉 ¡Tu pedido está listo para recoger!",
            "DINE_IN": "🎉 ¡Tu mesa está lista!",
            "DEFAULT": "🎉 ¡Tu pedido está listo!",
        },
        "PICKED_UP": {
            "DINE_IN": "✨ Gracias por comer con nosotros. ¡Buen provecho!",
            "DEFAULT": "✨ Tu pedido ha sido recogido. ¡Que lo disfrutes!",
        },
        "OUT_FOR_DELIVERY": "🚗 ¡Tu pedido está en camino!",
        "DELIVERED": "✨ Tu pedido ha sido entregado. ¡Que lo disfrutes!",
    },
    "el": {
        "CONFIRMED": "✅ Η παραγγελία σας επιβεβαιώθηκε και την ετοιμάζουμε για εσάς!",
        "PREPARING": {
            "RETAIL": "📦 Η παραγγελία σας ετοιμάζεται για αποστολή!",
            "DEFAULT": "👨‍🍳 Η παραγγελία σας ετοιμάζεται με φροντίδα!",
        },
        "READY": {
            "PICKUP": "🎉 Η παραγγελία σας είναι έτοιμη για παραλαβή!",
            "DINE_IN": "🎉 Το τραπέζι σας είναι έτοιμο!",
            "DEFAULT": "🎉 Η παραγγελία σας είναι έτοιμη!",
        },
        "PICKED_UP": {
            "DINE_IN": "✨ Ευχαριστούμε που φάγατε μαζί μας. Καλή όρεξη!",
            "DEFAULT": "✨ Η παραγγελία σας παραλήφθηκε. Καλή απόλαυση!",
        },
        "OUT_FOR_DELIVERY": "🚗 Η παραγγελία σας είναι καθ' οδόν!",
        "DELIVERED": "✨ Η παραγγελία σας παραδόθηκε. Καλή απόλαυση!",
    },
}

# country code -> language -> name, used to spell out codes inside delivery addresses
COUNTRY_NAMES: dict[str, dict[str, str]] = {
    "AL": {"en": "Albania", "sq": "Shqipëri", "es": "Albania", "el": "Αλβανία"},
    "XK": {"en": "Kosovo", "sq": "Kosovë", "es": "Kosovo", "el": "Κοσσυφοπέδιο"},
    "MK": {"en": "North Macedonia", "sq": "Maqedonia e Veriut", "es": "Macedonia del Norte", "el": "Βόρεια Μακεδονία"},
}

TABLES: dict[str, dict[str, dict]] = {
    "status_labels": STATUS_LABELS,
    "phrases": PHRASES,
    "status_messages": STATUS_MESSAGES,
}

# Keys the English tables must carry; other languages are compared against English.
REQUIRED_KEYS: dict[str, frozenset[str]] = {
    "status_labels": frozenset(status.value for status in OrderStatus),
    "phrases": frozenset({
        "greeting", "status_updated", "delivery_address", "pickup_at", "dine_in_at", "total",
        "scheduled_time", "delivery_time", "pickup_time", "arrival_time", "thank_you",
    }),
    "status_messages": frozenset({
        "CONFIRMED", "PREPARING", "READY", "PICKED_UP", "OUT_FOR_DELIVERY", "DELIVERED",
    }),
}


def _resolve(entry, branches: tuple[str | None, ...]) -> str | None:
    if entry is None or isinstance(entry, str):
        return entry
    for branch in branches:
        if branch is not None and branch in entry:
            return entry[branch]
    return entry.get(DEFAULT_BRANCH)


def _lookup(table: dict, language: str, key: str, branches: tuple[str | None, ...] = ()) -> str | None:
    text = _resolve(table.get(language, {}).get(key), branches)
    if text is None and language != FALLBACK_LANGUAGE:
        text = _resolve(table[FALLBACK_LANGUAGE].get(key), branches)
    return text


def status_label(language: str, status: str, business_kind: str | None = None) -> str | None:
    """Display label for a status, None when the status has no label in any language."""
    return _lookup(STATUS_LABELS, language, status, (business_kind,))


def phrase(language: str, key: str) -> str:
    text = _lookup(PHRASES, language, key)
    if text is None:
        raise KeyError(key)
    return text


def status_message(
    language: str,
    status: str,
    order_type: str | None = None,
    business_kind: str | None = None,
) -> str | None:
    """Status-specific sentence, None for statuses that complete silently."""
    return _lookup(STATUS_MESSAGES, language, status, (order_type, business_kind))


def country_name(code: str, language: str) -> str:
    names = COUNTRY_NAMES.get(code.upper())
    if not names:
        return code
    return names.get(language) or names[FALLBACK_LANGUAGE]


def _flat_keys(entries: dict) -> set[str]:
    keys = set()
    for key, value in entries.items():
        if isinstance(value, dict):
            keys.update(f"{key}.{branch}" for branch in value)
        else:
            keys.add(key)
    return keys


def missing_translations() -> list[tuple[str, str, str]]:
    """(table, language, key) for every entry a language lacks relative to English."""
    gaps = []
    for table_name, table in TABLES.items():
        english = table[FALLBACK_LANGUAGE]
        for key in sorted(REQUIRED_KEYS[table_name] - set(english)):
            gaps.append((table_name, FALLBACK_LANGUAGE, key))

        canonical = _flat_keys(english)
        for language, entries in table.items():
            if language == FALLBACK_LANGUAGE:
                continue
            for key in sorted(canonical - _flat_keys(entries)):
                gaps.append((table_name, language, key))
    return gaps


def _check_tables() -> None:
    gaps = missing_translations()
    english_gaps = [gap for gap in gaps if gap[1] == FALLBACK_LANGUAGE]
    if english_gaps:
        raise RuntimeError(f"English message tables are incomplete: {english_gaps}")
    for table_name, language, key in gaps:
        logger.warning("Missing %s translation for %s: %s (English used)", table_name, language, key)


_check_tables()
