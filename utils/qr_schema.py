# utils/qr_schema.py
"""
Definiert die Formularfelder für jeden QRVerse-Eingabetyp.
Die Feldnamen entsprechen denen, die das Frontend sendet.
"""

from typing import Dict, Any, Optional


# ✅ Felder pro Eingabetyp
QR_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "URL": {
        "required": ["url"]
    },
    "Text": {
        "required": ["text"]
    },
    "Wi-Fi": {
        "required": ["ssid"],
        "optional": ["password", "encryption"]
    },
    "Email": {
        "required": ["emailTo"],
        "optional": ["subject", "body"]
    },
    "vCard": {
        "required": ["name"],
        "optional": ["phone", "email", "company"]
    },
    "Phone": {
        "required": ["phoneNumber"]
    },
    "SMS": {
        "required": ["smsNumber"],
        "optional": ["smsMessage"]
    },
    "Event": {
        "required": ["eventName", "eventStart"],
        "optional": ["eventLocation", "eventEnd", "eventDescription"]
    },
    "Geo": {
        "required": ["latitude", "longitude"],
        "optional": ["label"]
    },
    "UPI": {
        "required": ["pa", "pn"],
        "optional": ["am", "cu", "tn", "tr"]
    },
    "MECARD": {
        "required": ["fullName"],
        "optional": ["mePhone", "meEmail"]
    },
}

# 🔁 Schreibweisen, die ältere Clients schicken
_ALIASES: Dict[str, str] = {
    "wifi": "Wi-Fi",
    "tel": "Phone",
    "mail": "Email",
    "calendar": "Event",
    "location": "Geo",
}

_CANONICAL: Dict[str, str] = {name.lower(): name for name in QR_SCHEMAS}
_CANONICAL.update(_ALIASES)


def canonical_input_type(input_type: Optional[str]) -> Optional[str]:
    """Liefert den kanonischen Typnamen (z. B. 'wifi' → 'Wi-Fi') oder None."""
    if not input_type:
        return None
    return _CANONICAL.get(input_type.strip().lower())
