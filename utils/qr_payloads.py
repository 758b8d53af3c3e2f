"""
utils/qr_payloads.py
────────────────────────────────────────────
Baut den QR-Inhalt (Payload-String) aus den Formularfeldern.
- Unterstützt: URL, Text, Wi-Fi, E-Mail, vCard, Telefon, SMS,
  Event, Geo, UPI, MECARD
- Fehlende Felder werden als leere Strings eingesetzt
────────────────────────────────────────────
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import quote
import logging

from utils.qr_schema import QR_SCHEMAS, canonical_input_type

logger = logging.getLogger(__name__)


class UnknownInputType(ValueError):
    """Eingabetyp ist nicht bekannt."""


def _f(fields: Mapping[str, Any], key: str) -> str:
    value = fields.get(key)
    return "" if value is None else str(value)


def _uri_component(value: str) -> str:
    # wie encodeURIComponent im Browser
    return quote(value, safe="-_.!~*'()")


def _url(fields: Mapping[str, Any]) -> str:
    return _f(fields, "url")


def _text(fields: Mapping[str, Any]) -> str:
    return _f(fields, "text")


def _wifi(fields: Mapping[str, Any]) -> str:
    encryption = _f(fields, "encryption") or "WPA"
    return f"WIFI:S:{_f(fields, 'ssid')};T:{encryption};P:{_f(fields, 'password')};;"


def _email(fields: Mapping[str, Any]) -> str:
    return (
        f"mailto:{_f(fields, 'emailTo')}"
        f"?subject={_uri_component(_f(fields, 'subject'))}"
        f"&body={_uri_component(_f(fields, 'body'))}"
    )


def _vcard(fields: Mapping[str, Any]) -> str:
    return "\n".join([
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{_f(fields, 'name')}",
        f"ORG:{_f(fields, 'company')}",
        f"TEL:{_f(fields, 'phone')}",
        f"EMAIL:{_f(fields, 'email')}",
        "END:VCARD",
    ])


def _phone(fields: Mapping[str, Any]) -> str:
    return f"tel:{_f(fields, 'phoneNumber')}"


def _sms(fields: Mapping[str, Any]) -> str:
    return f"SMSTO:{_f(fields, 'smsNumber')}:{_f(fields, 'smsMessage')}"


def _event(fields: Mapping[str, Any]) -> str:
    return "\n".join([
        "BEGIN:VEVENT",
        f"SUMMARY:{_f(fields, 'eventName')}",
        f"LOCATION:{_f(fields, 'eventLocation')}",
        f"DTSTART:{_f(fields, 'eventStart')}",
        f"DTEND:{_f(fields, 'eventEnd')}",
        f"DESCRIPTION:{_f(fields, 'eventDescription')}",
        "END:VEVENT",
    ])


def _geo(fields: Mapping[str, Any]) -> str:
    payload = f"geo:{_f(fields, 'latitude')},{_f(fields, 'longitude')}"
    label = _f(fields, "label")
    if label:
        payload += f"?q={label}"
    return payload


def _upi(fields: Mapping[str, Any]) -> str:
    payload = f"upi://pay?pa={_f(fields, 'pa')}&pn={_f(fields, 'pn')}"
    for key in ("am", "cu", "tn", "tr"):
        value = _f(fields, key)
        if value:
            payload += f"&{key}={value}"
    return payload


def _mecard(fields: Mapping[str, Any]) -> str:
    return (
        f"MECARD:N:{_f(fields, 'fullName')};"
        f"TEL:{_f(fields, 'mePhone')};"
        f"EMAIL:{_f(fields, 'meEmail')};;"
    )


PAYLOAD_BUILDERS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "URL": _url,
    "Text": _text,
    "Wi-Fi": _wifi,
    "Email": _email,
    "vCard": _vcard,
    "Phone": _phone,
    "SMS": _sms,
    "Event": _event,
    "Geo": _geo,
    "UPI": _upi,
    "MECARD": _mecard,
}


def build_payload(input_type: Optional[str], fields: Optional[Mapping[str, Any]] = None) -> str:
    """
    Erstellt den QR-Inhalt für den angegebenen Eingabetyp.
    Wirft UnknownInputType, wenn der Typ nicht unterstützt wird.
    """
    canonical = canonical_input_type(input_type)
    if canonical is None:
        logger.warning(f"⚠️ Unbekannter Eingabetyp: {input_type!r}")
        raise UnknownInputType(f"Unknown input type: {input_type!r}")
    return PAYLOAD_BUILDERS[canonical](fields or {})


def missing_fields(input_type: Optional[str], fields: Optional[Mapping[str, Any]] = None) -> List[str]:
    """Pflichtfelder, die leer sind oder fehlen."""
    canonical = canonical_input_type(input_type)
    if canonical is None:
        raise UnknownInputType(f"Unknown input type: {input_type!r}")
    fields = fields or {}
    return [
        key for key in QR_SCHEMAS[canonical].get("required", [])
        if not _f(fields, key).strip()
    ]
