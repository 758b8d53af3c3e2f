# =============================================================================
# 🛡️ utils/input_safety.py
# -----------------------------------------------------------------------------
# Sicherheitsprüfung für QR-Inhalte (QRVerse)
# Klassifiziert einen Inhalt als ok / warn / block, bevor ein QR-Code
# erzeugt oder in der Vorschau angezeigt wird.
# =============================================================================

from __future__ import annotations
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import SplitResult, unquote, urlsplit

import idna


# ---------------------------------------------------------------------------
# 🏷️ Verdict
# ---------------------------------------------------------------------------

class Status(str, Enum):
    OK = "ok"
    WARN = "warn"
    BLOCK = "block"

    @property
    def severity(self) -> int:
        """0 = ok, 1 = warn, 2 = block."""
        return _SEVERITY[self]


_SEVERITY: Dict[Status, int] = {Status.OK: 0, Status.WARN: 1, Status.BLOCK: 2}


class ReasonCode(str, Enum):
    EMPTY = "EMPTY"
    UNSAFE_PROTOCOL = "UNSAFE_PROTOCOL"
    RISKY_PROTOCOL = "RISKY_PROTOCOL"
    EXECUTABLE = "EXECUTABLE"
    EXECUTABLE_HIDDEN = "EXECUTABLE_HIDDEN"
    ARCHIVE = "ARCHIVE"
    MACRO_DOC = "MACRO_DOC"
    PUNYCODE_DOMAIN = "PUNYCODE_DOMAIN"
    SHORTENER = "SHORTENER"
    HTTP = "HTTP"
    SAFE = "SAFE"
    INVALID = "INVALID"


@dataclass(frozen=True)
class Verdict:
    status: Status
    reason_code: ReasonCode
    message: str

    @property
    def blocked(self) -> bool:
        return self.status is Status.BLOCK

    @property
    def needs_warning(self) -> bool:
        return self.status is Status.WARN

    @property
    def severity(self) -> int:
        return self.status.severity

    def to_dict(self) -> Dict[str, str]:
        return {
            "status": self.status.value,
            "reasonCode": self.reason_code.value,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# 📋 Regeltabellen
# ---------------------------------------------------------------------------

NON_URL_INPUT_TYPES = frozenset({
    "text", "wi-fi", "email", "vcard", "phone",
    "sms", "event", "geo", "upi", "mecard",
})

UNSAFE_SCHEMES: Tuple[str, ...] = (
    "javascript:", "data:", "file:", "vbscript:", "about:", "filesystem:",
)

RISKY_SCHEMES: Tuple[str, ...] = (
    "ftp:", "telnet:", "ssh:", "mms:", "rtsp:", "magnet:",
)

BLOCKED_EXTENSIONS = frozenset({
    "exe", "msi", "bat", "cmd", "vbs", "scr", "dll", "com", "jar", "ps1", "sh",
    "apk", "aab", "app", "dmg", "pkg", "deb", "rpm", "img", "bin", "crx", "xpi",
})

# Teilmenge für die Suche im ganzen String: Endungen wie .com, .app oder .sh
# sind zugleich TLDs und würden jede normale Domain treffen.
HIDDEN_EXECUTABLE_EXTENSIONS = frozenset({
    "exe", "msi", "bat", "cmd", "vbs", "scr", "dll", "jar", "ps1",
    "apk", "aab", "dmg", "pkg", "deb", "rpm", "img", "bin", "crx", "xpi",
})

ARCHIVE_EXTENSIONS = frozenset({
    "zip", "rar", "7z", "tar", "tgz", "gz", "bz2", "xz", "iso",
})

MACRO_DOC_EXTENSIONS = frozenset({"docm", "xlsm", "pptm"})

SHORTENER_DOMAINS = frozenset({
    "bit.ly", "t.co", "tinyurl.com", "goo.gl", "ow.ly",
    "buff.ly", "dlvr.it", "rebrand.ly", "cutt.ly",
})

MAX_DECODE_ROUNDS = 3

_EXTENSION_RE = re.compile(r"\.([a-z0-9]+)$", re.IGNORECASE)
_HIDDEN_EXECUTABLE_RE = re.compile(
    r"\.(?:%s)(?![a-z])" % "|".join(sorted(HIDDEN_EXECUTABLE_EXTENSIONS)),
    re.IGNORECASE,
)
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9a-f]{2})", re.IGNORECASE)
_URL_LIKE_RE = re.compile(r"^(?:https?|ftp)://", re.IGNORECASE)


# ---------------------------------------------------------------------------
# 🔧 Normalisierung & URL-Hilfen (liefern None statt Exceptions)
# ---------------------------------------------------------------------------

def percent_decode(value: str) -> Optional[str]:
    """Eine Runde Prozent-Dekodierung; None bei kaputter Escape-Sequenz."""
    if _MALFORMED_ESCAPE_RE.search(value):
        return None
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return None


def normalize(content: str) -> str:
    """
    Trimmt, verkleinert und dekodiert bis zu MAX_DECODE_ROUNDS mal.
    Schlägt eine Runde fehl, bleibt der zuletzt gültige Wert erhalten.
    """
    value = content.strip().lower()
    for _ in range(MAX_DECODE_ROUNDS):
        decoded = percent_decode(value)
        if decoded is None or decoded == value:
            break
        value = decoded
    return value.lower().replace("\x00", "")


def parse_url(value: str) -> Optional[SplitResult]:
    """Parst eine absolute URL; None, wenn kein Schema vorhanden oder ungültig."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts


def extract_extension(value: str) -> str:
    parts = parse_url(value)
    if parts is not None:
        path = parts.path
    else:
        path = re.split(r"[?#]", value, maxsplit=1)[0]
    match = _EXTENSION_RE.search(path)
    return match.group(1).lower() if match else ""


def ascii_hostname(parts: Optional[SplitResult]) -> str:
    """Hostname in ASCII-Form (IDN → xn--); leer, wenn keiner vorhanden."""
    if parts is None:
        return ""
    host = parts.hostname or ""
    if not host:
        return ""
    try:
        return idna.encode(host, uts46=True).decode("ascii").lower()
    except (idna.IDNAError, UnicodeError):
        return host.lower()


# ---------------------------------------------------------------------------
# 🧩 Regelkette (erste Regel mit Ergebnis gewinnt)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Candidate:
    input_type: str
    value: str
    extension: str
    hostname: str
    is_verified_user: bool


Rule = Callable[[_Candidate], Optional[Verdict]]


def _non_url_type(c: _Candidate) -> Optional[Verdict]:
    if c.input_type in NON_URL_INPUT_TYPES:
        return Verdict(Status.OK, ReasonCode.SAFE, "Content type is non-URL and safe.")
    return None


def _unsafe_scheme(c: _Candidate) -> Optional[Verdict]:
    if c.value.startswith(UNSAFE_SCHEMES):
        return Verdict(
            Status.BLOCK,
            ReasonCode.UNSAFE_PROTOCOL,
            "Blocked — unsafe URL scheme (javascript:, data:, file:, etc.) detected.",
        )
    return None


def _risky_scheme(c: _Candidate) -> Optional[Verdict]:
    if c.value.startswith(RISKY_SCHEMES):
        return Verdict(
            Status.WARN,
            ReasonCode.RISKY_PROTOCOL,
            "Warning — non-secure protocol detected (ftp, telnet, etc.).",
        )
    return None


def _hidden_executable(c: _Candidate) -> Optional[Verdict]:
    if c.extension in BLOCKED_EXTENSIONS:
        return None
    match = _HIDDEN_EXECUTABLE_RE.search(c.value)
    if match:
        return Verdict(
            Status.BLOCK,
            ReasonCode.EXECUTABLE_HIDDEN,
            f"Blocked — hidden executable file type ({match.group(0)}) detected inside the link.",
        )
    return None


def _executable(c: _Candidate) -> Optional[Verdict]:
    if c.extension in BLOCKED_EXTENSIONS:
        return Verdict(
            Status.BLOCK,
            ReasonCode.EXECUTABLE,
            f"Blocked — executable or installable file type (.{c.extension}) "
            "is not allowed for safety reasons.",
        )
    return None


def _archive(c: _Candidate) -> Optional[Verdict]:
    if c.extension not in ARCHIVE_EXTENSIONS:
        return None
    if c.is_verified_user:
        return Verdict(
            Status.WARN,
            ReasonCode.ARCHIVE,
            f"Archive link detected (.{c.extension}). "
            "Proceed with caution and share only with trusted users.",
        )
    return Verdict(
        Status.BLOCK,
        ReasonCode.ARCHIVE,
        f"Archive file (.{c.extension}) links are restricted to verified users for safety.",
    )


def _macro_doc(c: _Candidate) -> Optional[Verdict]:
    if c.extension in MACRO_DOC_EXTENSIONS:
        return Verdict(
            Status.WARN,
            ReasonCode.MACRO_DOC,
            f"Macro-enabled document (.{c.extension}) detected. "
            "These may contain embedded scripts. Verify file before sharing.",
        )
    return None


def _punycode(c: _Candidate) -> Optional[Verdict]:
    if c.hostname.startswith("xn--"):
        return Verdict(
            Status.WARN,
            ReasonCode.PUNYCODE_DOMAIN,
            f"Internationalized domain ({c.hostname}) detected. "
            "Check carefully for look-alike characters before sharing.",
        )
    return None


def _shortener(c: _Candidate) -> Optional[Verdict]:
    if c.hostname in SHORTENER_DOMAINS:
        return Verdict(
            Status.WARN,
            ReasonCode.SHORTENER,
            f"Shortened URL detected ({c.hostname}). Expand the link before generating a QR code.",
        )
    return None


def _plain_http(c: _Candidate) -> Optional[Verdict]:
    if c.value.startswith("http://"):
        return Verdict(
            Status.WARN,
            ReasonCode.HTTP,
            "Warning — non-secure HTTP link detected. Use HTTPS whenever possible.",
        )
    return None


def _url_like(c: _Candidate) -> Optional[Verdict]:
    if _URL_LIKE_RE.match(c.value) or c.value.startswith("https://"):
        return Verdict(
            Status.OK,
            ReasonCode.SAFE,
            "Looks good — this link appears safe for QR generation.",
        )
    return None


RULES: Tuple[Rule, ...] = (
    _non_url_type,
    _unsafe_scheme,
    _risky_scheme,
    _hidden_executable,
    _executable,
    _archive,
    _macro_doc,
    _punycode,
    _shortener,
    _plain_http,
    _url_like,
)

EMPTY_VERDICT = Verdict(
    Status.BLOCK, ReasonCode.EMPTY, "Please enter content to generate a QR code."
)
INVALID_VERDICT = Verdict(
    Status.BLOCK,
    ReasonCode.INVALID,
    "Invalid or unrecognized input. Please enter a valid URL or text.",
)


# ---------------------------------------------------------------------------
# 🚦 Einstiegspunkt
# ---------------------------------------------------------------------------

def validate(input_type: Any, content: Any, is_verified_user: bool = False) -> Verdict:
    """
    Prüft einen QR-Inhalt vor der Erzeugung.

    Gibt immer ein Verdict zurück, auch für kaputte Eingaben:
    - block → QR-Code darf nicht erzeugt werden
    - warn  → erzeugen, aber Hinweis anzeigen
    - ok    → ohne Hinweis erzeugen
    """
    if not isinstance(content, str) or not content.strip():
        return EMPTY_VERDICT

    value = normalize(content)
    candidate = _Candidate(
        input_type=input_type.strip().lower() if isinstance(input_type, str) else "",
        value=value,
        extension=extract_extension(value),
        hostname=ascii_hostname(parse_url(value)),
        is_verified_user=bool(is_verified_user),
    )

    for rule in RULES:
        verdict = rule(candidate)
        if verdict is not None:
            return verdict
    return INVALID_VERDICT


# Name aus dem Frontend
validate_input_safety = validate
