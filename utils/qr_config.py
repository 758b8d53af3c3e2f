"""
utils/qr_config.py
────────────────────────────────────────────
Render-Konfiguration für das QRVerse-Backend.

Definiert Standardwerte (Farben, Modulgröße, Rand,
Fehlerkorrektur) und prüft die Parameter, die das
Frontend an /generate schickt. Standardwerte lassen
sich per Umgebungsvariable überschreiben.
────────────────────────────────────────────
"""

from __future__ import annotations
import os
from typing import Any, Dict, Optional, Tuple

from PIL import ImageColor
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q


class QRConfigError(ValueError):
    """Ungültiger Render-Parameter."""


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ─────────────────────────────────────────────
# 🔢 Fehlerkorrektur & Formate
# ─────────────────────────────────────────────
ERROR_LEVELS: Dict[str, int] = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

MODULE_STYLES = ("square", "rounded", "dots", "soft")

OUTPUT_FORMATS: Dict[str, str] = {
    "png": "image/png",
    "svg": "image/svg+xml",
}

# ─────────────────────────────────────────────
# 📏 Grenzen
# ─────────────────────────────────────────────
QR_MAX_BOX_SIZE = _env_int("QR_MAX_BOX_SIZE", 40)
QR_MAX_BORDER = _env_int("QR_MAX_BORDER", 20)
# Byte-Kapazität von Version 40 bei Level L
QR_MAX_PAYLOAD = _env_int("QR_MAX_PAYLOAD", 2953)

# ─────────────────────────────────────────────
# 🎨 STANDARDDESIGN (Basis)
# ─────────────────────────────────────────────
QR_DEFAULT_STYLE: Dict[str, Any] = {
    "fg": os.getenv("QR_DEFAULT_FG", "#000000"),
    "bg": os.getenv("QR_DEFAULT_BG", "#FFFFFF"),
    "box_size": _env_int("QR_DEFAULT_BOX_SIZE", 10),
    "border": _env_int("QR_DEFAULT_BORDER", 4),
    "error": os.getenv("QR_DEFAULT_ERROR", "H"),
    "module_style": "square",
}


# ─────────────────────────────────────────────
# 🧪 Prüfungen
# ─────────────────────────────────────────────
def parse_color(value: str) -> Tuple[int, int, int]:
    """'#RRGGBB', '#RGB' oder Farbname → RGB-Tupel."""
    try:
        rgb = ImageColor.getrgb(value.strip())
    except (ValueError, AttributeError):
        raise QRConfigError(f"Invalid colour: {value!r}")
    return rgb[:3]


def parse_error_level(value: str) -> int:
    level = ERROR_LEVELS.get(str(value).strip().upper())
    if level is None:
        raise QRConfigError(f"Invalid error correction level: {value!r} (use L, M, Q or H)")
    return level


def _bounded(name: str, value: Any, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise QRConfigError(f"{name} must be an integer")
    if not low <= number <= high:
        raise QRConfigError(f"{name} must be between {low} and {high}")
    return number


# ─────────────────────────────────────────────
# 🧠 FUNKTION: Stil zusammenführen
# ─────────────────────────────────────────────
def get_qr_style(
    fg: Optional[str] = None,
    bg: Optional[str] = None,
    box_size: Optional[int] = None,
    border: Optional[int] = None,
    error: Optional[str] = None,
    module_style: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Führt Anfrageparameter mit dem Standarddesign zusammen und prüft sie.
    Wirft QRConfigError bei ungültigen Werten.
    """
    style = dict(QR_DEFAULT_STYLE)
    overrides = {
        "fg": fg,
        "bg": bg,
        "box_size": box_size,
        "border": border,
        "error": error,
        "module_style": module_style,
    }
    style.update({k: v for k, v in overrides.items() if v is not None})

    parse_color(style["fg"])
    parse_color(style["bg"])
    parse_error_level(style["error"])
    style["error"] = str(style["error"]).strip().upper()
    style["box_size"] = _bounded("box_size", style["box_size"], 1, QR_MAX_BOX_SIZE)
    style["border"] = _bounded("border", style["border"], 0, QR_MAX_BORDER)
    if style["module_style"] not in MODULE_STYLES:
        raise QRConfigError(
            f"Invalid module_style: {style['module_style']!r} (use {', '.join(MODULE_STYLES)})"
        )
    return style
