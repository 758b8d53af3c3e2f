# =============================================================================
# 🧠 QR-Code Generator – QRVerse
# -----------------------------------------------------------------------------
# Rendert QR-Codes als PNG (Pillow) oder SVG (qrcode-SVG-Factory).
# Nichts wird auf die Platte geschrieben; Rückgabe sind immer Bytes.
# =============================================================================

from __future__ import annotations
from typing import Tuple
from io import BytesIO
import logging
import qrcode
import qrcode.image.styledpil
import qrcode.image.styles.moduledrawers as mod
import qrcode.image.styles.colormasks as mask
import qrcode.image.svg
from qrcode.exceptions import DataOverflowError

from utils.qr_config import (
    OUTPUT_FORMATS,
    QRConfigError,
    QR_DEFAULT_STYLE,
    parse_color,
    parse_error_level,
)

# ---------------------------------------------------------------------------
# ⚙️ Logging konfigurieren
# ---------------------------------------------------------------------------
logger = logging.getLogger(__name__)


def _build_qr(payload: str, box_size: int, border: int, error: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        version=None,
        error_correction=parse_error_level(error),
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except ValueError as e:
        # qrcode 8.x meldet den Überlauf als ValueError("Invalid version ...")
        raise DataOverflowError(str(e)) from e
    return qr


# ---------------------------------------------------------------------------
# 🧩 PNG
# ---------------------------------------------------------------------------

def generate_qr_png(
    payload: str,
    fg: str = QR_DEFAULT_STYLE["fg"],
    bg: str = QR_DEFAULT_STYLE["bg"],
    box_size: int = QR_DEFAULT_STYLE["box_size"],
    border: int = QR_DEFAULT_STYLE["border"],
    error: str = QR_DEFAULT_STYLE["error"],
    module_style: str = "square",
) -> bytes:
    """
    Generiert einen QR-Code als PNG mit Farb- und Moduloptionen.
    Gibt die Bilddaten als Bytes zurück.
    """

    # === 1️⃣ QR-Code Basis ===
    qr = _build_qr(payload, box_size, border, error)

    # === 2️⃣ Modul-Stil ===
    module_drawer = {
        "square": mod.SquareModuleDrawer(),
        "rounded": mod.RoundedModuleDrawer(),
        "dots": mod.CircleModuleDrawer(),
        "soft": mod.GappedSquareModuleDrawer(),
    }.get(module_style, mod.SquareModuleDrawer())

    # === 3️⃣ Farbmaske ===
    color_mask = mask.SolidFillColorMask(
        front_color=parse_color(fg),
        back_color=parse_color(bg),
    )

    # === 4️⃣ Bild erzeugen ===
    img = qr.make_image(
        image_factory=qrcode.image.styledpil.StyledPilImage,
        module_drawer=module_drawer,
        color_mask=color_mask,
    )

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    data = buffer.getvalue()
    logger.debug(f"✅ PNG erzeugt ({len(data)} Bytes, Version {qr.version})")
    return data


# ---------------------------------------------------------------------------
# 🧩 SVG
# ---------------------------------------------------------------------------

def _svg_factory(fg: str, bg: str) -> type:
    # Farben als Klassenattribute der SVG-Factory
    return type(
        "QRVerseSvgImage",
        (qrcode.image.svg.SvgPathFillImage,),
        {
            "background": bg,
            "QR_PATH_STYLE": {
                "fill": fg,
                "fill-opacity": "1",
                "fill-rule": "nonzero",
                "stroke": "none",
            },
        },
    )


def generate_qr_svg(
    payload: str,
    fg: str = QR_DEFAULT_STYLE["fg"],
    bg: str = QR_DEFAULT_STYLE["bg"],
    box_size: int = QR_DEFAULT_STYLE["box_size"],
    border: int = QR_DEFAULT_STYLE["border"],
    error: str = QR_DEFAULT_STYLE["error"],
) -> bytes:
    """Generiert einen QR-Code als SVG (Vektor, z. B. für EPS-Export im Frontend)."""
    parse_color(fg)
    parse_color(bg)
    qr = _build_qr(payload, box_size, border, error)
    img = qr.make_image(image_factory=_svg_factory(fg, bg))

    buffer = BytesIO()
    img.save(buffer)
    data = buffer.getvalue()
    logger.debug(f"✅ SVG erzeugt ({len(data)} Bytes, Version {qr.version})")
    return data


# ---------------------------------------------------------------------------
# 🚦 Dispatcher
# ---------------------------------------------------------------------------

def render_qr(payload: str, fmt: str = "png", **style) -> Tuple[bytes, str]:
    """Rendert im gewünschten Format; gibt (bytes, media_type) zurück."""
    fmt = (fmt or "png").lower()
    media_type = OUTPUT_FORMATS.get(fmt)
    if media_type is None:
        raise QRConfigError(f"Unsupported format: {fmt!r} (use {', '.join(OUTPUT_FORMATS)})")

    if fmt == "svg":
        style.pop("module_style", None)
        return generate_qr_svg(payload, **style), media_type
    return generate_qr_png(payload, **style), media_type
