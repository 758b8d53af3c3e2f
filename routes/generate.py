# routes/generate.py
# =============================================================================
# 🚀 QR-Render-Route (QRVerse)
# 🛡️ Jeder Inhalt läuft vor dem Rendern durch die Sicherheitsprüfung
# =============================================================================

from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from qrcode.exceptions import DataOverflowError

from utils.input_safety import validate
from utils.qr_config import QRConfigError, QR_MAX_PAYLOAD, get_qr_style
from utils.qr_generator import render_qr

logger = logging.getLogger(__name__)

router = APIRouter(tags=["QR Render"])


@router.get("/generate")
def generate_qr(
    data: str = Query(..., description="QR-Inhalt, fertig vom Frontend zusammengebaut"),
    input_type: str = Query("URL", alias="inputType"),
    fg: Optional[str] = Query(None),
    bg: Optional[str] = Query(None),
    box_size: Optional[int] = Query(None),
    border: Optional[int] = Query(None),
    error: Optional[str] = Query(None),
    module_style: Optional[str] = Query(None),
    fmt: str = Query("png"),
    verified: bool = Query(False),
) -> Response:
    """
    Erstellt einen QR-Code als PNG oder SVG.
    Blockierte Inhalte → 422 mit dem Verdict als Detail.
    """
    verdict = validate(input_type, data, verified)
    if verdict.blocked:
        logger.warning(f"⛔ QR blockiert ({verdict.reason_code.value}) für Typ {input_type!r}")
        raise HTTPException(status_code=422, detail=verdict.to_dict())
    if verdict.needs_warning:
        logger.info(f"⚠️ QR mit Warnung ({verdict.reason_code.value}) für Typ {input_type!r}")

    if len(data.encode("utf-8")) > QR_MAX_PAYLOAD:
        raise HTTPException(status_code=413, detail=f"Content exceeds {QR_MAX_PAYLOAD} bytes")

    try:
        style = get_qr_style(
            fg=fg,
            bg=bg,
            box_size=box_size,
            border=border,
            error=error,
            module_style=module_style,
        )
        image, media_type = render_qr(data, fmt, **style)
    except QRConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataOverflowError:
        raise HTTPException(
            status_code=413,
            detail="Content is too long for the selected error correction level",
        )

    return Response(
        content=image,
        media_type=media_type,
        headers={
            "X-QR-Validation-Status": verdict.status.value,
            "X-QR-Validation-Reason": verdict.reason_code.value,
        },
    )
