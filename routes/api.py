from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from utils.input_safety import validate
from utils.qr_payloads import UnknownInputType, build_payload, missing_fields
from utils.qr_schema import canonical_input_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Public API"])


class ValidateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_type: str = Field(default="URL", alias="inputType")
    content: str = Field(default="")
    is_verified_user: bool = Field(default=False, alias="isVerifiedUser")


class PayloadIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_type: str = Field(..., alias="inputType")
    fields: dict[str, Any] = Field(default_factory=dict)
    is_verified_user: bool = Field(default=False, alias="isVerifiedUser")


@router.post("/validate")
def validate_content(body: ValidateIn) -> dict[str, str]:
    """Prüft einen fertigen QR-Inhalt (z. B. bei jeder Eingabe im Formular)."""
    return validate(body.input_type, body.content, body.is_verified_user).to_dict()


@router.post("/payload")
def build_and_validate(body: PayloadIn) -> dict[str, Any]:
    """Baut den QR-Inhalt aus den Formularfeldern und prüft ihn direkt."""
    try:
        content = build_payload(body.input_type, body.fields)
        missing = missing_fields(body.input_type, body.fields)
    except UnknownInputType as e:
        raise HTTPException(status_code=400, detail=str(e))

    verdict = validate(canonical_input_type(body.input_type), content, body.is_verified_user)
    if verdict.blocked:
        logger.info(f"⛔ Payload blockiert ({verdict.reason_code.value}) für Typ {body.input_type!r}")
    return {
        "content": content,
        "missing": missing,
        "verdict": verdict.to_dict(),
    }
