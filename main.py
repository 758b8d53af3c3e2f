# =============================================================================
# 🚀 QRVerse Backend – Hauptapplikation (main.py)
# =============================================================================

from __future__ import annotations
import os
import logging
from pathlib import Path
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# -------------------------------------------------------------------------
# 1️⃣ .env laden (muss ganz oben sein!)
# -------------------------------------------------------------------------
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)

# -------------------------------------------------------------------------
# 2️⃣ Logging
# -------------------------------------------------------------------------
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("qrverse")

APP_VERSION = "1.0"

# -------------------------------------------------------------------------
# 3️⃣ FastAPI App
# -------------------------------------------------------------------------
app = FastAPI(title=os.getenv("APP_TITLE", "QRVerse Backend"), version=APP_VERSION)

# -------------------------------------------------------------------------
# 4️⃣ CORS – das Frontend läuft auf einer eigenen Domain
# -------------------------------------------------------------------------
_origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins or ["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-QR-Validation-Status", "X-QR-Validation-Reason"],
)

# -------------------------------------------------------------------------
# 5️⃣ Routen laden
# -------------------------------------------------------------------------
from routes import api
from routes import generate

app.include_router(generate.router)
app.include_router(api.router)

logger.info(f"🧩 QRVerse Backend gestartet (CORS: {', '.join(_origins) or '*'})")


# -------------------------------------------------------------------------
# 6️⃣ Health
# -------------------------------------------------------------------------
@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}

