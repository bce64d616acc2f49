# main.py

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grain.config import load_settings
from grain.routers import coach, plans

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ---------- Boot ----------

# FastAPI app (create ONCE)
app = FastAPI(title="Grain API")

allow_origins = settings.cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans.router)
app.include_router(coach.router)

if not settings.openai_api_key:
    logger.warning("OPENAI_API_KEY is not set; /api/ask-grain will answer 503")


# ---------- Probes ----------
@app.get("/")
def root():
    return {"ok": True, "service": "grain-api"}


@app.get("/health")
def health():
    return {"ok": True}
