# techmarket/main.py

import os
import multiprocessing
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from techmarket.config import settings
from techmarket.utils.log import Log
from techmarket.utils.database import init_db
from techmarket.middleware.db_middleware import DBSessionMiddleware

# --- environment ---
load_dotenv()

# --- sync logger for early boot ---
boot_log = Log()
if os.environ.get("RUN_MAIN") == "true" or multiprocessing.current_process().name == "MainProcess":
    boot_log.log_info_sync(target="startup", message="main.py imports done")

# ────────────── Lifespan ──────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    boot_log.log_info_sync(target="startup", message="lifespan: startup")

    seeded = await init_db()
    boot_log.log_info_sync(target="startup", message="Database ready", data={"seeded_products": seeded})

    boot_log.log_info_sync(
        target="startup",
        message="Integrations",
        data={
            "payment": "live" if settings.payment_live else "mock",
            "mail": "enabled" if settings.mail_enabled else "disabled",
            "signature_check": bool(settings.PAYMENT_SIGNATURE_SECRET),
        },
    )

    app.state.log = Log()
    await app.state.log.log_info(target="startup", message="Async Log ready")

    yield

    # shutdown
    await app.state.log.log_info(target="shutdown", message="Stopping application")
    await app.state.log.shutdown()
    boot_log.log_info_sync(target="shutdown", message="Log closed")

# ────────────── FastAPI application ──────────────
app = FastAPI(title=f"{settings.STORE_NAME} API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# request.state.db for every request
app.add_middleware(DBSessionMiddleware)

@app.get("/api/health")
def health():
    return {
        "name": settings.STORE_NAME,
        "payment": "live" if settings.payment_live else "mock",
        "mail": "enabled" if settings.mail_enabled else "disabled",
    }

# ────────────── Routers ──────────────
from techmarket.routes import product, payment, ai

app.include_router(product.router, prefix="/api/products", tags=["catalog"])
app.include_router(payment.router, prefix="/api", tags=["checkout"])
app.include_router(ai.router, prefix="/api/ai", tags=["ai"])

# ────────────── Built client ──────────────
# mounted last so /api routes win
if os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="client")

# ────────────── uvicorn ──────────────
if __name__ == "__main__":
    boot_log.log_info_sync(target="startup", message="Starting uvicorn")
    uvicorn.run(
        "techmarket.main:app",
        host="0.0.0.0",
        port=3000,
        log_level="info",
    )
