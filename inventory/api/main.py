"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from inventory import __version__
from inventory.api.items import router as items_router
from inventory.api.support import router as support_router
from inventory.utils.feature_flags import web_ui_enabled

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

STATIC_DIR = Path(__file__).resolve().parent.parent / "web" / "static"

app = FastAPI(
    title="Inventory Manager",
    description="API and web UI for listing, searching, adding, editing and removing inventory items.",
    version=__version__,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:8080").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(items_router)
app.include_router(support_router)

if web_ui_enabled():
    from inventory.web.views import router as web_router

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(web_router)
else:
    logger.info("web_ui_disabled: serving API routes only")
