"""
Onboarding Strategy API

FastAPI application serving the strategy endpoint plus service status routes.
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

load_dotenv('.env.local')

SERVICE_NAME = "Onboarding Strategy API"
SERVICE_VERSION = "1.0.0"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging() -> Path:
    """
    Send logs to the console and to a rotating file under LOG_DIR

    Returns:
        Path of the active log file
    """
    logs_dir = Path(os.getenv('LOG_DIR', Path(__file__).parent.parent / 'logs'))
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / 'backend.log'

    formatter = logging.Formatter(LOG_FORMAT)
    rotating = RotatingFileHandler(log_path, maxBytes=10_000_000, backupCount=5, encoding='utf-8')
    stream = logging.StreamHandler()
    for handler in (rotating, stream):
        handler.setFormatter(formatter)

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), handlers=[rotating, stream])
    return log_path


log_file = configure_logging()
logger = logging.getLogger(__name__)
logger.info(f"📝 Writing logs to {log_file}")

from app.routes import strategy
from core.config import Config


def report_credentials():
    """Log which external credentials are available at startup"""
    credentials = Config.validate_environment()

    if credentials['anthropic']:
        logger.info("✅ Anthropic API key resolved")
    else:
        logger.error("❌ No Anthropic API key found (ANTHROPIC_API_KEY or CLI credentials)")

    if not credentials['deepgram']:
        logger.warning("⚠️ DEEPGRAM_API_KEY not set - uploaded recordings cannot be transcribed")
    if not credentials['fathom']:
        logger.warning("⚠️ FATHOM_API_KEY not set - Fathom links fall back to page scraping")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {SERVICE_NAME} starting ({os.getenv('ENVIRONMENT', 'development')})")
    report_credentials()
    yield
    logger.info(f"👋 {SERVICE_NAME} stopped")


app = FastAPI(
    title=SERVICE_NAME,
    description="Turns client onboarding material into a structured marketing strategy",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(strategy.router, prefix="/api", tags=["strategy"])


@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "online"
    }


@app.get("/health")
async def health_check():
    """Report credential availability without exposing the keys"""
    return {
        "status": "healthy",
        "credentials": Config.validate_environment(),
        "environment": os.getenv('ENVIRONMENT', 'development')
    }


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled exception on {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "message": str(exc),
            "path": str(request.url)
        }
    )
