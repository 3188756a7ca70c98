"""
jobbot/main.py

Purpose: Application entry point (webhook mode)

- Initializes FastAPI app
- Loads configuration and logging
- Opens stores, creates the Telegram client and the dispatcher
- Registers the webhook with Telegram
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from jobbot.core.config import settings, validate_settings
from jobbot.core.errors import add_exception_handlers
from jobbot.core.logging import setup_logging, get_logger
from jobbot.db.factory import open_stores
from jobbot.flow.dispatcher import Dispatcher
from jobbot.services.telegram_service import TelegramService
from jobbot.api import webhook
from utils.constants import WEBHOOK_ROUTE

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting JobBot application...")
    
    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")
        
        record_store, job_store = await open_stores()
        telegram = TelegramService()
        
        app.state.record_store = record_store
        app.state.job_store = job_store
        app.state.telegram = telegram
        app.state.dispatcher = Dispatcher(record_store, telegram, bot_name=settings.BOT_NAME)
        
        if settings.RUN_MODE == "webhook":
            webhook_url = f"{settings.WEBHOOK_URL.rstrip('/')}{settings.API_PREFIX}{WEBHOOK_ROUTE}"
            await telegram.set_webhook(webhook_url, settings.WEBHOOK_SECRET)
            logger.info(f"✅ Webhook registered: {webhook_url}")
        
        logger.info("🎉 JobBot application started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        
    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise
    
    yield  # Application runs here
    
    logger.info("🛑 Shutting down JobBot application...")
    
    try:
        await app.state.telegram.close()
        await app.state.record_store.close()
        await app.state.job_store.close()
        logger.info("👋 JobBot application shut down successfully")
        
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="JobBot",
    description="Telegram onboarding bot for job preferences and channels",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

add_exception_handlers(app)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    
    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )
    
    return response


app.include_router(webhook.router, prefix=settings.API_PREFIX, tags=["Webhook"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "JobBot API",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "mode": settings.RUN_MODE
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint.
    Checks that the record store is usable.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {}
    }
    
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        health_status["checks"]["store"] = "not_initialized"
        health_status["status"] = "unhealthy"
    else:
        store_healthy = await store.check_health()
        health_status["checks"]["store"] = "healthy" if store_healthy else "unhealthy"
        if not store_healthy:
            health_status["status"] = "degraded"
    
    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - indicates if app is ready to receive updates.
    """
    if getattr(request.app.state, "dispatcher", None) is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "dispatcher_unavailable"}
        )
    return {"status": "ready"}


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "jobbot.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
