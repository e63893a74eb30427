"""FastAPI application entrypoint"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from pocket_trader import __version__
from pocket_trader.config import settings
from pocket_trader.db import AsyncSessionLocal, close_db, init_db
from pocket_trader.api.routes import (
    alerts, auth, autotrade, favorites, goals, health, journal,
    notifications, paper_trading, push, realtime, signals, telegram,
)
from pocket_trader.services.alerts import PriceAlertWatcher
from pocket_trader.services.autotrade import get_autotrade_controller


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    # Startup
    logger.info("Starting up application...")
    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
    
    controller = get_autotrade_controller()
    await controller.restore()
    logger.info(f"Auto-trade relay restored (enabled: {controller.enabled})")
    
    watcher = None
    if settings.price_alert_check_enabled:
        watcher = PriceAlertWatcher(AsyncSessionLocal)
        watcher.start()
    
    yield
    
    # Shutdown
    logger.info("Shutting down application...")
    await controller.shutdown()
    if watcher is not None:
        await watcher.stop()
    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Failed to close database: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Trading signals, auto-trade relay and paper trading API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(telegram.router)
app.include_router(signals.router)
app.include_router(autotrade.router)
app.include_router(push.router)
app.include_router(alerts.router)
app.include_router(favorites.router)
app.include_router(journal.router)
app.include_router(goals.router)
app.include_router(paper_trading.router)
app.include_router(notifications.router)
app.include_router(realtime.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Pocket Trader API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "pocket_trader.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
