from fastapi import FastAPI, Query
from typing import Optional
import logging

from papersync.events.web_observers import start as start_event_observers, get_events as get_web_events

# Routers
from papersync.api.routes import scanners, settings, sync

# Logging
logger = logging.getLogger("papersync_app")

app = FastAPI(title="PaperSync API")

# Include routers
app.include_router(sync.router)
app.include_router(settings.router)
app.include_router(scanners.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for the web event feed when the app starts."""
    start_event_observers()
    logger.info("Web observers for sync and scanner events started")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/events")
def api_events(since: Optional[int] = Query(default=None, ge=0)):
    """Sync and scan events newer than 'since', for UI polling."""
    return get_web_events(since)
