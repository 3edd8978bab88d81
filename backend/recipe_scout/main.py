# recipe_scout/main.py
# FastAPI app setup and routers
# Run: uvicorn recipe_scout.main:app --app-dir backend --reload

from __future__ import annotations
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recipe_scout.api.routes_recipes import router as recipes_router    # search + health
from recipe_scout.api.routes_scrapers import router as scrapers_router  # diagnostics / single adapter run
from recipe_scout.core.config import settings
from recipe_scout.core.logging_utils import setup_logging
from recipe_scout.core.rate_limit import SlidingWindowLimiter
from recipe_scout.services.recipe_service import RecipeSearchService

log = logging.getLogger(__name__)

app = FastAPI(title="Recipe Scout - API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging(settings.log_level, settings.log_file)
    # one service per process: circuits, metrics, cache and in-flight map are shared state
    app.state.search_service = RecipeSearchService.create(settings)
    app.state.rate_limiter = SlidingWindowLimiter(
        max_requests=settings.rate_limit_max,
        window_s=settings.rate_limit_window_s,
    )
    log.info("startup: %d scrapers ready", len(app.state.search_service.orchestrator.adapters))


@app.on_event("shutdown")
async def on_shutdown() -> None:
    service = getattr(app.state, "search_service", None)
    if service is not None:
        await service.aclose()
    log.info("shutdown: http client closed")


@app.get("/")
async def root():
    return {"status": "ok"}


# route prefixes are defined in each router
app.include_router(recipes_router)
app.include_router(scrapers_router)
