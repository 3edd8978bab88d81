# recipe_scout/api/routes_scrapers.py
# Scraper diagnostics (read-only) and a single-adapter debug run
# GET  /api/scraper-status            -> circuits, per-adapter metrics, recent runs, stats
# POST /api/scrapers/{site}/run?q=... -> one adapter's ScraperResult (no tiers, no cache)

from fastapi import APIRouter, Depends, HTTPException, Query

from recipe_scout.core.deps import get_search_service
from recipe_scout.models.schemas import MAX_INGREDIENTS_LEN, ScraperResult, sanitize_text
from recipe_scout.services.recipe_service import RecipeSearchService

router = APIRouter(prefix="/api", tags=["scrapers"])


@router.get("/scraper-status")
async def scraper_status(service: RecipeSearchService = Depends(get_search_service)):
    return service.status()


@router.post("/scrapers/{site}/run", response_model=ScraperResult)
async def run_scraper(
    site: str,
    q: str = Query(..., description="search query, e.g. 'chicken, garlic'"),
    service: RecipeSearchService = Depends(get_search_service),
):
    query = sanitize_text(q, MAX_INGREDIENTS_LEN)
    if not query:
        raise HTTPException(status_code=422, detail="Query is required.")
    result = await service.run_single(site, query)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Unknown scraper: {site}")
    return result
