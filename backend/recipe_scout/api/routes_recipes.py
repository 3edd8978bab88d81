# recipe_scout/api/routes_recipes.py
# Recipe search: sanitized params -> rate limit -> search service (cache / scrape / demo)

from __future__ import annotations
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from recipe_scout.core.deps import get_search_service, rate_limit
from recipe_scout.models.schemas import RecipeResponse, SearchParams
from recipe_scout.services.recipe_service import RecipeSearchService

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["recipes"])


@router.post("/recipes", response_model=RecipeResponse, dependencies=[Depends(rate_limit)])
async def find_recipes(
    params: SearchParams,
    service: RecipeSearchService = Depends(get_search_service),
) -> RecipeResponse:
    # SearchParams already stripped tags, collapsed whitespace and clipped every field
    log.info("POST /api/recipes ingredients=%r time=%s cuisine=%s strictness=%s",
             params.ingredients, params.timeAvailable or "any",
             params.cuisine or "any", params.strictness)
    result = await service.search(params)
    log.info("returning %d recipes (source: %s)", len(result.recipes), result.source)
    return result


@router.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
