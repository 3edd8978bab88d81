# Shared dependencies: the app-wide search service and the search rate limit
from fastapi import HTTPException, Request

from recipe_scout.core.rate_limit import RATE_LIMIT_MESSAGE, SlidingWindowLimiter
from recipe_scout.services.recipe_service import RecipeSearchService


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_search_service(request: Request) -> RecipeSearchService:
    # built once in main.on_startup and kept on app.state
    return request.app.state.search_service


def rate_limit(request: Request) -> None:
    limiter: SlidingWindowLimiter = request.app.state.rate_limiter
    if not limiter.hit(client_ip(request)):
        raise HTTPException(status_code=429, detail=RATE_LIMIT_MESSAGE)
