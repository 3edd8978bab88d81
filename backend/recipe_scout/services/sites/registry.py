# recipe_scout/services/sites/registry.py
# Fixed source list in priority order. Tier 1 always runs, Tier 2 only as fallback.
# Declaration order is also aggregation order (ties in ranking keep it).

from typing import List

from recipe_scout.services.sites import allrecipes, bbcgoodfood, budgetbytes, epicurious, foodnetwork
from recipe_scout.services.sites.base import SiteProfile

PROFILES: List[SiteProfile] = [
    allrecipes.PROFILE,
    bbcgoodfood.PROFILE,
    budgetbytes.PROFILE,
    foodnetwork.PROFILE,
    epicurious.PROFILE,
]
