# recipe_scout/services/sites/allrecipes.py
# AllRecipes (Tier 1): recipe pages live at /recipe/{id}/...

from urllib.parse import quote

from recipe_scout.services.extract import Attr, Text
from recipe_scout.services.sites.base import META_DESCRIPTION, NutritionRows, SiteProfile

BASE_URL = "https://www.allrecipes.com"


def search_url(query: str) -> str:
    return f"{BASE_URL}/search?q={quote(query, safe='')}"


PROFILE = SiteProfile(
    key="allrecipes",
    name="AllRecipes",
    site_name="AllRecipes",
    base_url=BASE_URL,
    search_url=search_url,
    link_selectors=(
        'a[href*="/recipe/"]',
        '.mntl-card-list-items a[href*="/recipe/"]',
        ".card__titleLink",
        "a.comp.mntl-card-list-items",
    ),
    link_include=(r"/recipe/\d+", r"allrecipes\.com/recipe/"),
    title=(Text("h1.article-heading"), Text("h1.headline"), Text("h1")),
    description=(Text("p.article-subheading"), META_DESCRIPTION),
    steps=(
        "li.mntl-sc-block-group--LI p",
        ".recipe__steps-content p",
        ".instructions-section li p",
    ),
    ingredients=(
        "li.mntl-structured-ingredients__list-item p",
        ".mntl-structured-ingredients__list-item",
        ".ingredients-section li",
    ),
    prep_time=(
        Text('.recipe-meta-item:-soup-contains("Prep") + *'),
        Text('.mntl-recipe-details__label:-soup-contains("Prep") + *'),
        Attr('meta[itemprop="prepTime"]', "content"),
    ),
    cook_time=(
        Text('.recipe-meta-item:-soup-contains("Cook") + *'),
        Text('.mntl-recipe-details__label:-soup-contains("Cook") + *'),
        Attr('meta[itemprop="cookTime"]', "content"),
    ),
    nutrition=NutritionRows(
        ".mntl-nutrition-facts-label__table-body tr, .nutrition-section tr",
        calorie_fallback=(".nutrition-section .mntl-nutrition-facts-label__table-cell:first-child",),
    ),
    why_it_works="A popular recipe from {site}.",
    tier=1,
)
