# recipe_scout/services/sites/bbcgoodfood.py
# BBC Good Food (Tier 1): individual recipes under /recipes/, collections filtered out

from urllib.parse import quote

from recipe_scout.services.extract import Attr, Text
from recipe_scout.services.sites.base import META_DESCRIPTION, NutritionRows, SiteProfile

BASE_URL = "https://www.bbcgoodfood.com"


def search_url(query: str) -> str:
    return f"{BASE_URL}/search?q={quote(query, safe='')}"


PROFILE = SiteProfile(
    key="bbcgoodfood",
    name="BBCGoodFood",
    site_name="BBC Good Food",
    base_url=BASE_URL,
    search_url=search_url,
    link_selectors=(
        'a[href*="/recipes/"]',
        '.search-results a[href*="/recipes/"]',
        ".standard-card-new__article-title a",
    ),
    link_include=(r"/recipes/",),
    link_exclude=(
        "/collection/", "/collections/", "/category/", "/categories/",
        "-recipes-", "-recipe-ideas", "-recipe-collection",
    ),
    title=(
        Text("h1.heading-1"),
        Text("h1.post-header__title"),
        Text("h1.recipe-header__title"),
        Text("h1"),
    ),
    description=(META_DESCRIPTION, Text(".editor-content p"), Text(".recipe-description p")),
    steps=(
        ".method-steps__list-item p",
        ".grouped-list__list-item p",
        ".method-steps__content p",
        ".method li p",
    ),
    ingredients=(
        ".ingredients-list__group li",
        ".recipe-ingredients li",
        ".grouped-list li",
    ),
    prep_time=(
        Attr('meta[itemprop="prepTime"]', "content"),
        Text("li.recipe-details__cooking-time-prep span:last-child"),
        Text(".icon-timer + span"),
    ),
    cook_time=(
        Attr('meta[itemprop="cookTime"]', "content"),
        Text("li.recipe-details__cooking-time-cook span:last-child"),
    ),
    nutrition=NutritionRows(
        "tr.key-value-blocks__batch, .nutrition tr, table.key-value-blocks tr",
        calorie_words=("kcal", "calorie", "energy"),
        exclude_fat="saturate",
        calorie_fallback=("td.key-value-blocks__value", "tr.nutrition td:nth-child(2)"),
    ),
    why_it_works="A well-tested recipe from {site}.",
    tier=1,
)
