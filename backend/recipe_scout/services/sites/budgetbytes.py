# recipe_scout/services/sites/budgetbytes.py
# Budget Bytes (Tier 1): WordPress + WP Recipe Maker (wprm-*) markup

from urllib.parse import quote

from recipe_scout.services.extract import Attr, Text
from recipe_scout.services.sites.base import META_DESCRIPTION, NutritionFields, SiteProfile

BASE_URL = "https://www.budgetbytes.com"

_LABEL_VALUE = '.wprm-nutrition-label-text-nutrient-container:-soup-contains("{0}") .wprm-nutrition-label-text-nutrient-value'


def search_url(query: str) -> str:
    return f"{BASE_URL}/?s={quote(query, safe='')}"


PROFILE = SiteProfile(
    key="budgetbytes",
    name="BudgetBytes",
    site_name="Budget Bytes",
    base_url=BASE_URL,
    search_url=search_url,
    link_selectors=(
        'article a[href*="budgetbytes.com"]',
        ".search-results a",
        ".post-summary a",
        'h2 a[href*="budgetbytes.com"]',
    ),
    link_include=(r"budgetbytes\.com",),
    link_exclude=("/category/", "/tag/", "/page/"),
    title=(Text("h2.wprm-recipe-name"), Text("h1.entry-title"), Text("h1")),
    description=(Text(".wprm-recipe-summary p"), META_DESCRIPTION),
    steps=(
        ".wprm-recipe-instruction-text",
        ".wprm-recipe-instruction p",
        ".wprm-recipe-instruction-group li",
    ),
    ingredients=(
        "li.wprm-recipe-ingredient",
        ".wprm-recipe-ingredient-group li",
    ),
    prep_time=(
        Text("span.wprm-recipe-prep_time-container"),
        Attr('meta[itemprop="prepTime"]', "content"),
    ),
    cook_time=(
        Text("span.wprm-recipe-cook_time-container"),
        Attr('meta[itemprop="cookTime"]', "content"),
    ),
    nutrition=NutritionFields({
        "calories": (
            'span.wprm-nutrition-field-value[data-nutrient="calories"]',
            "span.wprm-nutrition-field-value",
            _LABEL_VALUE.format("Calories"),
        ),
        "protein": (
            'span.wprm-nutrition-field-value[data-nutrient="protein"]',
            _LABEL_VALUE.format("Protein"),
        ),
        "carbs": (
            'span.wprm-nutrition-field-value[data-nutrient="carbohydrates"]',
            _LABEL_VALUE.format("Carb"),
        ),
        "fat": (
            'span.wprm-nutrition-field-value[data-nutrient="fat"]',
            _LABEL_VALUE.format("Fat"),
        ),
    }),
    why_it_works="A budget-friendly recipe from {site}.",
    tier=1,
)
