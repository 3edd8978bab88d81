# recipe_scout/services/sites/epicurious.py
# Epicurious (Tier 2): markup carries no usable times, prep/cook stay "N/A" without JSON-LD

from urllib.parse import quote

from recipe_scout.services.extract import Text
from recipe_scout.services.sites.base import META_DESCRIPTION, NutritionRows, SiteProfile

BASE_URL = "https://www.epicurious.com"


def search_url(query: str) -> str:
    return f"{BASE_URL}/search/{quote(query, safe='')}"


PROFILE = SiteProfile(
    key="epicurious",
    name="Epicurious",
    site_name="Epicurious",
    base_url=BASE_URL,
    search_url=search_url,
    link_selectors=(
        'a[href*="/recipes/"]',
        '.results-group a[href*="/recipes/"]',
        'article a[href*="/recipes/"]',
    ),
    link_include=(r"/recipes/",),
    link_exclude=("/gallery/",),
    title=(Text('h1[data-testid="ContentHeaderHed"]'), Text("h1")),
    description=(
        META_DESCRIPTION,
        Text('p[class*="dek"]'),
        Text('p[data-testid="ContentHeaderDek"]'),
    ),
    steps=(
        'div[class*="preparation"] li p',
        ".preparation-steps li p",
        '[data-testid*="InstructionList"] li p',
        ".steps-list li p",
    ),
    ingredients=(
        'div[class*="ingredient"] li p',
        ".ingredient-list li",
        '[data-testid*="IngredientList"] li',
    ),
    nutrition=NutritionRows(
        '[data-testid*="NutritionInfo"] li, .nutrition-info li, .nutrition-body tr',
        cells=False,
    ),
    why_it_works="An expertly curated recipe from {site}.",
    tier=2,
)
