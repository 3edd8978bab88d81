# recipe_scout/services/sites/foodnetwork.py
# Food Network (Tier 2): search path is /search/{words-joined-by-dashes}-

import re
from urllib.parse import quote

from recipe_scout.services.extract import Attr, Text
from recipe_scout.services.sites.base import META_DESCRIPTION, NutritionRows, SiteProfile

BASE_URL = "https://www.foodnetwork.com"


def search_url(query: str) -> str:
    slug = re.sub(r"\s+", "-", query)
    return f"{BASE_URL}/search/{quote(slug, safe='')}-"


PROFILE = SiteProfile(
    key="foodnetwork",
    name="FoodNetwork",
    site_name="Food Network",
    base_url=BASE_URL,
    search_url=search_url,
    link_selectors=(
        'a[href*="/recipes/"]',
        ".o-ResultCard a",
        ".m-MediaBlock__a-Headline a",
    ),
    link_include=(r"/recipes/",),
    link_exclude=("/photos/", "/videos/"),
    title=(
        Text("h1.o-AssetTitle__a-HeadlineText"),
        Text("span.o-AssetTitle__a-HeadlineText"),
        Text("h1"),
    ),
    description=(META_DESCRIPTION, Text(".o-AssetDescription__a-Description")),
    steps=(
        ".o-Method__m-Step p",
        ".o-Method__m-Body p",
        ".recipe-procedure li p",
    ),
    ingredients=(
        ".o-Ingredients__a-Ingredient",
        ".o-Ingredients__a-ListItemText",
        ".ingredient-list li",
    ),
    prep_time=(
        Attr('meta[itemprop="prepTime"]', "content"),
        Text(".o-RecipeInfo__m-Time .o-RecipeInfo__a-Description:first-of-type"),
    ),
    cook_time=(
        Attr('meta[itemprop="cookTime"]', "content"),
        Text(".o-RecipeInfo__m-Time .o-RecipeInfo__a-Description:last-of-type"),
    ),
    nutrition=NutritionRows(
        ".o-NutritionInfo__m-Row, .o-NutritionInfo li, .nutrition-body tr",
        cells=False,
    ),
    why_it_works="A professionally tested recipe from {site}.",
    tier=2,
)
