# recipe_scout/services/ranking.py
from __future__ import annotations
import logging
from typing import List, Tuple

from recipe_scout.models.schemas import PLACEHOLDER_STEP, Recipe, SearchParams
from recipe_scout.services.extract import parse_total_minutes
from recipe_scout.services.utils import normalize_many, parse_time_limit, split_ingredients

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Additive scoring against the search params
# - query ingredient in the ingredient list: +15, only elsewhere in the text: +8
# - time limit: +5 when the known total fits, -15 when it exceeds
# - cuisine keyword anywhere: +8, related term anywhere: +8 each
# - completeness: nutrition +2, >=3 ingredients +3, >=3 real steps +3, image +1
# -----------------------------------------------------------------------------
INGREDIENT_HIT = 15
TEXT_HIT = 8
TIME_FIT = 5
TIME_OVER = -15
CUISINE_HIT = 8
RELATED_HIT = 8


def _recipe_text(recipe: Recipe) -> Tuple[str, str]:
    """(ingredient text, full searchable text), lowercased."""
    ings = " ".join(recipe.ingredients).lower()
    text = " ".join([
        recipe.name.lower(),
        recipe.description.lower(),
        ings,
        " ".join(recipe.steps).lower(),
    ])
    return ings, text


def total_minutes(recipe: Recipe) -> int:
    return parse_total_minutes(recipe.prepTime) + parse_total_minutes(recipe.cookTime)


def score_recipe(recipe: Recipe, params: SearchParams) -> int:
    ings, text = _recipe_text(recipe)
    query = split_ingredients(params.ingredients)
    s = 0

    for q in query:
        if q in ings:
            s += INGREDIENT_HIT
        elif q in text:
            s += TEXT_HIT

    limit = parse_time_limit(params.timeAvailable)
    if limit > 0:
        total = total_minutes(recipe)
        if 0 < total <= limit:
            s += TIME_FIT
        elif total > limit:
            s += TIME_OVER

    if params.cuisine and params.cuisine.lower() in text:
        s += CUISINE_HIT

    for term in normalize_many(params.relatedTerms):
        if term not in query and term in text:
            s += RELATED_HIT

    if recipe.nutrition.calories > 0:
        s += 2
    if len(recipe.ingredients) >= 3:
        s += 3
    if len(recipe.steps) >= 3 and recipe.steps[0] != PLACEHOLDER_STEP:
        s += 3
    if recipe.image:
        s += 1
    return s


def rank_recipes(recipes: List[Recipe], params: SearchParams, limit: int = 5) -> List[Recipe]:
    """
    Score -> (strict: drop score <= 0) -> stable sort desc -> top `limit`.
    Equal scores keep their input order.
    """
    scored = [(score_recipe(r, params), r) for r in recipes]
    if params.strictness == "strict":
        scored = [x for x in scored if x[0] > 0]
    scored.sort(key=lambda x: x[0], reverse=True)
    top = scored[:limit]
    if top:
        log.info("ranked %d/%d recipes, top scores: %s",
                 len(top), len(recipes), ", ".join(str(sc) for sc, _ in top))
    return [r for _, r in top]
