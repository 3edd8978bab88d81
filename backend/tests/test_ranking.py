from recipe_scout.models.schemas import PLACEHOLDER_STEP, SearchParams
from recipe_scout.services.ranking import rank_recipes, score_recipe


def params(**kw):
    kw.setdefault("ingredients", "chicken")
    return SearchParams(**kw)


def bare(recipe_factory, **kw):
    # no completeness bonuses, so only the rule under test moves the score
    kw.setdefault("calories", 0)
    kw.setdefault("image", "")
    kw.setdefault("steps", ["Cook it all."])
    kw.setdefault("description", "A simple dish for any night.")
    return recipe_factory(**kw)


def test_ingredient_list_hit_is_worth_exactly_15_more(recipe_factory):
    with_hit = bare(recipe_factory, name="Weeknight Skillet", ingredients=["tofu", "chicken thighs"])
    without = bare(recipe_factory, name="Weeknight Skillet", ingredients=["tofu", "tempeh"])
    assert score_recipe(with_hit, params()) - score_recipe(without, params()) == 15


def test_text_only_hit_scores_8(recipe_factory):
    r = bare(recipe_factory, name="Chicken-Style Tofu", ingredients=["tofu", "soy sauce"])
    assert score_recipe(r, params()) == 8


def test_multiple_query_terms_split_on_commas_and_newlines(recipe_factory):
    r = bare(recipe_factory, name="Plain Dish", ingredients=["rice", "garlic"])
    assert score_recipe(r, params(ingredients="Rice, garlic\nleek")) == 30


def test_search_params_keep_ingredient_line_breaks():
    p = params(ingredients="<i>Rice</i>,  garlic\r\n\n  leek  \n")
    assert p.ingredients == "Rice, garlic\nleek"
    assert params(cuisine=" Thai\n food ").cuisine == "Thai food"


def test_time_bonus_and_penalty(recipe_factory):
    quick = bare(recipe_factory, name="Plain Dish", ingredients=["a b", "c d"], prep="PT10M", cook="PT15M")
    slow = bare(recipe_factory, name="Plain Dish", ingredients=["a b", "c d"], prep="1 hr", cook="30 min")
    unknown = bare(recipe_factory, name="Plain Dish", ingredients=["a b", "c d"], prep="N/A", cook="N/A")
    assert score_recipe(quick, params(ingredients="zzz", timeAvailable="30")) == 5
    assert score_recipe(slow, params(ingredients="zzz", timeAvailable="30")) == -15
    assert score_recipe(unknown, params(ingredients="zzz", timeAvailable="30")) == 0
    assert score_recipe(slow, params(ingredients="zzz", timeAvailable="2 hours")) == 5


def test_cuisine_and_related_terms(recipe_factory):
    r = bare(recipe_factory, name="Thai Basil Stir Fry", ingredients=["basil", "pork"],
             description="A spicy thai classic with holy basil.")
    p = params(ingredients="zzz", cuisine="Thai", relatedTerms=["basil", "holy basil", "beef"])
    assert score_recipe(r, p) == 8 + 8 + 8


def test_completeness_bonuses(recipe_factory):
    full = recipe_factory(name="Plain Dish", ingredients=["a b", "c d", "e f"])
    assert score_recipe(full, params(ingredients="zzz")) == 2 + 3 + 3 + 1
    placeholder = recipe_factory(name="Plain Dish", ingredients=["a b", "c d"], steps=[PLACEHOLDER_STEP] * 3,
                                 calories=0, image="")
    assert score_recipe(placeholder, params(ingredients="zzz")) == 0


def test_rank_is_stable_and_limited(recipe_factory):
    recipes = [bare(recipe_factory, name=f"Dish {i}", ingredients=["x y", "z w"]) for i in range(7)]
    recipes[4] = bare(recipe_factory, name="Chicken Dish", ingredients=["chicken", "z w"])
    top = rank_recipes(recipes, params(), limit=5)
    assert [r.name for r in top] == ["Chicken Dish", "Dish 0", "Dish 1", "Dish 2", "Dish 3"]


def test_strict_mode_drops_non_positive(recipe_factory):
    hit = bare(recipe_factory, name="Chicken Dish", ingredients=["chicken", "salt"])
    miss = bare(recipe_factory, name="Plain Dish", ingredients=["x y", "z w"])
    assert rank_recipes([miss, hit], params(strictness="strict")) == [hit]
    assert rank_recipes([miss], params(strictness="strict")) == []
    assert len(rank_recipes([miss, hit], params(strictness="flexible"))) == 2
