import asyncio
from types import SimpleNamespace
from typing import List, Optional

import pytest

from recipe_scout.models.schemas import Nutrition, Recipe, ScraperResult


def make_recipe(
    name: str = "Garlic Butter Chicken",
    *,
    ingredients: Optional[List[str]] = None,
    steps: Optional[List[str]] = None,
    description: str = "Weeknight chicken in a glossy garlic butter sauce.",
    calories: int = 410,
    prep: str = "10 minutes",
    cook: str = "20 minutes",
    image: str = "https://img.example/chicken.jpg",
    url: Optional[str] = None,
    site: str = "AllRecipes",
) -> Recipe:
    return Recipe(
        name=name,
        description=description,
        prepTime=prep,
        cookTime=cook,
        ingredients=ingredients if ingredients is not None else [
            "2 chicken breasts", "3 cloves garlic", "2 tbsp butter",
        ],
        steps=steps if steps is not None else [
            "Season the chicken.", "Sear until golden.", "Baste with garlic butter.",
        ],
        whyItWorks=f"A popular recipe from {site}.",
        nutrition=Nutrition(calories=calories, protein="30g", carbs="4g", fat="18g"),
        image=image,
        sourceUrl=url or "https://www.example.com/recipe/123/" + name.lower().replace(" ", "-"),
        sourceSite=site,
    )


class FakeAdapter:
    """Stands in for SiteAdapter in orchestrator / service tests."""

    def __init__(self, name, tier=1, recipes=None, *, fail=None, delay=0.0, raises=None):
        self.profile = SimpleNamespace(key=name.lower(), name=name)
        self.name = name
        self.tier = tier
        self.recipes = recipes or []
        self.fail = fail
        self.delay = delay
        self.raises = raises
        self.calls = 0
        self.cancelled = False

    async def search(self, query):
        self.calls += 1
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.raises is not None:
            raise self.raises
        if self.fail:
            return ScraperResult(siteName=self.name, success=False, error=self.fail)
        return ScraperResult(recipes=[r.model_copy() for r in self.recipes], siteName=self.name, success=True)


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recipe_factory():
    return make_recipe


@pytest.fixture
def adapter_factory():
    return FakeAdapter
