# recipe_scout/services/sites/base.py
# One generic adapter driven by a declarative SiteProfile.
# search(query): search page -> candidate recipe links (<= max_links) -> concurrent detail scrapes
# Detail page: JSON-LD first, otherwise the profile's per-field selector chains.
# Never raises out of search(); a failed search page becomes success=False.

from __future__ import annotations
import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from recipe_scout.models.schemas import PLACEHOLDER_STEP, Nutrition, Recipe, ScraperResult
from recipe_scout.services.errors import FetchError
from recipe_scout.services.extract import (
    Attr,
    Strategy,
    Text,
    all_texts,
    extract_json_ld,
    extract_links,
    first_value,
    map_schema_to_recipe,
    nutrition_from_fields,
    nutrition_from_rows,
    parse_duration,
    parse_soup,
    validate_recipe,
)
from recipe_scout.services.fetcher import PageFetcher

log = logging.getLogger(__name__)

OG_IMAGE = (Attr('meta[property="og:image"]', "content"),)
META_DESCRIPTION = Attr('meta[name="description"]', "content")


@dataclass(frozen=True)
class NutritionRows:
    """Table/list rows holding label + number."""
    row_selector: str
    cells: bool = True
    calorie_words: Tuple[str, ...] = ("calorie",)
    exclude_fat: str = "saturated"
    # single-cell calorie fallback when the table yields none
    calorie_fallback: Tuple[str, ...] = ()

    def parse(self, soup) -> Nutrition:
        n = nutrition_from_rows(
            soup, self.row_selector,
            cells=self.cells, calorie_words=self.calorie_words, exclude_fat=self.exclude_fat,
        )
        if n.calories == 0 and self.calorie_fallback:
            n.calories = nutrition_from_fields(soup, {"calories": self.calorie_fallback}).calories
        return n


@dataclass(frozen=True)
class NutritionFields:
    """One selector chain per nutrient."""
    fields: Dict[str, Tuple[str, ...]]

    def parse(self, soup) -> Nutrition:
        return nutrition_from_fields(soup, self.fields)


@dataclass(frozen=True)
class SiteProfile:
    key: str                                  # url slug, e.g. "allrecipes"
    name: str                                 # adapter name in run logs / meta
    site_name: str                            # display name on recipes
    base_url: str
    search_url: Callable[[str], str]
    link_selectors: Tuple[str, ...]
    link_include: Tuple[str, ...]             # regexes, any must match
    link_exclude: Tuple[str, ...] = ()        # substrings (lowercased url)
    title: Tuple[Strategy, ...] = (Text("h1"),)
    description: Tuple[Strategy, ...] = (META_DESCRIPTION,)
    steps: Tuple[str, ...] = ()
    ingredients: Tuple[str, ...] = ()
    prep_time: Tuple[Strategy, ...] = ()
    cook_time: Tuple[Strategy, ...] = ()
    image: Tuple[Strategy, ...] = OG_IMAGE
    nutrition: Optional[object] = None        # NutritionRows | NutritionFields
    why_it_works: str = "A popular recipe from {site}."
    tier: int = 1
    step_min_length: int = 10
    ingredient_min_length: int = 2
    _include_res: Tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False, default=())

    def __post_init__(self):
        object.__setattr__(self, "_include_res", tuple(re.compile(p) for p in self.link_include))

    def is_recipe_link(self, url: str) -> bool:
        low = url.lower()
        if any(p in low for p in self.link_exclude):
            return False
        return any(rx.search(url) for rx in self._include_res)


class SiteAdapter:
    def __init__(self, profile: SiteProfile, fetcher: PageFetcher, max_links: int = 3) -> None:
        self.profile = profile
        self.fetcher = fetcher
        self.max_links = max_links

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def tier(self) -> int:
        return self.profile.tier

    def __repr__(self) -> str:
        return f"SiteAdapter({self.profile.name!r}, tier={self.profile.tier})"

    # ------------------------------------------------------------------
    def find_links(self, html: str) -> List[str]:
        p = self.profile
        links = extract_links(parse_soup(html), p.base_url, p.link_selectors)
        return [u for u in links if p.is_recipe_link(u)][: self.max_links]

    async def discover(self, query: str) -> List[str]:
        """Candidate recipe URLs from the site's search page. FetchError propagates."""
        url = self.profile.search_url(query)
        html = await self.fetcher.fetch(url)
        links = self.find_links(html)
        log.debug("[%s] %d candidate links for %r", self.name, len(links), query)
        return links

    def parse_page(self, html: str, url: str) -> Optional[Recipe]:
        """Detail page -> validated Recipe or None."""
        p = self.profile
        soup = parse_soup(html)

        schema = extract_json_ld(soup)
        if schema is not None:
            return map_schema_to_recipe(schema, url, p.site_name)

        name = first_value(soup, p.title)
        if not name:
            return None

        steps = all_texts(soup, p.steps, p.step_min_length)
        nutrition = p.nutrition.parse(soup) if p.nutrition is not None else Nutrition()
        recipe = Recipe(
            name=name,
            description=first_value(soup, p.description),
            prepTime=parse_duration(first_value(soup, p.prep_time)),
            cookTime=parse_duration(first_value(soup, p.cook_time)),
            ingredients=all_texts(soup, p.ingredients, p.ingredient_min_length),
            steps=steps or [PLACEHOLDER_STEP],
            whyItWorks=p.why_it_works.format(site=p.site_name),
            nutrition=nutrition,
            image=first_value(soup, p.image),
            sourceUrl=url,
            sourceSite=p.site_name,
        )
        return validate_recipe(recipe)

    async def scrape(self, url: str) -> Optional[Recipe]:
        """One detail page. Failures are logged and give None."""
        try:
            html = await self.fetcher.fetch(url)
        except FetchError as e:
            log.warning("[%s] fetch failed for %s: %s", self.name, url, e)
            return None
        except Exception:
            log.exception("[%s] unexpected fetch error for %s", self.name, url)
            return None
        try:
            return self.parse_page(html, url)
        except Exception:
            log.exception("[%s] parse failed for %s", self.name, url)
            return None

    async def search(self, query: str) -> ScraperResult:
        try:
            links = await self.discover(query)
        except Exception as e:
            log.warning("[%s] search page failed: %s", self.name, e)
            return ScraperResult(siteName=self.name, success=False, error=str(e) or type(e).__name__)

        if not links:
            return ScraperResult(siteName=self.name, success=True)

        # one bad detail page must not take the adapter's other recipes with it
        results = await asyncio.gather(*(self.scrape(u) for u in links), return_exceptions=True)
        recipes = []
        for url, r in zip(links, results):
            if isinstance(r, Exception):
                log.warning("[%s] scrape failed for %s: %r", self.name, url, r)
            elif isinstance(r, BaseException):
                raise r
            elif r is not None:
                recipes.append(r)
        return ScraperResult(recipes=recipes, siteName=self.name, success=True)


def build_adapters(profiles: Sequence[SiteProfile], fetcher: PageFetcher, max_links: int = 3) -> List[SiteAdapter]:
    return [SiteAdapter(p, fetcher, max_links=max_links) for p in profiles]
