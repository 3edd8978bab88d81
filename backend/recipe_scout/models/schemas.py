# Pydantic models shared by the scrapers, the search service and the API
# Field names follow the frontend contract (camelCase), as before.
from __future__ import annotations

import re
import time
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_STEP = "Visit the recipe page for full instructions."

# request input limits
MAX_INGREDIENTS_LEN = 500
MAX_CUISINE_LEN = 100
MAX_TIME_LEN = 20
MAX_STRICTNESS_LEN = 20
MAX_RELATED_TERM_LEN = 50
MAX_RELATED_TERMS = 20

TAG_RE = re.compile(r"<[^>]*>")
WS_RE = re.compile(r"\s+")
NL_RE = re.compile(r"[\r\n]+")


def sanitize_text(value, max_len: int, keep_newlines: bool = False) -> Optional[str]:
    """
    Strip HTML tags, collapse whitespace, trim, clip. Empty -> None.
    keep_newlines: line breaks survive (one per run, blank lines dropped) so
    newline-separated lists keep their separators.
    """
    if value is None:
        return None
    s = TAG_RE.sub("", str(value))
    if keep_newlines:
        lines = (WS_RE.sub(" ", line).strip() for line in NL_RE.split(s))
        s = "\n".join(line for line in lines if line)
    else:
        s = WS_RE.sub(" ", s)
    s = s.strip()[:max_len].strip()
    return s or None


class Nutrition(BaseModel):
    calories: int = 0
    protein: str = "0g"
    carbs: str = "0g"
    fat: str = "0g"


class Recipe(BaseModel):
    name: str
    description: str = ""
    prepTime: str = "N/A"
    cookTime: str = "N/A"
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    whyItWorks: str = ""
    nutrition: Nutrition = Field(default_factory=Nutrition)
    image: str = ""
    sourceUrl: Optional[str] = None
    sourceSite: Optional[str] = None


class SearchParams(BaseModel):
    # anything other than "strict" is flexible
    ingredients: str
    timeAvailable: Optional[str] = None
    cuisine: Optional[str] = None
    strictness: Literal["strict", "flexible"] = "flexible"
    relatedTerms: List[str] = Field(default_factory=list)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _v_ingredients(cls, v):
        s = sanitize_text(v, MAX_INGREDIENTS_LEN, keep_newlines=True)
        if not s:
            raise ValueError("Ingredients are required.")
        return s

    @field_validator("timeAvailable", mode="before")
    @classmethod
    def _v_time(cls, v):
        return sanitize_text(v, MAX_TIME_LEN)

    @field_validator("cuisine", mode="before")
    @classmethod
    def _v_cuisine(cls, v):
        return sanitize_text(v, MAX_CUISINE_LEN)

    @field_validator("strictness", mode="before")
    @classmethod
    def _v_strictness(cls, v):
        s = sanitize_text(v, MAX_STRICTNESS_LEN)
        return "strict" if s and s.lower() == "strict" else "flexible"

    @field_validator("relatedTerms", mode="before")
    @classmethod
    def _v_related(cls, v):
        if not isinstance(v, list):
            return []
        terms = [t.strip()[:MAX_RELATED_TERM_LEN].strip() for t in v if isinstance(t, str)]
        return [t for t in terms if t][:MAX_RELATED_TERMS]


class ScraperResult(BaseModel):
    recipes: List[Recipe] = Field(default_factory=list)
    siteName: str
    success: bool
    error: Optional[str] = None


class ScraperMeta(BaseModel):
    scrapersUsed: List[str] = Field(default_factory=list)
    scrapersDown: List[str] = Field(default_factory=list)
    totalScraped: int = 0
    fromCache: bool = False


class RecipeResponse(BaseModel):
    recipes: List[Recipe] = Field(default_factory=list)
    source: Literal["scraped", "demo"]
    meta: Optional[ScraperMeta] = None


class AdapterRun(BaseModel):
    site: str
    recipes: int
    success: bool
    error: Optional[str] = None
    elapsedMs: int


class RunLog(BaseModel):
    timestamp: float = Field(default_factory=time.time)
    query: str
    results: List[AdapterRun] = Field(default_factory=list)
    totalRecipes: int = 0
    validRecipes: int = 0
    source: Literal["scraped", "demo"] = "demo"

    def to_meta(self, from_cache: bool = False) -> ScraperMeta:
        return ScraperMeta(
            scrapersUsed=[r.site for r in self.results if r.success and r.recipes > 0],
            scrapersDown=[r.site for r in self.results if not r.success],
            totalScraped=self.totalRecipes,
            fromCache=from_cache,
        )
