# recipe_scout/services/extract.py
# Shared page-level extraction used by every site adapter.
# - schema.org Recipe JSON-LD discovery and field parsers (durations, nutrition, steps, images, ingredients)
# - selector chains for markup fallback (several candidate selectors per field, first hit wins)
# - recipe quality gate (validate_recipe)
# Parsers never raise: anything unrecognized degrades to an empty/zero default.

from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from recipe_scout.models.schemas import PLACEHOLDER_STEP, Nutrition, Recipe

log = logging.getLogger(__name__)

NO_INSTRUCTIONS = "No instructions available."

# name fragments of roundup / collection pages
COLLECTION_KEYWORDS = [
    "best recipes", "top recipes", "recipe ideas", "recipe collection",
    "recipe roundup", "recipes for every", "easy recipes for",
    "top 10", "top 20", "top 50", "best of", "our favorite",
    "recipe index", "all recipes for", "dietary needs", "special occasion",
]

_ISO_DURATION = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$", re.I
)
_HOURS = re.compile(r"(\d+)\s*(?:hr|hour)", re.I)
_MINUTES = re.compile(r"(\d+)\s*min", re.I)
_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_LINES = re.compile(r"\n+")


def parse_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


# ---------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------
def _is_recipe(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    t = node.get("@type")
    if isinstance(t, list):
        return "Recipe" in t
    return t == "Recipe"


def _find_recipe(data: Any) -> Optional[dict]:
    if isinstance(data, dict):
        graph = data.get("@graph")
        if isinstance(graph, list):
            for node in graph:
                if _is_recipe(node):
                    return node
        if _is_recipe(data):
            return data
    elif isinstance(data, list):
        for node in data:
            if _is_recipe(node):
                return node
            # some sites nest a graph inside the array
            if isinstance(node, dict) and isinstance(node.get("@graph"), list):
                found = _find_recipe(node)
                if found:
                    return found
    return None


def extract_json_ld(html_or_soup: Union[str, BeautifulSoup]) -> Optional[dict]:
    """First schema.org Recipe object embedded in the page, or None."""
    soup = html_or_soup if isinstance(html_or_soup, BeautifulSoup) else parse_soup(html_or_soup)
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            # strict=False: raw newlines inside strings are common in the wild
            data = json.loads(raw, strict=False)
        except ValueError:
            log.debug("skipping malformed JSON-LD block")
            continue
        found = _find_recipe(data)
        if found is not None:
            return found
    return None


# ---------------------------------------------------------------------
# field parsers
# ---------------------------------------------------------------------
def _as_str(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, str):
        return v.strip()
    if isinstance(v, list):
        return ", ".join(_as_str(x) for x in v if _as_str(x))
    if isinstance(v, (int, float)):
        return str(v)
    return ""


def parse_duration(value: Optional[str]) -> str:
    """
    ISO-8601 duration -> human text ("1 hr 15 min", "2 hr", "30 minutes").
    Anything else is taken as already human and returned as-is;
    empty or zero durations give "N/A".
    """
    s = _as_str(value)
    if not s:
        return "N/A"
    m = _ISO_DURATION.match(s)
    if not m:
        return s
    days, hours, minutes = (int(g or 0) for g in m.groups()[:3])
    hours += days * 24
    if hours and minutes:
        return f"{hours} hr {minutes} min"
    if hours:
        return f"{hours} hr"
    if minutes:
        return f"{minutes} minutes"
    return "N/A"


def parse_total_minutes(value: Optional[str]) -> int:
    """Minutes in an ISO duration or a human string ("1 hr 15 min"). Unknown -> 0."""
    s = _as_str(value)
    if not s:
        return 0
    m = _ISO_DURATION.match(s)
    if m:
        days, hours, minutes = (int(g or 0) for g in m.groups()[:3])
        return days * 24 * 60 + hours * 60 + minutes
    h = _HOURS.search(s)
    mi = _MINUTES.search(s)
    return (int(h.group(1)) * 60 if h else 0) + (int(mi.group(1)) if mi else 0)


def _first_number(v: Any) -> Optional[float]:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    m = _NUMBER.search(_as_str(v).replace(",", ""))
    return float(m.group(0)) if m else None


def parse_calories(v: Any) -> int:
    n = _first_number(v)
    return int(round(n)) if n is not None else 0


def parse_grams(v: Any) -> str:
    n = _first_number(v)
    return f"{int(round(n))}g" if n is not None else "0g"


def parse_nutrition(data: Any) -> Nutrition:
    if not isinstance(data, dict):
        return Nutrition()
    return Nutrition(
        calories=parse_calories(data.get("calories")),
        protein=parse_grams(data.get("proteinContent")),
        carbs=parse_grams(data.get("carbohydrateContent")),
        fat=parse_grams(data.get("fatContent")),
    )


def _step_text(item: Any) -> str:
    if isinstance(item, str):
        return item.strip()
    if isinstance(item, dict):
        return _as_str(item.get("text"))
    return ""


def parse_instructions(data: Any) -> List[str]:
    """
    recipeInstructions in any of its shapes:
    string (one step per line), list of strings, HowToStep objects,
    HowToSection objects with nested itemListElement.
    """
    if isinstance(data, str):
        steps = [s.strip() for s in _LINES.split(data) if s.strip()]
        return steps or [NO_INSTRUCTIONS]
    if not isinstance(data, list):
        return [NO_INSTRUCTIONS]

    steps: List[str] = []
    for item in data:
        if isinstance(item, dict) and item.get("@type") == "HowToSection":
            for sub in item.get("itemListElement") or []:
                text = _step_text(sub)
                if text:
                    steps.append(text)
            continue
        text = _step_text(item)
        if text:
            steps.append(text)
    return steps or [NO_INSTRUCTIONS]


def _image_url(v: Any) -> str:
    if isinstance(v, str):
        return v.strip()
    if isinstance(v, dict):
        return _as_str(v.get("url")) or _as_str(v.get("contentUrl"))
    return ""


def parse_image(data: Any) -> str:
    if isinstance(data, list):
        return _image_url(data[0]) if data else ""
    return _image_url(data)


def parse_ingredients(data: Any) -> List[str]:
    if isinstance(data, str):
        return [s.strip() for s in _LINES.split(data) if s.strip()]
    if not isinstance(data, list):
        return []
    out = []
    for item in data:
        text = item.strip() if isinstance(item, str) else (_as_str(item.get("text")) if isinstance(item, dict) else "")
        if text:
            out.append(text)
    return out


# ---------------------------------------------------------------------
# quality gate
# ---------------------------------------------------------------------
def is_collection_name(name: str) -> bool:
    low = (name or "").lower()
    return any(kw in low for kw in COLLECTION_KEYWORDS)


def has_real_steps(steps: Sequence[str]) -> bool:
    if not steps:
        return False
    return not (len(steps) == 1 and steps[0] == PLACEHOLDER_STEP)


def validate_recipe(recipe: Optional[Recipe]) -> Optional[Recipe]:
    """Return the recipe unchanged when it is usable, otherwise None."""
    if recipe is None:
        return None
    name = recipe.name or ""
    if not 3 <= len(name) <= 200:
        return None
    if len(recipe.ingredients) < 2:
        return None
    if not has_real_steps(recipe.steps):
        return None
    if is_collection_name(name):
        return None
    return recipe


def map_schema_to_recipe(schema: Dict[str, Any], source_url: str, site_name: str) -> Optional[Recipe]:
    """schema.org Recipe object -> validated Recipe (None when it fails the gate)."""
    description = _as_str(schema.get("description"))
    if description:
        flavor = (_as_str(schema.get("recipeCategory"))
                  or _as_str(schema.get("recipeCuisine"))
                  or "a variety of flavors")
        why = f"This recipe from {site_name} features: {flavor}."
    else:
        why = f"A popular recipe from {site_name}."

    recipe = Recipe(
        name=_as_str(schema.get("name")) or "Untitled Recipe",
        description=description,
        prepTime=parse_duration(schema.get("prepTime")),
        cookTime=parse_duration(schema.get("cookTime")),
        ingredients=parse_ingredients(schema.get("recipeIngredient")),
        steps=parse_instructions(schema.get("recipeInstructions")),
        whyItWorks=why,
        nutrition=parse_nutrition(schema.get("nutrition")),
        image=parse_image(schema.get("image")),
        sourceUrl=source_url,
        sourceSite=site_name,
    )
    return validate_recipe(recipe)


# ---------------------------------------------------------------------
# selector chains (markup fallback)
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Text:
    """Text content of the first element matching selector."""
    selector: str


@dataclass(frozen=True)
class Attr:
    """Attribute value of the first element matching selector."""
    selector: str
    attr: str


Strategy = Union[Text, Attr]


def _text(el) -> str:
    return " ".join(el.get_text(" ").split())


def _select_one(soup, selector: str):
    try:
        return soup.select_one(selector)
    except (SelectorSyntaxError, ValueError, NotImplementedError):
        log.debug("bad selector skipped: %s", selector)
        return None


def _select(soup, selector: str) -> list:
    try:
        return soup.select(selector)
    except (SelectorSyntaxError, ValueError, NotImplementedError):
        log.debug("bad selector skipped: %s", selector)
        return []


def first_value(soup, strategies: Iterable[Strategy]) -> str:
    """Run strategies in order; the first non-empty value wins."""
    for s in strategies:
        el = _select_one(soup, s.selector)
        if el is None:
            continue
        if isinstance(s, Attr):
            val = el.get(s.attr)
            val = _as_str(val)
        else:
            val = _text(el)
        if val:
            return val
    return ""


def all_texts(soup, selectors: Iterable[str], min_length: int = 0) -> List[str]:
    """Texts of every match of the first selector producing any text longer than min_length."""
    for sel in selectors:
        texts = [_text(el) for el in _select(soup, sel)]
        texts = [t for t in texts if len(t) > min_length]
        if texts:
            return texts
    return []


def extract_links(soup, base_url: str, selectors: Iterable[str]) -> List[str]:
    """Absolute http(s) hrefs of every selector match, de-duplicated in order."""
    links: List[str] = []
    seen = set()
    for sel in selectors:
        for a in _select(soup, sel):
            href = _as_str(a.get("href"))
            if not href:
                continue
            url = urljoin(base_url, href)
            if not url.startswith(("http://", "https://")):
                continue
            if url not in seen:
                seen.add(url)
                links.append(url)
    return links


# ---------------------------------------------------------------------
# nutrition from markup
# ---------------------------------------------------------------------
_FIRST_INT = re.compile(r"(\d+)")


def _classify(label: str, calorie_words: Sequence[str], exclude_fat: str) -> Optional[str]:
    if any(w in label for w in calorie_words):
        return "calories"
    if "protein" in label:
        return "protein"
    if "carb" in label:
        return "carbs"
    if "fat" in label and exclude_fat not in label:
        return "fat"
    return None


def _apply(nutrition: Nutrition, field: str, num: int) -> None:
    if field == "calories":
        nutrition.calories = num
    else:
        setattr(nutrition, field, f"{num}g")


def nutrition_from_rows(
    soup,
    row_selector: str,
    *,
    cells: bool = True,
    calorie_words: Sequence[str] = ("calorie",),
    exclude_fat: str = "saturated",
) -> Nutrition:
    """
    Nutrition table scan.
    cells=True: label is the first <td>, value the last <td> of each row.
    cells=False: the row's whole text carries both label and number.
    """
    nutrition = Nutrition()
    for row in _select(soup, row_selector):
        if cells:
            tds = row.find_all("td")
            if not tds:
                continue
            label = tds[0].get_text(strip=True).lower()
            value = tds[-1].get_text(strip=True)
        else:
            label = value = row.get_text(" ", strip=True).lower()
        m = _FIRST_INT.search(value)
        if not m:
            continue
        field = _classify(label, calorie_words, exclude_fat)
        if field:
            _apply(nutrition, field, int(m.group(1)))
    return nutrition


def nutrition_from_fields(soup, fields: Dict[str, Sequence[str]]) -> Nutrition:
    """One selector chain per nutrient (calories/protein/carbs/fat)."""
    nutrition = Nutrition()
    for field, selectors in fields.items():
        m = _FIRST_INT.search(first_value(soup, [Text(s) for s in selectors]))
        if m:
            _apply(nutrition, field, int(m.group(1)))
    return nutrition
