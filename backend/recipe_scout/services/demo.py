# recipe_scout/services/demo.py
# Static fallback recipes, served when no source produced a usable result.
# Picked by keyword in the ingredient text; nothing matched -> one of each.

from __future__ import annotations
from typing import Dict, List

from recipe_scout.models.schemas import Nutrition, Recipe

DEMO_RECIPES: Dict[str, Recipe] = {
    "chicken": Recipe(
        name="Herb-Crusted Chicken Breast",
        description="Juicy pan-seared chicken with a crispy herb crust, perfect for a quick weeknight dinner.",
        prepTime="10 minutes",
        cookTime="20 minutes",
        ingredients=[
            "4 boneless skinless chicken breasts",
            "1 cup panko breadcrumbs",
            "2 tsp dried rosemary",
            "2 tsp dried thyme",
            "1 tsp dried oregano",
            "3 tbsp olive oil",
            "Salt and black pepper to taste",
        ],
        steps=[
            "Pat chicken breasts dry and season generously with salt and pepper.",
            "Mix breadcrumbs with dried herbs (rosemary, thyme, oregano) and a drizzle of olive oil.",
            "Press the herb mixture onto the top of each chicken breast.",
            "Heat oil in an oven-safe skillet over medium-high heat.",
            "Sear chicken crust-side down for 2 minutes, then flip.",
            "Transfer to a 400°F oven and bake for 15-18 minutes until internal temp reaches 165°F.",
            "Rest for 5 minutes before serving.",
        ],
        whyItWorks="The herb crust adds flavor and texture while keeping the chicken moist during cooking.",
        nutrition=Nutrition(calories=320, protein="38g", carbs="8g", fat="14g"),
        image="/gallery_pasta_plate.jpg",
    ),
    "pasta": Recipe(
        name="Classic Spaghetti Carbonara",
        description="Authentic Roman pasta with crispy pancetta, eggs, and pecorino cheese.",
        prepTime="10 minutes",
        cookTime="15 minutes",
        ingredients=[
            "400g spaghetti",
            "200g pancetta or guanciale, diced",
            "4 large egg yolks",
            "2 whole eggs",
            "100g pecorino romano, finely grated",
            "Freshly cracked black pepper",
        ],
        steps=[
            "Bring a large pot of salted water to boil for pasta.",
            "Whisk eggs, egg yolks, and grated pecorino in a bowl. Set aside.",
            "Cook pancetta or guanciale until crispy, reserve the fat.",
            "Cook spaghetti until al dente, reserve 1 cup pasta water.",
            "Working quickly, toss hot pasta with pancetta off the heat.",
            "Add egg mixture, tossing vigorously to create creamy sauce.",
            "Add pasta water as needed. Season with black pepper and serve immediately.",
        ],
        whyItWorks="The residual heat from pasta gently cooks the eggs into a silky sauce without scrambling.",
        nutrition=Nutrition(calories=520, protein="22g", carbs="48g", fat="28g"),
        image="/gallery_pasta_plate.jpg",
    ),
    "quick": Recipe(
        name="15-Minute Fried Rice",
        description="Restaurant-style fried rice made easy with day-old rice and simple ingredients.",
        prepTime="5 minutes",
        cookTime="10 minutes",
        ingredients=[
            "4 cups cold cooked rice (day-old preferred)",
            "3 eggs",
            "2 tbsp vegetable oil",
            "1 cup frozen peas and carrots",
            "3 green onions, sliced",
            "3 tbsp soy sauce",
            "1 tsp sesame oil",
        ],
        steps=[
            "Use cold, day-old rice for best results (or spread fresh rice on a sheet pan to cool).",
            "Heat oil in a wok or large skillet over high heat.",
            "Scramble eggs, break into pieces, and set aside.",
            "Stir-fry diced vegetables (peas, carrots, green onions) for 2 minutes.",
            "Add rice and press flat against the hot pan to get some crispy bits.",
            "Add soy sauce, sesame oil, and return eggs to the pan.",
            "Toss everything together and serve hot.",
        ],
        whyItWorks="Cold rice separates easily and gets crispy edges when stir-fried at high heat.",
        nutrition=Nutrition(calories=340, protein="10g", carbs="48g", fat="12g"),
        image="/gallery_taco_prep.jpg",
    ),
}

# keyword -> demo entry, checked in this order
_KEYWORDS = [
    (("chicken",), "chicken"),
    (("pasta", "spaghetti"), "pasta"),
    (("rice", "egg"), "quick"),
]


def demo_recipes(ingredients: str, limit: int = 3) -> List[Recipe]:
    low = (ingredients or "").lower()
    picked = [DEMO_RECIPES[k] for words, k in _KEYWORDS if any(w in low for w in words)]
    if not picked:
        picked = list(DEMO_RECIPES.values())
    # copies, callers may mutate responses
    return [r.model_copy(deep=True) for r in picked[:limit]]
