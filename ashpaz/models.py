"""
Recipe data models.

These Pydantic models are the contract between the LLM output and the rest of
the application. Validation is strict (no type coercion) and unknown keys are
dropped, so a validated recipe carries exactly the content the model produced.
"""

from __future__ import annotations

import copy
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Closed vocabulary the prompt asks the model to use for ingredient icons.
ICON_VOCABULARY = (
    "pasta", "garlic", "oil", "cheese", "salt", "pepper", "tomato", "onion",
    "carrot", "potato", "chicken", "beef", "fish", "egg", "milk", "butter",
    "flour", "sugar", "water", "lemon", "herbs", "spices",
)
FALLBACK_ICON = "generic"


def resolve_icon(icon: Optional[str]) -> str:
    """Map an icon tag to a known vocabulary token, or the generic fallback."""
    if icon and icon.strip().lower() in ICON_VOCABULARY:
        return icon.strip().lower()
    return FALLBACK_ICON


class Ingredient(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    name: str = Field(..., description="Ingredient name, e.g. 'garlic cloves'.")
    quantity: Optional[str] = Field(None, description="Free-text amount, e.g. '200g' or 'to taste'.")
    icon: Optional[str] = Field(None, description="Icon tag from ICON_VOCABULARY. Unknown tags are kept as-is.")

    @property
    def display_icon(self) -> str:
        return resolve_icon(self.icon)


class Step(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    # Sequence number within the recipe; not globally unique.
    id: int
    title: Optional[str] = None
    description: str
    duration: Optional[str] = None
    ingredients: Optional[List[str]] = Field(None, description="Names of ingredients used in this step.")


class Recipe(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", populate_by_name=True)

    title: str
    servings: Optional[int] = Field(None, gt=0)
    total_time: Optional[str] = Field(None, alias="totalTime")
    tags: Optional[List[str]] = None
    ingredients: List[Ingredient]
    steps: List[Step]
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Recipe title cannot be empty")
        return v

    def to_dict(self) -> dict:
        """Wire representation: camelCase keys, absent optional fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


# A small example recipe returned in mock mode (no AI provider configured).
SAMPLE_RECIPE_DATA = {
    "title": "Simple Garlic Pasta",
    "servings": 2,
    "totalTime": "20 mins",
    "tags": ["vegetarian", "quick"],
    "ingredients": [
        {"name": "spaghetti", "quantity": "200g", "icon": "pasta"},
        {"name": "garlic cloves", "quantity": "3", "icon": "garlic"},
        {"name": "olive oil", "quantity": "2 tbsp", "icon": "oil"},
        {"name": "parmesan", "quantity": "to taste", "icon": "cheese"},
        {"name": "salt", "quantity": "to taste", "icon": "salt"},
    ],
    "steps": [
        {
            "id": 1,
            "title": "Boil pasta",
            "description": "Cook spaghetti in salted boiling water until al dente (8-10 mins).",
        },
        {
            "id": 2,
            "title": "Prep garlic",
            "description": "Thinly slice garlic cloves.",
            "ingredients": ["garlic cloves"],
        },
        {
            "id": 3,
            "title": "Sizzle garlic",
            "description": "Heat olive oil in a pan, add garlic and cook until fragrant and lightly golden.",
            "ingredients": ["olive oil", "garlic cloves"],
        },
        {
            "id": 4,
            "title": "Combine",
            "description": "Toss drained pasta with oil and garlic, top with parmesan and serve.",
            "ingredients": ["spaghetti", "parmesan"],
        },
    ],
    "notes": "A super-fast, tasty dish. Add chili flakes for heat.",
}

SAMPLE_SUGGESTIONS = [
    "Classic Pasta Carbonara",
    "Creamy Mushroom Pasta",
    "Spicy Arrabbiata Pasta",
    "Pesto Pasta with Cherry Tomatoes",
    "Garlic Butter Pasta with Shrimp",
]

SAMPLE_STEP_ANSWER = (
    "Take this step slowly and keep the heat moderate so nothing burns. "
    "Connect an AI provider to get answers tailored to your question."
)


def sample_recipe() -> Recipe:
    return Recipe.model_validate(copy.deepcopy(SAMPLE_RECIPE_DATA))
