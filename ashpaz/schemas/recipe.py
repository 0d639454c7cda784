from typing import List

from pydantic import BaseModel, Field, constr

from ashpaz.models import Recipe, Step
from ashpaz.prompts import Language


class RecipeRequest(BaseModel):
    """Schema for recipe generation and title suggestion requests."""
    prompt: constr(strip_whitespace=True, min_length=1, max_length=2000)
    language: Language = Language.EN


class StepQuestionRequest(BaseModel):
    """Schema for a question about one recipe step."""
    question: constr(strip_whitespace=True, min_length=1, max_length=1000)
    step: Step
    language: Language = Language.EN


class SaveRecipeRequest(BaseModel):
    recipe: Recipe


class RecipeResponse(BaseModel):
    recipe: dict
    mock: bool = False


class SuggestionsResponse(BaseModel):
    suggestions: List[str] = Field(..., max_length=5)
    mock: bool = False


class StepAnswerResponse(BaseModel):
    answer: str
    mock: bool = False
