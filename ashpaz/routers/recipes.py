from fastapi import Depends, HTTPException

from ashpaz.controller import RecipeAssistant
from ashpaz.routers.base import api_router, get_assistant
from ashpaz.schemas.recipe import (
    RecipeRequest, RecipeResponse, StepAnswerResponse, StepQuestionRequest, SuggestionsResponse
)
from ashpaz.services.recipe_service import RecipeService


@api_router.post("/recipe", response_model=RecipeResponse)
def generate_recipe(request: RecipeRequest, assistant: RecipeAssistant = Depends(get_assistant)):
    try:
        return RecipeService(assistant).generate_recipe(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@api_router.post("/suggestions", response_model=SuggestionsResponse)
def suggest_titles(request: RecipeRequest, assistant: RecipeAssistant = Depends(get_assistant)):
    try:
        return RecipeService(assistant).suggest_titles(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@api_router.post("/step-question", response_model=StepAnswerResponse)
def answer_step_question(request: StepQuestionRequest, assistant: RecipeAssistant = Depends(get_assistant)):
    try:
        return RecipeService(assistant).answer_step_question(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
