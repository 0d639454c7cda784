from fastapi import APIRouter, Request

from ashpaz.config import Settings
from ashpaz.controller import RecipeAssistant

api_router = APIRouter(prefix="/api")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_assistant(request: Request) -> RecipeAssistant:
    return request.app.state.assistant
