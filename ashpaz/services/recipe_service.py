from ashpaz.controller import RecipeAssistant
from ashpaz.schemas.recipe import (
    RecipeRequest, RecipeResponse, StepAnswerResponse, StepQuestionRequest, SuggestionsResponse
)


class RecipeService:
    """Service for AI recipe generation, title suggestions and step questions."""

    def __init__(self, assistant: RecipeAssistant):
        self.assistant = assistant

    def generate_recipe(self, request: RecipeRequest) -> RecipeResponse:
        result = self.assistant.generate_recipe(request.prompt, request.language)
        return RecipeResponse(recipe=result.recipe.to_dict(), mock=result.mock)

    def suggest_titles(self, request: RecipeRequest) -> SuggestionsResponse:
        result = self.assistant.suggest_titles(request.prompt, request.language)
        return SuggestionsResponse(suggestions=result.suggestions, mock=result.mock)

    def answer_step_question(self, request: StepQuestionRequest) -> StepAnswerResponse:
        result = self.assistant.clarify_step(request.question, request.step, request.language)
        return StepAnswerResponse(answer=result.answer, mock=result.mock)
