"""
Main controller for Ashpaz.
Runs the three-stage pipeline (assemble -> request -> normalize) for every
mode and applies the mock-mode fallback when no provider is configured.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from ashpaz.errors import ProviderUnavailable
from ashpaz.llm_backends import CompletionBackend
from ashpaz.models import SAMPLE_STEP_ANSWER, SAMPLE_SUGGESTIONS, Recipe, Step, sample_recipe
from ashpaz.normalizer import normalize_answer, normalize_recipe, normalize_suggestions
from ashpaz.prompts import Language, PromptMode, assemble_prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GenerationResult:
    recipe: Recipe
    mock: bool = False


@dataclass
class SuggestionResult:
    suggestions: List[str]
    mock: bool = False


@dataclass
class StepAnswer:
    answer: str
    mock: bool = False


class RecipeAssistant:
    def __init__(self, backend: CompletionBackend):
        self.backend = backend

    def _run(self, mode: PromptMode, user_text: str, language: Language, normalize: Callable[[str], T],
             step: Optional[Step] = None, seed: Optional[str] = None) -> Optional[T]:
        """Returns None when the backend has no credential (mock mode)."""
        payload = assemble_prompt(user_text, mode=mode, language=language, step=step, seed=seed)
        try:
            raw = self.backend.request_completion(payload)
        except ProviderUnavailable as e:
            logger.warning(f"{e.message}. Returning sample data (mock mode) for {mode.value}.")
            return None
        return normalize(raw)

    def generate_recipe(self, prompt: str, language: Language = Language.EN) -> GenerationResult:
        """Generate a full recipe for the user's request."""
        recipe = self._run(PromptMode.FULL_RECIPE, prompt, language, normalize_recipe)
        if recipe is None:
            return GenerationResult(recipe=sample_recipe(), mock=True)
        logger.info(f"Generated recipe '{recipe.title}' with {len(recipe.steps)} steps")
        return GenerationResult(recipe=recipe)

    def suggest_titles(self, prompt: str, language: Language = Language.EN,
                       seed: Optional[str] = None) -> SuggestionResult:
        """Up to five recipe title ideas for the user's request."""
        suggestions = self._run(PromptMode.TITLE_SUGGESTIONS, prompt, language, normalize_suggestions, seed=seed)
        if suggestions is None:
            return SuggestionResult(suggestions=list(SAMPLE_SUGGESTIONS), mock=True)
        return SuggestionResult(suggestions=suggestions)

    def clarify_step(self, question: str, step: Step, language: Language = Language.EN) -> StepAnswer:
        """Answer a question about one step of a recipe."""
        answer = self._run(PromptMode.STEP_CLARIFICATION, question, language, normalize_answer, step=step)
        if answer is None:
            return StepAnswer(answer=SAMPLE_STEP_ANSWER, mock=True)
        return StepAnswer(answer=answer)
