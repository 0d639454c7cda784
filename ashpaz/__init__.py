"""
Ashpaz - bilingual (English/Persian) AI recipe assistant.

This package provides:
- Prompt assembly for recipes, title suggestions and step questions
- Interchangeable LLM completion backends with mock-mode fallback
- Normalization and validation of untrusted model output
- User accounts (password and Google sign-in) with cookie sessions
- Per-user saved recipes
"""

from .models import Ingredient, Step, Recipe
from .prompts import PromptMode, Language, assemble_prompt
from .llm_backends import CompletionBackend, ChatCompletionBackend, GenerateContentBackend, select_backend
from .normalizer import normalize_recipe, normalize_suggestions, normalize_answer
from .controller import RecipeAssistant

__version__ = '1.0.0'
__author__ = 'Ashpaz Team'

__all__ = [
    'Ingredient',
    'Step',
    'Recipe',
    'PromptMode',
    'Language',
    'assemble_prompt',
    'CompletionBackend',
    'ChatCompletionBackend',
    'GenerateContentBackend',
    'select_backend',
    'normalize_recipe',
    'normalize_suggestions',
    'normalize_answer',
    'RecipeAssistant',
]
