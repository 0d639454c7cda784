#!/usr/bin/env python3
"""
Main entry point for Ashpaz.
Example run of the recipe pipeline outside the web API. Without provider
keys it runs in mock mode and prints the sample recipe.

Run:
    python main.py
"""

import pprint

from ashpaz.config import load_settings
from ashpaz.controller import RecipeAssistant
from ashpaz.errors import AshpazError
from ashpaz.llm_backends import select_backend
from ashpaz.logging_utils import setup_logging
from ashpaz.prompts import Language


def example_run():
    settings = load_settings()
    setup_logging(settings.log_level)
    assistant = RecipeAssistant(select_backend(settings))

    try:
        result = assistant.generate_recipe("A quick weeknight pasta with garlic", Language.EN)
    except AshpazError as e:
        print("Recipe generation failed:", e.message)
        return

    recipe = result.recipe
    print(f"\n--- {recipe.title} ---{' (mock)' if result.mock else ''}")
    print(f"Serves {recipe.servings}, {recipe.total_time or 'time not given'}")
    print("Tags:", ", ".join(recipe.tags or []) or "-")

    print('\n--- Ingredients ---')
    for ing in recipe.ingredients:
        print(f"  [{ing.display_icon}] {ing.name}: {ing.quantity or 'to taste'}")

    print('\n--- Steps ---')
    for step in recipe.steps:
        print(f"  {step.id}. {step.title} ({step.duration or '-'})")
        print(f"     {step.description}")

    suggestions = assistant.suggest_titles("pasta", Language.EN)
    print('\n--- Title Suggestions ---')
    pprint.pprint(suggestions.suggestions)

    if recipe.steps:
        answer = assistant.clarify_step("How do I know when it's done?", recipe.steps[0], Language.EN)
        print('\n--- Step Question ---')
        print(answer.answer)


if __name__ == '__main__':
    example_run()
