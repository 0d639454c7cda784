"""
Normalization and validation of raw LLM completions.

Pure functions: the same raw text always yields the same result or the same
error type. Nothing here performs I/O or retries.
"""

import json
import logging
import re
from typing import Any, List

from pydantic import ValidationError

from ashpaz.errors import EmptyCompletion, InvalidSuggestionsFormat, MalformedResponse, SchemaViolation
from ashpaz.models import Recipe
from ashpaz.prompts import SUGGESTION_COUNT

logger = logging.getLogger(__name__)

FENCE = "```"
# Opening fence with an optional language tag, or a closing fence, plus one trailing newline.
FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+.-]*[ \t]*\r?\n?")


def strip_code_fences(text: str) -> str:
    """
    Trim the text and, when it starts with a code fence, remove every fence
    delimiter in it. A missing closing fence is not an error.
    """
    text = text.strip()
    if text.startswith(FENCE):
        text = FENCE_PATTERN.sub("", text).strip()
    return text


def parse_json(raw: str) -> Any:
    if raw is None or not raw.strip():
        raise EmptyCompletion()
    text = strip_code_fences(raw)
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.warning(f"AI response is not valid JSON: {e}")
        logger.debug(f"Raw completion: {raw}")
        raise MalformedResponse(raw)


def _warn_on_step_order(recipe: Recipe):
    ids = [step.id for step in recipe.steps]
    if any(later <= earlier for earlier, later in zip(ids, ids[1:])):
        # Step ids are a convention only; flag instead of renumbering.
        logger.warning(f"Recipe '{recipe.title}' has non-increasing step ids: {ids}")


def normalize_recipe(raw: str) -> Recipe:
    """Turn a raw completion into a validated Recipe."""
    data = parse_json(raw)
    try:
        recipe = Recipe.model_validate(data)
    except ValidationError as e:
        logger.warning(f"AI response failed recipe validation: {e.error_count()} error(s)")
        logger.debug(f"Raw completion: {raw}")
        raise SchemaViolation(raw, errors=e.errors(include_url=False))
    _warn_on_step_order(recipe)
    return recipe


def normalize_suggestions(raw: str) -> List[str]:
    """
    Turn a raw completion into at most SUGGESTION_COUNT title strings.
    Longer arrays are truncated; shorter non-empty arrays are returned as-is.
    """
    data = parse_json(raw)
    if not isinstance(data, list) or len(data) == 0:
        logger.warning(f"AI suggestions are not a non-empty array (got {type(data).__name__})")
        raise InvalidSuggestionsFormat(raw)
    suggestions = data[:SUGGESTION_COUNT]
    if not all(isinstance(s, str) for s in suggestions):
        raise InvalidSuggestionsFormat(raw, message="Suggestions must be strings")
    return suggestions


def normalize_answer(raw: str) -> str:
    """Step answers are plain text; only surrounding whitespace is removed."""
    if raw is None or not raw.strip():
        raise EmptyCompletion()
    return raw.strip()
