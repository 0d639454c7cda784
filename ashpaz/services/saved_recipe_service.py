import logging
from typing import List

from sqlalchemy.orm import Session

from ashpaz.errors import NotFound
from ashpaz.models import Recipe
from ashpaz.repository_postgres import PostgresSavedRecipeRepository

logger = logging.getLogger(__name__)


class SavedRecipeService:
    """
    Service for a user's saved recipes. The recipe title is the key: saving a
    title twice is rejected, and deletes are by title.
    """

    def __init__(self, db: Session, repo=None):
        self.db = db
        self.repo = repo or PostgresSavedRecipeRepository(db)

    def list_recipes(self, user_id: int) -> List[dict]:
        return self.repo.list_for_user(user_id)

    def save_recipe(self, user_id: int, recipe: Recipe) -> dict:
        saved = self.repo.add(user_id, recipe.to_dict())
        logger.info(f"User {user_id} saved recipe '{recipe.title}'")
        return saved

    def delete_recipe(self, user_id: int, title: str):
        if not self.repo.delete(user_id, title):
            raise NotFound("Recipe not found")
        logger.info(f"User {user_id} deleted saved recipe '{title}'")
