"""
SQLAlchemy-backed saved-recipe repository (PostgreSQL in production).
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ashpaz.database import SavedRecipe
from ashpaz.errors import Conflict
from ashpaz.repository import SavedRecipeRepository

logger = logging.getLogger(__name__)


class PostgresSavedRecipeRepository(SavedRecipeRepository):
    def __init__(self, db: Session):
        self.db = db
        self.model = SavedRecipe

    def _query(self, user_id: int, title: str):
        return self.db.query(self.model).filter(
            self.model.user_id == user_id,
            self.model.title == title,
        )

    def list_for_user(self, user_id: int) -> List[dict]:
        rows = self.db.query(self.model).filter(
            self.model.user_id == user_id
        ).order_by(self.model.created_at.desc(), self.model.id.desc()).all()
        return [row.recipe_data for row in rows]

    def find(self, user_id: int, title: str) -> Optional[dict]:
        row = self._query(user_id, title).first()
        return row.recipe_data if row else None

    def add(self, user_id: int, recipe: dict) -> dict:
        title = recipe["title"]
        if self.find(user_id, title) is not None:
            raise Conflict("Recipe already saved")
        row = self.model(user_id=user_id, title=title, recipe_data=recipe)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent save of the same title won the race.
            self.db.rollback()
            logger.info(f"Duplicate save rejected by the database for user {user_id}: '{title}'")
            raise Conflict("Recipe already saved")
        self.db.refresh(row)
        return row.recipe_data

    def delete(self, user_id: int, title: str) -> bool:
        deleted = self._query(user_id, title).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0
