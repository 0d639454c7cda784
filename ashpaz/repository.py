"""
Repository interface for saved recipes.
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class SavedRecipeRepository(ABC):
    @abstractmethod
    def list_for_user(self, user_id: int) -> List[dict]:
        """Recipe blobs saved by the user, newest first."""

    @abstractmethod
    def find(self, user_id: int, title: str) -> Optional[dict]:
        pass

    @abstractmethod
    def add(self, user_id: int, recipe: dict) -> dict:
        """Store a recipe; raises Conflict if the user already saved this title."""

    @abstractmethod
    def delete(self, user_id: int, title: str) -> bool:
        """Returns False when nothing matched."""
