from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ashpaz.database import User, get_db
from ashpaz.routers.auth import get_current_user
from ashpaz.routers.base import api_router
from ashpaz.schemas.recipe import SaveRecipeRequest
from ashpaz.services.saved_recipe_service import SavedRecipeService


@api_router.get("/saved-recipes")
def list_saved_recipes(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"recipes": SavedRecipeService(db).list_recipes(current_user.id)}


@api_router.post("/saved-recipes", status_code=status.HTTP_201_CREATED)
def save_recipe(
    request: SaveRecipeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    saved = SavedRecipeService(db).save_recipe(current_user.id, request.recipe)
    return {"message": "Recipe saved successfully", "recipe": saved}


@api_router.delete("/saved-recipes")
def delete_saved_recipe(
    title: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not title or not title.strip():
        raise HTTPException(status_code=400, detail="Recipe title is required")
    SavedRecipeService(db).delete_recipe(current_user.id, title)
    return {"message": "Recipe deleted successfully"}
