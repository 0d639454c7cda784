# flake8: noqa
import copy

import pytest

from ashpaz.database import SavedRecipe, User
from ashpaz.errors import Conflict
from ashpaz.models import SAMPLE_RECIPE_DATA
from ashpaz.repository_postgres import PostgresSavedRecipeRepository

from .conftest import TEA_RECIPE


def test_saved_recipes_require_auth(client):
    assert client.get("/api/saved-recipes").status_code == 401
    assert client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE}).status_code == 401
    assert client.delete("/api/saved-recipes", params={"title": "Tea"}).status_code == 401


def test_save_twice_conflicts(user_client):
    first = user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    assert first.status_code == 201
    assert first.json() == {"message": "Recipe saved successfully", "recipe": TEA_RECIPE}

    second = user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    assert second.status_code == 409
    assert second.json() == {"error": "Recipe already saved"}


def test_list_newest_first(user_client):
    user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    user_client.post("/api/saved-recipes", json={"recipe": SAMPLE_RECIPE_DATA})

    res = user_client.get("/api/saved-recipes")
    assert res.status_code == 200
    assert [r["title"] for r in res.json()["recipes"]] == ["Simple Garlic Pasta", "Tea"]
    assert res.json()["recipes"][0] == SAMPLE_RECIPE_DATA


def test_saved_recipe_is_validated(user_client):
    bad = copy.deepcopy(TEA_RECIPE)
    bad["steps"][0]["id"] = "first"
    res = user_client.post("/api/saved-recipes", json={"recipe": bad})
    assert res.status_code == 400
    assert user_client.get("/api/saved-recipes").json() == {"recipes": []}


def test_delete_by_title(user_client):
    user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    res = user_client.delete("/api/saved-recipes", params={"title": "Tea"})
    assert res.status_code == 200
    assert user_client.get("/api/saved-recipes").json() == {"recipes": []}

    again = user_client.delete("/api/saved-recipes", params={"title": "Tea"})
    assert again.status_code == 404
    assert again.json() == {"error": "Recipe not found"}


def test_delete_requires_title(user_client):
    res = user_client.delete("/api/saved-recipes")
    assert res.status_code == 400
    assert res.json() == {"error": "Recipe title is required"}


def test_titles_are_scoped_per_user(user_client):
    user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    user_client.post("/api/users/register",
                     json={"email": "second@example.com", "password": "secret-pass", "name": "Second"})
    assert user_client.get("/api/saved-recipes").json() == {"recipes": []}
    assert user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE}).status_code == 201


def test_account_delete_removes_saved_recipes(user_client, database):
    user_client.post("/api/saved-recipes", json={"recipe": TEA_RECIPE})
    assert user_client.delete("/api/users/me").status_code == 200

    session = database.SessionLocal()
    try:
        assert session.query(SavedRecipe).count() == 0
    finally:
        session.close()


def test_concurrent_duplicate_save_is_conflict(database):
    database.init_db()
    session = database.SessionLocal()
    try:
        user = User(email="race@example.com", name="Race")
        session.add(user)
        session.commit()

        repo = PostgresSavedRecipeRepository(session)
        repo.add(user.id, TEA_RECIPE)
        # another request saved the same title between the lookup and the insert
        repo.find = lambda user_id, title: None

        with pytest.raises(Conflict):
            repo.add(user.id, TEA_RECIPE)

        assert repo.list_for_user(user.id) == [TEA_RECIPE]
        assert session.query(SavedRecipe).count() == 1
    finally:
        session.close()
