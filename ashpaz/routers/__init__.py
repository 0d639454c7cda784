# Router modules for the Ashpaz API
# Import order matters - routers register endpoints on the shared api_router

from .base import api_router
from . import auth
from . import users
from . import recipes
from . import saved_recipes

__all__ = ['api_router', 'auth', 'users', 'recipes', 'saved_recipes']
