from .auth_routes import auth_router
from .health_routes import health_router
from .user_routes import users_router

__all__ = ["auth_router", "health_router", "users_router"]
