from cryptic_chest.app.models.user import User
from cryptic_chest.app.models.password import Password

__all__ = ["User", "Password"]
