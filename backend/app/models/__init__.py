# Import every model so Base.metadata knows all tables
from backend.app.models.user import User
from backend.app.models.platform import Platform
from backend.app.models.binding import Binding

__all__ = ["User", "Platform", "Binding"]
