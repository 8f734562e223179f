"""Resource handlers mounted under ``/api``."""
from .authorized_users import router as authorized_users_router
from .expenses import router as expenses_router

__all__ = ["authorized_users_router", "expenses_router"]
