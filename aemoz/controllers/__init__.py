"""FastAPI routers acting as controllers in the MVC architecture."""

from . import admin, auth, draw, participants, reports

__all__ = ["admin", "auth", "draw", "participants", "reports"]
