"""
FastAPI service exposing the admin console to the dashboard.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
