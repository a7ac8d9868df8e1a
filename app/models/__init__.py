"""
Shared model utilities.

Domain models live beside their feature (app.projects, app.scenarios,
app.audit); only helpers used across them belong here.
"""

from app.models.base import generate_id

__all__ = ["generate_id"]
