"""
API data models. Single import surface for DB entities.

DB entities (aspyr.models.models):
- User, Course, Module, Completion, Profile
"""

from aspyr.models.models import (
    User,
    Course,
    Module,
    Completion,
    Profile,
)

__all__ = [
    "User",
    "Course",
    "Module",
    "Completion",
    "Profile",
]
