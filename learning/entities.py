"""
Snapshot entities shared by the aggregator, the toggle controller and the gateways.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    NEON = "neon"


class Bucket(str, Enum):
    """Course filter states derived from completion percentage."""
    ALL = "all"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: str) -> "Bucket":
        try:
            return cls((value or "all").strip().lower())
        except ValueError:
            raise ValueError(f"Unknown course filter: {value!r}") from None


@dataclass(frozen=True)
class Course:
    id: str
    title: str
    description: str = ""
    category: str = ""
    icon: str = ""
    color: str = ""


@dataclass(frozen=True)
class Module:
    id: str
    course_id: str
    title: str
    order_index: int
    description: str = ""
    duration: str = ""


@dataclass(frozen=True)
class Completion:
    """Existence of a record means `user_id` completed `module_id`."""
    user_id: str
    module_id: str


@dataclass(frozen=True)
class Profile:
    id: str
    username: str
    tagline: str = ""
    theme: Theme = Theme.DARK
    learning_mood: str = ""
    daily_journal: Optional[str] = None
    streak_days: int = 0
    profile_photo: Optional[str] = None
    cover_image: Optional[str] = None


@dataclass(frozen=True)
class CourseProgress:
    course_id: str
    total: int
    completed: int
    percentage: int


@dataclass(frozen=True)
class Stats:
    courses_enrolled: int
    modules_completed: int
    total_modules: int
    completion_percentage: int


@dataclass(frozen=True)
class ModuleState:
    """A module joined with the current user's completion flag."""
    module: Module
    completed: bool
