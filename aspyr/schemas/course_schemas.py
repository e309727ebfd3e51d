"""
Course and module schemas for the dashboard views.
"""

from enum import Enum
from pydantic import BaseModel
from typing import Optional


class CourseIcon(str, Enum):
    """Closed set of icons the client knows how to draw."""
    CODE = "Code"
    SERVER = "Server"
    PALETTE = "Palette"

    @classmethod
    def resolve(cls, tag: Optional[str]) -> "CourseIcon":
        for icon in cls:
            if tag and tag.strip().lower() == icon.value.lower():
                return icon
        return cls.CODE


class ProgressResponse(BaseModel):
    total: int
    completed: int
    percentage: int


class CourseCardResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    icon: CourseIcon
    color: str
    progress: ProgressResponse


class CourseListResponse(BaseModel):
    greeting: str
    filter: str
    courses: list[CourseCardResponse]
    message: Optional[str] = None  # shown when the filter matches nothing


class ModuleResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: str
    order_index: int
    duration: str
    completed: bool


class CourseModulesResponse(BaseModel):
    course: CourseCardResponse
    modules: list[ModuleResponse]
    all_completed: bool
