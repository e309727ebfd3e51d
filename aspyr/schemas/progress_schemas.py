"""
Completion toggle and aggregate stats schemas.
"""

from pydantic import BaseModel
from typing import Literal

from aspyr.schemas.course_schemas import ProgressResponse


class ProgressUpdateResponse(BaseModel):
    status: Literal["completed", "incomplete", "noop"]
    message: str
    module_ids: list[str]
    course_id: str
    progress: ProgressResponse


class StatsResponse(BaseModel):
    courses_enrolled: int
    modules_completed: int
    total_modules: int
    completion_percentage: int
