"""
Common utility functions used across multiple routes.
"""

from aspyr.schemas.course_schemas import CourseCardResponse, CourseIcon, ProgressResponse
from aspyr.schemas.user_schemas import User
from learning.entities import Course, CourseProgress


def display_name(current_user: User) -> str:
    """Email prefix, e.g. `ada` for ada@example.com."""
    return current_user.email.split("@", 1)[0]


def greeting(current_user: User) -> str:
    return f"Welcome back, {display_name(current_user)}!"


def progress_response(progress: CourseProgress) -> ProgressResponse:
    return ProgressResponse(total=progress.total, completed=progress.completed, percentage=progress.percentage)


def course_card(course: Course, progress: CourseProgress) -> CourseCardResponse:
    return CourseCardResponse(
        id=course.id,
        title=course.title,
        description=course.description or "",
        category=course.category or "",
        icon=CourseIcon.resolve(course.icon),
        color=course.color or "",
        progress=progress_response(progress),
    )
