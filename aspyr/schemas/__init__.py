"""
API schemas package. Import from submodules or from this package.

Example:
    from aspyr.schemas import CourseListResponse, ProfileOverviewResponse
    from aspyr.schemas.course_schemas import CourseIcon
"""

from aspyr.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from aspyr.schemas.user_schemas import User
from aspyr.schemas.course_schemas import (
    CourseIcon,
    ProgressResponse,
    CourseCardResponse,
    CourseListResponse,
    ModuleResponse,
    CourseModulesResponse,
)
from aspyr.schemas.progress_schemas import ProgressUpdateResponse, StatsResponse
from aspyr.schemas.profile_schemas import (
    ProfileResponse,
    AchievementResponse,
    ProfileOverviewResponse,
    UpdateProfileRequest,
    UpdateThemeRequest,
)

__all__ = [
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "RegisterRequest",
    "RegisterResponse",
    "User",
    "CourseIcon",
    "ProgressResponse",
    "CourseCardResponse",
    "CourseListResponse",
    "ModuleResponse",
    "CourseModulesResponse",
    "ProgressUpdateResponse",
    "StatsResponse",
    "ProfileResponse",
    "AchievementResponse",
    "ProfileOverviewResponse",
    "UpdateProfileRequest",
    "UpdateThemeRequest",
]
