"""
Profile page schemas: profile card, stats, achievements and edits.
"""

from pydantic import BaseModel, Field
from typing import Optional

from learning.entities import Theme
from aspyr.schemas.progress_schemas import StatsResponse


class ProfileResponse(BaseModel):
    id: str
    username: str
    profile_photo: Optional[str] = None
    cover_image: Optional[str] = None
    tagline: str
    theme: Theme
    learning_mood: str
    daily_journal: Optional[str] = None
    streak_days: int


class AchievementResponse(BaseModel):
    title: str
    description: str
    quote: str
    unlocked: bool


class ProfileOverviewResponse(BaseModel):
    profile: ProfileResponse
    stats: StatsResponse
    achievements: list[AchievementResponse]


class UpdateProfileRequest(BaseModel):
    tagline: Optional[str] = Field(None, max_length=200)
    learning_mood: Optional[str] = Field(None, max_length=200)
    daily_journal: Optional[str] = Field(None, max_length=5000)


class UpdateThemeRequest(BaseModel):
    theme: Theme
