from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from learning.entities import Profile, Stats

Predicate = Callable[[Optional[Profile], Stats], bool]


@dataclass(frozen=True)
class AchievementDefinition:
    title: str
    description: str
    quote: str
    predicate: Predicate


@dataclass(frozen=True)
class AchievementStatus:
    title: str
    description: str
    quote: str
    unlocked: bool


def streak_at_least(days: int) -> Predicate:
    return lambda profile, stats: (profile.streak_days if profile else 0) >= days


def completion_at_least(pct: int) -> Predicate:
    return lambda profile, stats: stats.completion_percentage >= pct


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        title="Consistency Star",
        description="Learning streak of 7+ days",
        quote="Consistency breeds excellence",
        predicate=streak_at_least(7),
    ),
    AchievementDefinition(
        title="UI Pro",
        description="Completed UI Magic course",
        quote="Design is intelligence made visible",
        predicate=completion_at_least(33),
    ),
    AchievementDefinition(
        title="Backend Explorer",
        description="Completed Backend Essentials",
        quote="Logic is the backbone of innovation",
        predicate=completion_at_least(66),
    ),
)


def evaluate_achievements(
    profile: Optional[Profile],
    stats: Stats,
    definitions: Sequence[AchievementDefinition] = ACHIEVEMENTS,
) -> list[AchievementStatus]:
    """Unlocked state of each definition, in declaration order."""
    return [
        AchievementStatus(
            title=d.title,
            description=d.description,
            quote=d.quote,
            unlocked=bool(d.predicate(profile, stats)),
        )
        for d in definitions
    ]
