"""
Learner progress core. Pure aggregation, completion toggling and achievements
over snapshots fetched through a `TableGateway`.

- learning.entities: Course, Module, Completion, Profile and derived records
- learning.progress: course_progress, filter_courses, aggregate_stats
- learning.toggle: plan_toggle, plan_mark_all, ModuleToggleController
- learning.achievements: evaluate_achievements
- learning.session: SessionStore, DashboardSession
- learning.store: TableGateway contract
"""

from learning.achievements import ACHIEVEMENTS, AchievementStatus, evaluate_achievements
from learning.entities import (
    Bucket,
    Completion,
    Course,
    CourseProgress,
    Module,
    ModuleState,
    Profile,
    Stats,
    Theme,
)
from learning.errors import AuthRequired, DashboardError, NoOpCondition, RemoteReadFailure, RemoteWriteFailure
from learning.progress import aggregate_stats, course_progress, filter_courses, module_states
from learning.session import AuthSession, DashboardSession, SessionEvent, SessionStore
from learning.store import TableGateway
from learning.toggle import ModuleToggleController, plan_mark_all, plan_toggle

__all__ = [
    "ACHIEVEMENTS",
    "AchievementStatus",
    "evaluate_achievements",
    "Bucket",
    "Completion",
    "Course",
    "CourseProgress",
    "Module",
    "ModuleState",
    "Profile",
    "Stats",
    "Theme",
    "AuthRequired",
    "DashboardError",
    "NoOpCondition",
    "RemoteReadFailure",
    "RemoteWriteFailure",
    "aggregate_stats",
    "course_progress",
    "filter_courses",
    "module_states",
    "AuthSession",
    "DashboardSession",
    "SessionEvent",
    "SessionStore",
    "TableGateway",
    "ModuleToggleController",
    "plan_mark_all",
    "plan_toggle",
]
