"""
Progress aggregation over in-memory snapshots.

Everything here is pure: callers pass the course, module and completion
snapshots and get derived view data back. Completions that reference a module
missing from the module snapshot are ignored rather than reported.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from learning.entities import Bucket, Completion, Course, CourseProgress, Module, ModuleState, Stats


def percent(done: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when there is nothing to do."""
    if total <= 0:
        return 0
    return (200 * done + total) // (2 * total)


def completed_module_ids(completions: Iterable[Completion]) -> set[str]:
    return {c.module_id for c in completions}


def course_modules(course_id: str, modules: Iterable[Module]) -> list[Module]:
    """Modules of one course in display order."""
    return sorted((m for m in modules if m.course_id == course_id), key=lambda m: m.order_index)


def course_progress(course_id: str, modules: Iterable[Module], completions: Iterable[Completion]) -> CourseProgress:
    done_ids = completed_module_ids(completions)
    own = [m for m in modules if m.course_id == course_id]
    completed = sum(1 for m in own if m.id in done_ids)
    return CourseProgress(
        course_id=course_id,
        total=len(own),
        completed=completed,
        percentage=percent(completed, len(own)),
    )


def in_bucket(progress: CourseProgress, bucket: Bucket) -> bool:
    if bucket is Bucket.COMPLETED:
        return progress.percentage == 100
    if bucket is Bucket.IN_PROGRESS:
        return 0 < progress.percentage < 100
    return True


def filter_courses(
    courses: Sequence[Course],
    modules: Sequence[Module],
    completions: Iterable[Completion],
    bucket: Bucket | str,
) -> list[Course]:
    """Courses in `bucket`, keeping the input order."""
    if not isinstance(bucket, Bucket):
        bucket = Bucket.parse(bucket)
    if bucket is Bucket.ALL:
        return list(courses)
    done = list(completions)
    return [c for c in courses if in_bucket(course_progress(c.id, modules, done), bucket)]


def aggregate_stats(
    courses: Sequence[Course],
    modules: Sequence[Module],
    completions: Iterable[Completion],
) -> Stats:
    """Totals across every visible course; all courses count as enrolled."""
    module_ids = {m.id for m in modules}
    completed = len(completed_module_ids(completions) & module_ids)
    return Stats(
        courses_enrolled=len(courses),
        modules_completed=completed,
        total_modules=len(module_ids),
        completion_percentage=percent(completed, len(module_ids)),
    )


def module_states(course_id: str, modules: Iterable[Module], completions: Iterable[Completion]) -> list[ModuleState]:
    done_ids = completed_module_ids(completions)
    return [ModuleState(module=m, completed=m.id in done_ids) for m in course_modules(course_id, modules)]
