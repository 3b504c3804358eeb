"""Dashboard Metrics — pure aggregation over a user's projects.

Invariants:
    - total_time_spent is a PostgreSQL interval rendered as "HH:MM[:SS]"; seconds ignored
    - Blank, unparsable or "00:00:00" intervals contribute 0 minutes
    - concepts_mastered is counted as a set across all projects (no double counting)
"""

from dataclasses import dataclass, asdict
from typing import Iterable, Protocol

from ruby_tutor.core.domain_types import ProjectStatus


class ProjectLike(Protocol):
    status: str
    total_time_spent: str | None
    concepts_mastered: list | None


@dataclass(frozen=True)
class DashboardMetrics:
    completed: int
    active: int
    total: int
    total_time_minutes: int
    concepts: int

    @property
    def formatted_time(self) -> str:
        return format_minutes(self.total_time_minutes)

    def to_dict(self) -> dict:
        return {**asdict(self), "formatted_time": self.formatted_time}


def interval_minutes(interval: str | None) -> int:
    if not interval or interval == "00:00:00":
        return 0
    parts = interval.split(":")
    try:
        hours = int(parts[0]) if parts[0] else 0
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return 0
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}min" if mins > 0 else f"{hours}h"


def compute_metrics(projects: Iterable[ProjectLike]) -> DashboardMetrics:
    projects = list(projects)
    concepts: set[str] = set()
    for p in projects:
        concepts.update(p.concepts_mastered or [])
    return DashboardMetrics(
        completed=sum(1 for p in projects if p.status == ProjectStatus.COMPLETED.value),
        active=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE.value),
        total=len(projects),
        total_time_minutes=sum(interval_minutes(p.total_time_spent) for p in projects),
        concepts=len(concepts),
    )
