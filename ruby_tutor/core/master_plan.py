"""Master Plan — pure planning state machine over the project's `master_plan` JSON.

Invariants:
    - master_plan shape: {overview, overview_generated_at, breakdown, breakdown_generated_at, complete}
    - Step resolution is a pure function of the stored dict (page reload = same step)
    - "Valid plan data" = any of overview / breakdown / complete is truthy
    - Partial plan data without an overview blocks auto-generation (never overwrite silently)
    - Writers return NEW dicts — the stored dict is never mutated in place
    - Readers tolerate any stored JSON: non-object sections and weeks count as missing
    - Durations always clamped to MIN_DURATION_WEEKS..MAX_DURATION_WEEKS

Design Decisions:
    - Dict in, dict out: the JSON column is the source of truth, no parallel model to keep in sync
    - Timestamps passed in by the caller: deterministic tests, no clock inside core
    - Flattening (overview + breakdown -> one plan) lives here so weekly plan rows can be
      derived from either the nested detail-view format or an already-flat plan
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ruby_tutor.core.domain_types import (
    DEFAULT_ESTIMATED_SESSIONS,
    MAX_DURATION_WEEKS,
    MIN_DURATION_WEEKS,
    PlanningStep,
    WeeklyPlanStatus,
)

_PLAN_KEYS = ("overview", "breakdown", "complete")
_REQUIRED_WEEK_TEXT = ("title", "main_goal")
_REQUIRED_WEEK_LISTS = ("concepts", "deliverables")


@dataclass(frozen=True)
class PlanResumption:
    """Where the planning wizard resumes for a given stored master plan."""
    step: PlanningStep
    overview: dict | None
    breakdown: dict | None
    auto_generate_allowed: bool


# -- Reading -------------------------------------------------------------------

def _section(master_plan: Any, key: str) -> dict | None:
    """A nested plan section, or None when missing or not an object."""
    value = master_plan.get(key) if isinstance(master_plan, dict) else None
    return value if isinstance(value, dict) and value else None


def _weeks(breakdown: Any) -> list:
    weeks = breakdown.get("weekly_breakdown") if isinstance(breakdown, dict) else None
    return weeks if isinstance(weeks, list) else []


def _week_number(week: dict) -> int | None:
    number = week.get("week")
    if isinstance(number, bool) or not isinstance(number, int) or number < 1:
        return None
    return number


def has_valid_plan_data(master_plan: Any) -> bool:
    if not isinstance(master_plan, dict) or not master_plan:
        return False
    return any(master_plan.get(key) for key in _PLAN_KEYS)


def resolve_planning_step(master_plan: Any) -> PlanResumption:
    """Resolve the wizard step from persisted state.

    overview + breakdown + complete -> COMPLETE
    overview only (or breakdown incomplete) -> OVERVIEW_REVIEW
    breakdown/complete without overview -> OVERVIEW, auto-generation blocked
    empty / unrecognised -> OVERVIEW, auto-generation allowed

    Sections that are not objects count as missing.
    """
    if not isinstance(master_plan, dict):
        return PlanResumption(PlanningStep.OVERVIEW, None, None, True)

    overview = _section(master_plan, "overview")
    breakdown = _section(master_plan, "breakdown")
    if overview:
        if breakdown and master_plan.get("complete"):
            return PlanResumption(PlanningStep.COMPLETE, overview, breakdown, False)
        return PlanResumption(PlanningStep.OVERVIEW_REVIEW, overview, None, False)

    if has_valid_plan_data(master_plan):
        return PlanResumption(PlanningStep.OVERVIEW, None, None, False)
    return PlanResumption(PlanningStep.OVERVIEW, None, None, True)


def clamp_duration(weeks: int) -> int:
    return max(MIN_DURATION_WEEKS, min(MAX_DURATION_WEEKS, int(weeks)))


def editable_duration(master_plan: Any, fallback: int) -> int:
    """Duration the child can still edit: overview recommendation, else the project's."""
    overview = _section(master_plan, "overview") or {}
    recommended = overview.get("recommended_duration")
    if isinstance(recommended, int) and not isinstance(recommended, bool) and recommended:
        return clamp_duration(recommended)
    return clamp_duration(fallback or MIN_DURATION_WEEKS)


def approval_blockers(master_plan: Any) -> list[str]:
    """Reasons the plan cannot be approved yet (empty list = approvable)."""
    if not _section(master_plan, "overview"):
        return ["overview_missing"]
    weeks = _weeks(_section(master_plan, "breakdown"))
    if not weeks:
        return ["weekly_breakdown_missing"]
    blockers = []
    for position, week in enumerate(weeks, start=1):
        if not isinstance(week, dict):
            blockers.append(f"week_{position}_invalid")
            continue
        number = _week_number(week)
        if number is None:
            blockers.append(f"week_{position}_number_missing")
            number = position
        for key in _REQUIRED_WEEK_TEXT:
            if not week.get(key):
                blockers.append(f"week_{number}_{key}_missing")
        for key in _REQUIRED_WEEK_LISTS:
            if week.get(key) is None:
                blockers.append(f"week_{number}_{key}_missing")
    return blockers


# -- Writing -------------------------------------------------------------------

def with_overview(overview: dict, now: datetime) -> dict:
    """Fresh master plan holding only the overview (any old breakdown discarded)."""
    return {"overview": overview, "overview_generated_at": now.isoformat()}


def with_breakdown(master_plan: Any, breakdown: dict, now: datetime) -> dict:
    """Merge breakdown into the CURRENT stored plan, preserving the overview."""
    current = master_plan if isinstance(master_plan, dict) else {}
    return {
        **current,
        "breakdown": breakdown,
        "breakdown_generated_at": now.isoformat(),
        "complete": True,
    }


def with_duration(master_plan: dict, weeks: int, now: datetime) -> dict:
    """Rewrite the overview's recommended_duration; keep the original generation time."""
    overview = {**master_plan["overview"], "recommended_duration": weeks}
    return {
        **master_plan,
        "overview": overview,
        "overview_generated_at": master_plan.get("overview_generated_at") or now.isoformat(),
    }


def overview_project_fields(overview: dict) -> dict:
    """Project columns copied from a freshly generated overview."""
    return {
        "project_type": overview["project_type"],
        "difficulty_level": overview["difficulty_assessment"],
        "duration_weeks": clamp_duration(overview["recommended_duration"]),
        "learning_goal": overview.get("learning_trajectory") or "",
    }


# -- Flattening + weekly plans -------------------------------------------------

def flatten_master_plan(master_plan: dict) -> dict:
    """Combine nested overview + breakdown into the flat plan shape.

    Already-flat plans (weekly_breakdown at top level) pass through unchanged.
    """
    if "weekly_breakdown" in master_plan:
        return master_plan
    overview = _section(master_plan, "overview") or {}
    breakdown = _section(master_plan, "breakdown") or {}
    return {
        "response": breakdown.get("response", ""),
        "project_analysis": overview.get("project_analysis", ""),
        "project_type": overview.get("project_type"),
        "recommended_duration": overview.get("recommended_duration"),
        "difficulty_assessment": overview.get("difficulty_assessment"),
        "learning_trajectory": overview.get("learning_trajectory", ""),
        "weekly_breakdown": _weeks(breakdown),
        "success_criteria": breakdown.get("success_criteria") or [],
    }


def weekly_plan_rows(master_plan: dict) -> list[dict]:
    """Weekly plan row values for every numbered week of a (nested or flat) master plan.

    Week 1 starts CURRENT, the rest LOCKED; first attempt; sessions default to 3.
    Entries that are not objects or carry no week number are skipped.
    """
    plan = flatten_master_plan(master_plan)
    rows = []
    for week in _weeks(plan):
        if not isinstance(week, dict):
            continue
        number = _week_number(week)
        if number is None:
            continue
        concepts = week.get("concepts") or []
        deliverables = week.get("deliverables") or []
        main_goal = week.get("main_goal")
        rows.append({
            "week_number": number,
            "week_title": week.get("title") or f"Week {number}",
            "week_description": main_goal,
            "learning_objectives": [main_goal] if main_goal else [],
            "target_concepts": concepts,
            "attempt_number": 1,
            "difficulty_level": plan.get("difficulty_assessment") or "normal",
            "status": (
                WeeklyPlanStatus.CURRENT.value if number == 1
                else WeeklyPlanStatus.LOCKED.value
            ),
            "progress_percentage": 0,
            "estimated_sessions": week.get("estimated_sessions") or DEFAULT_ESTIMATED_SESSIONS,
            "goals": {
                "main_goal": main_goal,
                "concepts": concepts,
                "deliverables": deliverables,
            },
            "deliverables": deliverables,
        })
    return rows
