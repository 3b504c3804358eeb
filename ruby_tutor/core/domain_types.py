"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the identity provider's string subject
    - All valid states encoded as Enums — no raw string matching
    - MIN_DURATION_WEEKS..MAX_DURATION_WEEKS bounds every project duration

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (DB columns store .value)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)


# ─── Constants ───────────────────────────────────────────────────

MIN_DURATION_WEEKS = 1
MAX_DURATION_WEEKS = 4
DEFAULT_ESTIMATED_SESSIONS = 3


# ─── Enums ───────────────────────────────────────────────────────

class ProjectType(str, Enum):
    """The 9 project categories the overview model chooses from."""
    GAME = "game"
    ANIMATION = "animation"
    INTERACTIVE_STORY = "interactive_story"
    ART = "art"
    MUSIC = "music"
    QUIZ = "quiz"
    EXPERIMENT = "experiment"
    CALCULATOR = "calculator"
    DATA_VIZ = "data_viz"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ProjectStatus(str, Enum):
    """Project lifecycle — maps to DB `status` column."""
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    ARCHIVED = "archived"


class WeeklyPlanStatus(str, Enum):
    LOCKED = "locked"
    CURRENT = "current"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    STRUGGLING = "struggling"
    FAILED = "failed"
    PLANNED = "planned"
    ACTIVE = "active"
    SIMPLIFIED = "simplified"


class WeeklyPlanDifficulty(str, Enum):
    """Week difficulty — superset of DifficultyLevel (adaptive levels)."""
    NORMAL = "normal"
    ADAPTED = "adapted"
    SIMPLIFIED = "simplified"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ConversationType(str, Enum):
    LEARNING = "learning"
    DEBUGGING = "debugging"
    EXPLORATION = "exploration"
    REVIEW = "review"
    HELP = "help"


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    ERROR = "error"


class MessageRole(str, Enum):
    """Project chat roles. 'ruby' and 'assistant' both count as Ruby turns."""
    USER = "user"
    RUBY = "ruby"
    ASSISTANT = "assistant"


class GoalMessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class CodeLanguage(str, Enum):
    REACT = "react"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    HTML = "html"
    CSS = "css"
    SCRATCH = "scratch"


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"
    MANUAL_STOP = "manual_stop"


class PlanningStep(str, Enum):
    """Planning wizard steps: overview -> overview_review -> breakdown -> complete."""
    OVERVIEW = "overview"
    OVERVIEW_REVIEW = "overview_review"
    BREAKDOWN = "breakdown"
    COMPLETE = "complete"
