"""Data models for the statusline renderer."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_MODEL_NAME = "Unknown"
DEFAULT_CURRENT_DIR = "~"

# Branch names longer than this are cut to BRANCH_KEEP_CHARS + BRANCH_ELLIPSIS
BRANCH_MAX_CHARS = 12
BRANCH_KEEP_CHARS = 10
BRANCH_ELLIPSIS = ".."


class RenderStyle(str, Enum):
    """The three statusline layouts."""

    BASIC = "basic"
    MINIMAL = "minimal"
    SEGMENTS = "segments"


class CostTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Efficiency(str, Enum):
    """Share of wall-clock time spent waiting on the API."""

    VERY_FAST = "very_fast"
    NORMAL = "normal"
    SLOW = "slow"


@dataclass(frozen=True)
class SessionSnapshot:
    """One session's telemetry at render time, with every field defaulted."""

    model_name: str = DEFAULT_MODEL_NAME
    current_dir: str = DEFAULT_CURRENT_DIR
    project_dir: Optional[str] = None
    total_cost_usd: float = 0.0
    total_duration_ms: int = 0
    api_duration_ms: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    transcript_path: Optional[str] = None


@dataclass(frozen=True)
class GitState:
    """Working tree status for the session directory."""

    present: bool = False
    branch: str = ""
    staged: int = 0
    unstaged: int = 0
    ahead: int = 0
    behind: int = 0

    @property
    def display_branch(self) -> str:
        if len(self.branch) > BRANCH_MAX_CHARS:
            return self.branch[:BRANCH_KEEP_CHARS] + BRANCH_ELLIPSIS
        return self.branch

    @property
    def is_clean(self) -> bool:
        return self.staged == 0 and self.unstaged == 0

    @property
    def has_changes(self) -> bool:
        """True if anything is staged, unstaged, or out of sync with upstream."""
        return not self.is_clean or self.ahead > 0 or self.behind > 0


@dataclass(frozen=True)
class ContextUsage:
    """Estimated context window usage; percentage may exceed 100."""

    available: bool = False
    percentage: int = 0
    token_estimate: int = 0

    @classmethod
    def unavailable(cls) -> "ContextUsage":
        return cls()
