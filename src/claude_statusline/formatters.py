"""Pure formatting helpers shared by every statusline style."""

import math
import os
from typing import Optional

from .models import CostTier, Efficiency

COST_MEDIUM_THRESHOLD = 0.05
COST_HIGH_THRESHOLD = 0.10

BURN_RATE_MIN_DURATION_MS = 60_000
MS_PER_HOUR = 3_600_000

EFFICIENCY_FAST_RATIO = 0.10
EFFICIENCY_NORMAL_RATIO = 0.30

CONTEXT_BAR_WIDTH = 8
CONTEXT_BAR_FILLED = "█"
CONTEXT_BAR_EMPTY = "░"
CONTEXT_MEDIUM_THRESHOLD = 60
CONTEXT_HIGH_THRESHOLD = 80

COLLAPSED_PREFIX = "…/"

EFFICIENCY_MARKERS: dict[Efficiency, str] = {
    Efficiency.VERY_FAST: "✨",
    Efficiency.NORMAL: "⚡",
    Efficiency.SLOW: "🐌",
}

# Evaluated in order; first case-insensitive substring match wins
MODEL_FAMILIES: list[tuple[str, str, str]] = [
    ("opus", "🎭", "OPUS"),
    ("sonnet", "🎵", "SONNET"),
    ("haiku", "🍃", "HAIKU"),
]
FALLBACK_MODEL_GLYPH = "🤖"
FALLBACK_MODEL_CHARS = 7


def cost_tier(cost: float) -> CostTier:
    if cost > COST_HIGH_THRESHOLD:
        return CostTier.HIGH
    if cost > COST_MEDIUM_THRESHOLD:
        return CostTier.MEDIUM
    return CostTier.LOW


def burn_rate(cost: float, duration_ms: int) -> Optional[float]:
    """Cost per hour rounded to cents, or None for sessions under a minute."""
    if duration_ms < BURN_RATE_MIN_DURATION_MS:
        return None
    return round(cost / (duration_ms / MS_PER_HOUR), 2)


def format_burn_rate(rate: float) -> str:
    return f"${rate:.2f}/h"


def format_cost(cost: float, decimals: int) -> str:
    return f"${cost:.{decimals}f}"


def format_duration(duration_ms: int) -> str:
    """Format a duration as "2m5s", or "45s" under a minute."""
    duration_ms = max(duration_ms, 0)
    minutes = duration_ms // 60_000
    seconds = (duration_ms % 60_000) // 1000
    if minutes > 0:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def efficiency(
    api_duration_ms: int,
    total_duration_ms: int,
    fast_ratio: float = EFFICIENCY_FAST_RATIO,
    normal_ratio: float = EFFICIENCY_NORMAL_RATIO,
) -> Optional[Efficiency]:
    """Classify how much of the session was spent waiting on API calls."""
    if api_duration_ms <= 0 or total_duration_ms <= 0:
        return None
    ratio = api_duration_ms / total_duration_ms
    if ratio < fast_ratio:
        return Efficiency.VERY_FAST
    if ratio < normal_ratio:
        return Efficiency.NORMAL
    return Efficiency.SLOW


def substitute_home(path: str, home_dir: str) -> str:
    home = home_dir.rstrip("/")
    if not home:
        return path
    if path == home:
        return "~"
    if path.startswith(home + "/"):
        return "~" + path[len(home):]
    return path


def project_relative(current_dir: str, project_dir: str) -> Optional[str]:
    """Return "{project}/{relative}" if current_dir sits inside project_dir."""
    if not (os.path.isabs(current_dir) and os.path.isabs(project_dir)):
        return None
    rel_path = os.path.relpath(current_dir, project_dir)
    if rel_path == "." or rel_path == ".." or rel_path.startswith("../"):
        return None
    project_name = os.path.basename(project_dir.rstrip("/"))
    if not project_name:
        return None
    return f"{project_name}/{rel_path}"


def collapse_path(path: str, max_length: int) -> str:
    """Keep only the last two path segments when path exceeds max_length."""
    if len(path) <= max_length:
        return path
    tail = "/".join(path.rstrip("/").split("/")[-2:])
    return COLLAPSED_PREFIX + tail


def shorten_directory(
    current_dir: str,
    home_dir: str,
    project_dir: Optional[str] = None,
    max_length: Optional[int] = None,
) -> str:
    """Shorten a working directory for display.

    The home prefix becomes ``~``. When a project root is known and differs
    from the current directory, the path is shown relative to it, prefixed
    by the project name. Paths longer than ``max_length`` collapse to
    ``…/<parent>/<dir>``.
    """
    display = substitute_home(current_dir, home_dir)

    if project_dir and project_dir != current_dir:
        relative = project_relative(current_dir, project_dir)
        if relative and relative != display:
            display = relative

    if not display:
        display = os.path.basename(current_dir.rstrip("/")) or "/"

    if max_length is not None:
        display = collapse_path(display, max_length)
    return display


def context_filled_cells(percentage: int, width: int = CONTEXT_BAR_WIDTH) -> int:
    # Round half up; never overflow the bar when usage exceeds 100%
    filled = math.floor(percentage * width / 100 + 0.5)
    return min(max(filled, 0), width)


def context_bar(percentage: int, width: int = CONTEXT_BAR_WIDTH) -> str:
    filled = context_filled_cells(percentage, width)
    return CONTEXT_BAR_FILLED * filled + CONTEXT_BAR_EMPTY * (width - filled)


def context_tier(percentage: int) -> CostTier:
    """Severity bucket for context usage, reusing the cost tier scale."""
    if percentage > CONTEXT_HIGH_THRESHOLD:
        return CostTier.HIGH
    if percentage > CONTEXT_MEDIUM_THRESHOLD:
        return CostTier.MEDIUM
    return CostTier.LOW


def net_lines(lines_added: int, lines_removed: int) -> int:
    return lines_added - lines_removed


def net_indicator(lines_added: int, lines_removed: int) -> str:
    """Arrow and magnitude of the net line change, or "=" when balanced."""
    net = net_lines(lines_added, lines_removed)
    if net > 0:
        return f"↑{net}"
    if net < 0:
        return f"↓{-net}"
    return "="


def model_badge(model_name: str) -> str:
    lowered = model_name.lower()
    for pattern, glyph, label in MODEL_FAMILIES:
        if pattern in lowered:
            return f"{glyph} {label}"
    return f"{FALLBACK_MODEL_GLYPH} {model_name[:FALLBACK_MODEL_CHARS]}"
