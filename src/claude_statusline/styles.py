"""Compose formatted fields into the three statusline styles."""

from dataclasses import dataclass
from typing import Callable, Optional

import click

from . import formatters as fmt
from .config import Config
from .models import ContextUsage, CostTier, GitState, RenderStyle, SessionSnapshot
from .segments import (
    BLACK,
    BLUE,
    BRIGHT,
    DARK,
    GRAY,
    LIGHT,
    LIME,
    PURPLE,
    RED,
    TEAL,
    TIER_COLORS,
    WHITE,
    YELLOW,
    Segment,
    join_segments,
)

GIT_GLYPH = "⎇"
CLEAN_MARK = "✓"
DIRTY_MARK = "*"

COST_PREFIXES: dict[CostTier, str] = {
    CostTier.LOW: "",
    CostTier.MEDIUM: "💰 ",
    CostTier.HIGH: "💸 ",
}

CONTEXT_COLORS: dict[CostTier, tuple[int, int]] = {
    CostTier.LOW: (DARK, LIGHT),
    CostTier.MEDIUM: TIER_COLORS[CostTier.MEDIUM],
    CostTier.HIGH: TIER_COLORS[CostTier.HIGH],
}


def render_basic(snapshot: SessionSnapshot, config: Config, **_) -> str:
    """Shell-prompt style: user@host:directory."""
    directory = fmt.shorten_directory(snapshot.current_dir, str(config.home_dir))
    identity = f"{config.user}@{config.host}"
    return (
        click.style(identity, fg="green", bold=True)
        + ":"
        + click.style(directory, fg="blue", bold=True)
    )


# Minimal style


def minimal_git_segment(git: GitState) -> Optional[Segment]:
    if not git.present:
        return None
    if git.is_clean:
        return Segment(f"{GIT_GLYPH} {git.display_branch}", bg=TEAL, fg=WHITE)
    return Segment(f"{GIT_GLYPH} {git.display_branch}{DIRTY_MARK}", bg=YELLOW, fg=BLACK)


def render_minimal(
    snapshot: SessionSnapshot, config: Config, git: Optional[GitState] = None, **_
) -> str:
    git = git or GitState()
    bg, fg = TIER_COLORS[fmt.cost_tier(snapshot.total_cost_usd)]

    segments = [
        Segment(snapshot.model_name.upper(), bg=PURPLE, fg=WHITE, bold=True),
        Segment(
            fmt.shorten_directory(
                snapshot.current_dir,
                str(config.home_dir),
                max_length=config.minimal_dir_max_length,
            ),
            bg=BLUE,
            fg=BRIGHT,
        ),
        minimal_git_segment(git),
        Segment(fmt.format_cost(snapshot.total_cost_usd, 4), bg=bg, fg=fg),
        Segment(fmt.format_duration(snapshot.total_duration_ms), bg=GRAY, fg=WHITE),
    ]
    return join_segments([s for s in segments if s is not None])


# Segments style


def git_detail(git: GitState) -> str:
    """Space-prefixed change counters, e.g. " +2 ~1 ↑3"."""
    stats = ""
    if git.staged > 0:
        stats += f" +{git.staged}"
    if git.unstaged > 0:
        stats += f" ~{git.unstaged}"
    if git.ahead > 0:
        stats += f" ↑{git.ahead}"
    if git.behind > 0:
        stats += f" ↓{git.behind}"
    return stats


def full_git_segment(git: GitState) -> Optional[Segment]:
    if not git.present:
        return None
    if git.has_changes:
        return Segment(
            f"{GIT_GLYPH} {git.display_branch}{git_detail(git)}", bg=YELLOW, fg=BLACK
        )
    return Segment(f"{GIT_GLYPH} {git.display_branch} {CLEAN_MARK}", bg=TEAL, fg=WHITE)


def full_cost_segment(snapshot: SessionSnapshot) -> Segment:
    tier = fmt.cost_tier(snapshot.total_cost_usd)
    bg, fg = TIER_COLORS[tier]
    text = COST_PREFIXES[tier] + fmt.format_cost(snapshot.total_cost_usd, 3)
    rate = fmt.burn_rate(snapshot.total_cost_usd, snapshot.total_duration_ms)
    if rate is not None:
        text += f" {fmt.format_burn_rate(rate)}"
    return Segment(text, bg=bg, fg=fg)


def full_time_segment(snapshot: SessionSnapshot, config: Config) -> Optional[Segment]:
    if snapshot.total_duration_ms <= 0:
        return None
    text = f"⏱ {fmt.format_duration(snapshot.total_duration_ms)}"
    marker = fmt.efficiency(
        snapshot.api_duration_ms,
        snapshot.total_duration_ms,
        config.efficiency_fast_ratio,
        config.efficiency_normal_ratio,
    )
    if marker is not None:
        text += f" {fmt.EFFICIENCY_MARKERS[marker]}"
    return Segment(text, bg=GRAY, fg=WHITE)


def full_context_segment(context: ContextUsage) -> Optional[Segment]:
    if not context.available:
        return None
    bg, fg = CONTEXT_COLORS[fmt.context_tier(context.percentage)]
    bar = fmt.context_bar(context.percentage)
    return Segment(f"📊 {context.percentage}% [{bar}]", bg=bg, fg=fg)


def full_changes_segment(snapshot: SessionSnapshot) -> Optional[Segment]:
    added, removed = snapshot.lines_added, snapshot.lines_removed
    if added == 0 and removed == 0:
        return None
    net = fmt.net_lines(added, removed)
    if net > 0:
        net_fg = LIME
    elif net < 0:
        net_fg = RED
    else:
        net_fg = LIGHT
    return Segment(
        f"📝 +{added}/-{removed}",
        bg=DARK,
        fg=LIGHT,
        tail=f" {fmt.net_indicator(added, removed)}",
        tail_fg=net_fg,
    )


def render_segments(
    snapshot: SessionSnapshot,
    config: Config,
    git: Optional[GitState] = None,
    context: Optional[ContextUsage] = None,
    **_,
) -> str:
    git = git or GitState()
    context = context or ContextUsage.unavailable()
    directory = fmt.shorten_directory(
        snapshot.current_dir,
        str(config.home_dir),
        project_dir=snapshot.project_dir,
        max_length=config.segments_dir_max_length,
    )

    segments = [
        Segment(fmt.model_badge(snapshot.model_name), bg=PURPLE, fg=WHITE, bold=True),
        Segment(f"📁 {directory}", bg=BLUE, fg=BRIGHT),
        full_git_segment(git),
        full_cost_segment(snapshot),
        full_time_segment(snapshot, config),
        full_context_segment(context),
        full_changes_segment(snapshot),
    ]
    return join_segments([s for s in segments if s is not None])


@dataclass(frozen=True)
class StyleRenderer:
    """A style's compose function and the external queries it consumes."""

    render: Callable[..., str]
    uses_git: bool = False
    uses_context: bool = False


STYLES: dict[RenderStyle, StyleRenderer] = {
    RenderStyle.BASIC: StyleRenderer(render_basic),
    RenderStyle.MINIMAL: StyleRenderer(render_minimal, uses_git=True),
    RenderStyle.SEGMENTS: StyleRenderer(render_segments, uses_git=True, uses_context=True),
}
