"""Tests for segment joining and the three statusline styles."""

from pathlib import Path

import click
import pytest

from claude_statusline.config import Config
from claude_statusline.models import ContextUsage, GitState, RenderStyle, SessionSnapshot
from claude_statusline.segments import (
    BLUE,
    DARK,
    GRAY,
    GREEN,
    LIME,
    ORANGE,
    PURPLE,
    RED,
    SEPARATOR,
    TEAL,
    YELLOW,
    Segment,
    join_segments,
    render_segment,
)
from claude_statusline.styles import (
    STYLES,
    full_changes_segment,
    full_context_segment,
    full_cost_segment,
    full_git_segment,
    full_time_segment,
    minimal_git_segment,
    render_basic,
    render_minimal,
    render_segments,
)


@pytest.fixture
def config(tmp_path):
    return Config(
        home_dir=Path("/home/alice"),
        user="alice",
        host="devbox",
        settings_file=tmp_path / "settings.json",
    )


class TestJoinSegments:
    def test_empty(self):
        assert join_segments([]) == ""

    def test_single_segment_has_end_cap(self):
        output = join_segments([Segment("a", bg=BLUE, fg=15)])
        assert click.unstyle(output) == f" a {SEPARATOR}"
        assert output.endswith(click.style(SEPARATOR, fg=BLUE))

    def test_separator_takes_previous_background(self):
        output = join_segments([Segment("a", bg=PURPLE, fg=15), Segment("b", bg=BLUE, fg=15)])
        assert click.unstyle(output) == f" a {SEPARATOR} b {SEPARATOR}"
        assert click.style(SEPARATOR, fg=PURPLE, bg=BLUE) in output

    def test_tail_keeps_background(self):
        output = render_segment(Segment("x", bg=DARK, fg=250, tail=" ↑3", tail_fg=LIME))
        assert click.unstyle(output) == " x ↑3 "
        assert "\x1b[38;5;82m ↑3" in output


class TestBasicStyle:
    def test_identity_and_directory(self, config):
        snapshot = SessionSnapshot(current_dir="/home/alice/code/app")
        assert click.unstyle(render_basic(snapshot, config)) == "alice@devbox:~/code/app"

    def test_no_thresholds(self, config):
        snapshot = SessionSnapshot(total_cost_usd=5.0, total_duration_ms=600_000)
        output = click.unstyle(render_basic(snapshot, config))
        assert "$" not in output
        assert output == "alice@devbox:~"


class TestMinimalStyle:
    def test_defaults(self, config):
        output = render_minimal(SessionSnapshot(), config)
        assert click.unstyle(output) == " UNKNOWN ▶ ~ ▶ $0.0000 ▶ 0s ▶"

    def test_clean_git(self):
        segment = minimal_git_segment(GitState(present=True, branch="main", ahead=4))
        assert segment.text == "⎇ main"
        assert segment.bg == TEAL

    def test_dirty_git(self):
        segment = minimal_git_segment(GitState(present=True, branch="main", staged=1))
        assert segment.text == "⎇ main*"
        assert segment.bg == YELLOW

    def test_no_git(self):
        assert minimal_git_segment(GitState()) is None

    def test_full_line(self, config):
        snapshot = SessionSnapshot(
            model_name="Sonnet 4",
            current_dir="/home/alice/projects/client/backend/api",
            total_cost_usd=0.12,
            total_duration_ms=125_000,
            api_duration_ms=90_000,
            lines_added=3,
        )
        git = GitState(present=True, branch="feature/long-branch", unstaged=2)
        output = render_minimal(snapshot, config, git=git)
        assert click.unstyle(output) == " SONNET 4 ▶ …/backend/api ▶ ⎇ feature/lo..* ▶ $0.1200 ▶ 2m5s ▶"
        # High cost tier background, dirty git colour carried into the next arrow
        assert "\x1b[48;5;196m" in output
        assert click.style(SEPARATOR, fg=YELLOW, bg=RED) in output

    def test_full_style_extras_not_shown(self, config):
        snapshot = SessionSnapshot(lines_added=10, api_duration_ms=500, total_duration_ms=700_000)
        output = click.unstyle(render_minimal(snapshot, config))
        assert "+10" not in output
        assert "/h" not in output
        assert "11m40s" in output


class TestSegmentsStyle:
    def test_cost_without_burn_rate(self):
        segment = full_cost_segment(SessionSnapshot(total_cost_usd=0.02, total_duration_ms=59_000))
        assert segment.text == "$0.020"
        assert segment.bg == GREEN

    def test_cost_with_burn_rate(self):
        segment = full_cost_segment(SessionSnapshot(total_cost_usd=0.0456, total_duration_ms=125_000))
        assert segment.text == "$0.046 $1.31/h"

    def test_cost_tier_prefixes(self):
        assert full_cost_segment(SessionSnapshot(total_cost_usd=0.07)).text == "💰 $0.070"
        assert full_cost_segment(SessionSnapshot(total_cost_usd=0.07)).bg == ORANGE
        assert full_cost_segment(SessionSnapshot(total_cost_usd=0.5)).text == "💸 $0.500"

    def test_time_omitted_at_zero(self, config):
        assert full_time_segment(SessionSnapshot(), config) is None

    def test_time_with_efficiency(self, config):
        snapshot = SessionSnapshot(total_duration_ms=125_000, api_duration_ms=10_000)
        segment = full_time_segment(snapshot, config)
        assert segment.text == "⏱ 2m5s ✨"
        assert segment.bg == GRAY

    def test_time_without_api_duration(self, config):
        segment = full_time_segment(SessionSnapshot(total_duration_ms=45_000), config)
        assert segment.text == "⏱ 45s"

    def test_git_detail(self):
        segment = full_git_segment(GitState(present=True, branch="main", staged=2, unstaged=1, ahead=3, behind=1))
        assert segment.text == "⎇ main +2 ~1 ↑3 ↓1"
        assert segment.bg == YELLOW

    def test_git_ahead_only_is_not_clean_text(self):
        segment = full_git_segment(GitState(present=True, branch="main", ahead=2))
        assert segment.text == "⎇ main ↑2"

    def test_git_clean(self):
        segment = full_git_segment(GitState(present=True, branch="main"))
        assert segment.text == "⎇ main ✓"
        assert segment.bg == TEAL

    def test_context_segment(self):
        segment = full_context_segment(ContextUsage(available=True, percentage=45, token_estimate=45_000))
        assert segment.text == "📊 45% [████░░░░]"
        assert segment.bg == DARK

    def test_context_overrun(self):
        segment = full_context_segment(ContextUsage(available=True, percentage=150, token_estimate=150_000))
        assert segment.text == "📊 150% [████████]"
        assert segment.bg == RED

    def test_context_unavailable(self):
        assert full_context_segment(ContextUsage.unavailable()) is None

    def test_changes(self):
        segment = full_changes_segment(SessionSnapshot(lines_added=45, lines_removed=12))
        assert segment.text == "📝 +45/-12"
        assert segment.tail == " ↑33"
        assert segment.tail_fg == LIME

    def test_changes_balanced(self):
        segment = full_changes_segment(SessionSnapshot(lines_added=4, lines_removed=4))
        assert segment.tail == " ="

    def test_changes_omitted(self):
        assert full_changes_segment(SessionSnapshot()) is None

    def test_full_line(self, config):
        snapshot = SessionSnapshot(
            model_name="Opus",
            current_dir="/home/alice/work/proj/src",
            project_dir="/home/alice/work/proj",
            total_cost_usd=0.0456,
            total_duration_ms=125_000,
            api_duration_ms=50_000,
            lines_added=45,
            lines_removed=12,
        )
        output = render_segments(
            snapshot,
            config,
            git=GitState(present=True, branch="main"),
            context=ContextUsage(available=True, percentage=45, token_estimate=90_000),
        )
        assert click.unstyle(output) == (
            " 🎭 OPUS ▶ 📁 proj/src ▶ ⎇ main ✓ ▶ $0.046 $1.31/h ▶ ⏱ 2m5s 🐌"
            " ▶ 📊 45% [████░░░░] ▶ 📝 +45/-12 ↑33 ▶"
        )

    def test_optional_segments_omitted(self, config):
        output = click.unstyle(render_segments(SessionSnapshot(current_dir="/srv/app"), config))
        assert output == " 🤖 Unknown ▶ 📁 /srv/app ▶ $0.000 ▶"


class TestStyleRegistry:
    def test_every_style_registered(self):
        assert set(STYLES) == set(RenderStyle)

    def test_queries_per_style(self):
        assert not STYLES[RenderStyle.BASIC].uses_git
        assert STYLES[RenderStyle.MINIMAL].uses_git
        assert not STYLES[RenderStyle.MINIMAL].uses_context
        assert STYLES[RenderStyle.SEGMENTS].uses_context
