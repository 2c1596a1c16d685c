"""Render a statusline from the raw session JSON."""

import logging
from typing import Callable, Optional

from .config import Config
from .context import estimate_context
from .formatters import shorten_directory
from .git_state import inspect_git
from .models import DEFAULT_CURRENT_DIR, ContextUsage, GitState, RenderStyle, SessionSnapshot
from .parser import load_payload, snapshot_from_dict
from .styles import STYLES

logger = logging.getLogger(__name__)

GitInspector = Callable[[str], GitState]
ContextEstimator = Callable[..., ContextUsage]


def render_snapshot(
    snapshot: SessionSnapshot,
    style: RenderStyle,
    config: Config,
    git_inspector: GitInspector = inspect_git,
    context_estimator: ContextEstimator = estimate_context,
) -> str:
    """Compose the statusline for an already-parsed snapshot.

    Only the external queries the chosen style displays are run.
    """
    renderer = STYLES[RenderStyle(style)]

    git = GitState()
    if renderer.uses_git:
        git = git_inspector(config.expand_home(snapshot.current_dir))

    context = ContextUsage.unavailable()
    if renderer.uses_context:
        transcript_path = snapshot.transcript_path
        if transcript_path:
            transcript_path = config.expand_home(transcript_path)
        context = context_estimator(
            transcript_path,
            snapshot.model_name,
            opus_window=config.opus_context_window,
            default_window=config.default_context_window,
        )

    return renderer.render(snapshot, config, git=git, context=context)


def render(
    raw: str,
    style: RenderStyle,
    config: Optional[Config] = None,
    git_inspector: GitInspector = inspect_git,
    context_estimator: ContextEstimator = estimate_context,
) -> str:
    """Parse the stdin JSON and render it in the given style."""
    config = config or Config()
    snapshot = snapshot_from_dict(load_payload(raw))
    return render_snapshot(snapshot, style, config, git_inspector, context_estimator)


def fallback_line(raw: str, config: Config) -> str:
    """Plain directory-only line used when rendering fails unexpectedly."""
    try:
        snapshot = snapshot_from_dict(load_payload(raw))
        return shorten_directory(snapshot.current_dir, str(config.home_dir)) or DEFAULT_CURRENT_DIR
    except Exception:
        logger.exception("Fallback line failed; emitting home marker")
        return DEFAULT_CURRENT_DIR


def render_safe(
    raw: str,
    style: RenderStyle,
    config: Optional[Config] = None,
    git_inspector: GitInspector = inspect_git,
    context_estimator: ContextEstimator = estimate_context,
) -> str:
    """Like render(), but always returns a non-empty line."""
    config = config or Config()
    try:
        line = render(raw, style, config, git_inspector, context_estimator)
    except Exception:
        logger.exception("Statusline rendering failed; emitting fallback line")
        return fallback_line(raw, config)
    return line or fallback_line(raw, config)
