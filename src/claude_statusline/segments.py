"""Powerline-style segments and the convention for joining them."""

from dataclasses import dataclass
from typing import Optional

import click

from .models import CostTier

SEPARATOR = "▶"

# 256-colour palette indices
PURPLE = 93
BLUE = 33
TEAL = 37
GREEN = 40
YELLOW = 220
ORANGE = 208
RED = 196
GRAY = 240
DARK = 236

WHITE = 255
BLACK = 16
BRIGHT = 231
LIGHT = 250
LIME = 82

# (background, foreground) per severity tier
TIER_COLORS: dict[CostTier, tuple[int, int]] = {
    CostTier.LOW: (GREEN, WHITE),
    CostTier.MEDIUM: (ORANGE, BLACK),
    CostTier.HIGH: (RED, WHITE),
}


@dataclass(frozen=True)
class Segment:
    """One coloured chunk of the statusline.

    ``tail`` is appended after ``text`` in its own foreground colour, on the
    same background.
    """

    text: str
    bg: int
    fg: int
    bold: bool = False
    tail: str = ""
    tail_fg: Optional[int] = None


def render_segment(segment: Segment) -> str:
    if not segment.tail:
        return click.style(
            f" {segment.text} ", fg=segment.fg, bg=segment.bg, bold=segment.bold
        )
    body = click.style(
        f" {segment.text}", fg=segment.fg, bg=segment.bg, bold=segment.bold, reset=False
    )
    body += click.style(segment.tail, fg=segment.tail_fg, reset=False)
    body += click.style(" ", fg=segment.fg, bg=segment.bg)
    return body


def join_segments(segments: list[Segment]) -> str:
    """Concatenate segments with arrow separators and a closing end cap.

    Each arrow is drawn in the colour of the segment it follows, on the
    background of the segment it leads into.
    """
    output = ""
    previous: Optional[Segment] = None
    for segment in segments:
        if previous is not None:
            output += click.style(SEPARATOR, fg=previous.bg, bg=segment.bg)
        output += render_segment(segment)
        previous = segment
    if previous is not None:
        output += click.style(SEPARATOR, fg=previous.bg)
    return output
