"""CLI for the Claude Code statusline renderer."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import formatters as fmt
from .config import DEFAULT_CONFIG_FILE, Config, detect_active_style, read_statusline_command
from .models import CostTier, Efficiency, RenderStyle
from .renderer import render_safe
from .segments import TIER_COLORS, Segment, render_segment
from .styles import CLEAN_MARK, CONTEXT_COLORS, DIRTY_MARK, GIT_GLYPH

STYLE_CHOICE = click.Choice([style.value for style in RenderStyle])

config_option = click.option(
    "--config",
    type=click.Path(path_type=Path),
    default=None,
    envvar="STATUSLINE_CONFIG",
    help="Path to config file",
)

input_option = click.option(
    "--input",
    "input_file",
    type=click.File("r", encoding="utf-8", errors="replace"),
    default="-",
    help="Read session JSON from a file instead of stdin",
)


def configure_logging(debug: bool):
    """Send diagnostics to stderr; stdout carries only the statusline."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def emit_statusline(raw: str, style: RenderStyle, cfg: Config):
    line = render_safe(raw, style, cfg)
    # The host reads stdout through a pipe; keep the colours anyway
    click.echo(line, nl=False, color=True)


@click.group()
@click.version_option(package_name="claude-statusline")
@config_option
@click.option("--debug", is_flag=True, help="Log diagnostics to stderr")
@click.pass_context
def main(ctx, config: Optional[Path], debug: bool):
    """Render a Claude Code statusline from session JSON."""
    configure_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = Config.load(config)
    ctx.obj["config_path"] = config or DEFAULT_CONFIG_FILE


@main.command()
@click.option(
    "--style",
    type=STYLE_CHOICE,
    default=None,
    help="Statusline style (default: from config)",
)
@input_option
@click.pass_context
def render(ctx, style: Optional[str], input_file):
    """Render one statusline from session JSON on stdin."""
    cfg: Config = ctx.obj["config"]
    selected = RenderStyle(style) if style else cfg.default_style
    emit_statusline(input_file.read(), selected, cfg)


@main.command()
def legend():
    """Show what the statusline colours and glyphs mean."""
    click.echo("Cost")
    cost_rows = [
        (CostTier.LOW, f"up to ${fmt.COST_MEDIUM_THRESHOLD:.2f}"),
        (
            CostTier.MEDIUM,
            f"over ${fmt.COST_MEDIUM_THRESHOLD:.2f}, up to ${fmt.COST_HIGH_THRESHOLD:.2f}",
        ),
        (CostTier.HIGH, f"over ${fmt.COST_HIGH_THRESHOLD:.2f}"),
    ]
    for tier, description in cost_rows:
        bg, fg = TIER_COLORS[tier]
        click.echo(f"  {render_segment(Segment(tier.value, bg=bg, fg=fg))} {description}")
    click.echo(
        f"  Burn rate ($/h) appears after {fmt.BURN_RATE_MIN_DURATION_MS // 1000}s of session time"
    )

    click.echo()
    click.echo("Context")
    context_rows = [
        (40, f"up to {fmt.CONTEXT_MEDIUM_THRESHOLD}%"),
        (70, f"over {fmt.CONTEXT_MEDIUM_THRESHOLD}%"),
        (90, f"over {fmt.CONTEXT_HIGH_THRESHOLD}%"),
    ]
    for percentage, description in context_rows:
        bg, fg = CONTEXT_COLORS[fmt.context_tier(percentage)]
        sample = f"{percentage}% [{fmt.context_bar(percentage)}]"
        click.echo(f"  {render_segment(Segment(sample, bg=bg, fg=fg))} {description}")

    click.echo()
    click.echo("API time share")
    labels = {
        Efficiency.VERY_FAST: f"under {fmt.EFFICIENCY_FAST_RATIO:.0%}",
        Efficiency.NORMAL: f"under {fmt.EFFICIENCY_NORMAL_RATIO:.0%}",
        Efficiency.SLOW: f"{fmt.EFFICIENCY_NORMAL_RATIO:.0%} or more",
    }
    for marker, glyph in fmt.EFFICIENCY_MARKERS.items():
        click.echo(f"  {glyph}  {labels[marker]}")

    click.echo()
    click.echo("Git")
    click.echo(f"  {GIT_GLYPH} branch {CLEAN_MARK}  clean working tree")
    click.echo(f"  {GIT_GLYPH} branch{DIRTY_MARK}  uncommitted changes (minimal style)")
    click.echo("  +N staged  ~N unstaged  ↑N ahead  ↓N behind")


@main.command()
@click.option(
    "--style",
    type=STYLE_CHOICE,
    default=None,
    help="Set the default style",
)
@click.option(
    "--home-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Set the home directory used for ~ substitution",
)
@click.option(
    "--settings-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Set the Claude Code settings file",
)
@click.option(
    "--show",
    is_flag=True,
    help="Show current configuration",
)
@click.pass_context
def config(
    ctx,
    style: Optional[str],
    home_dir: Optional[Path],
    settings_file: Optional[Path],
    show: bool,
):
    """Configure statusline settings."""
    cfg: Config = ctx.obj["config"]

    if show or not (style or home_dir or settings_file):
        command = read_statusline_command(cfg.settings_file)
        active = detect_active_style(cfg.settings_file)
        click.echo("Current configuration:")
        click.echo(f"  Default style:  {cfg.default_style.value}")
        click.echo(f"  Home dir:       {cfg.home_dir}")
        click.echo(f"  Settings file:  {cfg.settings_file}")
        click.echo(f"  Active command: {command or 'none'}")
        if active:
            click.echo(f"  Active style:   {active.value}")
        return

    if style:
        cfg.default_style = RenderStyle(style)
    if home_dir:
        cfg.home_dir = home_dir
    if settings_file:
        cfg.settings_file = settings_file

    cfg.save(ctx.obj["config_path"])
    click.echo("Configuration saved.")
    click.echo(f"  Default style:  {cfg.default_style.value}")
    click.echo(f"  Home dir:       {cfg.home_dir}")


def style_command(style: RenderStyle) -> click.Command:
    """Build a standalone executable that always renders ``style``."""

    @click.command(
        name=f"statusline-{style.value}",
        help=f"Render the {style.value} statusline from session JSON on stdin.",
    )
    @config_option
    @click.option("--debug", is_flag=True, help="Log diagnostics to stderr")
    @input_option
    def command(config: Optional[Path], debug: bool, input_file):
        configure_logging(debug)
        emit_statusline(input_file.read(), style, Config.load(config))

    return command


basic = style_command(RenderStyle.BASIC)
minimal = style_command(RenderStyle.MINIMAL)
segments = style_command(RenderStyle.SEGMENTS)


if __name__ == "__main__":
    main()
