"""Configuration management for the statusline renderer."""

import getpass
import json
import math
import socket
from pathlib import Path
from typing import Optional

from .context import DEFAULT_CONTEXT_WINDOW, OPUS_CONTEXT_WINDOW
from .formatters import EFFICIENCY_FAST_RATIO, EFFICIENCY_NORMAL_RATIO
from .models import RenderStyle

DEFAULT_CLAUDE_DIR = Path.home() / ".claude"
DEFAULT_CONFIG_FILE = DEFAULT_CLAUDE_DIR / "statusline.json"
DEFAULT_SETTINGS_FILE = DEFAULT_CLAUDE_DIR / "settings.json"

DEFAULT_MINIMAL_DIR_MAX_LENGTH = 20
DEFAULT_SEGMENTS_DIR_MAX_LENGTH = 30

# Keys persisted to the config file, in save order
CONFIG_KEYS = (
    "home_dir",
    "settings_file",
    "default_style",
    "minimal_dir_max_length",
    "segments_dir_max_length",
    "opus_context_window",
    "default_context_window",
    "efficiency_fast_ratio",
    "efficiency_normal_ratio",
)

INT_KEYS = (
    "minimal_dir_max_length",
    "segments_dir_max_length",
    "opus_context_window",
    "default_context_window",
)
FLOAT_KEYS = ("efficiency_fast_ratio", "efficiency_normal_ratio")


def get_default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


def get_default_host() -> str:
    return socket.gethostname().split(".")[0] or "localhost"


class Config:
    """Configuration for the statusline renderer.

    Built once at startup and passed to the renderer, so rendering never
    consults environment variables or the home directory on its own.
    """

    def __init__(
        self,
        home_dir: Optional[Path] = None,
        user: Optional[str] = None,
        host: Optional[str] = None,
        settings_file: Optional[Path] = None,
        default_style: RenderStyle = RenderStyle.SEGMENTS,
        minimal_dir_max_length: int = DEFAULT_MINIMAL_DIR_MAX_LENGTH,
        segments_dir_max_length: int = DEFAULT_SEGMENTS_DIR_MAX_LENGTH,
        opus_context_window: int = OPUS_CONTEXT_WINDOW,
        default_context_window: int = DEFAULT_CONTEXT_WINDOW,
        efficiency_fast_ratio: float = EFFICIENCY_FAST_RATIO,
        efficiency_normal_ratio: float = EFFICIENCY_NORMAL_RATIO,
    ):
        self.home_dir = home_dir or Path.home()
        self.user = user or get_default_user()
        self.host = host or get_default_host()
        self.settings_file = settings_file or DEFAULT_SETTINGS_FILE
        self.default_style = RenderStyle(default_style)
        self.minimal_dir_max_length = minimal_dir_max_length
        self.segments_dir_max_length = segments_dir_max_length
        self.opus_context_window = opus_context_window
        self.default_context_window = default_context_window
        self.efficiency_fast_ratio = efficiency_fast_ratio
        self.efficiency_normal_ratio = efficiency_normal_ratio

    def expand_home(self, path: str) -> str:
        """Expand a leading ``~`` against the configured home directory."""
        if path == "~":
            return str(self.home_dir)
        if path.startswith("~/"):
            return str(self.home_dir / path[2:])
        return path

    def to_dict(self) -> dict:
        data = {}
        for key in CONFIG_KEYS:
            value = getattr(self, key)
            if isinstance(value, Path):
                value = str(value)
            elif isinstance(value, RenderStyle):
                value = value.value
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        kwargs = {key: data[key] for key in CONFIG_KEYS if data.get(key) is not None}
        for key in ("home_dir", "settings_file"):
            if key in kwargs:
                kwargs[key] = Path(kwargs[key]).expanduser()
        for key in INT_KEYS:
            if key in kwargs:
                kwargs[key] = int(kwargs[key])
                if kwargs[key] <= 0:
                    raise ValueError(f"{key} must be positive")
        for key in FLOAT_KEYS:
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
                if not math.isfinite(kwargs[key]):
                    raise ValueError(f"{key} must be finite")
        return cls(**kwargs)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from file, falling back to defaults."""
        path = config_path or DEFAULT_CONFIG_FILE

        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                return cls()
            return cls.from_dict(data)
        except (OSError, json.JSONDecodeError, TypeError, ValueError, OverflowError):
            return cls()

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to file."""
        path = config_path or DEFAULT_CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


def read_statusline_command(settings_file: Path) -> Optional[str]:
    """Return the ``statusLine.command`` configured in the host settings file."""
    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(settings, dict):
        return None
    statusline = settings.get("statusLine")
    if not isinstance(statusline, dict):
        return None
    command = statusline.get("command")
    return command if isinstance(command, str) and command else None


def detect_active_style(settings_file: Path) -> Optional[RenderStyle]:
    """Infer which style the host settings file is set to invoke."""
    command = read_statusline_command(settings_file)
    if not command:
        return None
    lowered = command.lower()
    for style in RenderStyle:
        if style.value in lowered:
            return style
    return None
