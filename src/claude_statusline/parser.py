"""Parse the session JSON that the host pipes to the statusline command."""

import json
import logging
import math
from typing import Any, Optional

from .models import DEFAULT_CURRENT_DIR, DEFAULT_MODEL_NAME, SessionSnapshot

logger = logging.getLogger(__name__)


def load_payload(raw: str) -> dict:
    """Decode the raw stdin text, degrading to an empty object."""
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; so is an over-long integer literal
        logger.debug("Ignoring malformed session JSON: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.debug("Ignoring non-object session JSON (%s)", type(data).__name__)
        return {}
    return data


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _get_str(data: dict, key: str) -> Optional[str]:
    """Return a non-empty string value, or None."""
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _to_float(value: Any) -> Optional[float]:
    # bool is an int subclass; a flag is never a measurement
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _get_float(data: dict, key: str, default: float = 0.0) -> float:
    number = _to_float(data.get(key))
    return default if number is None else number


def _get_int(data: dict, key: str, default: int = 0) -> int:
    number = _to_float(data.get(key))
    return default if number is None else int(number)


def _get_count(data: dict, key: str) -> int:
    """Like _get_int, but a count is never negative."""
    return max(0, _get_int(data, key))


def parse_snapshot(raw: str) -> SessionSnapshot:
    """Parse stdin text into a fully populated SessionSnapshot.

    Never raises: absent or wrong-typed fields take their defaults and an
    unparsable document yields the all-defaults snapshot.
    """
    return snapshot_from_dict(load_payload(raw))


def snapshot_from_dict(data: dict) -> SessionSnapshot:
    """Build a snapshot from an already-decoded payload."""
    model = _section(data, "model")
    workspace = _section(data, "workspace")
    cost = _section(data, "cost")

    current_dir = (
        _get_str(workspace, "current_dir")
        or _get_str(data, "cwd")
        or DEFAULT_CURRENT_DIR
    )

    return SessionSnapshot(
        model_name=_get_str(model, "display_name") or DEFAULT_MODEL_NAME,
        current_dir=current_dir,
        project_dir=_get_str(workspace, "project_dir"),
        total_cost_usd=_get_float(cost, "total_cost_usd"),
        total_duration_ms=_get_int(cost, "total_duration_ms"),
        api_duration_ms=_get_int(cost, "total_api_duration_ms"),
        lines_added=_get_count(cost, "total_lines_added"),
        lines_removed=_get_count(cost, "total_lines_removed"),
        transcript_path=_get_str(data, "transcript_path"),
    )
