"""Estimate context window usage from a session transcript."""

import json
import logging
import math
from pathlib import Path
from typing import Any, Iterator, Optional

from .models import ContextUsage

logger = logging.getLogger(__name__)

OPUS_CONTEXT_WINDOW = 200_000
DEFAULT_CONTEXT_WINDOW = 100_000

# Coarse heuristic: one token per four characters of text
CHARS_PER_TOKEN = 4


def context_window_for(
    model_name: str,
    opus_window: int = OPUS_CONTEXT_WINDOW,
    default_window: int = DEFAULT_CONTEXT_WINDOW,
) -> int:
    if "opus" in model_name.lower():
        return opus_window
    return default_window


def extract_text_content(content: Any) -> str:
    """Extract text content from message content (string or array)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for block in content:
            if isinstance(block, dict):
                if block.get("type") == "text":
                    text = block.get("text", "")
                    if isinstance(text, str):
                        texts.append(text)
            elif isinstance(block, str):
                texts.append(block)
        return "\n".join(texts)
    return ""


def parse_jsonl_lines(text: str) -> Iterator[dict]:
    """Yield each JSON object from JSONL text, skipping undecodable lines."""
    for line in text.splitlines():
        line = line.strip()
        if line:
            try:
                entry = json.loads(line)
            except (ValueError, RecursionError):
                continue
            if isinstance(entry, dict):
                yield entry


def load_transcript_messages(text: str) -> Optional[list[dict]]:
    """Return the role-bearing messages of a transcript, or None if unrecognised.

    Accepts a JSON document with a ``messages`` array (or a bare array of
    messages), or a JSONL transcript whose entries wrap a ``message`` object.
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        data = None
    if isinstance(data, dict) and isinstance(data.get("messages"), list):
        data = data["messages"]
    if isinstance(data, list):
        return [m for m in data if isinstance(m, dict)]

    # A single-entry JSONL file also decodes as one JSON object
    messages = []
    for entry in parse_jsonl_lines(text):
        message = entry.get("message")
        if isinstance(message, dict):
            messages.append(message)
        elif "role" in entry:
            messages.append(entry)
    return messages or None


def _token_number(value: Any) -> Optional[float]:
    """Return a finite token count, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _assistant_tokens(message: dict) -> float:
    token_count = _token_number(message.get("token_count"))
    if token_count is not None:
        return token_count
    usage = message.get("usage")
    if isinstance(usage, dict):
        output_tokens = _token_number(usage.get("output_tokens"))
        if output_tokens is not None:
            return output_tokens
    return len(extract_text_content(message.get("content"))) / CHARS_PER_TOKEN


def estimate_tokens(messages: list[dict]) -> int:
    """Approximate the tokens held in context by user and assistant messages."""
    user_chars = 0
    assistant_tokens = 0.0
    for message in messages:
        role = message.get("role")
        if role == "user":
            user_chars += len(extract_text_content(message.get("content")))
        elif role == "assistant":
            assistant_tokens += _assistant_tokens(message)
    if not math.isfinite(assistant_tokens):
        logger.debug("Assistant token total out of range; ignoring transcript")
        return 0
    return user_chars // CHARS_PER_TOKEN + int(assistant_tokens)


def estimate_context(
    transcript_path: Optional[str],
    model_name: str,
    opus_window: int = OPUS_CONTEXT_WINDOW,
    default_window: int = DEFAULT_CONTEXT_WINDOW,
) -> ContextUsage:
    """Estimate context usage for the session.

    Returns an unavailable result if the transcript is absent, unreadable,
    not in a recognised shape, or holds no countable text.
    """
    if not transcript_path:
        return ContextUsage.unavailable()

    path = Path(transcript_path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.debug("Cannot read transcript %s: %s", path, e)
        return ContextUsage.unavailable()

    messages = load_transcript_messages(text)
    if messages is None:
        logger.debug("Unrecognised transcript structure in %s", path)
        return ContextUsage.unavailable()

    tokens = estimate_tokens(messages)
    if tokens <= 0:
        return ContextUsage.unavailable()

    window = context_window_for(model_name, opus_window, default_window)
    return ContextUsage(
        available=True,
        percentage=tokens * 100 // window,
        token_estimate=tokens,
    )
