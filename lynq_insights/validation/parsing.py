"""Parsing of raw generated text into stage outputs.

A stage output is a tagged union: Parsed(record) when the text decoded to a
JSON object, Unparsed(raw_text) otherwise. Consumers match on the variant
instead of assuming structure.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any


# Fenced block, optionally tagged json
_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)
_STRAY_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass(frozen=True)
class Parsed:
    """Generated text that decoded to a JSON object."""

    record: dict[str, Any]


@dataclass(frozen=True)
class Unparsed:
    """Generated text that could not be decoded to a JSON object."""

    raw_text: str


StageOutput = Parsed | Unparsed


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return value if isinstance(value, dict) else None


def parse_stage_output(text: Any) -> StageOutput:
    """Parse generated text into a StageOutput.

    Attempts, in order:
        1. the whole text with markdown fences removed
        2. each fenced block
        3. the outermost {...} span (conversational wrapper text)

    Args:
        text: Raw completion text. Non-string input is passed through
            when it is already a mapping, otherwise stringified.

    Returns:
        Parsed on success, Unparsed carrying the original text otherwise.
    """
    if isinstance(text, dict):
        return Parsed(record=dict(text))
    if not isinstance(text, str):
        return Unparsed(raw_text="" if text is None else str(text))

    cleaned = _STRAY_FENCE.sub("", text).strip()
    if (record := _load_object(cleaned)) is not None:
        return Parsed(record=record)

    for block in _FENCED_BLOCK.findall(text):
        if (record := _load_object(block.strip())) is not None:
            return Parsed(record=record)

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        if (record := _load_object(text[start:end + 1])) is not None:
            return Parsed(record=record)

    return Unparsed(raw_text=text)


def as_record(output: StageOutput) -> dict[str, Any]:
    """Render a stage output as the record forwarded to later stages.

    Unparsed output is forwarded as {"raw": <text>}.
    """
    match output:
        case Parsed(record=record):
            return record
        case Unparsed(raw_text=raw_text):
            return {"raw": raw_text}
    raise TypeError(f"Unsupported stage output: {type(output).__name__}")


__all__ = [
    "Parsed",
    "StageOutput",
    "Unparsed",
    "as_record",
    "parse_stage_output",
]
