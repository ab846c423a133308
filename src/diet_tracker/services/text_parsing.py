"""Best-effort parsing of free-text model answers.

The models are asked to reply in a fixed ``Field: value`` layout, but answers
drift: extra prose, units, different capitalisation, carbohydrates spelled
out. These parsers are heuristics, not a grammar. Anything they cannot find is
reported as missing rather than raising.
"""

import json
import re
from dataclasses import dataclass

from diet_tracker.domain.recognition import UNIDENTIFIED_FOOD_NAME, UNKNOWN_FOOD_NAME

_NUMBER = r"(?P<value>\d+(?:\.\d+)?)"

_NAME_RE = re.compile(r"\b(?:Food\s*Name|Name)\s*:\s*(?P<name>[^\n.]+)", re.IGNORECASE)
_CALORIES_RE = re.compile(rf"\b(?:Calories|Cal)\s*:?\s*{_NUMBER}", re.IGNORECASE)
_PROTEIN_RE = re.compile(rf"\bProtein\s*:?\s*{_NUMBER}", re.IGNORECASE)
_CARBS_RE = re.compile(rf"\b(?:Carbs|Carbohydrates)\s*:?\s*{_NUMBER}", re.IGNORECASE)
_FAT_RE = re.compile(rf"\bFat\s*:?\s*{_NUMBER}", re.IGNORECASE)

_FOOD_BLOCK_RE = re.compile(
    r"^[ \t\-*\d.)]*(?:Food(?:\s*Name)?|Name)\s*:\s*(?P<name>[^\n]+)"
    r"(?:\s*Calories?\s*:?\s*(?P<calories>\d+(?:\.\d+)?)(?:\s*k?cal)?)?"
    r"(?:\s*Protein\s*:?\s*(?P<protein>\d+(?:\.\d+)?)(?:\s*g)?)?"
    r"(?:\s*Carb(?:s|ohydrates)?\s*:?\s*(?P<carbs>\d+(?:\.\d+)?)(?:\s*g)?)?"
    r"(?:\s*Fat\s*:?\s*(?P<fat>\d+(?:\.\d+)?)(?:\s*g)?)?",
    re.IGNORECASE | re.MULTILINE,
)

_UNIDENTIFIED_MARKERS = ("unidentified", "unknown", "not food")


@dataclass(frozen=True)
class ParsedFood:
    """Fields captured from a free-text answer; ``None`` when not found."""

    name: str | None
    calories: float | None
    protein: float | None
    carbs: float | None
    fat: float | None


def parse_food_text(content: str) -> ParsedFood:
    """Capture the name and macros from a single-food text answer."""
    name_match = _NAME_RE.search(content)
    name = name_match.group("name").strip() if name_match else None
    return ParsedFood(
        name=name or None,
        calories=_first_number(_CALORIES_RE, content),
        protein=_first_number(_PROTEIN_RE, content),
        carbs=_first_number(_CARBS_RE, content),
        fat=_first_number(_FAT_RE, content),
    )


def canonical_food_name(name: str | None) -> str:
    """Return the display name, mapping unknown foods to the sentinel name."""
    if not name:
        return UNIDENTIFIED_FOOD_NAME
    lowered = name.lower()
    if any(marker in lowered for marker in _UNIDENTIFIED_MARKERS):
        return UNIDENTIFIED_FOOD_NAME
    return name


def find_json_array(content: str) -> list[object] | None:
    """Find the first balanced JSON array of objects embedded in text."""
    start = content.find("[")
    while start != -1:
        if content[start + 1 :].lstrip().startswith("{"):
            end = _matching_bracket(content, start)
            if end is not None:
                try:
                    parsed = json.loads(content[start : end + 1])
                except json.JSONDecodeError:
                    parsed = None
                if isinstance(parsed, list):
                    return parsed
        start = content.find("[", start + 1)
    return None


def parse_food_blocks(content: str) -> list[ParsedFood]:
    """Capture repeated ``Food:``/``Calories:``/... blocks from text."""
    blocks: list[ParsedFood] = []
    for match in _FOOD_BLOCK_RE.finditer(content):
        name = match.group("name").strip()
        blocks.append(
            ParsedFood(
                name=name or UNKNOWN_FOOD_NAME,
                calories=_optional_float(match.group("calories")),
                protein=_optional_float(match.group("protein")),
                carbs=_optional_float(match.group("carbs")),
                fat=_optional_float(match.group("fat")),
            )
        )
    return blocks


def _first_number(pattern: re.Pattern[str], content: str) -> float | None:
    match = pattern.search(content)
    if match is None:
        return None
    return _optional_float(match.group("value"))


def _optional_float(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _matching_bracket(content: str, start: int) -> int | None:
    """Return the index of the ``]`` closing the array opened at ``start``."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(content)):
        char = content[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
            if depth == 0:
                return index if char == "]" else None
    return None
