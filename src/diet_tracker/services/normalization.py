"""Normalization of raw provider responses into canonical food records."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from diet_tracker.domain.errors import UnsupportedResponseShape
from diet_tracker.domain.recognition import (
    UNKNOWN_FOOD_NAME,
    FoodAnalysisResult,
    SearchResultItem,
)
from diet_tracker.services.extraction import extract_nutrient, macro_or_zero
from diet_tracker.services.text_parsing import (
    canonical_food_name,
    find_json_array,
    parse_food_blocks,
    parse_food_text,
)

_MACRO_KEYS = ("calories", "protein", "carbs", "fat")
_LIST_KEYS = ("items", "results", "foods")

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryShaped:
    """Response carrying ``category.name`` plus nutrition data."""

    name: str
    raw: Mapping[str, object]


@dataclass(frozen=True)
class TextContentShaped:
    """Response carrying the model's free-text answer."""

    content: str


@dataclass(frozen=True)
class DirectNutritionShaped:
    """Response with ``name`` and ``nutrition`` side by side."""

    name: str
    raw: Mapping[str, object]


@dataclass(frozen=True)
class Unrecognized:
    """Response matching none of the known shapes."""

    keys: list[str]


ResponseShape = CategoryShaped | TextContentShaped | DirectNutritionShaped | Unrecognized


def classify_response(raw: object) -> ResponseShape:
    """Classify a raw response; the first matching shape wins."""
    if not isinstance(raw, Mapping):
        return Unrecognized(keys=[])

    category = raw.get("category")
    if isinstance(category, Mapping) and category.get("name") is not None:
        return CategoryShaped(name=str(category["name"]), raw=raw)

    content = text_content(raw)
    if content is not None:
        return TextContentShaped(content=content)

    if isinstance(raw.get("nutrition"), Mapping) and raw.get("name") is not None:
        return DirectNutritionShaped(name=str(raw["name"]), raw=raw)

    return Unrecognized(keys=sorted(str(key) for key in raw))


def normalize_response(raw: object) -> FoodAnalysisResult:
    """Convert a raw provider response into a ``FoodAnalysisResult``."""
    match classify_response(raw):
        case CategoryShaped(name=name, raw=payload):
            return _from_payload(name, payload)
        case TextContentShaped(content=content):
            parsed = parse_food_text(content)
            return FoodAnalysisResult(
                name=canonical_food_name(parsed.name),
                calories=macro_or_zero(parsed.calories),
                protein=macro_or_zero(parsed.protein),
                carbs=macro_or_zero(parsed.carbs),
                fat=macro_or_zero(parsed.fat),
            )
        case DirectNutritionShaped(name=name, raw=payload):
            return _from_payload(name, payload)
        case Unrecognized(keys=keys):
            raise UnsupportedResponseShape(keys)


def normalize_search_response(raw: object) -> list[SearchResultItem]:
    """Convert a raw search response into result items; may be empty."""
    structured = _structured_items(raw)
    if structured is not None:
        return [_search_item(item) for item in structured if isinstance(item, Mapping)]

    content = text_content(raw) if isinstance(raw, Mapping) else None
    if content is None:
        return []

    array = find_json_array(content)
    if array is not None:
        _logger.debug("Search response contained a JSON array of %s items", len(array))
        return [_search_item(item) for item in array if isinstance(item, Mapping)]

    return [
        SearchResultItem(
            name=block.name or UNKNOWN_FOOD_NAME,
            calories=macro_or_zero(block.calories),
            protein=macro_or_zero(block.protein),
            carbs=macro_or_zero(block.carbs),
            fat=macro_or_zero(block.fat),
        )
        for block in parse_food_blocks(content)
    ]


def text_content(raw: Mapping[str, object]) -> str | None:
    """Return free-text model output from ``content`` or chat ``choices``."""
    content = raw.get("content")
    if isinstance(content, str):
        return content
    choices = raw.get("choices")
    if isinstance(choices, list) and choices:
        first = choices[0]
        message = first.get("message") if isinstance(first, Mapping) else None
        if isinstance(message, Mapping) and isinstance(message.get("content"), str):
            return message["content"]
    return None


def _from_payload(name: str, payload: Mapping[str, object]) -> FoodAnalysisResult:
    macros = {key: macro_or_zero(extract_nutrient(payload, key)) for key in _MACRO_KEYS}
    return FoodAnalysisResult(name=name, **macros)


def _structured_items(raw: object) -> list[object] | None:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, Mapping):
        for key in _LIST_KEYS:
            value = raw.get(key)
            if isinstance(value, list):
                return value
    return None


def _search_item(item: Mapping[str, object]) -> SearchResultItem:
    name = item.get("name")
    source_id = item.get("id")
    return SearchResultItem(
        name=str(name) if name else UNKNOWN_FOOD_NAME,
        calories=macro_or_zero(extract_nutrient(item, "calories")),
        protein=macro_or_zero(extract_nutrient(item, "protein")),
        carbs=macro_or_zero(extract_nutrient(item, "carbs")),
        fat=macro_or_zero(extract_nutrient(item, "fat")),
        source_id=str(source_id) if source_id is not None else None,
    )
