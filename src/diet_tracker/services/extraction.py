"""Nutrient extraction from loosely-typed provider payloads.

Provider payloads arrive in several shapes: macros at the top level, inside a
``nutrition`` map, as ``{"value": ...}`` wrappers, as strings with units
attached (``"350 cal"``) or as a ``nutrients`` list of ``{name, amount}``
entries. ``extract_nutrient`` tries each of these in turn and returns ``None``
when nothing matches; choosing a default is left to the caller.
"""

import math
import re
from collections.abc import Mapping

_NON_NUMERIC = re.compile(r"[^\d.]")


def parse_number(value: object) -> float | None:
    """Parse a numeric value from numbers, unit-suffixed strings or value maps."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    if isinstance(value, Mapping) and "value" in value:
        return parse_number(value["value"])
    return None


def extract_nutrient(data: object, key: str) -> float | None:
    """Return the amount for ``key`` from a nutrition payload, if present."""
    if not isinstance(data, Mapping):
        return None

    if key in data:
        found = parse_number(data[key])
        if found is not None:
            return found

    nutrition = data.get("nutrition")
    if not isinstance(nutrition, Mapping):
        return None

    if key in nutrition:
        found = parse_number(nutrition[key])
        if found is not None:
            return found

    nutrients = nutrition.get("nutrients")
    if not isinstance(nutrients, list):
        return None
    wanted = key.lower()
    for nutrient in nutrients:
        if not isinstance(nutrient, Mapping):
            continue
        name = nutrient.get("name")
        if name is not None and str(name).lower() == wanted:
            return parse_number(nutrient.get("amount"))
    return None


def macro_or_zero(value: float | None) -> float:
    """Clamp an extracted macro to a finite, non-negative float."""
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)
