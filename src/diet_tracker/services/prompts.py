"""Prompts shared by the recognition providers."""

import base64

from diet_tracker.domain.recognition import ProviderRequest, RequestKind

_SYSTEM_PROMPTS = {
    RequestKind.IMAGE_ANALYSIS: (
        "You are a food recognition system. Identify the food item in the image "
        "with a concise name (1-7 words maximum) and provide nutritional "
        "information. Use common food names that would appear in a food database."
    ),
    RequestKind.NAME_LOOKUP: (
        "You are a nutritional information system. Provide detailed nutritional "
        "facts for food items in a structured format."
    ),
    RequestKind.TEXT_SEARCH: (
        "You are a food database system. Provide food items matching the search "
        "query with concise names and nutritional information in a structured "
        "JSON format."
    ),
}

_MAX_TOKENS = {
    RequestKind.IMAGE_ANALYSIS: 300,
    RequestKind.NAME_LOOKUP: 300,
    RequestKind.TEXT_SEARCH: 500,
}

_IMAGE_INSTRUCTIONS = (
    "What single food item is in this image? Reply in this exact format:\n"
    "Food Name: [concise name, 1-7 words]\n"
    "Calories: [number] cal\n"
    "Protein: [number] g\n"
    "Carbs: [number] g\n"
    "Fat: [number] g\n\n"
    'If you can\'t identify the food or the image doesn\'t contain food, respond '
    'with "Food Name: Unidentified Food Item" and provide estimated nutritional '
    "values."
)


def build_messages(request: ProviderRequest) -> list[dict[str, object]]:
    """Build chat messages for a provider request."""
    return [
        {"role": "system", "content": _SYSTEM_PROMPTS[request.kind]},
        {"role": "user", "content": _user_content(request)},
    ]


def max_tokens_for(kind: RequestKind) -> int:
    """Return the completion token budget for a request kind."""
    return _MAX_TOKENS[kind]


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _user_content(request: ProviderRequest) -> str | list[dict[str, object]]:
    if request.kind is RequestKind.IMAGE_ANALYSIS:
        if not isinstance(request.payload, bytes):
            raise TypeError("Image analysis requires image bytes")
        text = _IMAGE_INSTRUCTIONS
        if request.meal_type:
            text = f"{text}\n\nThe photo was taken for {request.meal_type}."
        return [
            {"type": "text", "text": text},
            {"type": "image_url", "image_url": {"url": to_data_url(request.payload)}},
        ]

    query = _as_text(request.payload)
    if request.kind is RequestKind.NAME_LOOKUP:
        return (
            f"Provide nutritional information for {query}. "
            "Reply in this exact format:\n"
            f"Food Name: {query}\n"
            "Calories: [number] cal\n"
            "Protein: [number] g\n"
            "Carbs: [number] g\n"
            "Fat: [number] g"
        )
    return (
        f"Find up to 5 food items matching '{query}'. For each item, provide a "
        "concise name (1-7 words) and nutritional information. Format your "
        "response as a valid JSON array with each object having the format: "
        '{"name": "Food Name", "calories": number, "protein": number, '
        '"carbs": number, "fat": number}. Ensure the numbers are just numeric '
        "values without units."
    )


def _as_text(payload: bytes | str) -> str:
    if isinstance(payload, bytes):
        return payload.decode("utf-8")
    return payload


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
