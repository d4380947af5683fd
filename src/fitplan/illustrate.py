"""
fitplan.illustrate — illustration image URLs for exercises and meals
"""

from __future__ import annotations

from urllib.parse import quote

IMAGE_ENDPOINT = "https://image.pollinations.ai/prompt/"
QUALITY_DESCRIPTORS = "photorealistic, high quality, 4k"

# URI component encoding leaves these marks unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def image_url(label: str) -> str:
    """Image URL for an exercise name or meal option."""
    prompt = f"{label} {QUALITY_DESCRIPTORS}"
    return IMAGE_ENDPOINT + quote(prompt, safe=_URI_COMPONENT_SAFE)
