"""Bib number detection using a vision model."""

import base64
from dataclasses import dataclass
from typing import Protocol

from race_photos.domain.bibs import BibDetection

BIB_PROMPT = (
    "Analyze this race photo and extract any visible race bib numbers. "
    "Return only the numbers, separated by commas. "
    "If no bib numbers are visible, return 'none'."
)
NO_BIBS = "none"


class VisionClient(Protocol):
    """Interface for free-text LLM vision prompts."""

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Return the model's text answer about the image."""


@dataclass
class BibDetectionService:
    """Asks the vision model for bib numbers and parses its answer."""

    client: VisionClient
    model: str

    async def detect(self, image_bytes: bytes) -> BibDetection:
        """Detect bib numbers visible in an image."""
        text = await self.client.describe(
            model=self.model,
            image_data_url=_to_data_url(image_bytes),
            prompt=BIB_PROMPT,
        )
        return BibDetection(bib_numbers=parse_bib_numbers(text))


def parse_bib_numbers(text: str) -> list[str]:
    """Turn a comma-separated model answer into unique bib numbers."""
    cleaned = text.strip()
    if cleaned.lower() == NO_BIBS:
        return []
    numbers: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if value and value not in numbers:
            numbers.append(value)
    return numbers


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
