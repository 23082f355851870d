"""OpenAI Responses API client for image prompts."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from race_photos.services.bibs import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def describe(self, *, model: str, image_data_url: str, prompt: str) -> str:
        """Send an image with a prompt and return the text answer."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text.strip()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
