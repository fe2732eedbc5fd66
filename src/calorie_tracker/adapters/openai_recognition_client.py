"""OpenAI Responses API client for food recognition."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from calorie_tracker.domain.errors import ExternalServiceError
from calorie_tracker.services.recognition import RecognitionClient


@dataclass
class OpenAIRecognitionClient(RecognitionClient):
    """Recognition client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIRecognitionClient":
        """Create an OpenAI recognition client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def analyze(self, *, model: str, prompt: str, image_data_url: str) -> str:
        """Send the photo and prompt, returning the raw output text."""
        try:
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
        except OpenAIError as exc:
            raise ExternalServiceError(f"OpenAI request failed: {exc}") from exc

        output_text = response.output_text
        if not output_text:
            raise ExternalServiceError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
